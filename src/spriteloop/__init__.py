"""SpriteLoop - pose-guided 6-frame sprite sheet generation."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("spriteloop")
except PackageNotFoundError:
    __version__ = "unknown"
