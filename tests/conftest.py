"""Shared fixtures for SpriteLoop tests."""

import os
from pathlib import Path

import pytest
from PIL import Image

from spriteloop.config import AppConfig


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep tests away from the real home directory and API keys."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    for name in list(os.environ):
        if name.startswith("SPRITELOOP_") or name in ("GEMINI_API_KEY", "API_KEY"):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture
def reference_image(tmp_path: Path) -> Path:
    """A small RGBA character stand-in."""
    img = Image.new("RGBA", (64, 128), (0, 0, 0, 0))
    for y in range(20, 120):
        for x in range(24, 40):
            img.putpixel((x, y), (200, 120, 40, 255))
    path = tmp_path / "hero.png"
    img.save(path, "PNG")
    return path


@pytest.fixture
def app_config(tmp_path: Path) -> AppConfig:
    return AppConfig(
        config_dir=tmp_path / "config",
        output_dir=tmp_path / "output",
        active_backend="mock",
    )
