"""Application configuration with pydantic-settings + TOML."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict, TomlConfigSettingsSource

from spriteloop.models.enums import Archetype, Direction, SpriteStyle
from spriteloop.pipeline.prompts import DEFAULT_NEGATIVE


def _default_config_dir() -> Path:
    return Path.home() / ".spriteloop"


def _default_output_dir() -> Path:
    return Path("output")


class GeminiSettings(BaseSettings):
    """Google Gemini backend configuration."""

    model_config = SettingsConfigDict(env_prefix="SPRITELOOP_GEMINI__")

    api_key: str = ""
    image_model: str = "gemini-2.5-flash-image"
    reasoning_model: str = "gemini-3-pro-preview"
    aspect_ratio: str = "16:9"
    thinking_budget: int = Field(default=2048, ge=0)


class GenerationSettings(BaseSettings):
    """Default sheet generation parameters."""

    model_config = SettingsConfigDict(env_prefix="SPRITELOOP_GENERATION__")

    style: SpriteStyle = SpriteStyle.NEO_RETRO
    direction: Direction = Direction.SIDE
    archetype: Archetype = Archetype.VANGUARD
    negative_prompt: str = DEFAULT_NEGATIVE
    use_pose_guide: bool = True


class AppConfig(BaseSettings):
    """Root application configuration."""

    model_config = SettingsConfigDict(
        env_prefix="SPRITELOOP_",
        env_nested_delimiter="__",
    )

    config_dir: Path = Field(default_factory=_default_config_dir)
    output_dir: Path = Field(default_factory=_default_output_dir)
    active_backend: Literal["gemini", "mock"] = "gemini"
    gemini: GeminiSettings = Field(default_factory=GeminiSettings)
    generation: GenerationSettings = Field(default_factory=GenerationSettings)

    @classmethod
    def settings_customise_sources(cls, settings_cls, **kwargs):  # type: ignore[override]
        toml_path = _default_config_dir() / "config.toml"
        sources = (
            kwargs.get("init_settings"),
            kwargs.get("env_settings"),
        )
        if toml_path.exists():
            sources = (*sources, TomlConfigSettingsSource(settings_cls, toml_file=toml_path))
        return (*sources, kwargs.get("dotenv_settings"), kwargs.get("file_secret_settings"))

    def ensure_dirs(self) -> None:
        """Create the config directory if it doesn't exist."""
        self.config_dir.mkdir(parents=True, exist_ok=True)


def load_config() -> AppConfig:
    """Load application config, creating defaults if needed."""
    config = AppConfig()
    config.ensure_dirs()
    return config


def save_config(config: AppConfig, path: Path | None = None) -> Path:
    """Write *config* as TOML (the API key is never persisted)."""
    import tomli_w

    config_path = path or config.config_dir / "config.toml"
    data = config.model_dump(mode="json", exclude={"config_dir"})
    data["gemini"].pop("api_key", None)

    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_bytes(tomli_w.dumps(data).encode())
    return config_path
