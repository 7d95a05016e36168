from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)

from deutschme.domain.constants import SPEECH_RATE, STORAGE_KEY, WEEKLY_XP_GOAL


def config_dir() -> Path:
    return Path.home() / ".config/deutschme"


def config_file() -> Path:
    return config_dir() / "config.toml"


class AppConfig(BaseSettings):
    """
    Configuration model for deutschme.
    Supports loading from:
    1. Manual overrides (CLI)
    2. Environment variables (DEUTSCHME_*)
    3. Config file (~/.config/deutschme/config.toml)
    """

    model_config = SettingsConfigDict(
        env_prefix="DEUTSCHME_",
        extra="ignore",
    )

    # Persistence
    state_path: Path = Field(default_factory=lambda: config_dir() / "state.json")
    storage_key: str = STORAGE_KEY

    # Content
    curriculum_path: Path | None = None

    # Speech
    speech_enabled: bool = True
    speech_command: str | None = None
    speech_rate: float = SPEECH_RATE

    # Progress
    weekly_xp_goal: int = Field(default=WEEKLY_XP_GOAL, gt=0)

    # Logging: 0 errors only, 1 warnings, 2 info, 3 debug
    verbose: int = Field(default=1, ge=0)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Earlier sources win
        toml_file = config_file()
        if toml_file.exists():
            return (
                init_settings,
                env_settings,
                TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
            )
        return (init_settings, env_settings)

    @field_validator("state_path", mode="before")
    @classmethod
    def resolve_state_path(cls, v: Any) -> Path:
        return Path(v).expanduser()

    @field_validator("curriculum_path", mode="before")
    @classmethod
    def resolve_curriculum_path(cls, v: Any) -> Path | None:
        if v:
            return Path(v).expanduser().resolve()
        return None


def resolve_config(cli_overrides: dict[str, Any] | None = None) -> AppConfig:
    """
    Multi-layered configuration resolution.
    1. Defaults in AppConfig
    2. ~/.config/deutschme/config.toml (if exists)
    3. Environment variables (DEUTSCHME_*)
    4. cli_overrides (passed from Typer)
    """
    overrides = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
    return AppConfig(**overrides)
