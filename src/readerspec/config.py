"""Settings loaded from init kwargs, READERSPEC_* env vars, .env and readerspec.yaml."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

DEFAULT_MODEL = "gpt-4o-mini"
DOCUMENT_EXTENSION = ".readerspec.md"


class Settings(BaseSettings):
    """readerspec settings."""

    model: str = DEFAULT_MODEL
    temperature: float = 0.1
    max_tokens: int = 1000
    api_key: str | None = Field(
        default=None, description="Completion service key; litellm falls back to provider env vars."
    )

    specs_dir: str = "specs"
    extension: str = DOCUMENT_EXTENSION
    debounce_seconds: float = 1.0

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="READERSPEC_",
        env_file=".env",
        env_file_encoding="utf-8",
        yaml_file="readerspec.yaml",
        extra="ignore",
        protected_namespaces=(),
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )

    @property
    def specs_path(self) -> Path:
        return Path(self.specs_dir)
