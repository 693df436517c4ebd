"""Configuration management for zh."""

import os
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, SecretStr, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

from zh.core.constants import CacheLimits
from zh.exceptions import ConfigurationError


def config_dir() -> Path:
    """XDG-compliant configuration directory."""
    if xdg := os.getenv("XDG_CONFIG_HOME"):
        return Path(xdg) / "zh"
    return Path.home() / ".config" / "zh"


def config_file() -> Path:
    return config_dir() / "config.yml"


def default_cache_dir() -> Path:
    """XDG-compliant cache directory."""
    if xdg := os.getenv("XDG_CACHE_HOME"):
        return Path(xdg) / "zh"
    return Path.home() / ".cache" / "zh"


class GitHubConfig(BaseModel):
    """GitHub access used for branch name lookups."""

    method: Literal["gh", "pat", "none"] | None = None
    token: SecretStr | None = None


class AliasConfig(BaseModel):
    """User-defined shorthands, mapping alias -> entity display name."""

    pipelines: dict[str, str] = Field(default_factory=dict)
    epics: dict[str, str] = Field(default_factory=dict)


class Config(BaseSettings):
    """Application configuration."""

    api_key: SecretStr | None = Field(default=None, alias="ZH_API_KEY", description="ZenHub GraphQL API key")
    rest_api_key: SecretStr | None = Field(
        default=None, alias="ZH_REST_API_KEY", description="ZenHub REST API key (legacy epics)"
    )
    workspace: str | None = Field(default=None, alias="ZH_WORKSPACE", description="Active workspace ID")
    github_token: SecretStr | None = Field(
        default=None, alias="ZH_GITHUB_TOKEN", description="GitHub personal access token"
    )
    github: GitHubConfig = Field(default_factory=GitHubConfig)
    aliases: AliasConfig = Field(default_factory=AliasConfig)

    # Cache Configuration
    cache_dir: Path = Field(
        default_factory=default_cache_dir,
        alias="ZH_CACHE_DIR",
        description="Directory for cached entity snapshots",
    )
    cache_ttl_hours: float = Field(
        default=CacheLimits.DEFAULT_TTL_HOURS,
        alias="ZH_CACHE_TTL_HOURS",
        description="Hours before a cached snapshot is refreshed",
    )

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        populate_by_name=True,
        extra="ignore",
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
        # Environment variables take precedence over the config file
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls, yaml_file=config_file()),
            file_secret_settings,
        )

    @model_validator(mode="after")
    def _resolve_github_method(self) -> "Config":
        if self.github_token and not self.github.token:
            self.github.token = self.github_token
        if self.github.method is None:
            self.github.method = "pat" if self.github.token else "none"
        return self


def load_config() -> Config:
    """Load configuration from environment, .env file and the config file."""
    return Config()


def save_config(config: Config) -> Path:
    """Persist the user-editable parts of the configuration to the config file.

    Returns:
        Path of the written file

    Raises:
        ConfigurationError: If the file cannot be written
    """
    data: dict[str, Any] = {
        "github": {"method": config.github.method or "none"},
        "aliases": {
            "pipelines": dict(config.aliases.pipelines),
            "epics": dict(config.aliases.epics),
        },
    }
    if config.api_key:
        data["api_key"] = config.api_key.get_secret_value()
    if config.workspace:
        data["workspace"] = config.workspace
    if config.rest_api_key:
        data["rest_api_key"] = config.rest_api_key.get_secret_value()
    if config.github.token and config.github.method == "pat":
        data["github"]["token"] = config.github.token.get_secret_value()

    path = config_file()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
        path.chmod(0o600)
    except OSError as e:
        raise ConfigurationError(f"Could not write config file {path}: {e}") from e
    return path
