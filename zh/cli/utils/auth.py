"""Utility functions for CLI commands."""

from pydantic import ValidationError

from zh.api.client import ZenHubClient
from zh.api.github import GitHubClient
from zh.config import Config, load_config
from zh.exceptions import AuthenticationError, ConfigurationError


def get_api_key(config: Config, api_key: str | None = None) -> str:
    """Get the ZenHub API key from a parameter or the configuration.

    Raises:
        AuthenticationError: If no key is configured anywhere
    """
    if api_key:
        return api_key
    if config.api_key:
        return config.api_key.get_secret_value()
    raise AuthenticationError("No API key configured: set ZH_API_KEY or add api_key to the config file")


def get_workspace_id(config: Config, workspace_id: str | None = None) -> str:
    """Get the active workspace id from a parameter or the configuration.

    Raises:
        ConfigurationError: If no workspace is selected
    """
    final_workspace_id = workspace_id or config.workspace
    if not final_workspace_id:
        raise ConfigurationError("No workspace selected: run 'zh workspace switch NAME' or set ZH_WORKSPACE")
    return final_workspace_id


def with_api_client(config: Config, api_key: str | None = None) -> ZenHubClient:
    """Build a ZenHub client; use it in a ``with`` statement to open its session."""
    return ZenHubClient(get_api_key(config, api_key))


def get_github_client(config: Config) -> GitHubClient | None:
    """GitHub client for branch lookups, or None when GitHub access is disabled."""
    token = config.github.token.get_secret_value() if config.github.token else None
    return GitHubClient.from_settings(config.github.method, token)


def get_config() -> Config:
    """Load the configuration, reporting invalid values as a configuration error."""
    try:
        return load_config()
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e
