"""CLI utilities module."""

from zh.cli.utils.auth import get_api_key, get_config, get_github_client, get_workspace_id, with_api_client
from zh.cli.utils.data import CommandContext, command_context, open_cache
from zh.cli.utils.options import (
    LIMIT_OPTION,
    OUTPUT_FORMAT_OPTION,
    REPO_OPTION,
    VERBOSE_OPTION,
    WORKSPACE_OPTION,
    OutputFormat,
)
from zh.cli.utils.output import console, exit_on_error, handle_json_output, handle_table_output

__all__ = [
    "LIMIT_OPTION",
    "OUTPUT_FORMAT_OPTION",
    "REPO_OPTION",
    "VERBOSE_OPTION",
    "WORKSPACE_OPTION",
    "CommandContext",
    "OutputFormat",
    "command_context",
    "console",
    "exit_on_error",
    "get_api_key",
    "get_config",
    "get_github_client",
    "get_workspace_id",
    "handle_json_output",
    "handle_table_output",
    "open_cache",
    "with_api_client",
]
