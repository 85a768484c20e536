"""Configuration management for actionkit.

Loads configuration from environment variables (prefix ``ACTIONS_``) or a
``.env`` file, with sensible defaults.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Actionkit configuration settings.

    All settings can be overridden via environment variables,
    e.g. ``ACTIONS_STRICT_ATTRIBUTES=true``.
    """

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_json: bool = Field(default=False, description="Emit JSON log records in standalone processes")

    # Attribute pipeline
    strict_attributes: bool = Field(
        default=False,
        description="Reject input keys that no parameter declares",
    )
    strict_prefill: bool = Field(
        default=False,
        description="Fail when an option-style parameter has no prefill entry",
    )

    # Call-site recognition
    backtrace_limit: int = Field(
        default=64,
        description="Maximum number of stack frames inspected per resolution",
    )

    # Surface messages
    ui_success_message: str = Field(
        default="Action completed successfully.",
        description="UI message used when the result carries no message",
    )
    ui_failure_message: str = Field(
        default="Something went wrong, please try again later.",
        description="UI danger message used when an action returns an empty result",
    )
    tool_failure_message: str = Field(
        default="Something went wrong while executing the tool.",
        description="Tool error message used when an action returns an empty result",
    )

    # MCP server
    mcp_server_name: str = Field(default="actions-mcp", description="MCP server name")
    mcp_server_version: str = Field(default="1.0.0", description="MCP server version")
    tool_server: Optional[str] = Field(
        default=None,
        description="Import path of the ToolServer served by runmcp (e.g. 'workbench.mcp.PlatformServer')",
    )

    model_config = {
        "env_prefix": "ACTIONS_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance.

    Creates the instance on first call, then returns cached version.
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reload_settings() -> Settings:
    """Force reload settings from the environment.

    Useful for testing or after environment changes.
    """
    global _settings
    _settings = None
    return get_settings()
