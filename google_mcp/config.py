"""
Application configuration loaded from environment variables.

Uses pydantic-settings to define typed configuration that automatically reads
from environment variables (and a local .env file). There are two settings
classes sharing the GOOGLE_MCP_ prefix:

- PolicySettings: the raw access-policy inputs, interpreted by policy.py
- Settings: the server's own inputs (transport, bind address, log level),
  used by server.py

The policy fields are plain strings. A bool field would make pydantic reject
GOOGLE_MCP_GMAIL_SEND=maybe at startup, whereas the policy loader has to
accept any value and coerce unrecognized ones to a default that grants less
access. PolicySettings ignores the server keys, so a bad GOOGLE_MCP_PORT only
affects the server and never the policy engine.

Example:
    GOOGLE_MCP_SCOPE_PROFILE=readonly
    GOOGLE_MCP_SERVICES="gmail, calendar drive"
    GOOGLE_MCP_GMAIL_SEND=yes
"""

from pydantic_settings import BaseSettings

_MODEL_CONFIG = {
    "env_prefix": "GOOGLE_MCP_",
    "env_file": ".env",
    "env_file_encoding": "utf-8",
    # Each class sees the other's GOOGLE_MCP_* keys; they must not break it.
    "extra": "ignore",
}


class PolicySettings(BaseSettings):
    """
    Access policy inputs with environment variable bindings.

    Each field maps to an environment variable with the GOOGLE_MCP_ prefix.
    For example, `scope_profile` reads from GOOGLE_MCP_SCOPE_PROFILE and
    `calendar_write` reads from GOOGLE_MCP_CALENDAR_WRITE.
    """

    # Coarse bundle of access requested per service: readonly, editor or full.
    # Unrecognized values fall back to "editor".
    scope_profile: str = "editor"

    # Comma and/or whitespace separated service names, or "all".
    # Empty means the default set (gmail, calendar, drive, docs, sheets, slides).
    services: str = ""

    # Explicit OAuth scopes. When set, they are requested exactly as given and
    # every other policy knob is ignored for scope composition.
    scopes: str = ""

    # Fine-grained capability flags. None means "use the profile default".
    gmail_compose: str | None = None
    gmail_modify: str | None = None
    gmail_send: str | None = None
    calendar_write: str | None = None

    model_config = dict(_MODEL_CONFIG)


class Settings(BaseSettings):
    """Server configuration: GOOGLE_MCP_TRANSPORT, GOOGLE_MCP_PORT, ..."""

    # "stdio" for local MCP clients, "streamable-http" when running as a service.
    transport: str = "stdio"

    # Only used by the streamable-http transport.
    host: str = "127.0.0.1"
    port: int = 8080

    # Logging verbosity. Maps to Python's logging levels.
    log_level: str = "info"

    model_config = dict(_MODEL_CONFIG)


# Singleton instance: import this from other modules.
# Created once at module load time, reads environment variables immediately.
# Only string fields, so it cannot fail on any environment value.
policy_settings = PolicySettings()
