"""
Access policy: configuration loading and OAuth scope composition.

This module turns the raw GOOGLE_MCP_* settings into an immutable PolicyConfig
and composes the minimal set of OAuth scopes to request from Google:

    settings (config.py) -> load_policy() -> PolicyConfig -> compose_scopes()
                                                          -> tools.is_tool_allowed()

Rules:
- **Never fails**: unrecognized values are coerced to documented defaults and
  logged as warnings. No configuration value raises an exception here.
- **Fail closed**: every coercion moves toward less access. An unknown profile
  becomes "editor" (never "full"), an unknown boolean takes the profile default,
  an unknown service name matches no tool and no catalog row.
- **Pure decisions**: compose_scopes() and tools.is_tool_allowed() take the
  PolicyConfig as an argument and never read the environment themselves. Build
  one PolicyConfig and reuse it for decisions that must agree with each other.
"""

import logging
import re
from dataclasses import dataclass
from functools import lru_cache

from google_mcp import config
from google_mcp.config import PolicySettings
from google_mcp.scopes import (
    ALL_SERVICES,
    CALENDAR_READONLY_SCOPE,
    CALENDAR_SCOPE,
    DEFAULT_PROFILE,
    DEFAULT_SERVICES,
    GMAIL_COMPOSE_SCOPE,
    GMAIL_MODIFY_SCOPE,
    GMAIL_SEND_SCOPE,
    SCOPE_CATALOG,
    ScopeProfile,
)

logger = logging.getLogger(__name__)

_LIST_SEPARATOR = re.compile(r"[,\s]+")
_TRUE_VALUES = frozenset({"1", "true", "yes", "y", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "n", "off"})

# Profiles under which each capability flag is on when not set explicitly.
_FLAG_DEFAULT_PROFILES: dict[str, frozenset[ScopeProfile]] = {
    "gmail_compose": frozenset({ScopeProfile.EDITOR, ScopeProfile.FULL}),
    "gmail_modify": frozenset({ScopeProfile.EDITOR, ScopeProfile.FULL}),
    "gmail_send": frozenset({ScopeProfile.FULL}),
    "calendar_write": frozenset({ScopeProfile.FULL}),
}


@dataclass(frozen=True)
class GmailFlags:
    """What the Gmail tools may do beyond reading mail."""

    compose: bool
    modify: bool
    send: bool


@dataclass(frozen=True)
class PolicyConfig:
    """
    Fully resolved, immutable access policy.

    Attributes:
        profile: Scope profile used to pick catalog rows
        enabled_services: Service names whose tools may run. May contain
                          names outside the catalog; those match nothing.
        explicit_scopes: Operator-supplied scopes that replace composition
                         entirely, or None when not configured
        gmail: Gmail capability flags
        calendar_write: Whether calendar tools may create, update or delete events
    """

    profile: ScopeProfile
    enabled_services: frozenset[str]
    explicit_scopes: tuple[str, ...] | None
    gmail: GmailFlags
    calendar_write: bool


# ---------------------------------------------------------------------------
# Value parsing
# ---------------------------------------------------------------------------


def parse_csv(value: str | None, lowercase: bool = True) -> list[str]:
    """
    Split a comma and/or whitespace separated list.

    Tokens are trimmed (and lowercased unless `lowercase` is False); empty
    tokens are dropped. None and "" both give an empty list.
    """
    if not value:
        return []
    tokens = [token.strip() for token in _LIST_SEPARATOR.split(value)]
    if lowercase:
        tokens = [token.lower() for token in tokens]
    return [token for token in tokens if token]


def parse_bool(value: str | None, default: bool) -> bool:
    """
    Parse a boolean setting, falling back to `default`.

    Recognizes 1/true/yes/y/on and 0/false/no/n/off in any case. Anything else,
    including an absent value, yields the caller's default.
    """
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    if normalized:
        logger.warning("Ignoring unrecognized boolean %r, using %s", value, default)
    return default


def parse_scope_profile(value: str | None) -> ScopeProfile:
    normalized = (value or "").strip().lower()
    try:
        return ScopeProfile(normalized)
    except ValueError:
        if normalized:
            logger.warning(
                "Unknown scope profile %r, using %r", value, DEFAULT_PROFILE.value
            )
        return DEFAULT_PROFILE


def parse_services(value: str | None) -> frozenset[str]:
    """
    Parse the enabled-service list.

    Empty means the default services; "all" anywhere in the list means every
    known service, whatever else is listed. Otherwise the names are used as
    given, including ones this server does not know.
    """
    services = parse_csv(value)
    if not services:
        return frozenset(DEFAULT_SERVICES)
    if "all" in services:
        return frozenset(ALL_SERVICES)
    unknown = sorted(set(services) - set(ALL_SERVICES))
    if unknown:
        logger.warning("Unknown services %s will not enable any tools", unknown)
    return frozenset(services)


def default_for(flag: str, profile: ScopeProfile) -> bool:
    """
    Default value of a capability flag under `profile`.

    gmail_compose and gmail_modify are on unless the profile is readonly;
    gmail_send and calendar_write are on only under full. Unknown flags are off.
    """
    return profile in _FLAG_DEFAULT_PROFILES.get(flag, frozenset())


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------


def _source(settings: PolicySettings | None) -> PolicySettings:
    return config.policy_settings if settings is None else settings


def resolve_scope_profile(settings: PolicySettings | None = None) -> ScopeProfile:
    """Scope profile from GOOGLE_MCP_SCOPE_PROFILE (default: editor)."""
    return parse_scope_profile(_source(settings).scope_profile)


def resolve_enabled_services(settings: PolicySettings | None = None) -> frozenset[str]:
    """Enabled services from GOOGLE_MCP_SERVICES."""
    return parse_services(_source(settings).services)


def load_policy(settings: PolicySettings | None = None) -> PolicyConfig:
    """
    Build a PolicyConfig from settings (the process-wide settings by default).

    Every field is resolved exactly once, so the returned snapshot stays
    consistent even if the environment changes afterwards.
    """
    source = _source(settings)
    profile = parse_scope_profile(source.scope_profile)

    # Scope strings are case-sensitive, so they are not lowercased.
    explicit = tuple(dict.fromkeys(parse_csv(source.scopes, lowercase=False)))

    def flag(name: str, raw: str | None) -> bool:
        return parse_bool(raw, default_for(name, profile))

    return PolicyConfig(
        profile=profile,
        enabled_services=parse_services(source.services),
        explicit_scopes=explicit or None,
        gmail=GmailFlags(
            compose=flag("gmail_compose", source.gmail_compose),
            modify=flag("gmail_modify", source.gmail_modify),
            send=flag("gmail_send", source.gmail_send),
        ),
        calendar_write=flag("calendar_write", source.calendar_write),
    )


@lru_cache(maxsize=1)
def get_policy() -> PolicyConfig:
    """Process-wide policy snapshot, loaded on first use."""
    return load_policy()


# ---------------------------------------------------------------------------
# Scope composition
# ---------------------------------------------------------------------------


def compose_scopes(policy: PolicyConfig) -> list[str]:
    """
    Compute the OAuth scopes to request for `policy`.

    1. Explicit scopes, when configured, are returned as-is (deduplicated).
    2. Otherwise the catalog rows for the policy's profile are unioned over
       the enabled services. Empty rows and unknown services add nothing.
    3. Gmail compose/modify/send scopes are removed when their flag is off.
    4. With calendar_write on, calendar.readonly is replaced by full calendar.

    The result has no duplicates. Its order is stable (catalog order) but
    carries no meaning for Google.
    """
    if policy.explicit_scopes:
        return list(dict.fromkeys(policy.explicit_scopes))

    enabled = policy.enabled_services

    # dict as an insertion-ordered set
    scopes: dict[str, None] = {}
    for service, rows in SCOPE_CATALOG.items():
        if service in enabled:
            scopes.update(dict.fromkeys(rows.get(policy.profile, ())))

    if "gmail" in enabled:
        if not policy.gmail.compose:
            scopes.pop(GMAIL_COMPOSE_SCOPE, None)
        if not policy.gmail.modify:
            scopes.pop(GMAIL_MODIFY_SCOPE, None)
        if not policy.gmail.send:
            scopes.pop(GMAIL_SEND_SCOPE, None)

    if "calendar" in enabled and policy.calendar_write:
        scopes.pop(CALENDAR_READONLY_SCOPE, None)
        scopes[CALENDAR_SCOPE] = None

    return list(scopes)


def policy_summary(policy: PolicyConfig) -> dict:
    """JSON-friendly description of a policy, for status tools and the CLI."""
    return {
        "profile": policy.profile.value,
        "enabled_services": sorted(policy.enabled_services),
        "explicit_scopes": policy.explicit_scopes is not None,
        "scopes": compose_scopes(policy),
        "capabilities": {
            "gmail_compose": policy.gmail.compose,
            "gmail_modify": policy.gmail.modify,
            "gmail_send": policy.gmail.send,
            "calendar_write": policy.calendar_write,
        },
    }
