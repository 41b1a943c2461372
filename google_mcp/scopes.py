"""
Google OAuth scope catalog.

For every service this server can expose, SCOPE_CATALOG lists the OAuth scopes
needed to operate it at each scope profile:

    SCOPE_CATALOG = {
        "service": {
            ScopeProfile.READONLY: (...),
            ScopeProfile.EDITOR: (...),
            ScopeProfile.FULL: (...),
        },
    }

This is static data. The policy loader and scope composer in policy.py decide
which rows contribute to the scopes requested at consent time.

Empty rows mean "no usable access at this profile", not "read-only access":
Tasks, Contacts, YouTube and Chat offer no read-only scope that covers what
their tools need, and Notes is built on the Tasks API.
"""

from enum import Enum

_AUTH = "https://www.googleapis.com/auth/"


class ScopeProfile(str, Enum):
    """How much access to request for each enabled service."""

    READONLY = "readonly"
    EDITOR = "editor"
    FULL = "full"


DEFAULT_PROFILE = ScopeProfile.EDITOR

# Scopes the composer adds or removes individually.
GMAIL_READONLY_SCOPE = _AUTH + "gmail.readonly"
GMAIL_MODIFY_SCOPE = _AUTH + "gmail.modify"
GMAIL_COMPOSE_SCOPE = _AUTH + "gmail.compose"
GMAIL_SEND_SCOPE = _AUTH + "gmail.send"
CALENDAR_READONLY_SCOPE = _AUTH + "calendar.readonly"
CALENDAR_SCOPE = _AUTH + "calendar"
TASKS_SCOPE = _AUTH + "tasks"

# Services enabled when GOOGLE_MCP_SERVICES is unset or empty.
DEFAULT_SERVICES: tuple[str, ...] = (
    "gmail",
    "calendar",
    "drive",
    "docs",
    "sheets",
    "slides",
)

# Everything GOOGLE_MCP_SERVICES=all turns on. "notes" is a synthetic service
# layered on top of Google Tasks.
ALL_SERVICES: tuple[str, ...] = (
    "calendar",
    "gmail",
    "drive",
    "docs",
    "sheets",
    "slides",
    "tasks",
    "contacts",
    "youtube",
    "forms",
    "chat",
    "meet",
    "notes",
)


def _row(*names: str) -> tuple[str, ...]:
    return tuple(_AUTH + name for name in names)


SCOPE_CATALOG: dict[str, dict[ScopeProfile, tuple[str, ...]]] = {
    "gmail": {
        ScopeProfile.READONLY: (GMAIL_READONLY_SCOPE,),
        ScopeProfile.EDITOR: (
            GMAIL_READONLY_SCOPE,
            GMAIL_MODIFY_SCOPE,
            GMAIL_COMPOSE_SCOPE,
        ),
        # gmail.modify already covers reading, so readonly is not repeated here.
        ScopeProfile.FULL: (
            GMAIL_MODIFY_SCOPE,
            GMAIL_COMPOSE_SCOPE,
            GMAIL_SEND_SCOPE,
        ),
    },
    "calendar": {
        ScopeProfile.READONLY: (CALENDAR_READONLY_SCOPE,),
        ScopeProfile.EDITOR: (CALENDAR_READONLY_SCOPE,),
        ScopeProfile.FULL: (CALENDAR_SCOPE,),
    },
    "drive": {
        ScopeProfile.READONLY: _row("drive.readonly"),
        ScopeProfile.EDITOR: _row("drive"),
        ScopeProfile.FULL: _row("drive"),
    },
    "docs": {
        ScopeProfile.READONLY: _row("documents.readonly"),
        ScopeProfile.EDITOR: _row("documents"),
        ScopeProfile.FULL: _row("documents"),
    },
    "sheets": {
        ScopeProfile.READONLY: _row("spreadsheets.readonly"),
        ScopeProfile.EDITOR: _row("spreadsheets"),
        ScopeProfile.FULL: _row("spreadsheets"),
    },
    "slides": {
        ScopeProfile.READONLY: _row("presentations.readonly"),
        ScopeProfile.EDITOR: _row("presentations"),
        ScopeProfile.FULL: _row("presentations"),
    },
    "tasks": {
        ScopeProfile.READONLY: (),
        ScopeProfile.EDITOR: (TASKS_SCOPE,),
        ScopeProfile.FULL: (TASKS_SCOPE,),
    },
    "contacts": {
        ScopeProfile.READONLY: (),
        ScopeProfile.EDITOR: _row("contacts"),
        ScopeProfile.FULL: _row("contacts"),
    },
    "youtube": {
        ScopeProfile.READONLY: (),
        ScopeProfile.EDITOR: _row("youtube"),
        ScopeProfile.FULL: _row("youtube"),
    },
    "forms": {
        ScopeProfile.READONLY: _row("forms.responses.readonly"),
        ScopeProfile.EDITOR: _row("forms.body", "forms.responses.readonly"),
        ScopeProfile.FULL: _row("forms.body", "forms.responses.readonly"),
    },
    "chat": {
        ScopeProfile.READONLY: (),
        ScopeProfile.EDITOR: _row(
            "chat.spaces",
            "chat.messages",
            "chat.memberships",
        ),
        ScopeProfile.FULL: _row(
            "chat.spaces",
            "chat.spaces.create",
            "chat.messages",
            "chat.messages.create",
            "chat.memberships",
        ),
    },
    "meet": {
        ScopeProfile.READONLY: _row("meetings.space.readonly"),
        ScopeProfile.EDITOR: _row(
            "meetings.space.created",
            "meetings.space.readonly",
        ),
        ScopeProfile.FULL: _row(
            "meetings.space.created",
            "meetings.space.readonly",
        ),
    },
    "notes": {
        ScopeProfile.READONLY: (),
        ScopeProfile.EDITOR: (TASKS_SCOPE,),
        ScopeProfile.FULL: (TASKS_SCOPE,),
    },
}
