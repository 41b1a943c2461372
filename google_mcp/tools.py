"""
Tool registry and tool authorization.

This module maps MCP tool names to the Google service that owns them and
decides whether a tool may run under a given PolicyConfig. It is the central
registry for tool access control; the PolicyMiddleware in server.py consults
is_tool_allowed() for every tools/list and tools/call request.

Tool naming convention:
- Format: "<service>_<operation>" (e.g., "gmail_send", "drive_list_files")
- The prefix decides the owning service; a tool whose name matches no prefix
  belongs to no service and is always denied.
- Authentication tools ("google_auth", ...) belong to no service and are
  always allowed, since they establish the credentials every other tool needs.

Decision table for is_tool_allowed(tool_name, policy):

    auth tool                                  -> allowed
    no matching prefix                         -> denied
    owning service not enabled                 -> denied
    gmail send / modify / compose tool         -> matching gmail flag
    calendar create / update / delete / quick  -> calendar_write
    anything else                              -> allowed
"""

from google_mcp.policy import PolicyConfig

# Tool name prefix for each service.
TOOL_PREFIXES: dict[str, str] = {
    "drive": "drive_",
    "docs": "docs_",
    "sheets": "sheets_",
    "slides": "slides_",
    "calendar": "calendar_",
    "gmail": "gmail_",
    "contacts": "contacts_",
    "youtube": "youtube_",
    "tasks": "tasks_",
    "forms": "forms_",
    "chat": "chat_",
    "meet": "meet_",
    "notes": "notes_",
}

AUTH_TOOLS: frozenset[str] = frozenset(
    {
        "google_auth",
        "google_auth_status",
        "google_auth_code",
        "google_logout",
    }
)

GMAIL_SEND_TOOLS: frozenset[str] = frozenset({"gmail_send", "gmail_reply"})
GMAIL_MODIFY_TOOLS: frozenset[str] = frozenset(
    {"gmail_trash", "gmail_mark_read", "gmail_mark_unread"}
)
GMAIL_COMPOSE_TOOLS: frozenset[str] = frozenset({"gmail_create_draft"})
CALENDAR_WRITE_TOOLS: frozenset[str] = frozenset(
    {
        "calendar_create_event",
        "calendar_update_event",
        "calendar_delete_event",
        "calendar_quick_add",
    }
)


def _prefix_order(prefixes: dict[str, str]) -> tuple[tuple[str, str], ...]:
    """
    Order (prefix, service) pairs for matching: longest prefix first, equal
    lengths alphabetically. A name therefore resolves to its most specific
    prefix regardless of the order TOOL_PREFIXES is written in.
    """
    owners: dict[str, str] = {}
    for service, prefix in prefixes.items():
        if not prefix:
            raise ValueError(f"Service {service!r} has an empty tool prefix")
        if prefix in owners:
            raise ValueError(
                f"Tool prefix {prefix!r} is claimed by both "
                f"{owners[prefix]!r} and {service!r}"
            )
        owners[prefix] = service
    return tuple(sorted(owners.items(), key=lambda item: (-len(item[0]), item[0])))


_PREFIX_ORDER = _prefix_order(TOOL_PREFIXES)


def resolve_service(tool_name: str) -> str | None:
    """Owning service of `tool_name`, or None if no prefix matches."""
    for prefix, service in _PREFIX_ORDER:
        if tool_name.startswith(prefix):
            return service
    return None


def is_tool_allowed(tool_name: str, policy: PolicyConfig) -> bool:
    """
    Decide whether `tool_name` may be listed and called under `policy`.

    Pure and stateless: the answer depends only on the arguments.
    """
    if tool_name in AUTH_TOOLS:
        return True

    service = resolve_service(tool_name)
    if service is None:
        return False

    if service not in policy.enabled_services:
        return False

    if service == "gmail":
        if tool_name in GMAIL_SEND_TOOLS:
            return policy.gmail.send
        if tool_name in GMAIL_MODIFY_TOOLS:
            return policy.gmail.modify
        if tool_name in GMAIL_COMPOSE_TOOLS:
            return policy.gmail.compose

    if service == "calendar" and tool_name in CALENDAR_WRITE_TOOLS:
        return policy.calendar_write

    return True
