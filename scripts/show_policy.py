"""
CLI utility to inspect the Google MCP access policy.

Prints the OAuth scopes the server would request for the current
GOOGLE_MCP_* configuration. Useful when setting up the OAuth consent screen
in the Google Cloud console, or to check what a configuration change does
before restarting the server.

Usage examples:

    # Scopes for the current environment
    python -m scripts.show_policy

    # Try a different profile and service list without touching the environment
    python -m scripts.show_policy --profile readonly --services gmail,calendar

    # Comma separated, ready to paste into GOOGLE_MCP_SCOPES
    python -m scripts.show_policy --format csv

    # Check individual tools (exit status 1 if any of them is denied)
    python -m scripts.show_policy --check gmail_send calendar_create_event
"""

import argparse
import json

from google_mcp.config import PolicySettings
from google_mcp.policy import compose_scopes, load_policy, policy_summary
from google_mcp.tools import is_tool_allowed


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Show the OAuth scopes and tool decisions of the Google MCP policy.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Current environment:
    %(prog)s

  Read-only Gmail:
    %(prog)s --profile readonly --services gmail

  Everything, as JSON:
    %(prog)s --profile full --services all --format json
        """,
    )

    parser.add_argument(
        "--profile",
        help="Scope profile: readonly, editor or full (overrides GOOGLE_MCP_SCOPE_PROFILE)",
    )
    parser.add_argument(
        "--services",
        help="Comma separated services or 'all' (overrides GOOGLE_MCP_SERVICES)",
    )
    parser.add_argument(
        "--format",
        choices=["lines", "csv", "json"],
        default="lines",
        help="Output format (default: lines)",
    )
    parser.add_argument(
        "--check",
        nargs="+",
        default=[],
        metavar="TOOL",
        help="Tool names to check against the policy",
    )

    args = parser.parse_args(argv)

    overrides = {}
    if args.profile is not None:
        overrides["scope_profile"] = args.profile
    if args.services is not None:
        overrides["services"] = args.services

    policy = load_policy(PolicySettings(**overrides))
    decisions = {tool: is_tool_allowed(tool, policy) for tool in args.check}

    if args.format == "json":
        summary = policy_summary(policy)
        if decisions:
            summary["tools"] = decisions
        print(json.dumps(summary, indent=2))
    else:
        scopes = compose_scopes(policy)
        if args.format == "csv":
            print(",".join(scopes))
        else:
            for scope in scopes:
                print(scope)
        for tool, allowed in decisions.items():
            print(f"{tool}: {'allowed' if allowed else 'denied'}")

    return 0 if all(decisions.values()) else 1


if __name__ == "__main__":
    raise SystemExit(main())
