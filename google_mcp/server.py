"""
Google Workspace MCP server using FastMCP v2 with policy-based tool gating.

This module creates and runs the MCP server with:
- A PolicyMiddleware that hides and blocks tools the access policy denies
- The google_auth_status tool, reporting the policy and the OAuth scopes the
  server will request at consent time
- Health and readiness HTTP endpoints (for container probes)
- Structured JSON logging for all policy decisions
- stdio or Streamable HTTP transport, chosen by GOOGLE_MCP_TRANSPORT

Architecture:
    The policy is loaded once at startup (policy.get_policy()) and threaded into
    the middleware, so the scopes requested at login and every later tool
    decision come from the same snapshot.

    For every MCP request:

    1. tools/list: the middleware filters the server's tool list through
       tools.is_tool_allowed(), so disabled tools are never advertised
    2. tools/call: the middleware checks the same rule again before the tool
       handler runs, so guessing a hidden tool's name does not help

    The per-service adapters (Gmail, Calendar, Drive, ...) register their tools
    on the server returned by create_server(); they never need to check the
    policy themselves.

Running the server:
    python -m google_mcp.server

    With GOOGLE_MCP_TRANSPORT=streamable-http it listens on
    http://GOOGLE_MCP_HOST:GOOGLE_MCP_PORT with:
    - MCP endpoint at /mcp
    - Health check at /health
    - Readiness check at /ready
"""

import json
import logging
import sys
import uuid
from typing import Sequence

from fastmcp import FastMCP
from fastmcp.server.middleware import CallNext, Middleware, MiddlewareContext
from fastmcp.tools.tool import Tool, ToolResult
from mcp.types import CallToolRequestParams, ListToolsRequest
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from google_mcp.config import Settings
from google_mcp.policy import PolicyConfig, compose_scopes, get_policy, policy_summary
from google_mcp.tools import is_tool_allowed, resolve_service

settings = Settings()

# ---------------------------------------------------------------------------
# Structured JSON Logging
# ---------------------------------------------------------------------------
# One JSON object per log line. Over stdio the protocol owns stdout, so logs
# go to stderr there.


class JSONLogFormatter(logging.Formatter):
    """
    Formats log records as single-line JSON objects.

    Example output:

        {"timestamp": "2026-02-06 10:30:00,123", "level": "WARNING",
         "logger": "google-mcp", "message": "Tool call denied by policy",
         "tool": "gmail_send", "service": "gmail", "decision": "denied"}
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        # Structured fields passed via logger.info("msg", extra={"policy_data": {...}})
        if hasattr(record, "policy_data"):
            log_entry.update(record.policy_data)
        return json.dumps(log_entry)


handler = logging.StreamHandler(
    sys.stderr if settings.transport == "stdio" else sys.stdout
)
handler.setFormatter(JSONLogFormatter())

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    handlers=[handler],
)
logger = logging.getLogger("google-mcp")


# ---------------------------------------------------------------------------
# Policy Middleware
# ---------------------------------------------------------------------------


class PolicyMiddleware(Middleware):
    """
    Tool gating middleware driven by a fixed PolicyConfig.

    - tools/list responses only include tools the policy allows
    - tools/call requests for denied tools fail with PermissionError, which
      FastMCP converts to an MCP error result
    """

    def __init__(self, policy: PolicyConfig):
        self.policy = policy

    async def on_list_tools(
        self,
        context: MiddlewareContext[ListToolsRequest],
        call_next: CallNext[ListToolsRequest, Sequence[Tool]],
    ) -> Sequence[Tool]:
        request_id = str(uuid.uuid4())[:8]

        all_tools = await call_next(context)
        allowed_tools = [t for t in all_tools if is_tool_allowed(t.name, self.policy)]

        logger.info(
            "Tool list filtered by policy",
            extra={
                "policy_data": {
                    "request_id": request_id,
                    "profile": self.policy.profile.value,
                    "total_tools": len(all_tools),
                    "allowed_tools": [t.name for t in allowed_tools],
                    "decision": "filtered",
                }
            },
        )

        return allowed_tools

    async def on_call_tool(
        self,
        context: MiddlewareContext[CallToolRequestParams],
        call_next: CallNext[CallToolRequestParams, ToolResult],
    ) -> ToolResult:
        request_id = str(uuid.uuid4())[:8]
        tool_name = context.message.name
        service = resolve_service(tool_name)

        if not is_tool_allowed(tool_name, self.policy):
            if service is None:
                reason = "unknown_tool"
            elif service not in self.policy.enabled_services:
                reason = "service_disabled"
            else:
                reason = "capability_disabled"
            logger.warning(
                "Tool call denied by policy",
                extra={
                    "policy_data": {
                        "request_id": request_id,
                        "tool": tool_name,
                        "service": service,
                        "decision": "denied",
                        "reason": reason,
                    }
                },
            )
            raise PermissionError(
                f"Access denied: tool '{tool_name}' is disabled by the Google MCP policy"
            )

        logger.info(
            "Tool call allowed",
            extra={
                "policy_data": {
                    "request_id": request_id,
                    "tool": tool_name,
                    "service": service,
                    "decision": "allowed",
                }
            },
        )

        return await call_next(context)


# ---------------------------------------------------------------------------
# Server factory
# ---------------------------------------------------------------------------


def create_server(policy: PolicyConfig) -> FastMCP:
    """
    Build the MCP server for `policy`.

    Service adapters register their tools on the returned server with
    @server.tool; PolicyMiddleware gates them by name.
    """
    server = FastMCP(
        name="google-mcp",
        instructions=(
            "Google Workspace tools (Gmail, Calendar, Drive, Docs, Sheets, Slides "
            "and more). Only the services and capabilities enabled by the "
            "server's access policy are available."
        ),
        middleware=[PolicyMiddleware(policy)],
    )

    @server.tool(
        name="google_auth_status",
        description=(
            "Show the scope profile, enabled services, capability flags and "
            "OAuth scopes this server requests from Google."
        ),
    )
    def google_auth_status() -> dict:
        return policy_summary(policy)

    # Plain HTTP endpoints (not MCP protocol) for container probes.

    @server.custom_route("/health", methods=["GET"])
    async def health_check(request: Request) -> Response:
        """Liveness probe: is the server process alive and responsive?"""
        return JSONResponse({"status": "healthy"})

    @server.custom_route("/ready", methods=["GET"])
    async def readiness_check(request: Request) -> Response:
        """Readiness probe: does the policy grant any Google access at all?"""
        if not compose_scopes(policy):
            return JSONResponse(
                {"status": "not_ready", "reason": "policy requests no OAuth scopes"},
                status_code=503,
            )
        return JSONResponse({"status": "ready"})

    return server


policy = get_policy()
mcp = create_server(policy)


# ---------------------------------------------------------------------------
# Server entry point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    logger.info(
        "Starting Google MCP server (transport=%s, profile=%s, services=%s)",
        settings.transport,
        policy.profile.value,
        ",".join(sorted(policy.enabled_services)),
    )
    if settings.transport == "stdio":
        mcp.run(transport="stdio")
    else:
        mcp.run(
            transport=settings.transport,
            host=settings.host,
            port=settings.port,
            log_level=settings.log_level,
        )
