# =============================================================================
# core/dispatcher.py  —  The Tool Dispatcher
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Runs one tool call end to end.  Every Bento tool goes through the same
#   path, in this order:
#
#     1. look up the ToolSpec by name
#     2. validate the arguments against the tool's parameter model
#     3. run the tool's guard (e.g. "email or uuid")
#     4. read credentials from the settings
#     5. build a BentoClient and make exactly one delegated call
#     6. format the result as text
#
#   Any exception raised in steps 2-6 is turned into "Error: <message>".
#   invoke() always returns a string; nothing escapes to the MCP layer.
#
# LOGGING:
#   Everything goes to STDERR.  STDOUT carries the MCP protocol; a stray
#   print there would corrupt the stream.
# =============================================================================

import json
import logging
from typing import Any, Callable, Optional

from pydantic import ValidationError

from core.catalog import TOOLS, ToolSpec
from core.client import BentoClient
from core.config import BentoCredentials, BentoSettings
from core.formatting import format_response, handle_error

logger = logging.getLogger("bento_mcp")

# ANSI color codes for terminal output
_CYAN = "\033[36m"     # Requests (tool calls with params)
_GREEN = "\033[32m"    # Responses
_YELLOW = "\033[33m"   # Status/rejections
_RESET = "\033[0m"

ClientFactory = Callable[[BentoCredentials, str], BentoClient]


def _log_request(tool_name: str, arguments: dict[str, Any]) -> None:
    """Log an incoming tool call with its arguments in CYAN."""
    param_str = ", ".join(f"{k}={v!r}" for k, v in arguments.items())
    logger.info(f"{_CYAN}{tool_name} called with: {param_str}{_RESET}")


def _log_status(message: str) -> None:
    """Log a rejection or failure in YELLOW."""
    logger.warning(f"{_YELLOW}  → {message}{_RESET}")


def _log_response(tool_name: str, text: str) -> str:
    """Log the response text (single line) in GREEN, then return it."""
    logger.info(f"{_GREEN}  ← {tool_name} response: {json.dumps(text)}{_RESET}")
    return text


def _describe_validation_error(tool_name: str, error: ValidationError) -> str:
    problems = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"]) or "arguments"
        problems.append(f"{location}: {item['msg']}")
    return f"Error: Invalid arguments for {tool_name}: " + "; ".join(problems)


def _default_client_factory(credentials: BentoCredentials, base_url: str) -> BentoClient:
    return BentoClient(credentials, base_url=base_url)


class ToolDispatcher:
    """Validate → guard → credentials → one delegated call → text.

    Holds only the read-only settings and a client factory.  A new client
    is built for every call.
    """

    def __init__(
        self,
        settings: BentoSettings,
        client_factory: Optional[ClientFactory] = None,
        tools: Optional[dict[str, ToolSpec]] = None,
    ) -> None:
        self.settings = settings
        self.client_factory = client_factory or _default_client_factory
        self.tools = TOOLS if tools is None else tools

    async def invoke(self, tool_name: str, arguments: Optional[dict[str, Any]] = None) -> str:
        # Omitted optionals arrive as None from the MCP layer; drop them so
        # model defaults (currency="USD", type="html", ...) apply.
        arguments = {k: v for k, v in (arguments or {}).items() if v is not None}
        _log_request(tool_name, arguments)

        spec = self.tools.get(tool_name)
        if spec is None:
            _log_status(f"Unknown tool: {tool_name}")
            return _log_response(tool_name, f"Error: Unknown tool: {tool_name}")

        try:
            params = spec.params.model_validate(arguments)
        except ValidationError as e:
            _log_status(f"Rejected arguments ({e.error_count()} problem(s))")
            return _log_response(tool_name, _describe_validation_error(tool_name, e))

        try:
            if spec.guard is not None:
                rejection = spec.guard(params)
                if rejection is not None:
                    _log_status(f"Rejected: {rejection}")
                    return _log_response(tool_name, rejection)

            credentials = self.settings.credentials()
            client = self.client_factory(credentials, self.settings.api_base_url)
            result = await spec.operation(client, params)

            formatter = spec.formatter or format_response
            return _log_response(tool_name, formatter(result))
        except Exception as e:
            _log_status(f"{type(e).__name__}: {e}")
            return _log_response(tool_name, handle_error(e))
