# =============================================================================
# main.py  —  Entry Point for the Bento MCP Server
# =============================================================================
#
# HOW TO RUN:
#   uv run python main.py          (or the installed `bento-mcp` script)
#
# WHAT HAPPENS:
#   1. Loads a .env file if one exists (BENTO_* variables)
#   2. Builds the read-only BentoSettings once
#   3. Creates the ToolDispatcher and the FastMCP server around it
#   4. Serves MCP over stdio until the host closes the pipe
#
# EXIT STATUS:
#   0 on a normal shutdown or Ctrl-C.  Any exception that escapes the
#   listener (e.g. the stdio transport cannot be set up) is reported on
#   stderr as "Fatal error: ..." and the process exits with status 1.
# =============================================================================

import logging
import sys

from dotenv import load_dotenv

from core.config import BentoSettings
from core.dispatcher import ToolDispatcher
from tools.mcp_server import build_server

logger = logging.getLogger("bento_mcp")


# =============================================================================
# Logging Setup
# =============================================================================
# STDERR only: STDOUT is the MCP transport.
# =============================================================================
def configure_logging(level: str = "INFO") -> None:
    """Send all log records to stderr at ``level``."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [MCP] %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


def main() -> int:
    # Must happen BEFORE BentoSettings.from_env() reads the environment.
    load_dotenv()

    settings = BentoSettings.from_env()
    configure_logging(settings.log_level)

    missing = settings.missing_credentials()
    if missing:
        logger.warning(
            "Credentials not configured (%s); every tool call will fail until they are set",
            ", ".join(missing),
        )

    try:
        server = build_server(ToolDispatcher(settings), name=settings.server_name)
        logger.info("Bento MCP Server running on stdio")
        server.run(transport="stdio")
    except KeyboardInterrupt:
        return 0
    except Exception as e:
        logger.error("Fatal error: %s", e, exc_info=True)
        return 1
    return 0


# =============================================================================
# Script entry point
# =============================================================================
if __name__ == "__main__":
    sys.exit(main())
