# =============================================================================
# tools/__init__.py
# =============================================================================
# This package contains the FastMCP surface: typed tool functions that
# forward to core.dispatcher.ToolDispatcher.
#
# WHAT TOOLS DO NOT DO:
#   - They do NOT validate arguments beyond their type (core/schemas.py does)
#   - They do NOT talk to Bento (core/client.py does)
#   - They do NOT format results (core/formatting.py does)
# =============================================================================
