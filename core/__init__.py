# =============================================================================
# core/__init__.py
# =============================================================================
# This package contains everything the Bento tools need to run a call:
# configuration, parameter models, the REST client, the tool catalogue and
# the dispatcher that ties them together.
#
# Nothing in this package imports FastMCP.  The dispatcher takes a tool name
# and a dict of arguments and returns text, so it can be driven directly
# from tests or from any other host.
# =============================================================================
