# =============================================================================
# core/formatting.py  —  Result → Text
# =============================================================================
#
# Every tool answers with a single piece of text.  These two helpers are the
# only places that decide what that text looks like.
# =============================================================================

import json
from typing import Any

NO_DATA = "No data returned"
SUCCESS = "Success"
FAILURE = "Operation failed"


def format_response(data: Any) -> str:
    """Turn a remote result into the text the assistant sees.

    - None or an empty container/string → "No data returned"
    - bool → "Success" / "Operation failed"
    - int/float → "Count: <n>"
    - anything else → pretty JSON, keys in their original order
    """
    if data is None:
        return NO_DATA
    # bool before number: True is an int in Python.
    if isinstance(data, bool):
        return SUCCESS if data else FAILURE
    if isinstance(data, (int, float)):
        if isinstance(data, float) and data.is_integer():
            data = int(data)
        return f"Count: {data}"
    if isinstance(data, (dict, list, tuple, str)) and len(data) == 0:
        return NO_DATA
    return json.dumps(data, indent=2, ensure_ascii=False, default=str)


def handle_error(error: BaseException) -> str:
    """Render an exception as "Error: <message>"."""
    message = str(error) or type(error).__name__
    return f"Error: {message}"
