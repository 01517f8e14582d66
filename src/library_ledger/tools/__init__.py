"""
Operation handlers for the library ledger.

Each descriptor pairs an operation name with its input schema and a handler
that takes raw arguments and returns a structured response. invoke()
dispatches by name.
"""

from typing import Any

from .catalog import catalog_tools
from .lending import lending_tools
from .responses import INVALID_ARGUMENTS, error_response

all_tools = [*catalog_tools, *lending_tools]

tools_by_name = {tool["name"]: tool for tool in all_tools}


def invoke(name: str, arguments: dict[str, Any] | None = None) -> dict[str, Any]:
    """Run the named operation with the given arguments."""
    tool = tools_by_name.get(name)
    if tool is None:
        return error_response(INVALID_ARGUMENTS, f"Unknown operation: {name}")
    return tool["handler"](arguments or {})


__all__ = [
    "all_tools",
    "invoke",
    "tools_by_name",
]
