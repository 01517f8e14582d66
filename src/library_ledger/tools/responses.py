"""
Shared execution path for ledger operation handlers.

Every handler follows the same lifecycle:

1. INPUT: validate the raw arguments against the operation's schema
2. INVOCATION: run the operation inside one ledger transaction
3. RESPONSE: return structured data, or an error naming its kind

Errors are turned into responses only after the transaction scope has exited,
so a failed invocation has already been rolled back when it is reported.
"""

import logging
from collections.abc import Callable
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from ..contract import LibraryContract
from ..errors import LedgerException, StorageError
from ..runtime import ledger_transaction

logger = logging.getLogger(__name__)

INVALID_ARGUMENTS = "InvalidArguments"

P = TypeVar("P", bound=BaseModel)


def error_response(kind: str, text: str, key: str | None = None) -> dict[str, Any]:
    response: dict[str, Any] = {
        "isError": True,
        "errorKind": kind,
        "content": [{"type": "text", "text": text}],
    }
    if key is not None:
        response["key"] = key
    return response


def success_response(text: str, data: dict[str, Any]) -> dict[str, Any]:
    return {
        "content": [{"type": "text", "text": text}],
        "data": data,
    }


def execute(
    tool_name: str,
    input_model: type[P],
    arguments: dict[str, Any],
    operation: Callable[[LibraryContract, P], dict[str, Any]],
) -> dict[str, Any]:
    """
    Validate arguments, run the operation in a transaction, shape the result.

    Args:
        tool_name: Operation name for logs and messages
        input_model: Pydantic schema of the arguments
        arguments: Raw arguments from the caller
        operation: Runs against the contract and returns a success response

    Returns:
        The operation's response, or an error response
    """
    try:
        params = input_model.model_validate(arguments)
    except ValidationError as e:
        logger.warning("Invalid %s parameters: %s", tool_name, e)
        return error_response(INVALID_ARGUMENTS, f"Invalid {tool_name} parameters: {e}")

    try:
        with ledger_transaction() as contract:
            response = operation(contract, params)
    except StorageError as e:
        logger.exception("%s failed - world state error", tool_name)
        return error_response(e.kind, str(e), key=e.key)
    except LedgerException as e:
        logger.info("%s failed - %s: %s", tool_name, e.kind, e)
        return error_response(e.kind, str(e), key=e.key)
    except ValidationError as e:
        # Arguments that pass the schema but cannot form a valid entity
        logger.info("%s failed - invalid entity: %s", tool_name, e)
        return error_response(INVALID_ARGUMENTS, f"{tool_name} failed: {e}")

    return response
