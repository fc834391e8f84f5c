"""
Validation helpers shared by the pass builder.

All helpers return plain JSON-ready dicts (``None`` values dropped) so
that validated data can be written straight into pass.json.
"""
from typing import Any, Dict, Iterable, List, Optional, Type

from pydantic import BaseModel, ValidationError

from walletpass.core import messages
from walletpass.utils.logging import get_logger

logger = get_logger(__name__)


def validate(schema: Type[BaseModel], data: Any) -> Dict[str, Any]:
    """
    Validate data against a schema and return the normalized dict.

    Unknown keys are stripped for schemas that ignore them.

    Raises:
        pydantic.ValidationError: If data does not match the schema
    """
    instance = schema.model_validate(data)
    return instance.model_dump(mode="json", exclude_none=True)


def is_valid(schema: Type[BaseModel], data: Any) -> bool:
    try:
        schema.model_validate(data)
    except ValidationError:
        return False
    return True


def filter_valid(schema: Type[BaseModel], items: Optional[Iterable[Any]]) -> List[Dict[str, Any]]:
    """
    Keep only the items matching the schema, logging a warning for each
    dropped one.
    """
    if not items:
        return []

    valid: List[Dict[str, Any]] = []
    for item in items:
        try:
            valid.append(validate(schema, item))
        except ValidationError as exc:
            logger.warning(
                "schema_item_dropped",
                schema=schema.__name__,
                errors=exc.error_count(),
                reason=str(exc),
            )
    return valid


def assert_validity(schema: Type[BaseModel], data: Any, message: Optional[str] = None) -> Dict[str, Any]:
    """
    Validate data or raise a TypeError.

    Args:
        schema: Model to validate against
        data: Candidate data
        message: Optional message template; its ``%s`` receives the
            validation error

    Raises:
        TypeError: If data does not match the schema
    """
    try:
        return validate(schema, data)
    except ValidationError as exc:
        reason = str(exc)
        raise TypeError(messages.format(message, reason) if message else reason) from exc


__all__ = ["validate", "is_valid", "filter_valid", "assert_validity"]
