"""Date handling for pass.json date properties."""
from datetime import date, datetime, timezone
from typing import Union

from walletpass.core import messages

DateLike = Union[datetime, date, str]

W3C_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def to_w3c_string(value: DateLike) -> str:
    """
    Render a date as ``YYYY-MM-DDTHH:MM:SSZ``.

    Aware datetimes are converted to UTC first; naive ones are rendered
    as they are. Strings must be ISO 8601.

    Raises:
        ValueError: If value is not a date
    """
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    elif isinstance(value, date) and not isinstance(value, datetime):
        value = datetime(value.year, value.month, value.day)
    elif not isinstance(value, datetime):
        raise ValueError(f"unsupported date type {type(value).__name__}")

    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime(W3C_FORMAT)


def process_date(name: str, value: DateLike) -> str:
    """
    Render a date for the pass.json property ``name``.

    Raises:
        TypeError: If value is not a valid date
    """
    try:
        return to_w3c_string(value)
    except (TypeError, ValueError) as exc:
        raise TypeError(messages.format(messages.DATE_INVALID, name, value)) from exc
