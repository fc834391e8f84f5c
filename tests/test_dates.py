"""Tests for W3C date rendering."""
import sys
from datetime import date, datetime, timedelta, timezone
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from walletpass.core.dates import process_date, to_w3c_string  # noqa: E402


@pytest.mark.unit
@pytest.mark.parametrize(
    "value, expected",
    [
        (datetime(2020, 7, 1, 9, 5, 3), "2020-07-01T09:05:03Z"),
        (datetime(2020, 7, 1, 9, 0, tzinfo=timezone(timedelta(hours=-5))), "2020-07-01T14:00:00Z"),
        (date(2020, 12, 31), "2020-12-31T00:00:00Z"),
        ("2020-07-01T09:05:03", "2020-07-01T09:05:03Z"),
        ("2020-07-01T09:05:03+01:00", "2020-07-01T08:05:03Z"),
    ],
)
def test_to_w3c_string(value, expected):
    """Test dates render as W3C UTC strings."""
    assert to_w3c_string(value) == expected


@pytest.mark.unit
@pytest.mark.parametrize("value", ["31/12/2020", 1593594303, None, [2020, 7, 1]])
def test_process_date_rejects_invalid_values(value):
    """Test invalid dates raise TypeError."""
    with pytest.raises(TypeError, match="^Cannot set relevantDate. Invalid date"):
        process_date("relevantDate", value)
