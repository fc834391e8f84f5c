"""Tests for logging helpers."""
import logging
import sys
from pathlib import Path

import pytest
import structlog
from structlog.testing import capture_logs

PROJECT_ROOT = Path(__file__).resolve().parent.parent
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from walletpass.utils.logging import _coerce_level, get_logger, log_context  # noqa: E402


@pytest.mark.unit
def test_coerce_level(monkeypatch):
    """Test level names, numbers and the env default."""
    monkeypatch.delenv("WALLETPASS_LOG_LEVEL", raising=False)

    assert _coerce_level("info") == logging.INFO
    assert _coerce_level(logging.DEBUG) == logging.DEBUG
    assert _coerce_level(None) == logging.WARNING

    monkeypatch.setenv("WALLETPASS_LOG_LEVEL", "error")
    assert _coerce_level(None) == logging.ERROR

    with pytest.raises(ValueError):
        _coerce_level("chatty")


@pytest.mark.unit
def test_get_logger_binds_component():
    """Test loggers carry component and version."""
    logger = get_logger("walletpass.core.pkpass")

    with capture_logs() as logs:
        logger.warning("something_happened", path="icon.png")

    assert logs[0]["component"] == "pkpass"
    assert logs[0]["path"] == "icon.png"
    assert "version" in logs[0]


@pytest.mark.unit
def test_log_context_restores_previous_values():
    """Test log_context restores outer context values."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(serial_number="outer")

    with log_context(serial_number="inner", pass_type="coupon"):
        assert structlog.contextvars.get_contextvars() == {"serial_number": "inner", "pass_type": "coupon"}

    assert structlog.contextvars.get_contextvars() == {"serial_number": "outer"}
    structlog.contextvars.clear_contextvars()
