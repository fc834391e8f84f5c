"""Tests for the pass.strings codec."""
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from walletpass.core import strings_file  # noqa: E402


@pytest.mark.unit
def test_parse_entries_and_comments():
    """Test entries and comments are parsed, other lines ignored."""
    content = (
        '/* Header label */\n'
        '"EVENT" = "Evento";\n'
        '\n'
        'garbage line\n'
        '"LOCATION"="Luogo";\n'
        '   /* indented comment */   \n'
    ).encode("utf-8")

    result = strings_file.parse(content)

    assert result.translations == {"EVENT": "Evento", "LOCATION": "Luogo"}
    assert result.comments == ["Header label", "indented comment"]


@pytest.mark.unit
def test_parse_accepts_text_and_bom():
    """Test text input and a UTF-8 BOM are accepted."""
    assert strings_file.parse('"a" = "b";').translations == {"a": "b"}
    assert strings_file.parse('\ufeff"a" = "b";'.encode("utf-8")).translations == {"a": "b"}


@pytest.mark.unit
def test_parse_empty_content():
    """Test empty content parses to nothing."""
    result = strings_file.parse(b"")

    assert result.translations == {}
    assert result.comments == []


@pytest.mark.unit
def test_create():
    """Test translations render one entry per line."""
    assert strings_file.create({"a": "b", "c": "d"}) == b'"a" = "b";\n"c" = "d";'
    assert strings_file.create({}) == b""


@pytest.mark.unit
def test_create_then_parse_keeps_unicode():
    """Test non-ASCII translations survive create and parse."""
    translations = {"GREETING": "Grüße", "TICKET": "チケット"}

    assert strings_file.parse(strings_file.create(translations)).translations == translations


@pytest.mark.unit
def test_create_escapes_quotes_and_newlines():
    """Test values with quotes, newlines and backslashes stay on one line and parse back."""
    translations = {"NOTE": 'Say "hi"\nthen leave', "PATH": "C:\\passes"}

    content = strings_file.create(translations)

    assert content.count(b"\n") == 1
    assert content.startswith(b'"NOTE" = "Say \\"hi\\"\\nthen leave";')
    assert strings_file.parse(content).translations == translations
