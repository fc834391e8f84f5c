"""
Codec for ``pass.strings`` translation files.

The format is line based: ``"key" = "value";`` entries, with
``/* comment */`` lines allowed. Any other line is ignored.
Inside keys and values, ``\\"``, ``\\n`` and ``\\\\`` stand for a quote,
a newline and a backslash.
"""
import re
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Union

from walletpass.utils.logging import get_logger

logger = get_logger(__name__)

_QUOTED = r'(?:[^"\\]|\\.)+'
_ENTRY = re.compile(rf'^\s*"(?P<key>{_QUOTED})"\s*=\s*"(?P<value>{_QUOTED})"\s*;\s*$')
_COMMENT = re.compile(r"^\s*/\*\s*(?P<comment>.+?)\s*\*/\s*$")
_ESCAPE = re.compile(r'\\(.)')
_UNESCAPED = {"n": "\n", '"': '"', "\\": "\\"}


@dataclass
class StringsParseResult:
    translations: Dict[str, str] = field(default_factory=dict)
    comments: List[str] = field(default_factory=list)


def _decode(data: Union[bytes, bytearray]) -> str:
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        logger.warning("translations_file_not_utf8", error=str(exc))
        return data.decode("utf-8-sig", errors="replace")


def _unescape(text: str) -> str:
    return _ESCAPE.sub(lambda m: _UNESCAPED.get(m.group(1), m.group(0)), text)


def _escape(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")


def parse(data: Union[bytes, str]) -> StringsParseResult:
    """
    Parse the content of a pass.strings file.

    Bytes that are not valid UTF-8 are replaced with U+FFFD and a warning
    is logged; the readable entries are still returned.
    """
    text = _decode(data) if isinstance(data, (bytes, bytearray)) else data
    result = StringsParseResult()

    for line in text.splitlines():
        entry = _ENTRY.match(line)
        if entry:
            result.translations[_unescape(entry.group("key"))] = _unescape(entry.group("value"))
            continue

        comment = _COMMENT.match(line)
        if comment:
            result.comments.append(comment.group("comment"))

    return result


def create(translations: Mapping[str, str]) -> bytes:
    """Render translations as pass.strings content (empty bytes when there are none)."""
    lines = [f'"{_escape(key)}" = "{_escape(value)}";' for key, value in translations.items()]
    return "\n".join(lines).encode("utf-8")
