"""Properties file parsing.

Purpose
-------
Convert the classic line-oriented ``key=value`` format into a Python mapping.
:class:`PropertiesFileLoader` wraps the parser with UTF-8 decoding and
structured logging so every source the loader touches is handled the same way.

Format
------
* Lines are terminated by ``\\n``, ``\\r`` or ``\\r\\n``; leading whitespace is
  ignored.
* Lines whose first non-blank character is ``#`` or ``!`` are comments.
* A line ending in an odd number of backslashes continues on the next line;
  the continuation's leading whitespace is dropped.
* The key ends at the first unescaped ``=``, ``:`` or whitespace; one ``=``/``:``
  and surrounding whitespace between key and value are skipped.
* Escapes ``\\t \\n \\r \\f`` and ``\\uXXXX`` are decoded, any other ``\\x``
  yields ``x``.

Contents
--------
* :func:`parse_properties` – text to ordered ``dict``.
* :class:`PropertiesFileLoader` – bytes to mapping, raising ``InvalidFormat``.
"""

from __future__ import annotations

import re
import string
from typing import Final, Iterator, Mapping

from ...domain.errors import InvalidFormat
from ...observability import log_debug, log_error

_LINE_BREAK: Final[re.Pattern[str]] = re.compile(r"\r\n|\r|\n")
_WHITESPACE: Final[str] = " \t\f"
_SEPARATORS: Final[str] = "=:"
_COMMENT_MARKERS: Final[str] = "#!"
_ESCAPES: Final[dict[str, str]] = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}


class PropertiesFileLoader:
    """Decode UTF-8 payloads and parse them with :func:`parse_properties`."""

    encoding = "utf-8"

    def parse(self, payload: bytes, *, identifier: str) -> Mapping[str, str]:
        """Return the key/value pairs held in *payload*.

        Parameters
        ----------
        payload:
            Raw bytes of one properties source.
        identifier:
            File path or resource identifier, used for error messages and logs.

        Raises
        ------
        InvalidFormat
            When the payload is not valid UTF-8 or holds a malformed escape.

        Examples
        --------
        >>> PropertiesFileLoader().parse(b"name = demo", identifier="inline")
        {'name': 'demo'}
        """

        try:
            data = parse_properties(payload.decode(self.encoding))
        except UnicodeDecodeError as exc:
            log_error("properties_invalid", source="parser", path=identifier, error=str(exc))
            raise InvalidFormat(f"Invalid {self.encoding} content in {identifier}: {exc}") from exc
        except InvalidFormat as exc:
            log_error("properties_invalid", source="parser", path=identifier, error=str(exc))
            raise InvalidFormat(f"Invalid properties in {identifier}: {exc}") from exc
        log_debug("properties_parsed", source="parser", path=identifier, keys=len(data))
        return data


def parse_properties(text: str) -> dict[str, str]:
    """Parse properties *text* into a ``dict`` preserving file order.

    Later duplicates of a key overwrite earlier ones.

    Examples
    --------
    >>> parse_properties("# comment\\nhost = localhost\\nport:8080\\nmotd Hello \\\\\\n   world")
    {'host': 'localhost', 'port': '8080', 'motd': 'Hello world'}
    >>> parse_properties("path=C:\\\\\\\\temp\\ncopyright=\\\\u00a9 ACME")
    {'path': 'C:\\\\temp', 'copyright': '© ACME'}
    """

    result: dict[str, str] = {}
    for line in _logical_lines(text):
        key, value = _split_entry(line)
        result[_unescape(key)] = _unescape(value)
    return result


def _logical_lines(text: str) -> Iterator[str]:
    """Yield logical lines: comments and blanks dropped, continuations joined."""

    pending: str | None = None
    for raw in _LINE_BREAK.split(text):
        line = raw.lstrip(_WHITESPACE)
        if pending is None and (not line or line[0] in _COMMENT_MARKERS):
            continue
        if _continues(line):
            pending = (pending or "") + line[:-1]
            continue
        yield (pending or "") + line
        pending = None
    if pending:
        yield pending


def _continues(line: str) -> bool:
    """Return ``True`` when *line* ends with an odd number of backslashes."""

    trailing = len(line) - len(line.rstrip("\\"))
    return trailing % 2 == 1


def _split_entry(line: str) -> tuple[str, str]:
    """Split a logical line into its (still escaped) key and value."""

    key_end = value_start = len(line)
    separator_seen = False
    index = 0
    while index < len(line):
        char = line[index]
        if char == "\\":
            index += 2
            continue
        if char in _SEPARATORS or char in _WHITESPACE:
            key_end = index
            value_start = index + 1
            separator_seen = char in _SEPARATORS
            break
        index += 1
    value_start = _skip_whitespace(line, value_start)
    if not separator_seen and value_start < len(line) and line[value_start] in _SEPARATORS:
        value_start = _skip_whitespace(line, value_start + 1)
    return line[:key_end], line[value_start:]


def _skip_whitespace(line: str, index: int) -> int:
    while index < len(line) and line[index] in _WHITESPACE:
        index += 1
    return index


def _unescape(text: str) -> str:
    """Decode backslash escapes in a key or value."""

    if "\\" not in text:
        return text
    chars: list[str] = []
    index = 0
    while index < len(text):
        char = text[index]
        index += 1
        if char != "\\":
            chars.append(char)
            continue
        if index >= len(text):
            break
        char = text[index]
        index += 1
        if char == "u":
            digits = text[index : index + 4]
            if len(digits) != 4 or any(digit not in string.hexdigits for digit in digits):
                raise InvalidFormat(f"Malformed \\uxxxx encoding: \\u{digits}")
            chars.append(chr(int(digits, 16)))
            index += 4
            continue
        chars.append(_ESCAPES.get(char, char))
    return "".join(chars)
