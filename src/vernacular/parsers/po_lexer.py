"""Tokenizer for gettext PO/POT text.

Turns the lines of a catalog into a lazy stream of comment, identifier and
string tokens. String tokens carry decoded text; joining the strings that
follow one identifier is left to the parser.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable, Iterator, Union

from vernacular.parsers import ParseError


class CommentType(Enum):
    """Comment subtype, keyed by the character following ``#``."""
    TRANSLATOR = ""
    EXTRACTED = "."
    REFERENCE = ":"
    FLAG = ","
    OTHER = "~"

    @property
    def marker(self) -> str:
        return self.value


_COMMENT_MARKERS = {t.marker: t for t in CommentType if t.marker}


@dataclass(frozen=True)
class CommentToken:
    type: CommentType
    value: str


@dataclass(frozen=True)
class IdentifierToken:
    value: str


@dataclass(frozen=True)
class StringToken:
    value: str


Token = Union[CommentToken, IdentifierToken, StringToken]


class LexError(ParseError):
    """Malformed line in a PO file."""

    def __init__(self, path: str, line_number: int, message: str):
        super().__init__(f"{path}:{line_number}: {message}")
        self.path = path
        self.line_number = line_number
        self.message = message


IDENTIFIER_RE = re.compile(r"msgctxt|msgid|msgid_plural|msgstr|msgstr\[\d+\]")
_KEYWORD_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*(?:\[[^\]\s]*\])?")
_HEX_RE = re.compile(r"[0-9a-fA-F]{1,2}")
_OCTAL_RE = re.compile(r"[0-7]{1,3}")

# Highest accepted N in msgstr[N].
MAX_PLURAL_INDEX = 255

_ESCAPES = {
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
    '"': '"',
    "'": "'",
    "?": "?",
    "\\": "\\",
}

_REVERSE_ESCAPES = {v: "\\" + k for k, v in _ESCAPES.items() if k not in "'?"}


def escape(value: str) -> str:
    """Escape *value* for use inside a PO double-quoted string."""
    return "".join(_REVERSE_ESCAPES.get(ch, ch) for ch in value)


class POLexer:
    """Lazy, single-pass tokenizer over the lines of one PO file."""

    def __init__(self, reader: Iterable[str], path: Union[str, Path] = "<string>"):
        self.reader = reader
        self.path = str(path)
        self.line_number = 0

    def lex(self) -> Iterator[Token]:
        expect_string = False
        for raw in self._lines():
            line = raw.rstrip("\r\n")
            stripped = line.strip()
            if not stripped:
                continue

            if stripped.startswith("#"):
                yield self._lex_comment(line.lstrip())
                expect_string = False
            elif stripped.startswith('"'):
                if not expect_string:
                    raise self._error("string does not follow a keyword")
                for value in self._lex_strings(stripped):
                    yield StringToken(value)
            else:
                identifier, rest = self._lex_identifier(stripped)
                yield IdentifierToken(identifier)
                for value in self._lex_strings(rest):
                    yield StringToken(value)
                expect_string = True

    def _lines(self) -> Iterator[str]:
        lines = iter(self.reader)
        while True:
            try:
                raw = next(lines)
            except StopIteration:
                return
            except UnicodeDecodeError as e:
                raise LexError(self.path, self.line_number + 1,
                               f"could not decode line: {e.reason}") from e
            self.line_number += 1
            yield raw

    def _error(self, message: str) -> LexError:
        return LexError(self.path, self.line_number, message)

    def _lex_comment(self, text: str) -> CommentToken:
        rest = text[1:]
        comment_type = CommentType.TRANSLATOR
        if rest and rest[0] in _COMMENT_MARKERS:
            comment_type = _COMMENT_MARKERS[rest[0]]
            rest = rest[1:]
        if rest.startswith(" "):
            rest = rest[1:]
        return CommentToken(comment_type, rest)

    def _lex_identifier(self, text: str) -> tuple[str, str]:
        match = _KEYWORD_RE.match(text)
        if not match:
            raise self._error(f"unexpected content: {text[:20]!r}")
        keyword = match.group()
        if not IDENTIFIER_RE.fullmatch(keyword):
            raise self._error(f"unrecognized keyword {keyword!r}")
        if keyword.startswith("msgstr[") and int(keyword[7:-1]) > MAX_PLURAL_INDEX:
            raise self._error(f"plural index out of range in {keyword}")

        rest = text[match.end():]
        if not rest[:1].isspace() or not rest.lstrip().startswith('"'):
            raise self._error(f"expected a quoted string after {keyword}")
        return keyword, rest.lstrip()

    def _lex_strings(self, text: str) -> list[str]:
        """Read one or more quoted strings filling the rest of a line."""
        values = []
        pos = 0
        while True:
            value, pos = self._read_string(text, pos)
            values.append(value)
            while pos < len(text) and text[pos].isspace():
                pos += 1
            if pos == len(text):
                return values
            if text[pos] != '"':
                raise self._error(f"extra content after string: {text[pos:]!r}")

    def _read_string(self, text: str, pos: int) -> tuple[str, int]:
        # text[pos] is the opening quote
        pos += 1
        out: list[str] = []
        pending = bytearray()
        while pos < len(text):
            ch = text[pos]
            if ch == "\\":
                if pos + 1 >= len(text):
                    break
                esc = text[pos + 1]
                if esc == "x":
                    match = _HEX_RE.match(text, pos + 2)
                    if not match:
                        raise self._error("invalid hex escape")
                    pending.append(int(match.group(), 16))
                    pos = match.end()
                    continue
                if esc in "01234567":
                    match = _OCTAL_RE.match(text, pos + 1)
                    code = int(match.group(), 8)
                    if code > 0xFF:
                        raise self._error(f"octal escape out of range: \\{match.group()}")
                    pending.append(code)
                    pos = match.end()
                    continue
                self._flush(pending, out)
                if esc not in _ESCAPES:
                    raise self._error(f"unknown escape sequence \\{esc}")
                out.append(_ESCAPES[esc])
                pos += 2
                continue

            self._flush(pending, out)
            if ch == '"':
                return "".join(out), pos + 1
            out.append(ch)
            pos += 1

        raise self._error("string not terminated")

    def _flush(self, pending: bytearray, out: list[str]) -> None:
        """Decode a run of octal/hex escaped bytes as UTF-8."""
        if not pending:
            return
        try:
            out.append(pending.decode("utf-8"))
        except UnicodeDecodeError:
            raise self._error(f"could not decode escaped bytes {bytes(pending)!r}") from None
        pending.clear()
