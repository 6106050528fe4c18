"""PO/POT catalog parser.

Groups the lexer's tokens into units (comments followed by keyword/value
messages), recognizes the catalog header and turns every other unit into a
:class:`~vernacular.models.LocalizedString`.
"""

from __future__ import annotations

import logging
import re
from contextlib import closing
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Optional, Union

from vernacular.models import LanguageGender, LocalizationMetadata, LocalizedString
from vernacular.parsers.po_lexer import (
    CommentToken,
    CommentType,
    IdentifierToken,
    POLexer,
    StringToken,
    escape,
)

log = logging.getLogger("vernacular.parsers.po")

CatalogEntry = Union[LocalizationMetadata, LocalizedString]

SUPPORTED_FILE_EXTENSIONS = (".po", ".pot")

# Insertion order is the lookup order.
GENDER_CONTEXTS: dict[str, LanguageGender] = {
    "masculine form": LanguageGender.MASCULINE,
    "feminine form": LanguageGender.FEMININE,
    "gender-masculine": LanguageGender.MASCULINE,
    "gender-feminine": LanguageGender.FEMININE,
}

HEADER_KEYS = ("project-id-version:", "language:", "content-type:")

_MESSAGE_RE = re.compile(r"^msg(id|id_plural|str|str\[(\d+)\]|ctxt)$")


@dataclass
class POParserOptions:
    encoding: Optional[str] = "utf-8-sig"  # None: platform default
    # Translator comments replace developer comments; translator field stays empty.
    legacy_comment_merge: bool = False


@dataclass
class POMessage:
    identifier: str
    value: str = ""


@dataclass
class POUnit:
    comments: list[CommentToken] = field(default_factory=list)
    messages: list[POMessage] = field(default_factory=list)

    def __str__(self) -> str:
        lines = []
        for comment in self.comments:
            lines.append(f"#{comment.type.marker} {comment.value}")
        for message in self.messages:
            lines.append(f'{message.identifier} "{escape(message.value)}"')
        return "".join(line + "\n" for line in lines)


class POParseSession:
    """State shared by all files of one :meth:`POParser.parse` call."""

    def __init__(self):
        self.metadata: Optional[LocalizationMetadata] = None

    @property
    def header_found(self) -> bool:
        return self.metadata is not None


def _is_start_of_unit(token) -> bool:
    return isinstance(token, CommentToken) or (
        isinstance(token, IdentifierToken) and token.value in ("msgctxt", "msgid")
    )


def _is_msgstr(token) -> bool:
    return isinstance(token, IdentifierToken) and token.value.startswith("msgstr")


class POParser:
    """Reads one or more PO/POT files into a stream of catalog entries."""

    SUPPORTED_FILE_EXTENSIONS = SUPPORTED_FILE_EXTENSIONS

    def __init__(self, options: Optional[POParserOptions] = None):
        self.options = options or POParserOptions()
        self.paths: list[Path] = []

    def add(self, path: Union[str, Path]) -> None:
        path = Path(path)
        if path.suffix.lower() not in SUPPORTED_FILE_EXTENSIONS:
            raise ValueError(f"Expected .po or .pot file, got: {path.suffix}")
        self.paths.append(path)

    def parse(self) -> Iterator[CatalogEntry]:
        """Yield the entries of every added file, in order.

        Header recognition is attempted until the first header is found,
        across file boundaries, and never again within this call.
        """
        session = POParseSession()
        for path in self.paths:
            with closing(self._assemble_units(path)) as units:
                for unit in units:
                    yield self._parse_unit(unit, session)

    # ── Unit assembly ─────────────────────────────────────────────

    def _assemble_units(self, path: Path) -> Iterator[POUnit]:
        unit = POUnit()
        message: Optional[POMessage] = None
        seen_msgstr = False

        log.debug("Opening %s", path)
        with open(path, "r", encoding=self.options.encoding) as reader:
            for token in POLexer(reader, path).lex():
                if _is_msgstr(token):
                    seen_msgstr = True
                elif _is_start_of_unit(token) and seen_msgstr:
                    seen_msgstr = False
                    yield unit
                    unit = POUnit()

                if isinstance(token, CommentToken):
                    unit.comments.append(token)
                elif isinstance(token, IdentifierToken):
                    message = POMessage(token.value)
                    unit.messages.append(message)
                elif isinstance(token, StringToken):
                    message.value += token.value
        log.debug("Closed %s", path)

        yield unit

    # ── Unit parsing ──────────────────────────────────────────────

    def _parse_unit(self, unit: POUnit, session: POParseSession) -> CatalogEntry:
        if not session.header_found:
            session.metadata = self._parse_header_unit(unit)
            if session.metadata is not None:
                log.debug("Catalog header recognized (%d fields)", len(session.metadata))
                return session.metadata
        return self._parse_message_unit(unit)

    def _parse_header_unit(self, unit: POUnit) -> Optional[LocalizationMetadata]:
        messages = unit.messages
        if (len(messages) != 2
                or messages[0].identifier != "msgid"
                or messages[0].value
                or messages[1].identifier != "msgstr"):
            return None

        header_lower = messages[1].value.lower()
        if not all(key in header_lower for key in HEADER_KEYS):
            return None

        metadata = LocalizationMetadata()
        for line in messages[1].value.split("\n"):
            if not line.strip():
                continue
            pair = line.split(":", 1)
            if len(pair) != 2:
                log.debug("Header candidate rejected, no colon in %r", line)
                return None
            metadata.add(pair[0].strip(), pair[1].strip())
        return metadata

    def _parse_message_unit(self, unit: POUnit) -> LocalizedString:
        singular = None
        plural = None
        context = None
        translated: dict[int, str] = {}

        for message in unit.messages:
            match = _MESSAGE_RE.match(message.identifier)
            if not match:
                continue

            kind = match.group(1)
            if kind == "id":
                singular = message.value
            elif kind == "id_plural":
                plural = message.value
            elif kind == "ctxt":
                context = message.value.strip()
            else:
                index = int(match.group(2)) if match.group(2) is not None else 0
                if index in translated:
                    log.warning("Duplicate %s for %r, keeping the later value",
                                message.identifier, singular)
                translated[index] = message.value

        developer, translator, references, flags = [], [], [], []
        for comment in unit.comments:
            value = comment.value.strip()
            if comment.type is CommentType.EXTRACTED:
                developer.append(value)
            elif comment.type is CommentType.TRANSLATOR:
                translator.append(value)
            elif comment.type is CommentType.REFERENCE:
                references.append(value)
            elif comment.type is CommentType.FLAG:
                flags.append(value)

        entry = LocalizedString(
            untranslated_singular_value=singular,
            untranslated_plural_value=plural,
        )

        developer_comments = "\n".join(developer).strip() or None
        translator_comments = "\n".join(translator).strip() or None
        if self.options.legacy_comment_merge:
            entry.developer_comments = translator_comments or developer_comments
        else:
            entry.developer_comments = developer_comments
            entry.translator_comments = translator_comments

        joined_references = " ".join(references).strip()
        if joined_references:
            entry.references = joined_references.split()

        entry.flags = tuple(f for f in (f.strip() for f in ",".join(flags).split(",")) if f)
        for flag in entry.flags:
            if flag.endswith("-format"):
                entry.string_format_hint = flag

        if context is not None:
            context, entry.gender = _infer_gender(context)
        entry.context = context

        if translated:
            entry.translated_values = [translated.get(i) for i in range(max(translated) + 1)]

        return entry


def _infer_gender(context: str) -> tuple[Optional[str], Optional[LanguageGender]]:
    """Return the remaining context and the gender a context phrase names."""
    context_lower = context.lower()
    for phrase, gender in GENDER_CONTEXTS.items():
        if context_lower == phrase:
            return None, gender
        if phrase in context:
            return context, gender
    return context, None


def parse_po(path: Union[str, Path], options: Optional[POParserOptions] = None) -> list[CatalogEntry]:
    """Parse a single PO or POT file."""
    parser = POParser(options)
    parser.add(path)
    return list(parser.parse())


def is_po_file(path: Union[str, Path]) -> bool:
    return Path(path).suffix.lower() in SUPPORTED_FILE_EXTENSIONS


def get_po_parser_info():
    """Get parser information for registration."""
    return {
        'name': 'Gettext PO',
        'extensions': list(SUPPORTED_FILE_EXTENSIONS),
        'parse_func': parse_po,
        'check_func': is_po_file,
        'description': 'GNU gettext catalogs and templates (.po, .pot)'
    }
