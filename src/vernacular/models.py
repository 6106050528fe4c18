"""Catalog entries produced by the format parsers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional

import polib


class LanguageGender(Enum):
    MASCULINE = "masculine"
    FEMININE = "feminine"


@dataclass
class LocalizationMetadata:
    """Catalog header: key/value pairs in file order."""
    fields: dict[str, str] = field(default_factory=dict)

    def add(self, key: str, value: str) -> None:
        self.fields[key] = value

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self.fields.get(key, default)

    def items(self):
        return self.fields.items()

    def __getitem__(self, key: str) -> str:
        return self.fields[key]

    def __contains__(self, key: object) -> bool:
        return key in self.fields

    def __iter__(self) -> Iterator[str]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)

    @property
    def language(self) -> Optional[str]:
        for key, value in self.fields.items():
            if key.lower() == "language":
                return value
        return None


@dataclass
class LocalizedString:
    """A single translatable entry."""
    untranslated_singular_value: Optional[str] = None
    untranslated_plural_value: Optional[str] = None
    translated_values: Optional[list[Optional[str]]] = None
    context: Optional[str] = None
    gender: Optional[LanguageGender] = None
    developer_comments: Optional[str] = None
    translator_comments: Optional[str] = None
    references: Optional[list[str]] = None
    string_format_hint: Optional[str] = None
    flags: tuple[str, ...] = ()

    @property
    def has_plural(self) -> bool:
        return self.untranslated_plural_value is not None

    @property
    def is_translated(self) -> bool:
        return bool(self.translated_values) and all(self.translated_values)

    def to_polib(self) -> polib.POEntry:
        """Convert to a polib entry so polib-based writers can consume it.

        References of the form ``file:line`` become occurrences. A gender with
        no remaining context is written back as a ``gender-*`` context. Missing
        plural indices are left out of ``msgstr_plural``.
        """
        msgctxt = self.context
        if msgctxt is None and self.gender is not None:
            msgctxt = f"gender-{self.gender.value}"

        occurrences = []
        for ref in self.references or []:
            path, sep, line = ref.rpartition(":")
            if sep and line.isdigit():
                occurrences.append((path, line))
            else:
                occurrences.append((ref, ""))

        values = self.translated_values or []
        entry = polib.POEntry(
            msgid=self.untranslated_singular_value or "",
            msgid_plural=self.untranslated_plural_value or "",
            msgctxt=msgctxt,
            comment=self.developer_comments or "",
            tcomment=self.translator_comments or "",
            flags=list(self.flags),
            occurrences=occurrences,
        )
        if self.has_plural:
            entry.msgstr_plural = {i: v for i, v in enumerate(values) if v is not None}
        else:
            entry.msgstr = (values[0] or "") if values else ""
        return entry
