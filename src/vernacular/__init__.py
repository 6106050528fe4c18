"""Gettext PO/POT catalog reader."""

from vernacular.models import LanguageGender, LocalizationMetadata, LocalizedString
from vernacular.parsers import ParseError
from vernacular.parsers.po_lexer import LexError
from vernacular.parsers.po_parser import POParser, POParserOptions, parse_po

__all__ = [
    "LanguageGender",
    "LocalizationMetadata",
    "LocalizedString",
    "ParseError",
    "LexError",
    "POParser",
    "POParserOptions",
    "parse_po",
]
