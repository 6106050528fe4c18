"""File format parsers producing catalog entries."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Union


class ParseError(Exception):
    """Raised when an input file cannot be read as its declared format."""


def _registered_parsers() -> list[dict[str, Any]]:
    from vernacular.parsers.po_parser import get_po_parser_info
    return [get_po_parser_info()]


def get_parser_info(path: Union[str, Path]) -> Optional[dict[str, Any]]:
    """Return the registration info of the parser handling *path*, if any."""
    for info in _registered_parsers():
        if info["check_func"](path):
            return info
    return None


def supported_extensions() -> list[str]:
    extensions: list[str] = []
    for info in _registered_parsers():
        extensions.extend(info["extensions"])
    return extensions
