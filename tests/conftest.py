"""Shared fixtures for Vernacular tests."""
import sys
from pathlib import Path

import pytest

# Ensure src is on path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir():
    return FIXTURES


@pytest.fixture
def write_po(tmp_path):
    """Write PO text to a temp file and return its path."""
    def _write(text, name="test.po", newline=None):
        path = tmp_path / name
        with open(path, "w", encoding="utf-8", newline=newline) as f:
            f.write(text)
        return path
    return _write
