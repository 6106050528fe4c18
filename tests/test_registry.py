"""Tests for parser registration."""


class TestRegistry:
    def test_lookup_by_suffix(self):
        from vernacular.parsers import get_parser_info
        from vernacular.parsers.po_parser import parse_po
        for name in ("de.po", "messages.pot", "UPPER.PO"):
            info = get_parser_info(name)
            assert info["name"] == "Gettext PO"
            assert info["parse_func"] is parse_po

    def test_unknown_suffix(self):
        from vernacular.parsers import get_parser_info
        assert get_parser_info("strings.xml") is None

    def test_supported_extensions(self):
        from vernacular.parsers import supported_extensions
        assert supported_extensions() == [".po", ".pot"]

    def test_parse_func(self, fixtures_dir):
        from vernacular.parsers import get_parser_info
        info = get_parser_info(fixtures_dir / "second.pot")
        entries = info["parse_func"](fixtures_dir / "second.pot")
        assert [e.untranslated_singular_value for e in entries] == ["Save", "Quit"]

    def test_package_exports(self):
        import vernacular
        assert vernacular.parse_po is vernacular.parsers.po_parser.parse_po
        assert issubclass(vernacular.LexError, vernacular.ParseError)
