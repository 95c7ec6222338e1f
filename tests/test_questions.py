"""
Tests for the dating question catalog and answer parsers.

Run with: pytest tests/test_questions.py -v
"""
import json
import pytest

from nomadmatch.services.questions import (
    DATING_QUESTIONS,
    ParserKind,
    WizardQuestion,
    load_catalog,
    parse_answer,
    parse_integer,
    parse_string_list,
)


class TestIntegerParser:
    """Tests for the age-style integer parser."""

    def test_parses_plain_number(self):
        assert parse_integer("29") == 29

    def test_unparseable_text_is_none(self):
        """Garbage input should give None, not raise."""
        assert parse_integer("abc") is None

    def test_empty_text_is_none(self):
        assert parse_integer("") is None

    def test_leading_number_wins(self):
        """Trailing text after the number is ignored."""
        assert parse_integer(" 31 years") == 31

    def test_zero_is_a_value(self):
        assert parse_integer("0") == 0


class TestStringListParser:
    """Tests for the comma separated list parser."""

    def test_trims_and_drops_empty_tokens(self):
        assert parse_string_list(" a, b ,,c ") == ["a", "b", "c"]

    def test_blank_input_gives_empty_list(self):
        assert parse_string_list("  ,  , ") == []

    def test_single_value(self):
        assert parse_string_list("cooking") == ["cooking"]


class TestParseAnswer:
    """Tests for parser-kind dispatch."""

    def test_identity_keeps_raw_text(self):
        assert parse_answer(ParserKind.IDENTITY, "  Lisbon ") == "  Lisbon "

    def test_integer_kind(self):
        assert parse_answer(ParserKind.INTEGER, "29") == 29
        assert parse_answer(ParserKind.INTEGER, "abc") is None

    def test_string_list_kind(self):
        assert parse_answer(ParserKind.STRING_LIST, "gaming, reading") == ["gaming", "reading"]


class TestDefaultCatalog:
    """Tests for the built-in question catalog."""

    def test_fields_are_unique(self):
        fields = [q.field for q in DATING_QUESTIONS]
        assert len(fields) == len(set(fields))

    def test_age_uses_integer_parser(self):
        age = next(q for q in DATING_QUESTIONS if q.field == "age")
        assert age.parser is ParserKind.INTEGER

    def test_list_fields_use_list_parser(self):
        by_field = {q.field: q for q in DATING_QUESTIONS}
        assert by_field["interests"].parser is ParserKind.STRING_LIST
        assert by_field["hobbies"].parser is ParserKind.STRING_LIST

    def test_starts_with_core_questions(self):
        fields = [q.field for q in DATING_QUESTIONS]
        assert fields[:5] == ["gender", "age", "city", "orientation", "interests"]


class TestLoadCatalog:
    """Tests for loading a catalog from JSON."""

    def test_loads_entries_in_order(self, tmp_path):
        path = tmp_path / "questions.json"
        path.write_text(json.dumps([
            {"field": "age", "question": "Age?", "placeholder": "29", "parser": "integer"},
            {"field": "city", "question": "City?", "placeholder": "Lisbon"},
        ]))

        catalog = load_catalog(str(path))

        assert catalog == (
            WizardQuestion("age", "Age?", "29", ParserKind.INTEGER),
            WizardQuestion("city", "City?", "Lisbon", ParserKind.IDENTITY),
        )

    def test_unknown_parser_rejected(self, tmp_path):
        path = tmp_path / "questions.json"
        path.write_text(json.dumps([
            {"field": "age", "question": "Age?", "placeholder": "", "parser": "float"},
        ]))

        with pytest.raises(ValueError):
            load_catalog(str(path))

    def test_missing_keys_rejected(self, tmp_path):
        path = tmp_path / "questions.json"
        path.write_text(json.dumps([{"question": "No field"}]))

        with pytest.raises(ValueError):
            load_catalog(str(path))

    def test_non_list_rejected(self, tmp_path):
        path = tmp_path / "questions.json"
        path.write_text(json.dumps({"field": "age"}))

        with pytest.raises(ValueError):
            load_catalog(str(path))
