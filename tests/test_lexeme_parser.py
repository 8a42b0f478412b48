"""Tests for the lexeme string parser."""

import pandas as pd
import pytest

from duo_recall.lexeme_parser import (
    FormatError,
    ParsedLexeme,
    coarse_type,
    default_pos_reference,
    enrich_dataframe,
    parse_lexeme,
    parse_lexemes,
)


def test_parse_lexeme_extracts_fields():
    parsed = parse_lexeme("lernt/lernen<verb><pres><3><sg>")
    assert parsed == ParsedLexeme("lernt", "lernen", "verb", 4)


def test_parse_lexeme_single_tag():
    parsed = parse_lexeme("chat/chat<n>")
    assert parsed.base_form == "chat"
    assert parsed.part_of_speech == "n"
    assert parsed.modifier_count == 1


def test_base_form_runs_to_first_tag():
    assert parse_lexeme("x/y/z<n><pl>").base_form == "y/z"


def test_parser_is_pure():
    s = "gatos/gato<n><m><pl>"
    assert parse_lexeme(s) == parse_lexeme(s)


@pytest.mark.parametrize(
    "lexeme, reason",
    [
        ("lernen<vblex><inf>", "missing '/'"),
        ("lernt/lernen", "missing '<pos>' tag"),
        ("lernt<vblex>/lernen", "'/' appears after the first tag"),
        ("lernt/lernen<vblex><inf", "unbalanced '<' and '>'"),
        ("lernt/lernen<><inf>", "empty or unterminated '<pos>' tag"),
        ("a/b<x<y>>", "nested '<' inside the POS tag"),
    ],
)
def test_parse_lexeme_rejects_malformed(lexeme, reason):
    with pytest.raises(FormatError) as excinfo:
        parse_lexeme(lexeme)
    assert excinfo.value.reason == reason
    assert excinfo.value.lexeme == lexeme


def test_parse_lexemes_aligns_with_index():
    lexemes = pd.Series(
        ["lernt/lernen<vblex><pri><p3><sg>", "chat/chat<n>", "lernt/lernen<vblex><pri><p3><sg>"],
        index=[7, 3, 9],
    )
    parsed = parse_lexemes(lexemes)

    assert list(parsed.index) == [7, 3, 9]
    assert list(parsed["base_form"]) == ["lernen", "chat", "lernen"]
    assert list(parsed["part_of_speech"]) == ["vblex", "n", "vblex"]
    assert list(parsed["modifier_count"]) == [4, 1, 4]


def test_parse_lexemes_names_offending_row():
    lexemes = pd.Series(["chat/chat<n>", "broken", "chien/chien<n>"], index=[10, 11, 12])
    with pytest.raises(FormatError) as excinfo:
        parse_lexemes(lexemes)
    assert excinfo.value.row == 11
    assert excinfo.value.lexeme == "broken"
    assert type(excinfo.value.row) is int
    assert "at row 11:" in str(excinfo.value)


def test_enrich_dataframe_keeps_input_untouched():
    df = pd.DataFrame({"lexeme_string": ["gatos/gato<n><m><pl>"], "user_id": ["u1"]})
    out = enrich_dataframe(df)

    assert list(df.columns) == ["lexeme_string", "user_id"]
    assert out.loc[0, "surface_form"] == "gatos"
    assert out.loc[0, "base_form"] == "gato"
    assert out.loc[0, "modifier_count"] == 3


@pytest.mark.parametrize(
    "tag, expected",
    [("vblex", "verb"), ("vbmod", "verb"), ("n", "noun"), ("np", "noun"),
     ("adj", "adjective"), ("adv", "adverb"), ("det", "function"),
     ("cnjcoo", "function"), ("ij", "other"), ("@foo", "other")],
)
def test_coarse_type(tag, expected):
    assert coarse_type(tag) == expected


def test_default_pos_reference_layout():
    ref = default_pos_reference()
    assert list(ref.columns) == ["pos", "Type"]
    assert ref["pos"].is_unique
    assert set(ref["Type"]) <= {"noun", "verb", "adjective", "adverb", "function", "other"}


def test_parse_lexemes_reports_string_row_labels():
    lexemes = pd.Series(["chat/chat<n>", "chat<n>"], index=["r1", "r2"])
    with pytest.raises(FormatError) as excinfo:
        parse_lexemes(lexemes)
    assert excinfo.value.row == "r2"
    assert "at row r2:" in str(excinfo.value)
