"""
Tests for row field lookups and numeric coercion.
"""

import pytest

from talents.fields import (
    effect_keys,
    first_of,
    index_by_id,
    num_of,
    row_id,
    str_of,
    to_num,
)


class TestToNum:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            (12, 12),
            ("12", 12),
            ("2.5", 2.5),
            (" 7 ", 7),
            (3.0, 3),
        ],
    )
    def test_numbers_and_numeric_strings(self, raw, expected):
        assert to_num(raw) == expected

    @pytest.mark.parametrize(
        "raw",
        [None, "", "abc", float("inf"), "nan", True, 10**400, -(10**400), "1e400"],
    )
    def test_non_numbers_use_default(self, raw):
        assert to_num(raw) == 0
        assert to_num(raw, 5) == 5


class TestFieldResolver:
    def test_first_present_spelling_wins(self):
        row = {"Duration": None, "Duration_1": 5, "duration": 9}
        assert first_of(row, ("Duration", "Duration_1", "duration")) == 5

    def test_missing_everywhere_returns_default(self):
        assert first_of({}, ("a", "b"), "fallback") == "fallback"
        assert first_of(None, ("a",)) is None

    def test_num_of_coerces(self):
        keys = effect_keys("EffectBasePoints", 1)
        assert num_of({"EffectBasePoints1": "14"}, keys) == 14

    def test_zero_is_a_present_value(self):
        assert num_of({"A": 0, "B": 3}, ("A", "B")) == 0

    def test_out_of_range_id_is_not_an_id(self):
        assert row_id({"ID": 10**400}) == 0

    def test_str_of_skips_blank_text(self):
        row = {"Name_Lang_enUS": "", "Name": "Frostbolt"}
        assert str_of(row, ("Name_Lang_enUS", "Name")) == "Frostbolt"

    def test_effect_keys_cover_both_spellings(self):
        keys = effect_keys("EffectDieSides", 2)
        assert keys == ("EffectDieSides_2", "EffectDieSides2")


class TestIndexById:
    def test_accepts_id_spellings_and_drops_non_positive(self):
        rows = [
            {"ID": 1},
            {"Id": "2"},
            {"id": 3},
            {"ID": 0},
            {"ID": -4},
            {"Name": "no id"},
        ]
        assert sorted(index_by_id(rows)) == [1, 2, 3]

    def test_later_duplicates_replace_earlier(self):
        rows = [{"ID": 5, "Name": "first"}, {"ID": 5, "Name": "second"}]
        assert index_by_id(rows)[5]["Name"] == "second"

    def test_missing_table(self):
        assert index_by_id(None) == {}

    def test_rows_that_are_not_objects_are_skipped(self):
        rows = [None, 5, "x", ["ID", 1], {"ID": 2}]
        assert list(index_by_id(rows)) == [2]

    def test_row_id(self):
        assert row_id({"Id": "42"}) == 42
        assert row_id(None) == 0
