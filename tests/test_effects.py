"""
Tests for effect magnitudes, description variables and number formatting.
"""

import pytest

from talents.descriptions.effects import effect_value
from talents.descriptions.formatting import (
    duration_ms,
    format_duration,
    format_duration_long,
    format_number,
    format_yards,
    js_round,
    period_seconds,
    radius_yards,
)
from talents.descriptions.lookups import SpellLookups
from talents.descriptions.variables import desc_var_value, parse_desc_vars


class TestEffectValue:
    def test_fixed_value_is_base_plus_one(self):
        value = effect_value({"EffectBasePoints_1": 9}, 1)
        assert (value.min, value.max) == (10, 10)
        assert value.text == "10"
        assert value.display == 10
        assert not value.is_random

    def test_die_sides_make_a_range(self):
        value = effect_value({"EffectBasePoints_1": 9, "EffectDieSides_1": 5}, 1)
        assert (value.min, value.max) == (10, 14)
        assert value.text == "10 to 14"
        assert value.display == 14

    def test_single_sided_die_collapses_to_one_value(self):
        value = effect_value({"EffectBasePoints1": 9, "EffectDieSides1": 1}, 1)
        assert value.text == "10"
        assert value.is_random

    def test_negative_values_show_their_magnitude(self):
        assert effect_value({"EffectBasePoints_2": -11}, 2).text == "10"
        assert effect_value({"EffectBasePoints_1": -101}, 1).display == 100

    def test_missing_spell(self):
        assert effect_value(None, 1).text == "1"


class TestDescriptionVariables:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("5000;10;15", [5000, 10, 15]),
            ("1,2|3", [1, 2, 3]),
            ("a;2; 3.5 ", [2, 3.5]),
            ("", []),
        ],
    )
    def test_parse(self, raw, expected):
        assert parse_desc_vars({"Variables": raw}) == expected

    def test_lookup_is_one_based(self, lookups):
        spell = {"ID": 1, "SpellDescriptionVariablesID": 7}
        assert desc_var_value(spell, 1, lookups) == 5000
        assert desc_var_value(spell, 3, lookups) == 15

    def test_out_of_range_and_missing_rows_are_none(self, lookups):
        spell = {"ID": 1, "SpellDescriptionVariablesID": 7}
        assert desc_var_value(spell, 4, lookups) is None
        assert desc_var_value(spell, 0, lookups) is None
        missing_row = {"ID": 1, "SpellDescriptionVariablesID": 404}
        assert desc_var_value(missing_row, 1, lookups) is None
        assert desc_var_value({"ID": 1}, 1, lookups) is None

    def test_stored_zero_is_a_value(self):
        lookups = SpellLookups(desc_vars={3: {"ID": 3, "Variables": "0;4"}})
        assert desc_var_value({"DescriptionVariablesID": 3}, 1, lookups) == 0.0


class TestFormatting:
    def test_js_round_rounds_halves_up(self):
        assert js_round(1.5) == 2
        assert js_round(2.5) == 3
        assert js_round(2.49) == 2

    @pytest.mark.parametrize(
        "value, expected",
        [(2.0, "2"), (0.5, "0.5"), (12.5, "12.5"), (1 / 3, "0.333"), (0.1, "0.1")],
    )
    def test_format_number(self, value, expected):
        assert format_number(value) == expected

    @pytest.mark.parametrize(
        "ms, expected",
        [
            (0, "0 sec"),
            (-1, "infinite"),
            (5000, "5 sec"),
            (59400, "59 sec"),
            (59600, "1 min"),
            (65000, "1 min"),
            (90000, "2 min"),
        ],
    )
    def test_format_duration(self, ms, expected):
        assert format_duration(ms) == expected

    @pytest.mark.parametrize(
        "ms, expected",
        [
            (45000, "45 sec"),
            (90000, "1 min 30 sec"),
            (120000, "2 min"),
            (-5, "infinite"),
        ],
    )
    def test_format_duration_long(self, ms, expected):
        assert format_duration_long(ms) == expected

    def test_format_yards(self):
        assert format_yards(8) == "8"
        assert format_yards(6.5) == "6.5"
        assert format_yards(3.14159) == "3.14"
        assert format_yards(0) == "0"


class TestMagnitudeLookups:
    def test_duration_prefers_the_indexed_row(self, lookups):
        assert duration_ms({"DurationIndex": 21, "Duration": 1000}, lookups) == 30000

    def test_duration_falls_back_to_the_spell_field(self, lookups):
        assert duration_ms({"DurationIndex": 99, "Duration": 1000}, lookups) == 1000
        assert duration_ms({}, lookups) == 0

    def test_radius(self, lookups):
        assert radius_yards({"EffectRadiusIndex_1": 13}, lookups, 1) == 10
        assert radius_yards({"EffectRadiusIndex_2": 8}, lookups, 2) == 6.5
        assert radius_yards({"EffectRadiusIndex_1": 77}, lookups, 1) == 0
        assert radius_yards({}, lookups, 1) == 0

    def test_period_is_in_rounded_seconds(self):
        assert period_seconds({"EffectAuraPeriod_1": 3000}, 1) == 3
        assert period_seconds({"EffectAuraPeriod_1": 1500}, 1) == 2
        assert period_seconds({}, 1) == 0
