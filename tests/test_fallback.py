"""
Tests for the bundled static talent datasets.
"""

import pytest
from pydantic import ValidationError

from talents.arrows import resolve_arrow_direction
from talents.fallback import (
    FALLBACK_CLASSES,
    StaticRankDescription,
    load_fallback,
    parse_fallback,
)
from talents.visuals import get_tree_visuals


class TestLoadFallback:
    def test_mage(self):
        data = load_fallback("Mage")
        assert list(data) == ["Arcane", "Fire", "Frost"]
        combustion = data["Fire"].talents["Combustion"]
        assert combustion.prereq == "Critical Mass"
        assert combustion.req_points == 30
        assert combustion.description(1).startswith("When activated")

    def test_class_name_is_case_insensitive(self):
        assert list(load_fallback("mage")) == list(load_fallback("Mage"))

    def test_unknown_class(self, caplog):
        assert load_fallback("Druid") == {}
        assert "No bundled talent data" in caplog.text

    @pytest.mark.parametrize("klass", FALLBACK_CLASSES)
    def test_bundled_data_is_consistent(self, klass):
        data = load_fallback(klass)
        assert data
        for tree in data.values():
            positions = [talent.pos for talent in tree.talents.values()]
            assert len(positions) == len(set(positions)), tree.name
            for talent in tree.talents.values():
                assert talent.description(1), talent.name
                if talent.prereq:
                    prereq = tree.talents[talent.prereq]
                    assert [arrow.from_pos for arrow in talent.arrows] == [prereq.pos]
                for arrow in talent.arrows or []:
                    expected = resolve_arrow_direction(arrow.from_pos, arrow.to_pos)
                    assert arrow.direction == expected


class TestParseFallback:
    def test_invalid_position_is_rejected(self):
        with pytest.raises(ValidationError):
            parse_fallback(
                '{"Tree": {"talents": {"Bad": {"pos": "m9", "maxRank": 1}}}}'
            )

    def test_defaults(self):
        data = parse_fallback(
            '{"Tree": {"talents": {"Plain": {"pos": "a1", "maxRank": 1}}}}'
        )
        plain = data["Tree"].talents["Plain"]
        assert plain.req_points == 0
        assert plain.prereq is None
        assert plain.arrows is None
        assert plain.icon == ""
        assert plain.description(1) == ""


class TestStaticRankDescription:
    def test_rank_is_clamped(self):
        description = StaticRankDescription(("one", "two"))
        assert description(0) == "one"
        assert description(2) == "two"
        assert description(5) == "two"
        assert description.header(1) == ""


def test_tree_visuals(alpha_data):
    visuals = get_tree_visuals(alpha_data)
    assert visuals["Alpha"].background == "alpha_bg.jpg"
    assert visuals["Alpha"].icon == "alpha.jpg"
    assert visuals["Beta"].background == ""
