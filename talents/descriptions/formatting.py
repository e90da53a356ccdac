"""Magnitude lookups and display formatting for spell tooltips.

Durations and periods are stored in milliseconds, radii and ranges in
yards. A spell either references a row of a side table by index or, in some
exports, carries the magnitude directly.
"""

import math

from talents.descriptions.lookups import SpellLookups
from talents.fields import Row, effect_keys, num_of

DURATION_ROW_KEYS = (
    "BaseDuration",
    "Duration",
    "Duration_1",
    "Duration1",
    "DurationBase",
    "duration",
)
DURATION_INDEX_KEYS = ("DurationIndex", "DurationIndex_1", "durationIndex")
CAST_INDEX_KEYS = ("CastingTimeIndex", "CastTimeIndex", "castingTimeIndex")
RADIUS_ROW_KEYS = ("Radius", "Radius_1", "Radius1", "RadiusBase", "radius")
CAST_TIME_ROW_KEYS = ("Base", "CastTime", "Base_1", "CastingTime", "base")
RANGE_MIN_ROW_KEYS = ("RangeMin_1", "RangeMin", "RangeMin1", "MinRange", "rangeMin")
RANGE_MAX_ROW_KEYS = ("RangeMax_1", "RangeMax", "RangeMax1", "MaxRange", "rangeMax")


def js_round(value: float) -> int:
    # Half away from zero for positives, like the game client, not banker's rounding
    return math.floor(value + 0.5)


def format_number(value: float, places: int = 3) -> str:
    """Up to ``places`` decimals, without trailing zeros or a bare point."""
    if value == int(value):
        return str(int(value))
    text = f"{round(value, places):.{places}f}".rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


def format_duration(ms: float) -> str:
    if not ms:
        return "0 sec"
    if ms < 0:
        return "infinite"
    seconds = js_round(ms / 1000)
    if seconds < 60:
        return f"{seconds} sec"
    return f"{js_round(seconds / 60)} min"


def format_duration_long(ms: float) -> str:
    """Header style duration, keeping the seconds left over past a minute."""
    if not ms:
        return "0 sec"
    if ms < 0:
        return "infinite"
    seconds = js_round(ms / 1000)
    minutes, remainder = divmod(seconds, 60)
    if not minutes:
        return f"{remainder} sec"
    if not remainder:
        return f"{minutes} min"
    return f"{minutes} min {remainder} sec"


def format_yards(yards: float) -> str:
    if not yards:
        return "0"
    return format_number(round(yards, 2), places=2)


def duration_ms(spell: Row | None, lookups: SpellLookups) -> float:
    if not spell:
        return 0
    duration_index = int(num_of(spell, DURATION_INDEX_KEYS))
    if duration_index:
        ms = num_of(lookups.durations.get(duration_index), DURATION_ROW_KEYS)
        if ms:
            return ms
    return num_of(spell, ("Duration", "duration"))


def radius_yards(spell: Row | None, lookups: SpellLookups, index: int) -> float:
    radius_index = int(num_of(spell, effect_keys("EffectRadiusIndex", index)))
    if not radius_index:
        return 0
    return num_of(lookups.radii.get(radius_index), RADIUS_ROW_KEYS)


def period_seconds(spell: Row | None, index: int) -> int:
    period_ms = num_of(spell, effect_keys("EffectAuraPeriod", index))
    if not period_ms:
        return 0
    return js_round(period_ms / 1000)


def cast_time_ms(spell: Row | None, lookups: SpellLookups) -> float:
    cast_index = int(num_of(spell, CAST_INDEX_KEYS))
    if cast_index:
        ms = num_of(lookups.cast_times.get(cast_index), CAST_TIME_ROW_KEYS)
        if ms:
            return ms
    return num_of(spell, ("CastTime", "CastingTime", "CastTimeMs", "castTime"))


def range_yards(spell: Row | None, lookups: SpellLookups) -> tuple[float, float]:
    """(min, max) range; either may be zero."""
    range_index = int(num_of(spell, ("RangeIndex", "rangeIndex")))
    if range_index and range_index in lookups.ranges:
        row = lookups.ranges[range_index]
        return num_of(row, RANGE_MIN_ROW_KEYS), num_of(row, RANGE_MAX_ROW_KEYS)
    return (
        num_of(spell, ("MinRange", "RangeMin", "minRange")),
        num_of(spell, ("MaxRange", "RangeMax", "maxRange")),
    )
