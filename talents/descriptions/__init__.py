"""Expansion of ``$`` tokens in raw spell descriptions.

Raw descriptions reference the spell's balance data (``$s1``), other spells
(``$12345s1``), side tables (``$d``, ``$a1``) and description variables
(``$/1000;$1``). Expansion is an ordered list of passes over the whole
string; every pass works on the previous pass's output. A token that cannot
be resolved is left exactly as written.
"""

import dataclasses
import logging
import math
import re
from collections.abc import Callable

from talents.descriptions.effects import effect_value, is_effect_index
from talents.descriptions.formatting import (
    duration_ms,
    format_duration,
    format_number,
    format_yards,
    period_seconds,
    radius_yards,
)
from talents.descriptions.lookups import SpellLookups
from talents.descriptions.variables import desc_var_value
from talents.fields import Row, effect_keys, num_of

logger = logging.getLogger(__name__)

PROC_CHANCE_KEYS = ("ProcChance", "procChance")
PROC_PPM_KEYS = ("ProcsPerMinute", "ProcBasePPM", "ProcPPM", "procsPerMinute")
PROC_CHARGES_KEYS = ("ProcCharges", "procCharges")
STACK_AMOUNT_KEYS = ("StackAmount", "CumulativeAura", "stackAmount")

_ESCAPED_NEWLINE_RE = re.compile(r"\\r\\n|\\r|\\n")
_SLASHED_NEWLINE_RE = re.compile(r"/r/n|/r|/n")
_REAL_NEWLINE_RE = re.compile(r"\r\n|\r|\n")

_DIVISOR = r"\$/\s*(1000|100|10|2)\s*;\s*"
# Digits that prefix a lettered token ($123s1) are a spell id, not an index
_SCALED_INDEX_RE = re.compile(_DIVISOR + r"\$\s*(\d+)(?!\d|\s*[smhnuSMHNU]\s*\d)")
_SCALED_LETTER_RE = re.compile(
    _DIVISOR + r"\$?\s*(\d+)?\s*([smhnu])\s*(\d+)", re.IGNORECASE
)
_BARE_INDEX_RE = re.compile(r"\$(\d+)(?![\dA-Za-z])")
_EFFECT_RE = re.compile(r"\$(\d+)?([sm])(\d+)")
_PROC_RE = re.compile(r"\$(\d+)?([hnu])(\d+)?", re.IGNORECASE)
_RADIUS_RE = re.compile(r"\$(\d+)?a(\d+)")
_PERIOD_RE = re.compile(r"\$(\d+)?t(\d+)")
_DURATION_RE = re.compile(r"\$(\d+)?d")
_OVER_TIME_RE = re.compile(r"\$(\d+)?o(\d+)")
_PER_COMBO_RE = re.compile(r"\$(\d+)?b(\d+)")
_PLURAL_RE = re.compile(r"\$[lL]([^:;]+):([^;]+);")
_NUMBER_RE = re.compile(r"\d+(?:\.\d+)?")


def normalize_line_breaks(text: str) -> str:
    text = _ESCAPED_NEWLINE_RE.sub("\n", text)
    text = _SLASHED_NEWLINE_RE.sub("\n", text)
    return _REAL_NEWLINE_RE.sub("\n", text)


@dataclasses.dataclass(frozen=True)
class _Context:
    spell: Row | None
    lookups: SpellLookups

    def spell_for(self, spell_id: str | None) -> Row | None:
        if spell_id:
            return self.lookups.spell(int(spell_id))
        return self.spell


def _scaled(value: float, divisor: str) -> str:
    return format_number(value / int(divisor))


def _resolve_scaled_index(text: str, ctx: _Context) -> str:
    def replace(match: re.Match[str]) -> str:
        index = int(match[2])
        if index < 1:
            return match[0]
        value = desc_var_value(ctx.spell, index, ctx.lookups)
        if value is None:
            if not ctx.spell or not is_effect_index(index):
                return match[0]
            value = effect_value(ctx.spell, index).display
        return _scaled(value, match[1])

    return _SCALED_INDEX_RE.sub(replace, text)


def _resolve_scaled_letter(text: str, ctx: _Context) -> str:
    def replace(match: re.Match[str]) -> str:
        index = int(match[4])
        if not is_effect_index(index):
            return match[0]
        spell = ctx.spell_for(match[2])
        if not spell:
            return match[0]
        value = desc_var_value(spell, index, ctx.lookups)
        if value is None:
            value = effect_value(spell, index).display
        return _scaled(value, match[1])

    return _SCALED_LETTER_RE.sub(replace, text)


def _resolve_bare_index(text: str, ctx: _Context) -> str:
    def replace(match: re.Match[str]) -> str:
        value = desc_var_value(ctx.spell, int(match[1]), ctx.lookups)
        return match[0] if value is None else format_number(value)

    return _BARE_INDEX_RE.sub(replace, text)


def _resolve_effect(text: str, ctx: _Context) -> str:
    def replace(match: re.Match[str]) -> str:
        index = int(match[3])
        spell = ctx.spell_for(match[1])
        if not spell or not is_effect_index(index):
            return match[0]
        return effect_value(spell, index).text

    return _EFFECT_RE.sub(replace, text)


def _proc_value(spell: Row, letter: str, index: int) -> float:
    if letter == "h":
        return num_of(spell, PROC_CHANCE_KEYS) or num_of(spell, PROC_PPM_KEYS)
    if letter == "n":
        return (
            num_of(spell, effect_keys("EffectChainTargets", index))
            or num_of(spell, PROC_CHARGES_KEYS)
            or num_of(spell, STACK_AMOUNT_KEYS)
        )
    return num_of(spell, STACK_AMOUNT_KEYS)


def _resolve_proc(text: str, ctx: _Context) -> str:
    def replace(match: re.Match[str]) -> str:
        index = int(match[3]) if match[3] else 1
        spell = ctx.spell_for(match[1])
        if not spell or not is_effect_index(index):
            return match[0]
        value = _proc_value(spell, match[2].lower(), index)
        if value:
            return format_number(value)
        return effect_value(spell, index).text

    return _PROC_RE.sub(replace, text)


def _resolve_radius(text: str, ctx: _Context) -> str:
    def replace(match: re.Match[str]) -> str:
        index = int(match[2])
        spell = ctx.spell_for(match[1])
        if not spell or not is_effect_index(index):
            return match[0]
        yards = radius_yards(spell, ctx.lookups, index)
        return format_yards(yards) if yards else match[0]

    return _RADIUS_RE.sub(replace, text)


def _resolve_period(text: str, ctx: _Context) -> str:
    def replace(match: re.Match[str]) -> str:
        index = int(match[2])
        spell = ctx.spell_for(match[1])
        if not spell or not is_effect_index(index):
            return match[0]
        seconds = period_seconds(spell, index)
        return str(seconds) if seconds else match[0]

    return _PERIOD_RE.sub(replace, text)


def _resolve_duration(text: str, ctx: _Context) -> str:
    def replace(match: re.Match[str]) -> str:
        spell = ctx.spell_for(match[1])
        if not spell:
            return match[0]
        return format_duration(duration_ms(spell, ctx.lookups))

    return _DURATION_RE.sub(replace, text)


def _resolve_over_time(text: str, ctx: _Context) -> str:
    def replace(match: re.Match[str]) -> str:
        index = int(match[2])
        spell = ctx.spell_for(match[1])
        if not spell or not is_effect_index(index):
            return match[0]
        base = effect_value(spell, index).display
        period = period_seconds(spell, index)
        total_ms = duration_ms(spell, ctx.lookups)
        if not period or not total_ms:
            return str(base)
        ticks = max(1, math.floor(total_ms / 1000 / period))
        return str(base * ticks)

    return _OVER_TIME_RE.sub(replace, text)


def _resolve_per_combo(text: str, ctx: _Context) -> str:
    def replace(match: re.Match[str]) -> str:
        index = int(match[2])
        spell = ctx.spell_for(match[1])
        if not spell or not is_effect_index(index):
            return match[0]
        keys = (
            *effect_keys("EffectPointsPerCombo", index),
            *effect_keys("EffectPointsPerComboPoint", index),
            *effect_keys("EffectPointsPerResource", index),
        )
        per_combo = num_of(spell, keys)
        if per_combo:
            return format_number(per_combo)
        return effect_value(spell, index).text

    return _PER_COMBO_RE.sub(replace, text)


def _resolve_plural(text: str, ctx: _Context) -> str:
    def replace(match: re.Match[str]) -> str:
        numbers = _NUMBER_RE.findall(match.string, 0, match.start())
        if numbers and float(numbers[-1]) == 1:
            return match[1]
        return match[2]

    return _PLURAL_RE.sub(replace, text)


def _normalize(text: str, ctx: _Context) -> str:
    return normalize_line_breaks(text)


# Order matters: the scaled forms must consume their indices before the bare
# and lettered passes see them, and pluralisation reads substituted numbers.
_PASSES: tuple[Callable[[str, _Context], str], ...] = (
    _normalize,
    _resolve_scaled_index,
    _resolve_scaled_letter,
    _resolve_bare_index,
    _resolve_effect,
    _resolve_proc,
    _resolve_radius,
    _resolve_period,
    _resolve_duration,
    _resolve_over_time,
    _resolve_per_combo,
    _resolve_plural,
    _normalize,
)


def resolve_spell_description(
    raw: str, spell: Row | None, lookups: SpellLookups
) -> str:
    if not raw:
        return raw or ""
    ctx = _Context(spell=spell, lookups=lookups)
    text = raw
    for resolve_pass in _PASSES:
        try:
            text = resolve_pass(text, ctx)
        except Exception:
            # A broken row must not cost the whole tooltip
            logger.exception(
                "Tooltip pass %s failed, keeping partial text", resolve_pass.__name__
            )
    return text
