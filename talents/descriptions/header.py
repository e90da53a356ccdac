from talents.descriptions.formatting import (
    cast_time_ms,
    format_duration_long,
    format_number,
    range_yards,
)
from talents.descriptions.lookups import SpellLookups
from talents.fields import Row, num_of

SPELL_ATTR_PASSIVE = 0x40

POWER_NAMES = {
    0: "Mana",
    1: "Rage",
    2: "Focus",
    3: "Energy",
    4: "Happiness",
    5: "Runes",
    6: "Runic Power",
}
# Rage and runic power costs are stored in tenths
POWER_SCALE = {1: 10, 6: 10}

ATTRIBUTE_KEYS = ("Attributes", "Attribute", "Attributes_0", "attributes")
POWER_TYPE_KEYS = ("PowerType", "powerType")
FLAT_COST_KEYS = ("ManaCost", "PowerCost", "manaCost")
PERCENT_COST_KEYS = (
    "ManaCostPercentage",
    "ManaCostPct",
    "PowerCostPct",
    "manaCostPercentage",
)
PER_SECOND_KEYS = (
    "ManaPerSecond",
    "ManaCostPerSecond",
    "PowerPerSecond",
    "manaPerSecond",
)
RECOVERY_KEYS = ("RecoveryTime", "recoveryTime")
CATEGORY_RECOVERY_KEYS = ("CategoryRecoveryTime", "categoryRecoveryTime")


def is_passive(spell: Row | None) -> bool:
    return bool(int(num_of(spell, ATTRIBUTE_KEYS)) & SPELL_ATTR_PASSIVE)


def _cost_clause(spell: Row) -> str | None:
    power_type = int(num_of(spell, POWER_TYPE_KEYS))
    power_name = POWER_NAMES.get(power_type, "Mana")
    percent = num_of(spell, PERCENT_COST_KEYS)
    if percent > 0:
        return f"{format_number(percent)}% of base {power_name.lower()}"
    flat = num_of(spell, FLAT_COST_KEYS)
    if flat > 0:
        return f"{format_number(flat / POWER_SCALE.get(power_type, 1))} {power_name}"
    return None


def _drain_clause(spell: Row) -> str | None:
    per_second = num_of(spell, PER_SECOND_KEYS)
    if per_second > 0:
        return f"plus {format_number(per_second)} per sec"
    return None


def _range_clause(spell: Row, lookups: SpellLookups) -> str | None:
    low, high = range_yards(spell, lookups)
    if high <= 0:
        return None
    if low > 0:
        return f"{format_number(low)}-{format_number(high)} yd range"
    return f"{format_number(high)} yd range"


def _cast_clause(spell: Row, lookups: SpellLookups) -> str:
    ms = cast_time_ms(spell, lookups)
    if ms <= 0:
        return "Instant"
    return f"{format_number(ms / 1000, places=2)} sec cast"


def _cooldown_clause(spell: Row) -> str | None:
    ms = max(num_of(spell, RECOVERY_KEYS), num_of(spell, CATEGORY_RECOVERY_KEYS))
    if ms <= 0:
        return None
    return f"{format_duration_long(ms)} cooldown"


def build_header(spell: Row | None, lookups: SpellLookups) -> str:
    """Cost, range, cast time and cooldown lines shown above a tooltip.

    Passive spells get no header at all.
    """
    if not spell or is_passive(spell):
        return ""
    clauses = [
        _cost_clause(spell),
        _drain_clause(spell),
        _range_clause(spell, lookups),
        _cast_clause(spell, lookups),
        _cooldown_clause(spell),
    ]
    return "\n".join(clause for clause in clauses if clause)
