import math
import re

from talents.descriptions.lookups import SpellLookups
from talents.fields import Row, num_of, str_of

DESC_VARS_ID_KEYS = (
    "SpellDescriptionVariablesID",
    "SpellDescriptionVariablesId",
    "DescriptionVariablesID",
    "DescriptionVariablesId",
    "DescriptionVariables",
    "descVarsId",
)
DESC_VARS_VALUE_KEYS = ("Variables", "variables", "Vars", "vars", "Values", "values")

_SEPARATOR_RE = re.compile(r"[;,|]")


def parse_desc_vars(row: Row | None) -> list[float]:
    raw = str_of(row, DESC_VARS_VALUE_KEYS).strip()
    if not raw:
        return []
    values: list[float] = []
    for part in _SEPARATOR_RE.split(raw):
        try:
            value = float(part.strip())
        except ValueError:
            continue
        if math.isfinite(value):
            values.append(value)
    return values


def desc_var_value(
    spell: Row | None, index: int, lookups: SpellLookups
) -> float | None:
    """1-based lookup into the spell's description variables.

    ``None`` when the spell has no variables, the row is missing, or the
    index is out of range; a stored zero is returned as ``0.0``.
    """
    if not spell or index < 1:
        return None
    vars_id = int(num_of(spell, DESC_VARS_ID_KEYS))
    if not vars_id:
        return None
    values = parse_desc_vars(lookups.desc_vars.get(vars_id))
    if index > len(values):
        return None
    return values[index - 1]
