import math
from collections.abc import Mapping, Sequence
from typing import Any

Row = Mapping[str, Any]

ID_KEYS = ("ID", "Id", "id")


def to_num(value: Any, default: float = 0) -> float:
    """Coerce a raw cell to a number, ``default`` when it is not finite."""
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        number = value
    else:
        text = str(value).strip()
        if not text:
            return default
        try:
            number = float(text)
        except ValueError:
            return default
    try:
        if not math.isfinite(number):
            return default
    except OverflowError:
        # Integers past float range
        return default
    if isinstance(number, float) and number.is_integer():
        return int(number)
    return number


def first_of(row: Row | None, keys: Sequence[str], default: Any = None) -> Any:
    if not row:
        return default
    for key in keys:
        value = row.get(key)
        if value is not None:
            return value
    return default


def num_of(row: Row | None, keys: Sequence[str], default: float = 0) -> float:
    return to_num(first_of(row, keys), default)


def str_of(row: Row | None, keys: Sequence[str]) -> str:
    # Blank text columns count as missing so the next spelling gets a chance
    if not row:
        return ""
    for key in keys:
        value = row.get(key)
        if value is not None and str(value) != "":
            return str(value)
    return ""


def effect_keys(stem: str, index: int) -> tuple[str, str]:
    """``EffectBasePoints_1`` and ``EffectBasePoints1`` for ``index`` 1."""
    return f"{stem}_{index}", f"{stem}{index}"


def row_id(row: Row | None) -> int:
    return int(num_of(row, ID_KEYS))


def index_by_id(rows: Sequence[Row] | None) -> dict[int, Row]:
    """Index rows by their positive id; later duplicates replace earlier ones."""
    indexed: dict[int, Row] = {}
    for row in rows or []:
        if not isinstance(row, Mapping):
            continue
        id_ = row_id(row)
        if id_ > 0:
            indexed[id_] = row
    return indexed
