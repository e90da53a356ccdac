from typing import NamedTuple

from talents.models import Arrow, ArrowDirection, position_to_coords


class GridArea(NamedTuple):
    row_start: int
    column_start: int
    row_end: int
    column_end: int

    def __str__(self) -> str:
        return " / ".join(str(line) for line in self)


def resolve_arrow_direction(from_pos: str, to_pos: str) -> ArrowDirection:
    from_row, from_col = position_to_coords(from_pos)
    to_row, to_col = position_to_coords(to_pos)
    row_delta = to_row - from_row
    col_delta = to_col - from_col

    if col_delta == 0:
        return ArrowDirection.DOWN
    if row_delta == 0:
        return ArrowDirection.RIGHT if col_delta > 0 else ArrowDirection.LEFT
    if col_delta > 0 and row_delta > 0:
        if row_delta >= 2:
            return ArrowDirection.RIGHT_DOWN_DOWN
        return ArrowDirection.RIGHT_DOWN
    # No artwork for left or upward diagonals
    return ArrowDirection.DOWN


def make_arrow(from_pos: str, to_pos: str) -> Arrow:
    return Arrow(
        direction=resolve_arrow_direction(from_pos, to_pos),
        from_pos=from_pos,
        to_pos=to_pos,
    )


def grid_area(from_pos: str, to_pos: str) -> GridArea:
    """Smallest block of grid cells covering both ends of an arrow.

    End lines are exclusive, matching CSS ``grid-area`` shorthand.
    """
    from_row, from_col = position_to_coords(from_pos)
    to_row, to_col = position_to_coords(to_pos)
    return GridArea(
        row_start=min(from_row, to_row),
        column_start=min(from_col, to_col),
        row_end=max(from_row, to_row) + 1,
        column_end=max(from_col, to_col) + 1,
    )
