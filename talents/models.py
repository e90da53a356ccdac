import string
from collections.abc import Callable
from enum import Enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, StringConstraints

MAX_TIERS = 11
MAX_COLUMNS = 4
POINTS_PER_TIER = 5

TIER_LETTERS = string.ascii_lowercase[:MAX_TIERS]

POSITION_PATTERN = rf"^[{TIER_LETTERS}][1-{MAX_COLUMNS}]$"

Position = Annotated[str, StringConstraints(pattern=POSITION_PATTERN)]


def to_position(tier: int, column: int) -> str:
    tier = min(max(tier, 0), MAX_TIERS - 1)
    column = min(max(column + 1, 1), MAX_COLUMNS)
    return f"{TIER_LETTERS[tier]}{column}"


def position_to_coords(position: str) -> tuple[int, int]:
    # 1-based (row, column), as used by grid placement
    return ord(position[0]) - ord("a") + 1, int(position[1:])


class ArrowDirection(str, Enum):
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    RIGHT_DOWN = "right-down"
    RIGHT_DOWN_DOWN = "right-down-down"


class Arrow(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    direction: ArrowDirection = Field(alias="dir")
    from_pos: Position = Field(alias="from")
    to_pos: Position = Field(alias="to")


class PositionedTalent(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    pos: Position
    icon: str = ""
    description: Callable[[int], str] = Field(exclude=True)
    max_rank: int = Field(alias="maxRank", ge=1)
    req_points: int = Field(alias="reqPoints", ge=0)
    prereq: str | None = None
    arrows: list[Arrow] | None = None

    @property
    def tier(self) -> int:
        return position_to_coords(self.pos)[0] - 1


class TalentTree(BaseModel):
    name: str
    background: str = ""
    icon: str = ""
    talents: dict[str, PositionedTalent] = Field(default_factory=dict)


# Tree name -> tree, in display order
TalentData = dict[str, TalentTree]
