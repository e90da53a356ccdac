"""Hand-authored talent trees bundled with the calculator.

They are served while the live source is unreachable, lend art to live trees
and, with the whitelist policy, decide which live talents are kept.
"""

import dataclasses
import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from talents.models import Arrow, Position, PositionedTalent, TalentData, TalentTree

logger = logging.getLogger(__name__)

FALLBACK_CLASSES = ("Hunter", "Mage", "Priest", "Warlock", "Warrior")


class StaticTalent(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    pos: Position
    icon: str = ""
    max_rank: int = Field(alias="maxRank", ge=1)
    req_points: int = Field(default=0, alias="reqPoints", ge=0)
    description: list[str] = Field(default_factory=list)
    prereq: str | None = None
    arrows: list[Arrow] | None = None


class StaticTree(BaseModel):
    background: str = ""
    icon: str = ""
    talents: dict[str, StaticTalent] = Field(default_factory=dict)


_STATIC_CLASS_ADAPTER = TypeAdapter(dict[str, StaticTree])


@dataclasses.dataclass(frozen=True)
class StaticRankDescription:
    texts: tuple[str, ...]

    def header(self, rank: int) -> str:
        return ""

    def __call__(self, rank: int) -> str:
        if not self.texts:
            return ""
        return self.texts[min(max(rank - 1, 0), len(self.texts) - 1)]


def parse_fallback(raw_json: str | bytes) -> TalentData:
    trees = _STATIC_CLASS_ADAPTER.validate_json(raw_json)
    return {
        tree_name: TalentTree(
            name=tree_name,
            background=tree.background,
            icon=tree.icon,
            talents={
                talent_name: PositionedTalent(
                    name=talent_name,
                    pos=talent.pos,
                    icon=talent.icon,
                    description=StaticRankDescription(tuple(talent.description)),
                    max_rank=talent.max_rank,
                    req_points=talent.req_points,
                    prereq=talent.prereq,
                    arrows=talent.arrows,
                )
                for talent_name, talent in tree.talents.items()
            },
        )
        for tree_name, tree in trees.items()
    }


def load_fallback(klass: str) -> TalentData:
    """Bundled dataset for ``klass``; empty for classes without one."""
    path = Path(__file__).parent / "data" / f"{klass.lower()}.json"
    if not path.is_file():
        logger.warning("No bundled talent data for class %r", klass)
        return {}
    return parse_fallback(path.read_bytes())
