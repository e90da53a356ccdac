from collections import defaultdict
from dataclasses import dataclass

from calculator.config import CalculatorConfig
from talents.models import PositionedTalent, TalentData


class AllocationError(ValueError):
    pass


class DecrementNotPossible(Exception):
    def __init__(self, tree_name: str, talent_name: str, reason: str):
        super().__init__(f"{tree_name}/{talent_name}: {reason}")
        self.tree_name = tree_name
        self.talent_name = talent_name
        self.reason = reason


def talent_slug(name: str) -> str:
    sb: list[str] = []
    for char in name:
        if "a" <= char <= "z":
            sb.append(char)
        elif "A" <= char <= "Z":
            sb.append(char.lower())
        elif char.isspace():
            sb.append("_")
    return "".join(sb)


@dataclass
class TalentSelection:
    talent: PositionedTalent
    rank: int = 0

    def is_maxed(self) -> bool:
        return self.rank >= self.talent.max_rank

    def to_talent_string(self) -> str:
        return f"{talent_slug(self.talent.name)}:{self.rank}"


class TalentAllocation:
    """Points a player has spent across the trees of one class."""

    def __init__(
        self, data: TalentData, total_points: int = CalculatorConfig().total_points
    ):
        self._data = data
        self._total_points = total_points
        self._selections: dict[str, dict[str, TalentSelection]] = {
            tree_name: {
                name: TalentSelection(talent) for name, talent in tree.talents.items()
            }
            for tree_name, tree in data.items()
        }
        self._tree_by_talent: dict[str, str] = {
            talent_name: tree_name
            for tree_name, tree in data.items()
            for talent_name in tree.talents
        }

    def copy(self) -> "TalentAllocation":
        new_allocation = TalentAllocation(self._data, self._total_points)
        for tree_name, selections in self._selections.items():
            for talent_name, selection in selections.items():
                new_allocation._selections[tree_name][talent_name].rank = selection.rank
        return new_allocation

    def _selection(self, tree_name: str, talent_name: str) -> TalentSelection:
        try:
            return self._selections[tree_name][talent_name]
        except KeyError:
            raise AllocationError(
                f"Unknown talent {talent_name!r} in tree {tree_name!r}"
            ) from None

    def rank(self, tree_name: str, talent_name: str) -> int:
        return self._selection(tree_name, talent_name).rank

    def points_spent(self) -> int:
        return sum(self.tree_points_spent(tree_name) for tree_name in self._selections)

    def points_left(self) -> int:
        return self._total_points - self.points_spent()

    def tree_points_spent(self, tree_name: str) -> int:
        selections = self._selections.get(tree_name, {})
        return sum(selection.rank for selection in selections.values())

    def _points_by_tier(self, tree_name: str) -> defaultdict[int, int]:
        by_tier: defaultdict[int, int] = defaultdict(int)
        for selection in self._selections[tree_name].values():
            by_tier[selection.talent.tier] += selection.rank
        return by_tier

    def _prereq_selection(self, talent: PositionedTalent) -> TalentSelection | None:
        if not talent.prereq or talent.prereq not in self._tree_by_talent:
            return None
        return self._selections[self._tree_by_talent[talent.prereq]][talent.prereq]

    def can_increment(self, tree_name: str, talent_name: str) -> bool:
        selection = self._selection(tree_name, talent_name)
        if self.points_left() <= 0 or selection.is_maxed():
            return False
        if self.tree_points_spent(tree_name) < selection.talent.req_points:
            return False
        prereq = self._prereq_selection(selection.talent)
        return prereq is None or prereq.is_maxed()

    def increment(self, tree_name: str, talent_name: str) -> None:
        if not self.can_increment(tree_name, talent_name):
            raise AllocationError(f"Cannot add a point to {talent_name!r}")
        self._selection(tree_name, talent_name).rank += 1

    def can_decrement(self, tree_name: str, talent_name: str) -> bool:
        try:
            selection = self._selection(tree_name, talent_name)
            # Can only refund talents that hold points
            if selection.rank <= 0:
                raise DecrementNotPossible(tree_name, talent_name, "no points spent")
            # Talents depending on this one need it fully skilled
            for other in self._selections[tree_name].values():
                if other.talent.prereq == talent_name and other.rank > 0:
                    raise DecrementNotPossible(
                        tree_name, talent_name, f"{other.talent.name} depends on it"
                    )
            # Every occupied higher tier must keep enough points spent below it
            by_tier = self._points_by_tier(tree_name)
            by_tier[selection.talent.tier] -= 1
            for other in self._selections[tree_name].values():
                if other.rank <= 0 or other.talent.tier <= selection.talent.tier:
                    continue
                spent_below = sum(
                    points
                    for tier, points in by_tier.items()
                    if tier < other.talent.tier
                )
                if spent_below < other.talent.req_points:
                    raise DecrementNotPossible(
                        tree_name, talent_name, f"{other.talent.name} would be locked"
                    )
        except DecrementNotPossible:
            return False
        return True

    def decrement(self, tree_name: str, talent_name: str) -> None:
        if not self.can_decrement(tree_name, talent_name):
            raise AllocationError(f"Cannot remove a point from {talent_name!r}")
        self._selection(tree_name, talent_name).rank -= 1

    def reset_tree(self, tree_name: str) -> None:
        for selection in self._selections.get(tree_name, {}).values():
            selection.rank = 0

    def reset_all(self) -> None:
        for tree_name in self._selections:
            self.reset_tree(tree_name)

    def tree_points_summary(self) -> str:
        return "/".join(
            str(self.tree_points_spent(tree_name)) for tree_name in self._selections
        )

    def required_level(
        self, first_point_level: int = CalculatorConfig().first_point_level
    ) -> int | None:
        level = self.points_spent() + first_point_level - 1
        return level if level >= first_point_level else None

    def to_talent_string(self) -> str:
        talent_strings: list[str] = []
        for selections in self._selections.values():
            for selection in sorted(selections.values(), key=lambda s: s.talent.pos):
                if selection.rank > 0:
                    talent_strings.append(selection.to_talent_string())
        return "/".join(talent_strings)

    def __str__(self):
        return self.to_talent_string()
