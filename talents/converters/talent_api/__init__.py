import dataclasses
import logging
from collections.abc import Mapping
from enum import Enum

from talents.arrows import make_arrow
from talents.descriptions import resolve_spell_description
from talents.descriptions.header import build_header
from talents.descriptions.lookups import SpellLookups
from talents.fields import Row, index_by_id, num_of, row_id, str_of
from talents.icons import row_icon_url
from talents.models import (
    POINTS_PER_TIER,
    PositionedTalent,
    TalentData,
    TalentTree,
    to_position,
)
from talents.parsers.talent_api.models import TalentApiPayload
from talents.visuals import get_tree_visuals

logger = logging.getLogger(__name__)

TAB_ID_KEYS = ("TabID", "TabId", "tabId")
TIER_KEYS = ("TierID", "TierId", "Tier", "tier")
COLUMN_KEYS = ("ColumnIndex", "Column", "Col", "column")
SPELL_RANK_FIELDS = tuple(f"SpellRank_{rank}" for rank in range(1, 10))
PREREQ_ID_KEYS = (
    "PrereqTalent_1",
    "PrereqTalent1",
    "PrereqTalent",
    "PrereqTalent_0",
    "prereqTalent",
)
PREREQ_NAME_KEYS = ("PrereqTalentName", "prereqTalentName", "PrereqName")

SPELL_NAME_KEYS = ("Name_Lang_enUS", "Name", "name")
SPELL_DESC_KEYS = ("Description_Lang_enUS", "Description", "description")
AURA_DESC_KEYS = ("AuraDescription_Lang_enUS", "AuraDescription", "auraDescription")

TAB_NAME_KEYS = ("Name_Lang_enUS", "Name", "name", "TabName", "tabName")
TAB_ORDER_KEYS = ("OrderIndex", "orderIndex")
PET_MASK_KEYS = ("PetTalentMask", "PetTalentMask_1", "PetTalentMask1", "petTalentMask")
CLASS_MASK_KEYS = ("ClassMask", "ClassMask_0", "classMask")


class NormalizerPolicy(str, Enum):
    # Trust live tab and talent ids; a static dataset only lends visuals
    LIVE = "live"
    # Static dataset is the authority on which talents exist and where they live
    STATIC_WHITELIST = "static_whitelist"


@dataclasses.dataclass(frozen=True)
class RankDescription:
    """Tooltip text of one talent, resolved only for the rank asked for."""

    rank_spell_ids: tuple[int, ...]
    lookups: SpellLookups

    def spell(self, rank: int) -> Row | None:
        index = max(rank - 1, 0)
        if index >= len(self.rank_spell_ids):
            return None
        return self.lookups.spell(self.rank_spell_ids[index])

    def header(self, rank: int) -> str:
        return build_header(self.spell(rank), self.lookups)

    def __call__(self, rank: int) -> str:
        spell = self.spell(rank)
        raw = str_of(spell, SPELL_DESC_KEYS) or str_of(spell, AURA_DESC_KEYS)
        return resolve_spell_description(raw, spell, self.lookups)


@dataclasses.dataclass
class _LiveTalent:
    row: Row
    id: int
    tab_id: int
    tier: int
    column: int
    pos: str
    name: str
    rank_spell_ids: tuple[int, ...]


def is_excluded_tab(tab: Row | None, class_mask: int | None = None) -> bool:
    """Pet tabs, and tabs of other classes when a class filter is known.

    Without a filter, a zero class mask is how most exports mark pet-like tabs.
    """
    if not tab:
        return False
    if num_of(tab, PET_MASK_KEYS) != 0:
        return True
    tab_class_mask = int(num_of(tab, CLASS_MASK_KEYS))
    if class_mask is None:
        return tab_class_mask == 0
    return not (tab_class_mask & class_mask)


def _rank_spell_ids(row: Row) -> tuple[int, ...]:
    ids: list[int] = []
    for field in SPELL_RANK_FIELDS:
        spell_id = int(num_of(row, (field,)))
        if spell_id <= 0:
            break
        ids.append(spell_id)
    return tuple(ids)


def _tab_tree_name(tab: Row | None, tab_id: int) -> str:
    return str_of(tab, TAB_NAME_KEYS) or f"Tab {tab_id}"


def _whitelist_index(static_data: TalentData | None) -> dict[str, str]:
    # Talent name -> owning static tree name
    index: dict[str, str] = {}
    for tree in (static_data or {}).values():
        for talent_name in tree.talents:
            index.setdefault(talent_name, tree.name)
    return index


def _normalize_talents(
    payload: TalentApiPayload,
    lookups: SpellLookups,
    tabs_by_id: dict[int, Row],
    class_mask: int | None,
    whitelist: dict[str, str] | None,
) -> list[_LiveTalent]:
    normalized: list[_LiveTalent] = []
    for row in payload.talents:
        if not isinstance(row, Mapping):
            logger.debug("Skipping talent row that is not an object: %r", row)
            continue
        talent_id = row_id(row)
        if talent_id <= 0:
            logger.debug("Skipping talent row without an id: %r", row)
            continue
        tab_id = int(num_of(row, TAB_ID_KEYS))
        if is_excluded_tab(tabs_by_id.get(tab_id), class_mask):
            continue
        rank_spell_ids = _rank_spell_ids(row)
        if not rank_spell_ids:
            logger.debug("Skipping talent %d without rank spells", talent_id)
            continue
        tier = int(num_of(row, TIER_KEYS))
        column = int(num_of(row, COLUMN_KEYS))
        name = str_of(lookups.spell(rank_spell_ids[0]), SPELL_NAME_KEYS)
        name = name or f"Talent_{talent_id}"
        if whitelist is not None and name not in whitelist:
            logger.debug("Talent %r is not in the static dataset, dropping it", name)
            continue
        normalized.append(
            _LiveTalent(
                row=row,
                id=talent_id,
                tab_id=tab_id,
                tier=tier,
                column=column,
                pos=to_position(tier, column),
                name=name,
                rank_spell_ids=rank_spell_ids,
            )
        )
    return normalized


def _tree_order(tab_id: int, tabs_by_id: dict[int, Row]) -> tuple[float, int]:
    tab = tabs_by_id.get(tab_id)
    return num_of(tab, TAB_ORDER_KEYS), tab_id


def _resolve_prereq(
    talent: _LiveTalent,
    by_id: dict[int, _LiveTalent],
    by_name: dict[str, _LiveTalent],
) -> _LiveTalent | None:
    prereq_id = int(num_of(talent.row, PREREQ_ID_KEYS))
    if prereq_id > 0 and prereq_id in by_id:
        return by_id[prereq_id]
    prereq_name = str_of(talent.row, PREREQ_NAME_KEYS)
    if prereq_name:
        return by_name.get(prereq_name)
    return None


def convert(
    payload: TalentApiPayload,
    static_data: TalentData | None = None,
    policy: NormalizerPolicy = NormalizerPolicy.LIVE,
    class_mask: int | None = None,
) -> TalentData:
    lookups = SpellLookups.from_payload(payload)
    tabs_by_id = index_by_id(payload.tabs)
    whitelist = None
    if policy is NormalizerPolicy.STATIC_WHITELIST:
        whitelist = _whitelist_index(static_data)
    visuals = get_tree_visuals(static_data or {})
    static_icons = {
        talent.name: talent.icon
        for tree in (static_data or {}).values()
        for talent in tree.talents.values()
        if talent.icon
    }

    normalized = sorted(
        _normalize_talents(payload, lookups, tabs_by_id, class_mask, whitelist),
        key=lambda t: (*_tree_order(t.tab_id, tabs_by_id), t.tier, t.column, t.id),
    )
    by_id = {talent.id: talent for talent in normalized}
    by_name: dict[str, _LiveTalent] = {}
    for talent in normalized:
        by_name.setdefault(talent.name, talent)

    out: TalentData = {}
    # Talent name -> tree it was placed in; names address talents across trees
    placed: dict[str, str] = {}

    def ensure_tree(tree_name: str, tab: Row | None) -> TalentTree:
        if tree_name not in out:
            visual = visuals.get(tree_name)
            out[tree_name] = TalentTree(
                name=tree_name,
                background=visual.background if visual else "",
                icon=row_icon_url(tab) or (visual.icon if visual else ""),
            )
        return out[tree_name]

    if whitelist is not None:
        for static_tree in (static_data or {}).values():
            ensure_tree(static_tree.name, None)

    for talent in normalized:
        tab = tabs_by_id.get(talent.tab_id)
        if whitelist is not None:
            tree_name = whitelist[talent.name]
        else:
            tree_name = _tab_tree_name(tab, talent.tab_id)
        if talent.name in placed:
            logger.warning(
                "Duplicate talent name %r in tree %r, keeping the one in %r",
                talent.name,
                tree_name,
                placed[talent.name],
            )
            continue
        tree = ensure_tree(tree_name, tab)
        placed[talent.name] = tree.name

        prereq = _resolve_prereq(talent, by_id, by_name)
        spell_icon = row_icon_url(lookups.spell(talent.rank_spell_ids[0]))
        tree.talents[talent.name] = PositionedTalent(
            name=talent.name,
            pos=talent.pos,
            icon=spell_icon or static_icons.get(talent.name, ""),
            description=RankDescription(talent.rank_spell_ids, lookups),
            max_rank=len(talent.rank_spell_ids),
            req_points=max(talent.tier, 0) * POINTS_PER_TIER,
            prereq=prereq.name if prereq else None,
            arrows=[make_arrow(prereq.pos, talent.pos)] if prereq else None,
        )

    logger.info(
        "Built %d trees with %d talents from %d talent rows",
        len(out),
        sum(len(tree.talents) for tree in out.values()),
        len(payload.talents),
    )
    return out
