import dataclasses

from talents.fields import Row, index_by_id
from talents.parsers.talent_api.models import TalentApiPayload


@dataclasses.dataclass
class SpellLookups:
    """Id-indexed side tables a spell's tooltip may point into."""

    spells: dict[int, Row] = dataclasses.field(default_factory=dict)
    durations: dict[int, Row] = dataclasses.field(default_factory=dict)
    radii: dict[int, Row] = dataclasses.field(default_factory=dict)
    desc_vars: dict[int, Row] = dataclasses.field(default_factory=dict)
    cast_times: dict[int, Row] = dataclasses.field(default_factory=dict)
    ranges: dict[int, Row] = dataclasses.field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: TalentApiPayload) -> "SpellLookups":
        return cls(
            spells=index_by_id(payload.spells),
            durations=index_by_id(payload.durations),
            radii=index_by_id(payload.radii),
            desc_vars=index_by_id(payload.desc_vars),
            cast_times=index_by_id(payload.cast_times),
            ranges=index_by_id(payload.ranges),
        )

    def spell(self, spell_id: int) -> Row | None:
        return self.spells.get(spell_id)
