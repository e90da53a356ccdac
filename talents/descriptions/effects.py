import dataclasses

from talents.fields import Row, effect_keys, num_of

MAX_EFFECTS = 3


@dataclasses.dataclass(frozen=True)
class EffectValue:
    min: int
    max: int
    die_sides: int

    @property
    def is_random(self) -> bool:
        return self.die_sides > 0

    @property
    def display(self) -> int:
        # Random effects surface their upper roll bound
        return abs(self.max) if self.is_random else abs(self.min)

    @property
    def text(self) -> str:
        if self.min == self.max:
            return str(abs(self.min))
        return f"{abs(self.min)} to {abs(self.max)}"


def effect_value(spell: Row | None, index: int) -> EffectValue:
    base = int(num_of(spell, effect_keys("EffectBasePoints", index)))
    die_sides = int(num_of(spell, effect_keys("EffectDieSides", index)))
    low = base + 1
    high = base + die_sides if die_sides > 0 else low
    return EffectValue(min=low, max=high, die_sides=max(die_sides, 0))


def is_effect_index(index: int) -> bool:
    return 1 <= index <= MAX_EFFECTS
