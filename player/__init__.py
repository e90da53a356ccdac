import dataclasses

from calculator.config import CalculatorConfig


@dataclasses.dataclass(frozen=True)
class Player:
    name: str
    level: int
    klass: str

    def get_available_talent_points(
        self, config: CalculatorConfig | None = None
    ) -> int:
        config = config or CalculatorConfig()
        if self.level < 1:
            raise ValueError(f"Unsupported level: {self.level}")
        if self.level < config.first_point_level:
            return 0
        return min(self.level - config.first_point_level + 1, config.total_points)
