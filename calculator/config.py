import os
from collections.abc import Mapping

from pydantic import BaseModel, Field

CLASS_MASKS: dict[str, int] = {
    "Warrior": 1,
    "Paladin": 2,
    "Hunter": 4,
    "Rogue": 8,
    "Priest": 16,
    "Death Knight": 32,
    "Shaman": 64,
    "Mage": 128,
    "Warlock": 256,
    "Druid": 1024,
}


def class_mask_for(klass: str | None) -> int | None:
    if not klass:
        return None
    for name, mask in CLASS_MASKS.items():
        if name.lower() == klass.strip().lower():
            return mask
    return None


class CalculatorConfig(BaseModel):
    total_points: int = Field(default=51, ge=1)
    first_point_level: int = Field(default=10, ge=1)
    talent_api_url: str = "/talentapi.php"
    request_timeout: float = Field(default=30, gt=0)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "CalculatorConfig":
        environ = os.environ if environ is None else environ
        overrides: dict[str, str] = {}
        if environ.get("TALENT_API_URL"):
            overrides["talent_api_url"] = environ["TALENT_API_URL"]
        if environ.get("TALENT_API_TIMEOUT"):
            overrides["request_timeout"] = environ["TALENT_API_TIMEOUT"]
        return cls.model_validate(overrides)
