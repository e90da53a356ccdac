from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Rows are straight database dumps whose column spellings drift between
# exports, so they stay untyped and are read through talents.fields. A row
# that is not an object is skipped by those readers instead of failing the
# whole document.
ApiRow = Any


class TalentApiPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    talents: list[ApiRow] = Field(default_factory=list)
    spells: list[ApiRow] = Field(default_factory=list)
    tabs: list[ApiRow] | None = None
    durations: list[ApiRow] | None = None
    radii: list[ApiRow] | None = None
    desc_vars: list[ApiRow] | None = Field(default=None, alias="descVars")
    cast_times: list[ApiRow] | None = Field(default=None, alias="castTimes")
    ranges: list[ApiRow] | None = None
    error: str | None = None
