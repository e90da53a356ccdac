from jinja2 import Environment
from pydantic import BaseModel

from talents.models import PositionedTalent, TalentTree

DEFAULT_TOOLTIP_TEMPLATE = """\
{{ name }}
Rank {{ rank }}/{{ max_rank }}
{% if header %}
{{ header }}
{% endif %}
{% if req_points and not unlocked %}
Requires {{ req_points }} points in {{ tree_name }} Talents
{% endif %}
{% if prereq and not unlocked %}
{% set unit = "point" if prereq_max_rank == 1 else "points" %}
Requires {{ prereq_max_rank }} {{ unit }} in {{ prereq }}
{% endif %}
{{ description }}
{% if next_description %}

Next rank:
{{ next_description }}
{% endif %}
"""


class RenderArgs(BaseModel):
    name: str
    rank: int
    max_rank: int
    tree_name: str
    header: str = ""
    description: str = ""
    next_description: str = ""
    req_points: int = 0
    prereq: str | None = None
    prereq_max_rank: int = 1
    unlocked: bool = False


def rank_header(talent: PositionedTalent, rank: int) -> str:
    # Static descriptions carry no spell data and therefore no header
    header = getattr(talent.description, "header", None)
    return header(rank) if header else ""


def make_render_args(
    tree: TalentTree, talent: PositionedTalent, rank: int, unlocked: bool = False
) -> RenderArgs:
    shown_rank = min(max(rank, 1), talent.max_rank)
    prereq = tree.talents.get(talent.prereq) if talent.prereq else None
    return RenderArgs(
        name=talent.name,
        rank=rank,
        max_rank=talent.max_rank,
        tree_name=tree.name,
        header=rank_header(talent, shown_rank),
        description=talent.description(shown_rank),
        next_description=(
            talent.description(rank + 1) if 0 < rank < talent.max_rank else ""
        ),
        req_points=talent.req_points,
        prereq=talent.prereq,
        prereq_max_rank=prereq.max_rank if prereq else 1,
        unlocked=unlocked,
    )


class TooltipTemplate:
    def __init__(self, template_string: str = DEFAULT_TOOLTIP_TEMPLATE):
        env = Environment(trim_blocks=True, lstrip_blocks=True)
        self._template = env.from_string(template_string)

    def render(self, render_args: RenderArgs) -> str:
        render_kwargs = render_args.model_dump(mode="json")
        return self._template.render(**render_kwargs).strip()

    def render_talent(
        self,
        tree: TalentTree,
        talent: PositionedTalent,
        rank: int,
        unlocked: bool = False,
    ) -> str:
        return self.render(make_render_args(tree, talent, rank, unlocked))
