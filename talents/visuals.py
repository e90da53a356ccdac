from pydantic import BaseModel

from talents.models import TalentData


class TreeVisual(BaseModel):
    background: str = ""
    icon: str = ""


def get_tree_visuals(data: TalentData) -> dict[str, TreeVisual]:
    """Background and icon art per tree name, for decorating live trees."""
    return {
        name: TreeVisual(background=tree.background, icon=tree.icon)
        for name, tree in data.items()
    }
