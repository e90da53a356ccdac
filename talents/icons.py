from talents.fields import Row, str_of

ICON_URL_TEMPLATE = "https://wow.zamimg.com/images/wow/icons/large/{name}.jpg"

ICON_URL_KEYS = ("IconUrl", "IconURL", "iconUrl", "Icon", "icon")
TEXTURE_KEYS = ("TextureFilename", "textureFilename")

_FLATTENED_PREFIX = "interfaceicons"


def icon_name_from_texture(texture: str) -> str:
    """``Interface\\Icons\\Spell_Fire_Fireball`` -> ``Spell_Fire_Fireball``.

    Some exports drop the separators entirely (``InterfaceIconsSpell_Fire_Fireball``).
    """
    texture = texture.replace("\\", "/")
    if "/" in texture:
        name = texture.rsplit("/", 1)[1]
    elif texture.lower().startswith(_FLATTENED_PREFIX):
        name = texture[len(_FLATTENED_PREFIX) :]
    else:
        name = texture
    return name.lstrip("\\/")


def icon_url_from_texture(texture: str) -> str:
    name = icon_name_from_texture(texture)
    if not name:
        return ""
    return ICON_URL_TEMPLATE.format(name=name.lower())


def row_icon_url(row: Row | None) -> str:
    url = str_of(row, ICON_URL_KEYS)
    if url:
        return url
    texture = str_of(row, TEXTURE_KEYS)
    return icon_url_from_texture(texture) if texture else ""
