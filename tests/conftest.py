"""
Shared fixtures: a small live payload for the Mage class and a hand-made
static dataset used by allocation and tooltip tests.
"""

import json

import pytest

from talents.descriptions.lookups import SpellLookups
from talents.fallback import parse_fallback
from talents.parsers.talent_api.models import TalentApiPayload


@pytest.fixture
def lookups():
    return SpellLookups(
        durations={21: {"ID": 21, "Duration": 30000}},
        radii={13: {"ID": 13, "Radius": 10}, 8: {"ID": 8, "Radius_1": 6.5}},
        desc_vars={
            7: {"ID": 7, "Variables": "5000;10;15"},
            9: {"ID": 9, "Variables": "1;2;3;4;5;6;7;8;9;10;11;12;13"},
        },
    )


def talent_row(talent_id, tab_id, tier, column, spell_id, **fields):
    return {
        "ID": talent_id,
        "TabID": tab_id,
        "TierID": tier,
        "ColumnIndex": column,
        "SpellRank_1": spell_id,
        **fields,
    }


SUBTLETY_TEXT = "Reduces your target's resistance to all your spells by $s1."


@pytest.fixture
def mage_payload():
    return TalentApiPayload.model_validate(
        {
            "tabs": [
                {
                    "ID": 81,
                    "Name_Lang_enUS": "Arcane",
                    "ClassMask": 128,
                    "OrderIndex": 0,
                    "IconUrl": "arcane.jpg",
                },
                {"ID": 41, "Name_Lang_enUS": "Fire", "ClassMask": 128, "OrderIndex": 1},
                {
                    "ID": 409,
                    "Name_Lang_enUS": "Tenacity",
                    "ClassMask": 0,
                    "PetTalentMask": 1,
                },
                {"ID": 500, "Name": "Beast", "ClassMask": 0, "PetTalentMask": 0},
            ],
            "talents": [
                talent_row(74, 81, 0, 0, 11210, SpellRank_2=12592),
                talent_row(75, 81, 1, 1, 11213),
                talent_row(76, 81, 2, 1, 12043, PrereqTalent_1=75),
                talent_row(78, 81, 3, 9, 99999),
                talent_row(77, 81, 1, 0, 0),
                talent_row(0, 81, 0, 2, 11210),
                talent_row(30, 41, 0, 1, 11069),
                talent_row(900, 409, 0, 0, 5000),
                talent_row(901, 500, 0, 0, 5001),
            ],
            "spells": [
                {
                    "ID": 11210,
                    "Name_Lang_enUS": "Arcane Subtlety",
                    "Description_Lang_enUS": SUBTLETY_TEXT,
                    "EffectBasePoints_1": 4,
                    "IconUrl": "https://example.test/subtlety.jpg",
                },
                {
                    "ID": 12592,
                    "Name_Lang_enUS": "Arcane Subtlety",
                    "Description_Lang_enUS": SUBTLETY_TEXT,
                    "EffectBasePoints_1": 9,
                },
                {
                    "ID": 11213,
                    "Name": "Arcane Concentration",
                    "Description": (
                        "Gives you a $h% chance of entering a Clearcasting state."
                    ),
                    "ProcChance": 2,
                    "TextureFilename": "Interface\\Icons\\Spell_Shadow_ManaBurn",
                },
                {
                    "ID": 12043,
                    "Name_Lang_enUS": "Presence of Mind",
                    "Description_Lang_enUS": "",
                    "AuraDescription_Lang_enUS": (
                        "Your next Mage spell is an instant cast spell."
                    ),
                    "RecoveryTime": 180000,
                },
                {
                    "ID": 11069,
                    "Name_Lang_enUS": "Improved Fireball",
                    "Description_Lang_enUS": (
                        "Reduces the casting time of your Fireball spell"
                        " by $/1000;S1 sec."
                    ),
                    "EffectBasePoints_1": -101,
                },
                {"ID": 5000, "Name_Lang_enUS": "Great Stamina"},
                {"ID": 5001, "Name_Lang_enUS": "Cobra Reflexes"},
            ],
        }
    )


ALPHA_JSON = {
    "Alpha": {
        "background": "alpha_bg.jpg",
        "icon": "alpha.jpg",
        "talents": {
            "Root": {
                "pos": "a1",
                "maxRank": 5,
                "description": [f"Root rank {rank}" for rank in range(1, 6)],
            },
            "Side": {
                "pos": "a2",
                "maxRank": 3,
                "description": ["Side 1", "Side 2", "Side 3"],
            },
            "Mid": {
                "pos": "b1",
                "maxRank": 2,
                "reqPoints": 5,
                "description": ["Mid 1", "Mid 2"],
            },
            "Gate": {
                "pos": "b2",
                "maxRank": 1,
                "reqPoints": 5,
                "description": ["Gate 1"],
            },
            "Top": {
                "pos": "c2",
                "maxRank": 1,
                "reqPoints": 10,
                "prereq": "Gate",
                "arrows": [{"dir": "down", "from": "b2", "to": "c2"}],
                "description": ["Top rank 1"],
            },
        },
    },
    "Beta": {
        "talents": {
            "Other": {"pos": "a1", "maxRank": 5, "description": ["Other"]},
        },
    },
}


@pytest.fixture
def alpha_data():
    return parse_fallback(json.dumps(ALPHA_JSON))
