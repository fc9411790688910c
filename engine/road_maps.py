"""Road map templates: per-axis tiers for each monster archetype."""

from enum import Enum

from pydantic import BaseModel, ConfigDict


class Tier(str, Enum):
    """Coarse strength rating for a single stat axis."""
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    EXTREME = "extreme"


class RoadMapStats(BaseModel):
    """Tier assignment for every axis a road map controls."""
    model_config = ConfigDict(frozen=True)

    perception: Tier = Tier.MODERATE
    strength: Tier = Tier.MODERATE
    dexterity: Tier = Tier.MODERATE
    constitution: Tier = Tier.MODERATE
    intelligence: Tier = Tier.MODERATE
    wisdom: Tier = Tier.MODERATE
    charisma: Tier = Tier.MODERATE
    ac: Tier = Tier.MODERATE
    fortitude: Tier = Tier.MODERATE
    reflex: Tier = Tier.MODERATE
    will: Tier = Tier.MODERATE
    hp: Tier = Tier.MODERATE
    attack: Tier = Tier.MODERATE
    damage: Tier = Tier.MODERATE


class RoadMap(BaseModel):
    """A named creation template."""
    model_config = ConfigDict(frozen=True)

    key: str                        # Identifier stored on monster records
    name: str                       # Display name
    description: str
    stats: RoadMapStats


_L, _M, _H = Tier.LOW, Tier.MODERATE, Tier.HIGH

ROAD_MAPS: dict[str, RoadMap] = {
    road_map.key: road_map
    for road_map in (
        RoadMap(
            key="brute",
            name="Brute",
            description="Big, tough creatures like ogres. High HP, high damage, low AC.",
            stats=RoadMapStats(
                perception=_L, strength=_H, dexterity=_L, constitution=_H,
                intelligence=_L, wisdom=_L, charisma=_L, ac=_L,
                fortitude=_H, reflex=_L, will=_L, hp=_H, attack=_H, damage=_H,
            ),
        ),
        RoadMap(
            key="magicalStriker",
            name="Magical Striker",
            description="Creatures that combine martial prowess with magical abilities.",
            stats=RoadMapStats(
                intelligence=_H, charisma=_H, will=_H, attack=_H, damage=_H,
            ),
        ),
        RoadMap(
            key="skillParagon",
            name="Skill Paragon",
            description="Creatures with exceptional skills and abilities.",
            stats=RoadMapStats(
                perception=_H, dexterity=_H, intelligence=_H, wisdom=_H,
                charisma=_H, fortitude=_L, reflex=_H, will=_H,
            ),
        ),
        RoadMap(
            key="skirmisher",
            name="Skirmisher",
            description="Fast, mobile creatures that dart in and out of combat.",
            stats=RoadMapStats(dexterity=_H, fortitude=_L, reflex=_H),
        ),
        RoadMap(
            key="sniper",
            name="Sniper",
            description="Ranged attackers with high perception and accuracy.",
            stats=RoadMapStats(
                perception=_H, strength=_L, dexterity=_H, constitution=_L,
                wisdom=_H, ac=_L, fortitude=_L, reflex=_H, hp=_L,
                attack=_H, damage=_H,
            ),
        ),
        RoadMap(
            key="soldier",
            name="Soldier",
            description="Well-trained combatants with high AC and tactical abilities.",
            stats=RoadMapStats(
                strength=_H, constitution=_H, ac=_H, fortitude=_H, hp=_H,
                attack=_H, damage=_H,
            ),
        ),
        RoadMap(
            key="spellcaster",
            name="Spellcaster",
            description="Creatures focused on magical abilities and spellcasting.",
            stats=RoadMapStats(
                strength=_L, constitution=_L, intelligence=_H, wisdom=_H,
                charisma=_H, ac=_L, fortitude=_L, will=_H, hp=_L,
                attack=_L, damage=_L,
            ),
        ),
    )
}


def get_road_map(key: str | None) -> RoadMap | None:
    """Look up a road map by key. Returns None for absent or unknown keys."""
    if not key:
        return None
    return ROAD_MAPS.get(key)
