"""Stat derivation from a monster's level and road map."""

from __future__ import annotations

from typing import Any

from engine.road_maps import Tier, get_road_map

ABILITIES = ("strength", "dexterity", "constitution", "intelligence", "wisdom", "charisma")
SAVES = ("fortitude", "reflex", "will")

HP_PER_LEVEL = {Tier.LOW: 6, Tier.MODERATE: 8, Tier.HIGH: 10, Tier.EXTREME: 12}
# Shared by AC, saves and perception
TIER_MODIFIER = {Tier.LOW: -2, Tier.MODERATE: 0, Tier.HIGH: 2, Tier.EXTREME: 4}
ATTACK_BONUS_OFFSET = {Tier.LOW: 0, Tier.MODERATE: 2, Tier.HIGH: 4, Tier.EXTREME: 6}

SKIRMISHER_SPEED = 35
BASE_SPEED = 25


def _tier(value: Tier | str | None) -> Tier:
    """Coerce a tier name, falling back to moderate for anything unknown."""
    try:
        return Tier(value)
    except ValueError:
        return Tier.MODERATE


def calculate_ability_modifier(score: int) -> int:
    """Calculate ability modifier from a score.

    Args:
        score: The ability score (e.g. 16).

    Returns:
        The modifier (e.g. +3 for 16, -1 for 9).
    """
    return (score - 10) // 2


def ability_modifier_for_tier(tier: Tier | str | None, level: int) -> int:
    """Ability modifier a road map tier grants at a given level.

    Uses floor division so low tiers at levels 1-2 go negative.
    """
    base = level // 3
    return {
        Tier.LOW: base - 1,
        Tier.MODERATE: base,
        Tier.HIGH: base + 1,
        Tier.EXTREME: base + 2,
    }[_tier(tier)]


def calculate_stats(level: int, road_map: str | None) -> dict[str, int]:
    """Derive a full stat block for a level and road map.

    Args:
        level: Monster level.
        road_map: Road map key, e.g. "brute".

    Returns:
        Mapping of stat name to value. Empty when the road map is absent or
        unknown, meaning "leave the record's stats alone".
    """
    template = get_road_map(road_map)
    if template is None:
        return {}

    tiers = template.stats
    stats: dict[str, int] = {}

    for ability in ABILITIES:
        stats[ability] = 10 + 2 * ability_modifier_for_tier(getattr(tiers, ability), level)

    stats["hp"] = level * HP_PER_LEVEL[_tier(tiers.hp)]
    stats["ac"] = 10 + level + TIER_MODIFIER[_tier(tiers.ac)]
    for save in SAVES:
        stats[save] = level + TIER_MODIFIER[_tier(getattr(tiers, save))]
    stats["perception"] = level + TIER_MODIFIER[_tier(tiers.perception)]
    stats["speed"] = SKIRMISHER_SPEED if template.key == "skirmisher" else BASE_SPEED

    return stats


def calculate_attack_bonus(level: int, road_map: str | None) -> int:
    """Attack bonus for a new or recalculated strike.

    No road map means a moderate bonus; an unrecognised one falls back to
    moderate as well.
    """
    if not road_map:
        return level + ATTACK_BONUS_OFFSET[Tier.MODERATE]
    template = get_road_map(road_map)
    tier = template.stats.attack if template is not None else Tier.MODERATE
    return level + ATTACK_BONUS_OFFSET[_tier(tier)]


def recalculate_attack_bonuses(
    attacks: list[dict[str, Any]],
    level: int,
    road_map: str | None,
) -> list[dict[str, Any]]:
    """Replace the bonus of every attack with a freshly derived one.

    Args:
        attacks: Attack mappings as stored on a record.
        level: Monster level.
        road_map: Road map key.

    Returns:
        A new list; the input mappings are not mutated.
    """
    bonus = calculate_attack_bonus(level, road_map)
    return [{**attack, "bonus": bonus} for attack in attacks]


def apply_level_and_road_map(
    fields: dict[str, Any],
    level: int,
    road_map: str | None,
) -> dict[str, Any]:
    """Re-derivation pass to run whenever level or road map changes.

    Sets level and road map, merges the derived stat block, and when a road
    map is selected recomputes the bonus of every attached attack. With no
    road map only the level changes.

    Args:
        fields: Monster fields (plain mapping).
        level: The new level.
        road_map: The new road map key.

    Returns:
        A new mapping with the changes applied.
    """
    updated = {**fields, "level": level, "road_map": road_map}
    if not road_map:
        return updated
    updated.update(calculate_stats(level, road_map))
    updated["attacks"] = recalculate_attack_bonuses(
        updated.get("attacks") or [], level, road_map
    )
    return updated


def fill_missing_attack_bonuses(
    attacks: list[dict[str, Any]],
    level: int,
    road_map: str | None,
) -> list[dict[str, Any]]:
    """Give attacks without a bonus the derived one; explicit bonuses stay."""
    bonus = calculate_attack_bonus(level, road_map)
    return [
        attack if attack.get("bonus") is not None else {**attack, "bonus": bonus}
        for attack in attacks
    ]
