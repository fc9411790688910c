"""Road map listing and stat preview endpoints."""

from fastapi import APIRouter, Query

from config import MAX_LEVEL, MIN_LEVEL
from engine.road_maps import ROAD_MAPS
from engine.stats import calculate_attack_bonus, calculate_stats

router = APIRouter()


@router.get("/road-maps")
def list_road_maps() -> list[dict]:
    """All road map templates with their tiers."""
    return [road_map.model_dump(mode="json") for road_map in ROAD_MAPS.values()]


@router.get("/road-maps/{road_map}/stats")
def preview_stats(
    road_map: str,
    level: int = Query(1, ge=MIN_LEVEL, le=MAX_LEVEL),
) -> dict:
    """Stats a monster of this level would get from a road map.

    Unknown road maps are not an error: stats come back empty and the
    attack bonus uses the moderate default.
    """
    return {
        "road_map": road_map,
        "level": level,
        "stats": calculate_stats(level, road_map),
        "attack_bonus": calculate_attack_bonus(level, road_map),
    }
