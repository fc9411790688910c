"""Export monster records as FoundryVTT pf2e npc actor documents."""

from __future__ import annotations

import re
import secrets
import string
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from config import ATTACK_DEFAULTS, MONSTER_DEFAULTS
from engine.foundry_schema import (
    DEFAULT_NPC_IMAGE,
    DEFAULT_STRIKE_IMAGE,
    EXPORT_FLAG_SCOPE,
    PUBLICATION_TITLE,
    migration_block,
    prototype_token,
    stats_block,
)
from engine.stats import calculate_ability_modifier

FOUNDRY_ID_ALPHABET = string.ascii_lowercase + string.digits
FOUNDRY_ID_LENGTH = 16
SORT_STEP = 100000

ABILITY_KEYS = {
    "str": "strength",
    "dex": "dexterity",
    "con": "constitution",
    "int": "intelligence",
    "wis": "wisdom",
    "cha": "charisma",
}


def _field(record: Mapping[str, Any], key: str, default: Any) -> Any:
    """Read a record field, treating a missing key and None alike."""
    value = record.get(key)
    return default if value is None else value


def generate_foundry_id() -> str:
    """Generate a random 16-character lowercase alphanumeric document id."""
    return "".join(secrets.choice(FOUNDRY_ID_ALPHABET) for _ in range(FOUNDRY_ID_LENGTH))


def convert_attack(attack: Mapping[str, Any], index: int) -> dict[str, Any]:
    """Convert one stored attack into a strike item.

    Args:
        attack: Attack mapping as stored on the record.
        index: Position in the attack list, used for the sort key.

    Returns:
        The strike item document.
    """
    damage_roll = {
        "damage": _field(attack, "damage", ATTACK_DEFAULTS["damage"]),
        "damageType": _field(attack, "damageType", ATTACK_DEFAULTS["damageType"]),
        "category": None,
    }
    return {
        "_id": generate_foundry_id(),
        "img": DEFAULT_STRIKE_IMAGE,
        "name": attack.get("name") or ATTACK_DEFAULTS["name"],
        "sort": (index + 1) * SORT_STEP,
        "system": {
            "attackEffects": {"value": []},
            "bonus": {"value": _field(attack, "bonus", ATTACK_DEFAULTS["bonus"])},
            "damageRolls": {generate_foundry_id(): damage_roll},
            "description": {"value": attack.get("description") or "", "gm": ""},
            "publication": {
                "license": "OGL",
                "remaster": False,
                "title": "",
                "authors": "",
            },
            "rules": [],
            "slug": None,
            "traits": {"value": list(attack.get("traits") or []), "otherTags": []},
            "_migration": migration_block(),
        },
        "type": _field(attack, "type", ATTACK_DEFAULTS["type"]),
        "_stats": stats_block(),
        "effects": [],
        "folder": None,
        "flags": {},
    }


def convert_attacks(attacks: Any) -> list[dict[str, Any]]:
    """Convert an attack list into strike items.

    Non-lists yield []; entries that aren't mappings are skipped.
    """
    if not isinstance(attacks, list):
        return []
    valid = [attack for attack in attacks if isinstance(attack, Mapping)]
    return [convert_attack(attack, index) for index, attack in enumerate(valid)]


def convert_skills(skills: Any) -> dict[str, dict[str, int]]:
    """Normalise a skill map to `{lowercased_name: {"base": value}}`.

    Each entry's `bonus` wins over its `value`; either missing means 0.
    Anything that isn't a mapping yields an empty dict.
    """
    if not isinstance(skills, Mapping):
        return {}

    converted: dict[str, dict[str, int]] = {}
    for skill_name, skill_data in skills.items():
        if not isinstance(skill_data, Mapping):
            skill_data = {}
        base = skill_data.get("bonus")
        if base is None:
            base = skill_data.get("value")
        converted[str(skill_name).lower()] = {"base": base if base is not None else 0}
    return converted


def _ability_block(record: Mapping[str, Any]) -> dict[str, dict[str, int]]:
    return {
        short: {"mod": calculate_ability_modifier(_field(record, full, MONSTER_DEFAULTS[full]))}
        for short, full in ABILITY_KEYS.items()
    }


def export_monster(
    record: Mapping[str, Any],
    now: datetime | None = None,
) -> dict[str, Any]:
    """Build the full npc actor document for a monster record.

    Missing fields fall back to MONSTER_DEFAULTS; this never raises on an
    incomplete record.

    Args:
        record: Monster record as a plain mapping.
        now: Export time, defaults to the current UTC time.

    Returns:
        The actor document, ready for json serialisation.
    """
    now = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    timestamp_ms = int(now.timestamp() * 1000)

    name = record.get("name") or ""
    image = record.get("image_url") or DEFAULT_NPC_IMAGE
    hp = _field(record, "hp", MONSTER_DEFAULTS["hp"])

    system = {
        "attributes": {
            "hp": {"value": hp, "temp": 0, "max": hp, "details": ""},
            "speed": {
                "value": _field(record, "speed", MONSTER_DEFAULTS["speed"]),
                "otherSpeeds": [],
                "details": "",
            },
            "ac": {"value": _field(record, "ac", MONSTER_DEFAULTS["ac"]), "details": ""},
            "allSaves": {"value": ""},
        },
        "initiative": {"statistic": "perception"},
        "details": {
            "languages": {"value": [], "details": ""},
            "level": {"value": _field(record, "level", MONSTER_DEFAULTS["level"])},
            "blurb": "",
            "publicNotes": record.get("description") or "",
            "privateNotes": record.get("private_notes") or "",
            "publication": {
                "title": PUBLICATION_TITLE,
                "authors": "",
                "license": "OGL",
                "remaster": False,
            },
        },
        "resources": {},
        "_migration": migration_block(),
        "abilities": _ability_block(record),
        "perception": {
            "details": "",
            "mod": _field(record, "perception", MONSTER_DEFAULTS["perception"]),
            "senses": [],
            "vision": True,
        },
        "saves": {
            save: {
                "value": _field(record, save, MONSTER_DEFAULTS[save]),
                "saveDetail": "",
            }
            for save in ("fortitude", "reflex", "will")
        },
        "skills": convert_skills(record.get("skills")),
        "traits": {
            "value": [],
            "rarity": _field(record, "rarity", MONSTER_DEFAULTS["rarity"]),
            "size": {"value": _field(record, "size", MONSTER_DEFAULTS["size"])},
        },
    }

    return {
        "folder": None,
        "img": image,
        "items": convert_attacks(record.get("attacks")),
        "name": name,
        "system": system,
        "type": "npc",
        "_stats": stats_block(createdTime=timestamp_ms, modifiedTime=timestamp_ms),
        "effects": [],
        "prototypeToken": prototype_token(name, image),
        "flags": {
            EXPORT_FLAG_SCOPE: {
                "exported": True,
                "exportDate": now.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
                "roadMap": record.get("road_map") or None,
            }
        },
    }


def export_filename(name: str | None) -> str:
    """Download filename for an export: non-alphanumerics become '_'."""
    return re.sub(r"[^a-z0-9]", "_", (name or ""), flags=re.IGNORECASE | re.ASCII).lower() + ".json"
