"""FoundryVTT pf2e schema constants.

Everything here is dictated by the receiving system's schema version. Bump
FOUNDRY_SCHEMA when targeting a newer Foundry/pf2e release.
"""

from __future__ import annotations

import copy
from typing import Any

FOUNDRY_SCHEMA = {
    "coreVersion": "13.345",
    "systemId": "pf2e",
    "systemVersion": "7.2.1",
    "migrationVersion": 0.94,
}

EXPORT_FLAG_SCOPE = "monster-maker"
PUBLICATION_TITLE = "Monster Maker"

DEFAULT_NPC_IMAGE = "systems/pf2e/icons/default-icons/npc.svg"
DEFAULT_STRIKE_IMAGE = "systems/pf2e/icons/default-icons/melee.svg"


def migration_block() -> dict[str, Any]:
    """The `_migration` marker carried by actors and items."""
    return {"version": FOUNDRY_SCHEMA["migrationVersion"], "previous": None}


def stats_block(**extra: Any) -> dict[str, Any]:
    """The `_stats` document metadata, with optional timestamps merged in."""
    return {
        "coreVersion": FOUNDRY_SCHEMA["coreVersion"],
        "systemId": FOUNDRY_SCHEMA["systemId"],
        "systemVersion": FOUNDRY_SCHEMA["systemVersion"],
        **extra,
        "lastModifiedBy": None,
    }


_PROTOTYPE_TOKEN: dict[str, Any] = {
    "displayName": 0,
    "actorLink": False,
    "width": 1,
    "height": 1,
    "texture": {
        "anchorX": 0.5,
        "anchorY": 0.5,
        "offsetX": 0,
        "offsetY": 0,
        "fit": "contain",
        "scaleX": 1,
        "scaleY": 1,
        "rotation": 0,
        "tint": "#ffffff",
        "alphaThreshold": 0.75,
    },
    "lockRotation": False,
    "rotation": 0,
    "alpha": 1,
    "disposition": -1,
    "displayBars": 0,
    "bar1": {"attribute": "attributes.hp"},
    "bar2": {"attribute": None},
    "light": {
        "negative": False,
        "priority": 0,
        "alpha": 0.5,
        "angle": 360,
        "bright": 0,
        "color": None,
        "coloration": 1,
        "dim": 0,
        "attenuation": 0.5,
        "luminosity": 0.5,
        "saturation": 0,
        "contrast": 0,
        "shadows": 0,
        "animation": {"type": None, "speed": 5, "intensity": 5, "reverse": False},
        "darkness": {"min": 0, "max": 1},
    },
    "sight": {
        "enabled": False,
        "range": 0,
        "angle": 360,
        "visionMode": "basic",
        "color": None,
        "attenuation": 0.1,
        "brightness": 0,
        "saturation": 0,
        "contrast": 0,
    },
    "detectionModes": [],
    "occludable": {"radius": 0},
    "ring": {
        "enabled": False,
        "colors": {"ring": None, "background": None},
        "effects": 1,
        "subject": {"scale": 1, "texture": None},
    },
    "turnMarker": {"mode": 1, "animation": None, "src": None, "disposition": False},
    "movementAction": None,
    "flags": {"pf2e": {"linkToActorSize": True, "autoscale": True}},
    "randomImg": False,
    "appendNumber": False,
    "prependAdjective": False,
}


def prototype_token(name: str, image: str) -> dict[str, Any]:
    """Build the token sub-document for an actor.

    Args:
        name: Actor name shown on the token.
        image: Texture source path or URL.

    Returns:
        A fresh dict; callers may mutate it freely.
    """
    token = copy.deepcopy(_PROTOTYPE_TOKEN)
    token["texture"] = {"src": image, **token["texture"]}
    return {"name": name, **token}
