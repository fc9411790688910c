"""Monster record and attack models for Monster Maker."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from config import ATTACK_DEFAULTS, MAX_LEVEL, MIN_LEVEL, MONSTER_DEFAULTS


class Size(str, Enum):
    """Creature size categories."""
    TINY = "tiny"
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"
    HUGE = "huge"
    GARGANTUAN = "gargantuan"


class Rarity(str, Enum):
    """Creature rarity."""
    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    UNIQUE = "unique"


class AttackType(str, Enum):
    """Whether a strike is made in melee or at range."""
    MELEE = "melee"
    RANGED = "ranged"


class DamageType(str, Enum):
    """Damage types a strike can deal."""
    BLUDGEONING = "bludgeoning"
    PIERCING = "piercing"
    SLASHING = "slashing"
    FIRE = "fire"
    COLD = "cold"
    ELECTRICITY = "electricity"
    ACID = "acid"
    POISON = "poison"
    MENTAL = "mental"
    FORCE = "force"
    POSITIVE = "positive"
    NEGATIVE = "negative"


class Attack(BaseModel):
    """A strike attached to a monster."""
    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)

    id: str | None = None           # Temporary client-side id
    name: str = ATTACK_DEFAULTS["name"]
    type: AttackType = AttackType(ATTACK_DEFAULTS["type"])
    bonus: int | None = None        # Derived from level and road map when omitted
    damage: str = ATTACK_DEFAULTS["damage"]     # Dice expression, e.g. "2d4+3"
    damage_type: DamageType = Field(
        default=DamageType(ATTACK_DEFAULTS["damageType"]), alias="damageType"
    )
    traits: list[str] = []          # e.g. ["agile", "finesse"]
    description: str = ""


class MonsterFields(BaseModel):
    """The closed set of fields a client may write. Unknown keys are dropped."""
    model_config = ConfigDict(extra="ignore", use_enum_values=True)

    name: str = ""
    level: int = Field(default=MONSTER_DEFAULTS["level"], ge=MIN_LEVEL, le=MAX_LEVEL)
    size: Size = Size(MONSTER_DEFAULTS["size"])
    rarity: Rarity = Rarity(MONSTER_DEFAULTS["rarity"])
    road_map: str | None = None     # Road map key, kept even if unrecognised

    hp: int = MONSTER_DEFAULTS["hp"]
    ac: int = MONSTER_DEFAULTS["ac"]
    perception: int = MONSTER_DEFAULTS["perception"]
    fortitude: int = MONSTER_DEFAULTS["fortitude"]
    reflex: int = MONSTER_DEFAULTS["reflex"]
    will: int = MONSTER_DEFAULTS["will"]
    strength: int = MONSTER_DEFAULTS["strength"]
    dexterity: int = MONSTER_DEFAULTS["dexterity"]
    constitution: int = MONSTER_DEFAULTS["constitution"]
    intelligence: int = MONSTER_DEFAULTS["intelligence"]
    wisdom: int = MONSTER_DEFAULTS["wisdom"]
    charisma: int = MONSTER_DEFAULTS["charisma"]
    speed: int = MONSTER_DEFAULTS["speed"]

    description: str = ""
    private_notes: str = ""
    image_url: str = ""

    skills: dict[str, Any] = {}     # skill name -> {"bonus": int} or {"value": int}
    attacks: list[Attack] = []
    items: list[Any] = []
    spells: dict[str, Any] = {}


class MonsterUpdate(BaseModel):
    """A partial write: only the fields the client actually sent are applied."""
    model_config = ConfigDict(extra="ignore", use_enum_values=True)

    name: str | None = None
    level: int | None = Field(default=None, ge=MIN_LEVEL, le=MAX_LEVEL)
    size: Size | None = None
    rarity: Rarity | None = None
    road_map: str | None = None

    hp: int | None = None
    ac: int | None = None
    perception: int | None = None
    fortitude: int | None = None
    reflex: int | None = None
    will: int | None = None
    strength: int | None = None
    dexterity: int | None = None
    constitution: int | None = None
    intelligence: int | None = None
    wisdom: int | None = None
    charisma: int | None = None
    speed: int | None = None

    description: str | None = None
    private_notes: str | None = None
    image_url: str | None = None

    skills: dict[str, Any] | None = None
    attacks: list[Attack] | None = None
    items: list[Any] | None = None
    spells: dict[str, Any] | None = None


class Monster(MonsterFields):
    """A persisted monster record."""
    id: str
    user_id: str                    # Owning user's owner_id
    created_at: datetime
    updated_at: datetime | None = None
