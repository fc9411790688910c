"""Server-wide configuration constants for Monster Maker."""

import os

DATA_DIR = os.environ.get("DATA_DIR", ".")  # Persistent data directory
MONSTERS_FILE = os.path.join(DATA_DIR, "monsters.json")
TOKENS_FILE = os.path.join(DATA_DIR, "tokens.json")
ADMIN_SECRET = os.environ.get("ADMIN_SECRET", "change-me-in-production")
SECRET_FILE = os.path.join(DATA_DIR, "admin_secret.txt")
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

MIN_LEVEL = 1
MAX_LEVEL = 25

# Single source of truth for unset monster fields. Read by the record
# models, the stat deriver and the Foundry exporter.
MONSTER_DEFAULTS = {
    "level": 1,
    "size": "medium",
    "rarity": "common",
    "hp": 10,
    "ac": 15,
    "perception": 0,
    "fortitude": 0,
    "reflex": 0,
    "will": 0,
    "strength": 10,
    "dexterity": 10,
    "constitution": 10,
    "intelligence": 10,
    "wisdom": 10,
    "charisma": 10,
    "speed": 25,
}

ATTACK_DEFAULTS = {
    "name": "Attack",
    "type": "melee",
    "bonus": 0,
    "damage": "1d4",
    "damageType": "bludgeoning",
}


def load_secret() -> None:
    """Load admin secret from persistent file, if it exists."""
    global ADMIN_SECRET
    if os.path.exists(SECRET_FILE):
        with open(SECRET_FILE) as f:
            stored = f.read().strip()
        if stored:
            ADMIN_SECRET = stored


def save_secret() -> None:
    """Persist current admin secret to file (atomic write)."""
    tmp_path = SECRET_FILE + ".tmp"
    with open(tmp_path, "w") as f:
        f.write(ADMIN_SECRET)
    os.replace(tmp_path, SECRET_FILE)
