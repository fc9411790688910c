"""JSON-file record store for monsters, keyed by id and owner."""

from __future__ import annotations

import json
import os
import tempfile
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any
from uuid import uuid4

from engine.stats import fill_missing_attack_bonuses
from logging_util import setup_logger
from models.monster import Monster, MonsterFields

logger = setup_logger(__name__)


class MonsterNotFoundError(LookupError):
    """No monster with this id belongs to the requesting owner."""

    def __init__(self, monster_id: str):
        super().__init__(f"Monster '{monster_id}' not found")
        self.monster_id = monster_id


def _validated_fields(fields: dict[str, Any]) -> dict[str, Any]:
    """Validate writable fields and derive any missing attack bonus."""
    values = MonsterFields.model_validate(fields).model_dump(by_alias=True)
    values["attacks"] = fill_missing_attack_bonuses(
        values["attacks"], values["level"], values["road_map"]
    )
    return values


class MonsterStore:
    """Owner-scoped CRUD over monster records persisted to one JSON file.

    Writes are serialised; concurrent updates to one record are
    last-write-wins, there is no version token.
    """

    def __init__(self, path: str):
        self.path = path
        self._monsters: dict[str, Monster] = {}
        self._lock = threading.Lock()
        self.load()

    def load(self) -> None:
        """(Re)load all records from disk. A missing file means an empty store."""
        self._monsters.clear()
        if not Path(self.path).exists():
            return
        with open(self.path) as f:
            data = json.load(f)
        for monster_id, raw in data.items():
            self._monsters[monster_id] = Monster.model_validate(raw)
        logger.info("Loaded %d monsters from %s", len(self._monsters), self.path)

    def save(self) -> None:
        """Persist all records (atomic write through a unique temp file)."""
        data = {
            monster_id: monster.model_dump(mode="json", by_alias=True)
            for monster_id, monster in self._monsters.items()
        }
        directory = os.path.dirname(os.path.abspath(self.path))
        with tempfile.NamedTemporaryFile(
            "w", dir=directory, suffix=".tmp", delete=False
        ) as f:
            json.dump(data, f, indent=2)
        os.replace(f.name, self.path)

    def get(self, monster_id: str, owner_id: str) -> Monster:
        """Fetch one monster.

        Raises:
            MonsterNotFoundError: If the id is unknown or owned by someone else.
        """
        monster = self._monsters.get(monster_id)
        if monster is None or monster.user_id != owner_id:
            raise MonsterNotFoundError(monster_id)
        return monster

    def list(self, owner_id: str) -> list[Monster]:
        """All monsters belonging to an owner, newest first."""
        owned = [m for m in list(self._monsters.values()) if m.user_id == owner_id]
        return sorted(owned, key=lambda m: m.created_at, reverse=True)

    def create(self, owner_id: str, fields: MonsterFields | dict[str, Any]) -> Monster:
        """Create and persist a new monster.

        Attacks sent without a bonus get one derived from level and road map.

        Args:
            owner_id: The creating user.
            fields: Writable monster fields; unknown keys are dropped.

        Returns:
            The stored record with id and timestamps assigned.
        """
        if isinstance(fields, MonsterFields):
            fields = fields.model_dump(by_alias=True)
        monster = Monster(
            **_validated_fields(fields),
            id=str(uuid4()),
            user_id=owner_id,
            created_at=datetime.now(timezone.utc),
        )
        with self._lock:
            self._monsters[monster.id] = monster
            self.save()
        logger.info("Created monster %s (%s) for %s", monster.id, monster.name, owner_id)
        return monster

    def update(self, monster_id: str, owner_id: str, changes: dict[str, Any]) -> Monster:
        """Apply a partial update to an owned monster.

        Only keys in the writable field set are applied.

        Raises:
            MonsterNotFoundError: If the id is unknown or owned by someone else.
        """
        allowed = {k: v for k, v in changes.items() if k in MonsterFields.model_fields}
        with self._lock:
            current = self.get(monster_id, owner_id)
            merged = {**current.model_dump(by_alias=True), **allowed}
            monster = Monster(
                **_validated_fields(merged),
                id=current.id,
                user_id=current.user_id,
                created_at=current.created_at,
                updated_at=datetime.now(timezone.utc),
            )
            self._monsters[monster_id] = monster
            self.save()
        logger.info("Updated monster %s for %s", monster_id, owner_id)
        return monster

    def delete(self, monster_id: str, owner_id: str) -> None:
        """Delete an owned monster.

        Raises:
            MonsterNotFoundError: If the id is unknown or owned by someone else.
        """
        with self._lock:
            self.get(monster_id, owner_id)
            del self._monsters[monster_id]
            self.save()
        logger.info("Deleted monster %s for %s", monster_id, owner_id)
