"""Tests for the JSON-file monster store."""

import json
from concurrent.futures import ThreadPoolExecutor

import pytest
from pydantic import ValidationError

from engine.store import MonsterNotFoundError, MonsterStore


@pytest.fixture
def store(tmp_path):
    return MonsterStore(str(tmp_path / "monsters.json"))


class TestCreate:

    def test_defaults_filled(self, store):
        monster = store.create("alice", {"name": "Goblin"})
        assert monster.user_id == "alice"
        assert monster.hp == 10
        assert monster.ac == 15
        assert monster.strength == 10
        assert monster.speed == 25
        assert monster.perception == 0
        assert monster.size == "medium"
        assert monster.rarity == "common"
        assert monster.road_map is None
        assert monster.updated_at is None

    def test_unknown_fields_dropped(self, store):
        monster = store.create("alice", {"name": "Goblin", "is_admin": True, "user_id": "mallory"})
        assert monster.user_id == "alice"
        assert not hasattr(monster, "is_admin")

    def test_unknown_road_map_kept(self, store):
        assert store.create("alice", {"road_map": "homebrew"}).road_map == "homebrew"

    def test_level_out_of_range(self, store):
        with pytest.raises(ValidationError):
            store.create("alice", {"level": 26})


class TestOwnership:

    def test_get_foreign_monster(self, store):
        monster = store.create("alice", {"name": "Goblin"})
        with pytest.raises(MonsterNotFoundError):
            store.get(monster.id, "bob")

    def test_list_scoped_and_newest_first(self, store):
        first = store.create("alice", {"name": "First"})
        second = store.create("alice", {"name": "Second"})
        store.create("bob", {"name": "Other"})
        assert [m.id for m in store.list("alice")] == [second.id, first.id]
        assert store.list("carol") == []

    def test_delete_foreign_monster(self, store):
        monster = store.create("alice", {"name": "Goblin"})
        with pytest.raises(MonsterNotFoundError):
            store.delete(monster.id, "bob")
        assert store.get(monster.id, "alice").name == "Goblin"


class TestUpdate:

    def test_partial_update(self, store):
        monster = store.create("alice", {"name": "Goblin", "hp": 12})
        updated = store.update(monster.id, "alice", {"ac": 18})
        assert updated.hp == 12
        assert updated.ac == 18
        assert updated.created_at == monster.created_at
        assert updated.updated_at is not None

    def test_identity_fields_not_writable(self, store):
        monster = store.create("alice", {"name": "Goblin"})
        updated = store.update(monster.id, "alice", {"id": "x", "user_id": "bob"})
        assert updated.id == monster.id
        assert updated.user_id == "alice"

    def test_missing(self, store):
        with pytest.raises(MonsterNotFoundError):
            store.update("nope", "alice", {"hp": 1})


class TestPersistence:

    def test_reload_round_trip(self, tmp_path):
        path = str(tmp_path / "monsters.json")
        store = MonsterStore(path)
        monster = store.create("alice", {
            "name": "Goblin",
            "attacks": [{"name": "Dagger", "damageType": "piercing", "traits": ["agile"]}],
        })

        reloaded = MonsterStore(path)
        loaded = reloaded.get(monster.id, "alice")
        assert loaded == monster
        assert loaded.attacks[0].damage_type == "piercing"

    def test_attacks_saved_with_camel_case_damage_type(self, tmp_path):
        path = tmp_path / "monsters.json"
        store = MonsterStore(str(path))
        monster = store.create("alice", {"attacks": [{"name": "Bite", "damageType": "acid"}]})
        data = json.loads(path.read_text())
        assert data[monster.id]["attacks"][0]["damageType"] == "acid"

    def test_delete_persists(self, tmp_path):
        path = str(tmp_path / "monsters.json")
        store = MonsterStore(path)
        monster = store.create("alice", {"name": "Goblin"})
        store.delete(monster.id, "alice")
        assert MonsterStore(path).list("alice") == []


class TestAttackBonus:

    def test_missing_bonus_derived_on_create(self, store):
        monster = store.create("alice", {
            "level": 5,
            "road_map": "brute",
            "attacks": [{"name": "Club", "damage": "1d10"}, {"name": "Rock", "bonus": 2}],
        })
        assert [a.bonus for a in monster.attacks] == [9, 2]

    def test_missing_bonus_derived_on_update(self, store):
        monster = store.create("alice", {"level": 3, "road_map": "spellcaster"})
        updated = store.update(monster.id, "alice", {"attacks": [{"name": "Staff"}]})
        assert updated.attacks[0].bonus == 3


class TestConcurrentWrites:

    def test_parallel_creates_all_persist(self, tmp_path):
        path = str(tmp_path / "monsters.json")
        store = MonsterStore(path)

        def create_many(worker: int) -> list[str]:
            return [store.create("alice", {"name": f"M{worker}-{i}"}).id for i in range(40)]

        with ThreadPoolExecutor(max_workers=8) as pool:
            ids = [i for batch in pool.map(create_many, range(8)) for i in batch]

        assert len(ids) == 320
        assert len(MonsterStore(path).list("alice")) == 320
        assert list(tmp_path.glob("*.tmp")) == []

    def test_parallel_updates_last_write_wins(self, tmp_path):
        path = str(tmp_path / "monsters.json")
        store = MonsterStore(path)
        monster = store.create("alice", {"name": "Goblin"})

        def bump(hp: int) -> None:
            store.update(monster.id, "alice", {"hp": hp})

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(bump, range(1, 81)))

        on_disk = MonsterStore(path).get(monster.id, "alice")
        assert on_disk.hp == store.get(monster.id, "alice").hp
        assert 1 <= on_disk.hp <= 80
