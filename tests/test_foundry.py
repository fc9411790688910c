"""Tests for the FoundryVTT pf2e exporter."""

import json
import re
from datetime import datetime, timedelta, timezone

import pytest

from engine.foundry import (
    convert_attack,
    convert_attacks,
    convert_skills,
    export_filename,
    export_monster,
    generate_foundry_id,
)
from engine.foundry_schema import FOUNDRY_SCHEMA

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


def _record(**overrides) -> dict:
    record = {
        "name": "Cave Ogre",
        "level": 3,
        "size": "large",
        "rarity": "uncommon",
        "road_map": "brute",
        "hp": 30,
        "ac": 16,
        "perception": 1,
        "fortitude": 7,
        "reflex": 1,
        "will": 1,
        "strength": 14,
        "dexterity": 9,
        "constitution": 14,
        "intelligence": 8,
        "wisdom": 8,
        "charisma": 8,
        "speed": 25,
        "description": "Smells of wet rock.",
        "private_notes": "Hates torches.",
        "image_url": "https://example.com/ogre.png",
        "skills": {"Athletics": {"bonus": 9}},
        "attacks": [
            {
                "name": "Club",
                "type": "melee",
                "bonus": 11,
                "damage": "1d10+6",
                "damageType": "bludgeoning",
                "traits": ["reach 10"],
                "description": "",
            },
            {
                "name": "Rock",
                "type": "ranged",
                "bonus": 9,
                "damage": "1d8+4",
                "damageType": "bludgeoning",
                "traits": [],
            },
        ],
    }
    record.update(overrides)
    return record


class TestGenerateFoundryId:

    def test_shape(self):
        assert re.fullmatch(r"[0-9a-z]{16}", generate_foundry_id())

    def test_distinct(self):
        assert len({generate_foundry_id() for _ in range(200)}) == 200


class TestConvertAttack:

    def test_strike_item(self):
        item = convert_attack(_record()["attacks"][0], 0)
        assert item["name"] == "Club"
        assert item["type"] == "melee"
        assert item["sort"] == 100000
        assert item["system"]["bonus"] == {"value": 11}
        assert item["system"]["traits"] == {"value": ["reach 10"], "otherTags": []}
        assert item["_stats"]["systemId"] == "pf2e"
        assert item["system"]["_migration"]["version"] == FOUNDRY_SCHEMA["migrationVersion"]

    def test_single_damage_roll(self):
        item = convert_attack(_record()["attacks"][0], 0)
        rolls = item["system"]["damageRolls"]
        assert len(rolls) == 1
        roll_id, roll = next(iter(rolls.items()))
        assert re.fullmatch(r"[0-9a-z]{16}", roll_id)
        assert roll_id != item["_id"]
        assert roll == {"damage": "1d10+6", "damageType": "bludgeoning", "category": None}

    def test_sort_keys_follow_index(self):
        items = convert_attacks(_record()["attacks"])
        assert [i["sort"] for i in items] == [100000, 200000]
        assert items[1]["type"] == "ranged"

    def test_defaults_for_empty_attack(self):
        item = convert_attack({}, 2)
        roll = next(iter(item["system"]["damageRolls"].values()))
        assert item["name"] == "Attack"
        assert item["type"] == "melee"
        assert item["sort"] == 300000
        assert item["system"]["bonus"]["value"] == 0
        assert roll["damage"] == "1d4"
        assert roll["damageType"] == "bludgeoning"
        assert item["system"]["traits"]["value"] == []

    def test_negative_bonus_kept(self):
        assert convert_attack({"bonus": -1}, 0)["system"]["bonus"]["value"] == -1

    @pytest.mark.parametrize("attacks", [None, {}, "claw"])
    def test_non_list_attacks(self, attacks):
        assert convert_attacks(attacks) == []


class TestConvertSkills:

    def test_bonus(self):
        assert convert_skills({"acrobatics": {"bonus": 7}}) == {"acrobatics": {"base": 7}}

    def test_lowercases_and_falls_back_to_value(self):
        assert convert_skills({"Stealth": {"value": 4}, "Lore": {}}) == {
            "stealth": {"base": 4},
            "lore": {"base": 0},
        }

    def test_bonus_wins_over_value(self):
        assert convert_skills({"arcana": {"bonus": 3, "value": 9}}) == {"arcana": {"base": 3}}

    @pytest.mark.parametrize("skills", [None, [], "athletics", 5])
    def test_non_mapping(self, skills):
        assert convert_skills(skills) == {}


class TestExportMonster:

    def test_top_level(self):
        doc = export_monster(_record(), now=NOW)
        assert doc["type"] == "npc"
        assert doc["name"] == "Cave Ogre"
        assert doc["img"] == "https://example.com/ogre.png"
        assert doc["folder"] is None
        assert len(doc["items"]) == 2

    def test_system_block(self):
        system = export_monster(_record(), now=NOW)["system"]
        assert system["attributes"]["hp"] == {"value": 30, "temp": 0, "max": 30, "details": ""}
        assert system["attributes"]["speed"]["value"] == 25
        assert system["attributes"]["ac"]["value"] == 16
        assert system["details"]["level"]["value"] == 3
        assert system["details"]["publicNotes"] == "Smells of wet rock."
        assert system["details"]["privateNotes"] == "Hates torches."
        assert system["perception"]["mod"] == 1
        assert system["saves"]["fortitude"]["value"] == 7
        assert system["skills"] == {"athletics": {"base": 9}}
        assert system["traits"]["rarity"] == "uncommon"
        assert system["traits"]["size"] == {"value": "large"}

    @pytest.mark.parametrize(
        "strength, mod", [(1, -5), (9, -1), (10, 0), (11, 0), (30, 10)]
    )
    def test_ability_mods_floor(self, strength, mod):
        doc = export_monster(_record(strength=strength), now=NOW)
        assert doc["system"]["abilities"]["str"]["mod"] == mod

    def test_metadata(self):
        doc = export_monster(_record(), now=NOW)
        assert doc["_stats"]["createdTime"] == int(NOW.timestamp() * 1000)
        assert doc["_stats"]["coreVersion"] == FOUNDRY_SCHEMA["coreVersion"]
        flags = doc["flags"]["monster-maker"]
        assert flags == {"exported": True, "exportDate": "2026-10-18T12:00:00.000Z", "roadMap": "brute"}

    def test_road_map_passes_through_verbatim(self):
        doc = export_monster(_record(road_map="homebrewHorror"), now=NOW)
        assert doc["flags"]["monster-maker"]["roadMap"] == "homebrewHorror"

    def test_prototype_token(self):
        token = export_monster(_record(), now=NOW)["prototypeToken"]
        assert token["name"] == "Cave Ogre"
        assert token["texture"]["src"] == "https://example.com/ogre.png"
        assert token["bar1"] == {"attribute": "attributes.hp"}
        assert token["flags"]["pf2e"]["autoscale"] is True

    def test_prototype_token_not_shared(self):
        first = export_monster(_record(), now=NOW)
        first["prototypeToken"]["texture"]["tint"] = "#000000"
        second = export_monster(_record(), now=NOW)
        assert second["prototypeToken"]["texture"]["tint"] == "#ffffff"

    def test_empty_record_uses_defaults(self):
        doc = export_monster({}, now=NOW)
        system = doc["system"]
        assert doc["img"] == "systems/pf2e/icons/default-icons/npc.svg"
        assert doc["items"] == []
        assert system["attributes"]["hp"]["max"] == 10
        assert system["attributes"]["ac"]["value"] == 15
        assert system["attributes"]["speed"]["value"] == 25
        assert system["details"]["level"]["value"] == 1
        assert all(a["mod"] == 0 for a in system["abilities"].values())
        assert system["traits"]["size"]["value"] == "medium"
        assert system["traits"]["rarity"] == "common"
        assert system["skills"] == {}
        assert doc["flags"]["monster-maker"]["roadMap"] is None

    def test_repeat_exports_differ_only_in_ids(self):
        first = export_monster(_record(), now=NOW)
        second = export_monster(_record(), now=NOW)
        for a, b in zip(first["items"], second["items"]):
            assert a["_id"] != b["_id"]
            assert a["system"]["damageRolls"].keys() != b["system"]["damageRolls"].keys()
            a["_id"] = b["_id"] = None
            a["system"]["damageRolls"] = list(a["system"]["damageRolls"].values())
            b["system"]["damageRolls"] = list(b["system"]["damageRolls"].values())
        assert first == second

    def test_serialisable(self):
        json.dumps(export_monster(_record()))


class TestExportFilename:

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("Cave Ogre", "cave_ogre.json"),
            ("Dread-Wraith (Elite)!", "dread_wraith__elite__.json"),
            ("Übermensch", "_bermensch.json"),
            ("", ".json"),
        ],
    )
    def test_sanitised(self, name, expected):
        assert export_filename(name) == expected


class TestExportEdgeCases:

    def test_export_date_matches_js_iso_string(self):
        moment = datetime(2026, 10, 18, 14, 30, 5, 123456,
                          tzinfo=timezone(timedelta(hours=2)))
        doc = export_monster(_record(), now=moment)
        assert doc["flags"]["monster-maker"]["exportDate"] == "2026-10-18T12:30:05.123Z"

    def test_non_mapping_attacks_skipped(self):
        attacks = [None, _record()["attacks"][0], "bite", 3]
        items = convert_attacks(attacks)
        assert [item["name"] for item in items] == ["Club"]
        assert items[0]["sort"] == 100000

    def test_export_with_junk_attack_entries(self):
        doc = export_monster(_record(attacks=[None, {"name": "Bite"}]), now=NOW)
        assert [item["name"] for item in doc["items"]] == ["Bite"]
