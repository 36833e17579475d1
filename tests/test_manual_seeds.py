import pytest

from delve.dungeon import DungeonSettings
from delve.dungeon.manual_seeds import (
    SCHEMA_VERSION,
    ManualSeedConfig,
    ValueRange,
    expand_repeats,
    validate_seed_batch,
    virtual_config,
)
from delve.dungeon.rng import RandomSource


def test_value_range_parse_and_json():
    assert ValueRange.parse(5) == ValueRange(5, 5)
    assert ValueRange.parse({"min": 9, "max": 4}) == ValueRange(4, 9)
    assert ValueRange(5, 5).to_json() == 5
    assert ValueRange(4, 9).to_json() == {"min": 4, "max": 9}
    for bad in (True, "7", {"min": 1}, {"min": "a", "max": 2}):
        with pytest.raises(ValueError):
            ValueRange.parse(bad)


def test_value_range_roll_within_bounds():
    rng = RandomSource(3)
    rolls = {ValueRange(2, 4).roll(rng) for _ in range(50)}
    assert rolls <= {2, 3, 4}
    assert ValueRange(6, 6).roll(rng) == 6


def test_batch_accepts_single_object():
    valid, errors = validate_seed_batch({"schemaVersion": SCHEMA_VERSION, "id": "solo", "width": 5})
    assert errors == []
    assert valid == [ManualSeedConfig(id="solo", width=ValueRange(5, 5))]


def test_batch_reports_each_bad_item():
    valid, errors = validate_seed_batch(
        [
            {"schemaVersion": 1, "id": "ok"},
            {"id": "no-version"},
            {"schemaVersion": 1, "side": "up", "type": "lava"},
            "nope",
        ]
    )
    assert [c.id for c in valid] == ["ok"]
    assert errors[0].startswith("manualSeedQueue item 2: missing or invalid schemaVersion")
    assert any(e.startswith("manualSeedQueue item 3: side") for e in errors)
    assert any(e.startswith("manualSeedQueue item 3: type") for e in errors)
    assert errors[-1] == "manualSeedQueue item 4: must be an object"


def test_batch_rejects_non_collection():
    assert validate_seed_batch(42) == ([], ["manualSeedQueue must be an array or object"])


def test_optional_fields_parsed():
    (cfg,), _ = validate_seed_batch(
        [{"schemaVersion": 1, "allowMirror": False, "mandatory": False, "repeat": 3, "tags": ["a", 1]}]
    )
    assert cfg.allow_mirror is False and cfg.mandatory is False
    assert cfg.repeat == 3
    assert cfg.tags == ("a", "1")


def test_expand_repeats_suffixes_ids():
    expanded = expand_repeats([ManualSeedConfig(id="boss", repeat=3), ManualSeedConfig(repeat=2)])
    assert [c.id for c in expanded] == ["boss_1", "boss_2", "boss_3", None, None]
    assert all(c.repeat == 1 for c in expanded)


def test_single_entry_keeps_id():
    assert [c.id for c in expand_repeats([ManualSeedConfig(id="boss")])] == ["boss"]


def test_to_dict_is_camel_case():
    out = ManualSeedConfig(id="x", distance=ValueRange(2, 3), allow_mirror=False).to_dict()
    assert out == {
        "schemaVersion": 1,
        "type": "room",
        "id": "x",
        "distance": {"min": 2, "max": 3},
        "allowMirror": False,
        "mandatory": True,
    }


def test_virtual_config_follows_settings():
    cfg = virtual_config(DungeonSettings())
    assert cfg.width == ValueRange(3, 8)
    assert cfg.distance == ValueRange(3, 6)
    assert cfg.mandatory is False
    assert cfg.side is None
