import random

import pytest

from chasm.nn import mutate, zero_network
from chasm.storage import (
    Armor,
    GladiatorRecord,
    Weapon,
    load_armor,
    load_records,
    load_weapons,
    save_records,
)


def test_load_weapons_reads_name_and_dice(tmp_path):
    (tmp_path / "stick.txt").write_text("A Wooden Stick\n1d2\n")
    assert load_weapons(tmp_path) == [Weapon("A Wooden Stick", 1, 2)]


def test_load_weapons_sorted_by_file_name(tmp_path):
    (tmp_path / "b.txt").write_text("Second\n2d4")
    (tmp_path / "a.txt").write_text("First\n1d8")
    names = [w.name for w in load_weapons(tmp_path)]
    assert names == ["First", "Second"]


def test_load_weapons_missing_dice_keeps_default(tmp_path):
    (tmp_path / "w.txt").write_text("Bare Hands")
    assert load_weapons(tmp_path) == [Weapon("Bare Hands", 1, 1)]


def test_load_weapons_bad_dice_raises(tmp_path):
    (tmp_path / "w.txt").write_text("Club\nsix")
    with pytest.raises(ValueError):
        load_weapons(tmp_path)


def test_load_weapons_missing_directory(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_weapons(tmp_path / "nope")


def test_load_armor_reads_name_and_ac(tmp_path):
    (tmp_path / "rags.txt").write_text("Old Rags\n5\n")
    assert load_armor(tmp_path) == [Armor("Old Rags", 5)]


def test_load_armor_bad_ac_raises(tmp_path):
    (tmp_path / "a.txt").write_text("Plate\nheavy")
    with pytest.raises(ValueError):
        load_armor(tmp_path)


def test_save_writes_name_and_kill_count_first(tmp_path):
    save_records(tmp_path, [GladiatorRecord("Joe Schmo", 3)])
    lines = (tmp_path / "Joe Schmo.txt").read_text().splitlines()
    assert lines[:2] == ["Joe Schmo", "3"]
    net = zero_network()
    assert len(lines) == 2 + sum(len(row) for layer in net for row in layer)
    assert set(lines[2:]) == {"0"}


def test_records_round_trip(tmp_path):
    net = mutate(zero_network(), random.Random(11))
    net[0][0][0] = -1.0
    net[3][10][49] = 2.0
    records = [GladiatorRecord("Spartus", 4, net), GladiatorRecord("Glali", 0)]
    save_records(tmp_path, records)
    loaded = load_records(tmp_path, 10)
    assert sorted(loaded, key=lambda r: r.name) == sorted(records, key=lambda r: r.name)


def test_load_records_respects_limit(tmp_path):
    save_records(tmp_path, [GladiatorRecord(f"n{i}", i) for i in range(5)])
    loaded = load_records(tmp_path, 3)
    assert [r.name for r in loaded] == ["n0", "n1", "n2"]


def test_load_records_too_few_weights_raises(tmp_path):
    (tmp_path / "x.txt").write_text("Nerus\n1\n0.5\n0.25")
    with pytest.raises(ValueError):
        load_records(tmp_path, 5)


def test_load_records_bad_kill_count_raises(tmp_path):
    (tmp_path / "x.txt").write_text("Nerus\nmany")
    with pytest.raises(ValueError):
        load_records(tmp_path, 5)