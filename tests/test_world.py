import itertools
import random

import pytest

from chasm.nn import zero_network
from chasm.storage import Armor, Weapon
from chasm.world import (
    NAME_FIRST,
    NAME_SECOND,
    NAME_THIRD,
    TURNS,
    World,
)

VALID_NAMES = {
    first + second + third
    for first, second, third in itertools.product(NAME_FIRST, NAME_SECOND, NAME_THIRD)
}


@pytest.fixture
def world():
    return World(random.Random(1234))


def _is_identity(table):
    return all(
        table[i][j] == (1.0 if i == j else 0.0)
        for i in range(len(table))
        for j in range(len(table[i]))
    )


def test_defaults(world):
    assert world.npc_num == 200
    assert len(world.arenas) == 14
    assert [npc.fighting for npc in world.npcs].count(True) == 28
    assert world.weapons[0] == Weapon("A Wooden Stick", 1, 2)
    assert world.armors[0] == Armor("Old Rags", 5)
    assert all(_is_identity(npc.q_table) for npc in world.npcs[:5])
    assert [npc.target for npc in world.npcs[:3]] == [0, 1, 2]


def test_reward_accumulates(world):
    world.reward(3, 1.5)
    world.reward(3, 2.0)
    assert world.npcs[3].reward == 3.5
    assert world.npcs[4].reward == 0.0


def test_update_reward_table_off_diagonal(world):
    world.update_reward_table(0, 2, 5, 4)
    assert world.npcs[0].q_table[2][4] == pytest.approx(0.25)
    assert world.npcs[0].q_table[2][2] == 1.0
    assert _is_identity(world.npcs[1].q_table)


def test_update_reward_table_uses_reward(world):
    world.update_reward_table(0, 1, 1, 3)
    without = world.npcs[0].q_table[1][3]
    other = World(random.Random(1))
    other.reward(0, 2.0)
    other.update_reward_table(0, 1, 1, 3)
    assert other.npcs[0].q_table[1][3] == pytest.approx(without + 1.0)


def _place(world, a, b, a_pos, a_dir, b_pos, b_dir):
    world.npcs[a].pos = list(a_pos)
    world.npcs[a].direction = list(a_dir)
    world.npcs[b].pos = list(b_pos)
    world.npcs[b].direction = list(b_dir)


def test_attack_hits_when_facing(world):
    _place(world, 0, 1, (5, 5), (1, 0), (6, 5), (1, 0))
    damage = world.attack(0, 1)
    assert damage is not None and 1 <= damage <= 20
    assert world.npcs[1].hp == 20 - damage
    assert world.npcs[0].maim_count == damage
    assert world.npcs[0].reward == float(damage)


def test_attack_misses_when_not_adjacent(world):
    _place(world, 0, 1, (5, 5), (1, 0), (8, 8), (1, 0))
    assert world.attack(0, 1) is None
    assert world.npcs[1].hp == 20


def test_attack_blocked_when_face_to_face(world):
    _place(world, 0, 1, (5, 5), (1, 0), (6, 5), (-1, 0))
    assert world.attack(0, 1) is None
    assert world.npcs[1].hp == 20


def test_attack_kill_copies_network(world):
    _place(world, 0, 1, (5, 5), (0, 1), (5, 6), (0, 1))
    world.npcs[0].network[0][0][0] = 0.75
    world.npcs[0].weapon_idx = 0
    world.npcs[1].hp = 1
    world.npcs[1].kill_count = 4
    world.npcs[1].owned = True
    damage = world.attack(0, 1)
    assert world.npcs[1].hp == 1 - damage
    assert world.npcs[1].network == world.npcs[0].network
    assert world.npcs[1].network is not world.npcs[0].network
    assert world.npcs[0].kill_count == 1
    assert world.npcs[1].kill_count == 0
    assert world.npcs[1].owned is False
    assert world.npcs[1].name in VALID_NAMES
    assert world.npcs[0].reward == pytest.approx(4.0 * damage)


def test_generate_new_name(world):
    assert world.npcs[0].name == "Joe Schmo"
    for n in range(20):
        world.generate_new_name(n)
        assert world.npcs[n].name in VALID_NAMES
    assert world.npcs[20].name == "Joe Schmo"


def test_find_best_npc(world):
    world.npcs[7].kill_count = 3
    world.npcs[9].kill_count = 3
    world.find_best_npc()
    assert world.kill_argmax == 7
    world.npcs[12].kill_count = 5
    world.find_best_npc()
    assert world.kill_argmax == 12


def test_get_pop_stats(world):
    world.apply_weapons([Weapon("a", 1, 2), Weapon("b", 1, 4)])
    for npc in world.npcs[:100]:
        npc.weapon_idx = 1
    world.get_pop_stats()
    assert world.weapon_usage == [0.5, 0.5]
    assert world.armor_usage == [1.0]
    assert sum(world.weapon_usage) == pytest.approx(1.0)


def test_check_new_fight_replaces_dead(world):
    old = world.arenas[0][0]
    world.npcs[old].hp = 0
    world.check_new_fight()
    first, second = world.arenas[0]
    assert first != old
    assert world.npcs[old].fighting is False
    assert world.npcs[first].fighting is True
    assert world.npcs[first].hp == 20 and world.npcs[second].hp == 20
    assert world.npcs[first].target == second
    assert world.npcs[second].target == first
    assert _is_identity(world.npcs[first].q_table)
    assert 0 <= world.npcs[first].pos[0] < world.board_dim[0]
    assert 0 <= world.npcs[first].pos[1] < world.board_dim[1]
    assert tuple(world.npcs[first].direction) == TURNS[world.npcs[first].dir_idx]
    # untouched arenas keep their fighters
    assert world.arenas[1] == [2, 3]


def test_tycoon_check_new_fight(world):
    for npc in world.npcs:
        npc.fighting = False
    world.owned_list = [3, 4]
    world.npcs[0].hp = -1
    world.tycoon_check_new_fight()
    assert world.tycoon_arena == [3, 4]
    assert world.npcs[3].target == 4 and world.npcs[4].target == 3
    assert world.npcs[3].hp == 20 and world.npcs[4].hp == 20
    assert world.npcs[0].fighting is False
    assert 0 <= world.npcs[3].pos[0] < world.tycoon_arena_dim[0]


def test_tycoon_check_no_fight_when_alive(world):
    world.owned_list = [3, 4]
    world.tycoon_check_new_fight()
    assert world.tycoon_arena == [0, 0]


def test_reset_arenas(world):
    world.arenas[0] = [100, 101]
    world.npcs[50].fighting = True
    world.reset_arenas()
    assert world.arenas[0] == [0, 1]
    assert world.npcs[50].fighting is False
    assert world.npcs[27].fighting is True
    assert all(npc.pos == [1, 1] for npc in world.npcs)


def test_apply_empty_equipment_rejected(world):
    with pytest.raises(ValueError):
        world.apply_weapons([])
    with pytest.raises(ValueError):
        world.apply_armor([])


def test_apply_armor(world):
    world.apply_armor([Armor("Plate", 15), Armor("Leather", 8)])
    assert [armor.ac for armor in world.armors] == [15, 8]


def test_save_load_round_trip(world, tmp_path):
    world.npcs[0].name = "Alpha"
    world.npcs[0].kill_count = 3
    world.npcs[0].network[1][2][3] = 0.125
    world.save(tmp_path)
    assert sorted(p.name for p in tmp_path.iterdir()) == ["Alpha.txt", "Joe Schmo.txt"]

    fresh = World(random.Random(5))
    fresh.load(tmp_path)
    assert fresh.npcs[0].name == "Alpha"
    assert fresh.npcs[0].kill_count == 3
    assert fresh.npcs[0].network == world.npcs[0].network
    assert fresh.npcs[1].name == "Joe Schmo"
    assert fresh.npcs[1].network == zero_network()