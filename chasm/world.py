"""The population of gladiators, their arenas and the rules of combat."""

from __future__ import annotations

import copy
import random
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from chasm.nn import INPUT_SIZE, OUTPUT_SIZE, Matrix, Network, mutate, zero_network
from chasm.storage import Armor, GladiatorRecord, Weapon, load_records, save_records

NPC_COUNT = 200
ARENA_COUNT = 14
BOARD_DIM = (12, 12)
TYCOON_ARENA_DIM = (20, 20)
START_HP = 20
START_MAX_HP = 10
LEARNING_RATE = 0.5
DISCOUNT = 0.5
KILL_REWARD_FACTOR = 3.0

# Unit steps for the eight facing directions, in counter-clockwise order.
TURNS: tuple[tuple[int, int], ...] = (
    (1, 0),
    (1, 1),
    (0, 1),
    (-1, 1),
    (-1, 0),
    (-1, -1),
    (0, -1),
    (1, -1),
)

NAME_FIRST = ("Spa", "Gla", "Ne", "Cea", "Jo")
NAME_SECOND = ("tic", "li", "r", "om", "s", "hn")
NAME_THIRD = ("us", "a", "ar", "")

DEFAULT_WEAPON = Weapon("A Wooden Stick", 1, 2)
DEFAULT_ARMOR = Armor("Old Rags", 5)


def _default_arenas() -> list[list[int]]:
    return [
        [0, 1], [2, 3], [4, 5], [6, 7], [7, 8],
        [9, 10], [11, 12], [13, 14], [15, 16], [17, 18],
        [19, 20], [21, 22], [23, 24], [25, 26],
    ]


def _identity_q() -> Matrix:
    return [[1.0 if i == j else 0.0 for j in range(OUTPUT_SIZE)] for i in range(OUTPUT_SIZE)]


@dataclass
class _Gladiator:
    """State of one fighter."""

    target: int
    name: str = "Joe Schmo"
    pos: list[int] = field(default_factory=lambda: [2, 2])
    direction: list[int] = field(default_factory=lambda: [1, 0])
    dir_idx: int = 0
    hp: int = START_HP
    max_hp: int = START_MAX_HP
    max_acc: int = 2
    speed: list[int] = field(default_factory=lambda: [0] * len(TURNS))
    network: Network = field(default_factory=zero_network)
    q_table: Matrix = field(default_factory=_identity_q)
    reward: float = 0.0
    kill_count: int = 0
    maim_count: int = 0
    ticks_alive: int = 0
    weapon_idx: int = 0
    armor_idx: int = 0
    fighting: bool = False
    owned: bool = False
    price: int = 0
    old_output: list[float] = field(default_factory=lambda: [0.0] * INPUT_SIZE)

    def face(self, dir_idx: int) -> None:
        self.dir_idx = dir_idx
        self.direction = list(TURNS[dir_idx])


class World:
    """All gladiators, the arenas they fight in and the tycoon economy."""

    def __init__(self, rng: random.Random | None = None) -> None:
        self.rng = rng if rng is not None else random.Random()
        self.npcs = [_Gladiator(target=n) for n in range(NPC_COUNT)]
        self.arena_num = ARENA_COUNT
        self.arenas = _default_arenas()
        for npc in self.npcs[: 2 * self.arena_num]:
            npc.fighting = True
        self.board_dim = list(BOARD_DIM)
        self.board_pop = [[0.0] * self.board_dim[1] for _ in range(self.board_dim[0])]
        self.weapons: list[Weapon] = [copy.copy(DEFAULT_WEAPON)]
        self.armors: list[Armor] = [copy.copy(DEFAULT_ARMOR)]
        self.weapon_usage: list[float] = [0.0] * len(self.weapons)
        self.armor_usage: list[float] = [0.0] * len(self.armors)
        self.kill_argmax = 0
        # Tycoon economy.
        self.pop_cap = 1000
        self.population = 0
        self.gold = 1000
        self.ticket_price = 1
        self.tycoon_arena_dim = list(TYCOON_ARENA_DIM)
        self.tycoon_arena = [0, 0]
        self.owned_list: list[int] = []
        self.kill_sort: list[int] = [0] * NPC_COUNT

    @property
    def npc_num(self) -> int:
        return len(self.npcs)

    # ------------------------------------------------------------------ learning
    def reward(self, n: int, c: float) -> None:
        """Add ``c`` to gladiator ``n``'s reward for this tick."""
        self.npcs[n].reward += c

    def update_reward_table(
        self, n: int, state_init_idx: int, state_next_idx: int, action_idx: int
    ) -> None:
        """One Q-learning update of gladiator ``n``'s table."""
        row = self.npcs[n].q_table[state_init_idx]
        best = row[0]
        for value in row[1:]:
            if abs(value) >= abs(best):
                best = value
        row[action_idx] = (1.0 - LEARNING_RATE) * row[action_idx] + LEARNING_RATE * (
            self.npcs[n].reward + DISCOUNT * best
        )

    # ------------------------------------------------------------------ combat
    def attack(self, attacker: int, defender: int) -> int | None:
        """Strike ``defender`` if ``attacker`` faces it from behind or the side.

        Returns the damage dealt, or None when no blow was struck.
        """
        hitter = self.npcs[attacker]
        target = self.npcs[defender]
        facing = (
            hitter.pos[0] + hitter.direction[0] == target.pos[0]
            and hitter.pos[1] + hitter.direction[1] == target.pos[1]
        )
        faced_back = (
            target.pos[0] + target.direction[0] == hitter.pos[0]
            and target.pos[1] + target.direction[1] == hitter.pos[1]
        )
        if not facing or faced_back:
            return None

        weapon = self.weapons[hitter.weapon_idx]
        roll = self.rng.randrange(1, 20)
        if roll > self.armors[target.armor_idx].ac:
            for _ in range(weapon.dice):
                roll += self.rng.randrange(1, weapon.sides)

        hitter.maim_count += roll
        self.reward(attacker, float(roll))
        target.hp -= roll
        if target.hp <= 0:
            self.reward(attacker, KILL_REWARD_FACTOR * roll)
            target.network = copy.deepcopy(hitter.network)
            hitter.kill_count += 1
            target.max_hp = hitter.max_hp
            target.weapon_idx = hitter.weapon_idx
            target.kill_count = 0
            target.maim_count = 0
            target.owned = False
            self.generate_new_name(defender)
        return roll

    def generate_new_name(self, target_idx: int) -> None:
        """Give gladiator ``target_idx`` a freshly composed name."""
        self.npcs[target_idx].name = (
            self.rng.choice(NAME_FIRST)
            + self.rng.choice(NAME_SECOND)
            + self.rng.choice(NAME_THIRD)
        )

    # ------------------------------------------------------------------ statistics
    def find_best_npc(self) -> None:
        """Remember the gladiator with the most kills."""
        best = self.kill_argmax
        for n, npc in enumerate(self.npcs):
            if npc.kill_count > self.npcs[best].kill_count:
                best = n
        self.kill_argmax = best

    def get_pop_stats(self) -> None:
        """Compute the share of the population using each weapon and armour."""
        weapon_counts = [0.0] * len(self.weapons)
        armor_counts = [0.0] * len(self.armors)
        for npc in self.npcs:
            weapon_counts[npc.weapon_idx] += 1.0
            armor_counts[npc.armor_idx] += 1.0
        total = float(self.npc_num)
        self.weapon_usage = [count / total for count in weapon_counts]
        self.armor_usage = [count / total for count in armor_counts]

    # ------------------------------------------------------------------ matchmaking
    def _enter_arena(self, n: int, dims: list[int]) -> None:
        npc = self.npcs[n]
        npc.pos = [self.rng.randrange(dims[0]), self.rng.randrange(dims[1])]
        npc.face(self.rng.randrange(len(TURNS)))
        npc.network = mutate(npc.network, self.rng)

    def _start_fight(self, first: int, second: int) -> None:
        for n, opponent in ((first, second), (second, first)):
            npc = self.npcs[n]
            npc.hp = START_HP
            npc.ticks_alive = 0
            npc.target = opponent
            npc.max_hp = START_MAX_HP

    def _replace_fighter(self, arena: list[int], slot: int, gear_threshold: int) -> None:
        while True:
            candidate = self.rng.randrange(self.npc_num)
            if not self.npcs[candidate].fighting:
                break
        self.npcs[arena[slot]].fighting = False
        arena[slot] = candidate
        self.npcs[candidate].fighting = True
        self._enter_arena(candidate, self.board_dim)
        if self.rng.randrange(13) > gear_threshold:
            self.npcs[arena[slot]].weapon_idx = self.rng.randrange(len(self.weapons))
            self.npcs[arena[1]].armor_idx = self.rng.randrange(len(self.armors))
        self.npcs[candidate].q_table = _identity_q()

    def check_new_fight(self) -> None:
        """Replace dead fighters in every simulation arena with idle gladiators."""
        for arena in self.arenas:
            new_fight = False
            if self.npcs[arena[0]].hp <= 0:
                new_fight = True
                self._replace_fighter(arena, 0, 10)
            if self.npcs[arena[1]].hp <= 0:
                new_fight = True
                self._replace_fighter(arena, 1, 11)
            if new_fight:
                self._start_fight(arena[0], arena[1])

    def _replace_tycoon_fighter(self, slot: int) -> None:
        for candidate in self.owned_list:
            if not self.npcs[candidate].fighting:
                self.npcs[self.tycoon_arena[slot]].fighting = False
                self.tycoon_arena[slot] = candidate
                self.npcs[candidate].fighting = True
                self._enter_arena(candidate, self.tycoon_arena_dim)
                break

    def tycoon_check_new_fight(self) -> None:
        """Replace dead fighters in the tycoon arena with idle owned gladiators."""
        new_fight = False
        for slot in (0, 1):
            if self.npcs[self.tycoon_arena[slot]].hp <= 0:
                new_fight = True
                self._replace_tycoon_fighter(slot)
        if new_fight:
            self._start_fight(self.tycoon_arena[0], self.tycoon_arena[1])

    def reset_arenas(self) -> None:
        """Put the simulation arenas back to their starting line-up."""
        self.arenas = _default_arenas()
        for n, npc in enumerate(self.npcs):
            npc.pos = [1, 1]
            npc.fighting = n < 2 * self.arena_num

    # ------------------------------------------------------------------ equipment
    def apply_weapons(self, weapons: Iterable[Weapon]) -> None:
        """Replace the weapon list."""
        loaded = list(weapons)
        if not loaded:
            raise ValueError("at least one weapon is required")
        self.weapons = loaded

    def apply_armor(self, armors: Iterable[Armor]) -> None:
        """Replace the armour list."""
        loaded = list(armors)
        if not loaded:
            raise ValueError("at least one armour is required")
        self.armors = loaded

    # ------------------------------------------------------------------ persistence
    def save(self, directory: str | Path) -> None:
        """Save every gladiator's name, kills and network to ``directory``."""
        save_records(
            directory,
            (GladiatorRecord(npc.name, npc.kill_count, npc.network) for npc in self.npcs),
        )

    def load(self, directory: str | Path) -> None:
        """Load saved gladiators into the first slots of the population."""
        for npc, record in zip(self.npcs, load_records(directory, self.npc_num)):
            npc.name = record.name
            npc.kill_count = record.kill_count
            npc.network = record.network