"""Running the gladiators: what they perceive, what they decide and one tick of play."""

from __future__ import annotations

from collections.abc import Sequence

from chasm.nn import (
    INPUT_SIZE,
    OUTPUT_SIZE,
    Vector,
    brute_modulo,
    feed_forward,
    finite_linear_map,
    relu,
    transpose,
)
from chasm.world import TURNS, World

# Cells whose occupancy is reported as network inputs 2..9, as (row, column) offsets.
_NEIGHBOURS: tuple[tuple[int, int], ...] = (
    (1, 0),
    (1, 1),
    (1, -1),
    (0, -1),
    (-1, 1),
    (-1, -1),
    (0, 1),
    (0, -1),
)

# Steps taken by actions 0..7.
_STEPS: tuple[tuple[int, int], ...] = (
    (1, 0),
    (1, 1),
    (1, -1),
    (0, 1),
    (0, -1),
    (-1, 1),
    (-1, 0),
    (-1, -1),
)

TURN_RIGHT = 8
TURN_LEFT = 9
ACCELERATE = 10
TURN_CYCLE = 7
MOMENTUM_DIRECTIONS = 7
ARMOUR_CEILING = 20
AGE_LIMIT = 100
FAR_AWAY = 10000.0
FIGHT_OWN_INPUT = 10
FIGHT_TARGET_INPUT = 19
DISTANCE_INPUT = 18
HP_INPUT = 27
TARGET_HP_INPUT = 28
FEEDBACK_INPUT = 29
# A bout is aimed at this gladiator in the training arenas.
TRAINING_TARGET = 0
BASE_PRICE = 100
KILL_PRICE = 1000
MAIM_PRICE = 200
FUN_DIVISOR = 20
CROWD_THRESHOLD = 1000


def _trunc_div(a: int, b: int) -> int:
    """Integer division rounding toward zero."""
    return int(a / b)


def _last_argmax(values: Sequence[float], start: int) -> int:
    """Index of the last largest value, scanning from index 0 with ``start`` as the first pick."""
    best = start
    for m, value in enumerate(values):
        if value >= values[best]:
            best = m
    return best


class Simulation(World):
    """A world that can be stepped, either as training arenas or as a tycoon arena."""

    # ------------------------------------------------------------------ perception
    def observe(self, n: int, dims: Sequence[int]) -> Vector:
        """Build gladiator ``n``'s input vector and run it through its network."""
        npc = self.npcs[n]
        target = self.npcs[npc.target]
        data = [0.0] * INPUT_SIZE
        data[0] = float(npc.pos[0] - target.pos[0])
        data[1] = float(npc.pos[1] - target.pos[1])
        data[DISTANCE_INPUT] = data[0] ** 2 + data[1] ** 2
        for i, (dx, dy) in enumerate(_NEIGHBOURS, start=2):
            x = brute_modulo(npc.pos[0] + dx, dims[0])
            y = brute_modulo(npc.pos[1] + dy, dims[1])
            data[i] = 1.0 if self.board_pop[x][y] != 0.0 else 0.0
        data[FIGHT_OWN_INPUT + npc.dir_idx] = 1.0
        data[FIGHT_TARGET_INPUT + target.dir_idx] = 1.0
        data[HP_INPUT] = float(npc.hp)
        data[TARGET_HP_INPUT] = float(target.hp)
        data[FEEDBACK_INPUT : FEEDBACK_INPUT + OUTPUT_SIZE] = npc.old_output[:OUTPUT_SIZE]
        for layer in npc.network:
            data = relu(feed_forward(layer, data))
        return data

    def pass_to_q(self, n: int, data: Sequence[float]) -> Vector:
        """Weigh a network output by gladiator ``n``'s Q-table."""
        return finite_linear_map(transpose(self.npcs[n].q_table), data)

    # ------------------------------------------------------------------ helpers
    def _reset_rewards(self) -> None:
        for npc in self.npcs:
            npc.reward = 0.0

    def _mark(self, fighters: Sequence[int]) -> None:
        for m in fighters:
            pos = self.npcs[m].pos
            self.board_pop[pos[0]][pos[1]] = 1.0

    def _nearest(
        self, n: int, fighters: Sequence[int], stop_on_contact: bool
    ) -> tuple[float, bool]:
        """Squared distance to the nearest other fighter, and whether one shares the cell."""
        here = self.npcs[n].pos
        nearest = FAR_AWAY
        for m in fighters:
            there = self.npcs[m].pos
            dist = float((there[0] - here[0]) ** 2 + (there[1] - here[1]) ** 2)
            if dist < nearest and m != n:
                nearest = dist
            if stop_on_contact and dist == 0.0 and m != n:
                return nearest, True
        return nearest, False

    def _decide(self, n: int, data: Sequence[float]) -> tuple[int, bool]:
        """Pick the action for ``n`` and remember the output for the next observation."""
        npc = self.npcs[n]
        choice, moved = TURN_LEFT, False
        for m, value in enumerate(data):
            if value >= data[choice] and value > 0.0:
                choice, moved = m, True
            npc.old_output[m] = value
        return choice, moved

    def _act(
        self, n: int, choice: int, moved: bool, bounce: bool, dims: Sequence[int]
    ) -> None:
        npc = self.npcs[n]
        if moved:
            if choice == TURN_LEFT:
                npc.face((npc.dir_idx + 1) % TURN_CYCLE)
            elif choice == TURN_RIGHT:
                npc.face(len(TURNS) - 1 if npc.dir_idx == 0 else npc.dir_idx - 1)
            if choice < len(_STEPS):
                dx, dy = _STEPS[choice]
                npc.pos[0] += dx
                npc.pos[1] += dy
            if choice == ACCELERATE:
                npc.max_acc = _trunc_div(ARMOUR_CEILING - self.armors[npc.armor_idx].ac, 2)
                npc.speed[npc.dir_idx] += npc.max_acc
        for k, (dx, dy) in enumerate(TURNS[:MOMENTUM_DIRECTIONS]):
            npc.pos[0] += dx * npc.speed[k]
            npc.pos[1] += dy * npc.speed[k]
            if npc.speed[k] > 0:
                npc.speed[k] -= 1
        if bounce:
            npc.pos[0] += self.rng.randrange(-1, 1)
            npc.hp -= 1
            npc.pos[1] += self.rng.randrange(-1, 1)
        for axis in (0, 1):
            if npc.pos[axis] >= dims[axis] - 1:
                npc.pos[axis] = dims[axis] - 2
            if npc.pos[axis] < 1:
                npc.pos[axis] = 2

    # ------------------------------------------------------------------ ticks
    def sim_tick(self) -> None:
        """Advance every training arena by one step, learning as the fighters go."""
        self._reset_rewards()
        self.get_pop_stats()
        self.check_new_fight()
        self.find_best_npc()
        dims = self.board_dim
        for arena in self.arenas:
            first, second = arena[0], arena[1]
            self.npcs[first].target = second
            self.npcs[second].target = first
            self.board_pop = [[0.0] * dims[1] for _ in range(dims[0])]
            fighters = list(arena)
            for n in fighters:
                self._mark(fighters)
                min_dist, bounce = self._nearest(n, fighters, stop_on_contact=True)
                npc = self.npcs[n]
                if npc.hp <= 0:
                    continue
                first_view = self.observe(n, dims)
                choice, moved = self._decide(n, self.pass_to_q(n, first_view))
                self._act(n, choice, moved, bounce, dims)
                self.attack(n, TRAINING_TARGET)
                npc.ticks_alive += 1

                new_min, _ = self._nearest(n, fighters, stop_on_contact=False)
                if new_min < min_dist:
                    self.reward(n, 1.0)

                self._mark(fighters)
                old_state = _last_argmax(first_view, 0)
                new_state = _last_argmax(self.pass_to_q(n, self.observe(n, dims)), TURN_LEFT)
                self.update_reward_table(n, old_state, new_state, choice)

                if npc.ticks_alive > AGE_LIMIT:
                    npc.hp -= 1

    def _run_economy(self) -> None:
        total_fun = 0
        self.kill_sort = list(range(self.npc_num))
        self.owned_list = []
        for n, npc in enumerate(self.npcs):
            npc.price = BASE_PRICE + npc.kill_count * KILL_PRICE + npc.maim_count * MAIM_PRICE
            if npc.owned:
                self.owned_list.append(n)
                total_fun += _trunc_div(npc.price, FUN_DIVISOR)
        if self.population < self.pop_cap:
            if total_fun > self.ticket_price * CROWD_THRESHOLD:
                change = self.rng.randrange(-1, 2)
            else:
                change = self.rng.randrange(-2, 1)
            if change > 0:
                self.gold += change * self.ticket_price
            self.population = min(max(self.population + change, 0), self.pop_cap)
        for n in self.tycoon_arena:
            if not self.npcs[n].owned:
                self.npcs[n].hp = -1

    def tycoon_tick(self) -> None:
        """Run the arena business for one step and let the scheduled pair fight."""
        self._reset_rewards()
        self._run_economy()
        if len(self.owned_list) < 2:
            return

        self.tycoon_check_new_fight()
        self.find_best_npc()
        first, second = self.tycoon_arena
        self.npcs[first].target = second
        self.npcs[second].target = first

        dims = self.tycoon_arena_dim
        self.board_pop = [[0.0] * dims[1] for _ in range(dims[0])]
        fighters = list(self.tycoon_arena)
        self._mark(fighters)
        for n in fighters:
            npc = self.npcs[n]
            if npc.hp <= 0:
                continue
            _, bounce = self._nearest(n, fighters, stop_on_contact=True)
            target_idx = npc.target
            choice, moved = self._decide(n, self.observe(n, dims))
            self._act(n, choice, moved, bounce, dims)
            self.attack(n, target_idx)
            npc.ticks_alive += 1
            if npc.ticks_alive > AGE_LIMIT:
                npc.hp -= 1