"""Text shown in the two panels of the game screen."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from chasm.app import App
    from chasm.simulation import Simulation

MAIN_MENU_ITEMS: tuple[str, ...] = (
    "Load Custom Weapons and Armor",
    "Start Simulation",
    "Load Saved Gladiators",
    "Tycoon Mode",
)

TYCOON_MENU_ITEMS: tuple[str, ...] = (
    "Buy Gladiator",
    "Sell Gladiator",
    "Increase Ticket Price",
    "Decrease Ticket Price",
    "Schedule Fight",
)

LIST_HEADER = "Name : Price    *owned"
LIST_LENGTH = 25
ARENAS_PER_ROW = 7
ARENA_ROWS = 2

_GLYPHS = ("|", "\\", "-", "/")


def direction_glyph(dir_idx: int) -> str:
    """The character drawn in front of a gladiator facing direction ``dir_idx``."""
    if not 0 <= dir_idx < 2 * len(_GLYPHS):
        raise ValueError(f"no such direction: {dir_idx}")
    return _GLYPHS[dir_idx % len(_GLYPHS)]


def _number(value: float) -> str:
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def _wrap(value: int, dim: int) -> int:
    if value >= dim:
        return value - dim
    if value < 0:
        return value + dim
    return value


def _place(
    board: list[list[str]],
    sim: Simulation,
    n: int,
    fighters: Sequence[int],
    dims: Sequence[int],
) -> None:
    """Draw gladiator ``n`` and the cell it faces onto ``board``."""
    npc = sim.npcs[n]
    x, y = npc.pos
    fx = _wrap(npc.direction[0] + x, dims[0])
    fy = _wrap(npc.direction[1] + y, dims[1])
    if n == sim.kill_argmax:
        mark = "%"
    elif n == fighters[0]:
        mark = "@"
    elif n == fighters[1]:
        mark = "&"
    else:
        mark = "E"
    board[x][y] = mark
    board[fx][fy] = direction_glyph(npc.dir_idx)


def _menu(items: Sequence[str], counter: int) -> str:
    selected = counter if 0 <= counter < len(items) else 0
    return "".join(
        (" > " if i == selected else "") + item + "\n" for i, item in enumerate(items)
    )


def _list_line(sim: Simulation, n: int, selected: bool) -> str:
    npc = sim.npcs[n]
    line = f"{'> ' if selected else ''}{npc.name}: ${npc.price}"
    return line + " *" if npc.owned else line


def _arenas(sim: Simulation) -> str:
    rows, cols = sim.board_dim
    boards = [[["_"] * cols for _ in range(rows)] for _ in sim.arenas]
    for board, arena in zip(boards, sim.arenas):
        for n in arena:
            _place(board, sim, n, arena, sim.board_dim)
    border = "#" * (ARENAS_PER_ROW * (cols + 2))
    lines = [border]
    for b in range(ARENA_ROWS):
        for i in range(rows):
            lines.append(
                "".join(
                    "#" + "".join(boards[ARENAS_PER_ROW * b + a][i]) + "#"
                    for a in range(ARENAS_PER_ROW)
                )
            )
        lines.append(border)
    return "\n".join(lines) + "\n"


def render_left(app: App) -> str:
    """Text of the left panel: arenas, gladiator lists or a menu."""
    sim = app.simulation
    if app.sim_mode:
        return _arenas(sim)
    if app.npc_list_mode and (app.buy_mode or app.sell_mode):
        lines = [LIST_HEADER]
        lines.extend(
            _list_line(sim, n, position == app.counter)
            for position, n in enumerate(sim.kill_sort[:LIST_LENGTH])
        )
        return "\n".join(lines)
    if app.schedule_mode:
        return "".join("\n" + _list_line(sim, n, n == app.counter) for n in sim.owned_list)
    if app.tycoon_mode:
        return _menu(TYCOON_MENU_ITEMS, app.counter)
    if app.main_menu_mode:
        return _menu(MAIN_MENU_ITEMS, app.counter)
    return ""


def _statistics(sim: Simulation) -> str:
    top = sim.npcs[sim.kill_argmax]
    weapon = sim.weapons[top.weapon_idx]
    text = (
        "=== Top Gladiator Stats ===\n"
        f"    Name : {top.name}\n"
        f"    Kill Count : {top.kill_count}\n"
        f"    Hit Die : {weapon.dice}d{weapon.sides}\n"
        f"    Weapon : {weapon.name}\n"
        "    === Weapon Usage Stats ==="
    )
    text += "".join(
        f"\n{w.name} : {_number(usage * 100.0)}%"
        for w, usage in zip(sim.weapons, sim.weapon_usage)
    )
    text += "\n===Armor Usage Stats"
    text += "".join(
        f"\n {a.name}:{_number(usage * 100.0)}%" for a, usage in zip(sim.armors, sim.armor_usage)
    )
    return text


def _tycoon_arena(sim: Simulation) -> str:
    rows, cols = sim.tycoon_arena_dim
    board = [[" "] * cols for _ in range(rows)]
    for n in sim.tycoon_arena:
        _place(board, sim, n, sim.tycoon_arena, sim.tycoon_arena_dim)
    edge = "#" * rows
    text = edge + "\n" + "".join("#" + "".join(row) + "#\n" for row in board) + edge + "\n"
    first, second = sim.tycoon_arena
    return (
        f"{text}\nTicket Price: {sim.ticket_price}, Gold: {sim.gold}\n"
        f"Spectators: {sim.population}\n==Current Fighters==\n"
        f"@ <==> {sim.npcs[first].name}\n& <==> {sim.npcs[second].name}"
    )


def render_right(app: App) -> str:
    """Text of the right panel: population statistics or the tycoon arena."""
    if app.sim_mode:
        return _statistics(app.simulation)
    if app.tycoon_mode:
        return _tycoon_arena(app.simulation)
    return ""