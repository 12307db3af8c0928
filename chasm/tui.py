"""The curses front end and the command that starts the game."""

from __future__ import annotations

import argparse
import curses
import random
import threading
from collections.abc import Sequence

from chasm.app import App
from chasm.events import EventHandler, KeyPress
from chasm.simulation import Simulation
from chasm.ui import render_left, render_right

_NAMED_KEYS = {
    27: "esc",
    10: "enter",
    13: "enter",
    9: "tab",
    curses.KEY_ENTER: "enter",
    curses.KEY_UP: "up",
    curses.KEY_DOWN: "down",
    curses.KEY_LEFT: "left",
    curses.KEY_RIGHT: "right",
}


def key_name(code: int) -> KeyPress | None:
    """Turn a curses key code into a key press, or None for keys the game ignores."""
    if code in _NAMED_KEYS:
        return KeyPress(_NAMED_KEYS[code])
    if 1 <= code <= 26:
        return KeyPress(chr(ord("a") + code - 1), ctrl=True)
    if 32 <= code <= 126:
        return KeyPress(chr(code))
    return None


def _colour_attr() -> int:
    try:
        curses.curs_set(0)
    except curses.error:
        pass
    try:
        if curses.has_colors():
            curses.start_color()
            curses.init_pair(1, curses.COLOR_GREEN, curses.COLOR_BLACK)
            return curses.color_pair(1)
    except curses.error:
        pass
    return 0


def _put(stdscr, y: int, x: int, text: str, attr: int) -> None:
    try:
        stdscr.addstr(y, x, text, attr)
    except curses.error:
        pass  # writing into the last cell of the screen


def _draw_panel(stdscr, left: int, height: int, width: int, title: str, text: str, attr: int) -> None:
    if height < 2 or width < 2:
        return
    inner = width - 2
    top = "╭" + "─" * inner + "╮"
    label = title[:inner]
    start = 1 + (inner - len(label)) // 2
    top = top[:start] + label + top[start + len(label) :]
    _put(stdscr, 0, left, top, attr)
    for y in range(1, height - 1):
        _put(stdscr, y, left, "│", attr)
        _put(stdscr, y, left + width - 1, "│", attr)
    _put(stdscr, height - 1, left, "╰" + "─" * inner + "╯", attr)
    for y, line in enumerate(text.split("\n")[: height - 2], start=1):
        clipped = line[:inner]
        _put(stdscr, y, left + 1 + (inner - len(clipped)) // 2, clipped, attr)


def _draw(stdscr, app: App, attr: int) -> None:
    stdscr.erase()
    height, width = stdscr.getmaxyx()
    half = width // 2
    _draw_panel(stdscr, 0, height, half, "UI", render_left(app), attr)
    _draw_panel(stdscr, half, height, width - half, "INFO", render_right(app), attr)
    stdscr.refresh()


def run(stdscr, app: App) -> None:
    """Draw the game and feed it events until it stops running."""
    stdscr.keypad(True)
    attr = _colour_attr()
    lock = threading.Lock()

    def read_key(timeout: float) -> KeyPress | None:
        with lock:
            stdscr.timeout(max(0, int(timeout * 1000)))
            code = stdscr.getch()
        return None if code == -1 else key_name(code)

    with EventHandler(read_key) as events:
        while app.running:
            with lock:
                _draw(stdscr, app, attr)
            app.handle_event(events.next())


def main(argv: Sequence[str] | None = None) -> int:
    """Start the game in the terminal."""
    parser = argparse.ArgumentParser(prog="chasm", description="Evolving gladiator arena.")
    parser.add_argument("--weapons", default="Weapons/", help="directory of weapon files")
    parser.add_argument("--armor", default="Armor/", help="directory of armour files")
    parser.add_argument("--saves", default="Saves/", help="directory for saved gladiators")
    parser.add_argument("--seed", type=int, default=None, help="seed for the random numbers")
    args = parser.parse_args(argv)
    app = App(
        simulation=Simulation(random.Random(args.seed)),
        weapons_dir=args.weapons,
        armor_dir=args.armor,
        saves_dir=args.saves,
    )
    curses.wrapper(run, app)
    return 0