"""Application state: menus, modes and what the keys do."""

from __future__ import annotations

from pathlib import Path

from chasm.events import AppEvent, Event, KeyPress, Tick
from chasm.simulation import Simulation
from chasm.storage import load_armor, load_weapons

_INT_MAX = 2**31 - 1
_INT_MIN = -(2**31)

MAIN_MENU_LAST = 3
TYCOON_MENU_LAST = 4
NPC_LIST_LAST = 24


class App:
    """The game: a simulation plus the menu state driving it."""

    def __init__(
        self,
        simulation: Simulation | None = None,
        weapons_dir: str | Path = "Weapons/",
        armor_dir: str | Path = "Armor/",
        saves_dir: str | Path = "Saves/",
    ) -> None:
        self.simulation = simulation if simulation is not None else Simulation()
        self.weapons_dir = Path(weapons_dir)
        self.armor_dir = Path(armor_dir)
        self.saves_dir = Path(saves_dir)
        self.running = True
        self.counter = 0
        self.sim_mode = False
        self.main_menu_mode = True
        self.tycoon_mode = False
        self.npc_list_mode = False
        self.buy_mode = True
        self.sell_mode = False
        self.schedule_mode = False

    # ------------------------------------------------------------------ ticking
    def _clamp_counter(self, last: int) -> None:
        self.counter = min(max(self.counter, 0), last)

    def tick(self) -> None:
        """Keep the menu cursor in range and advance the active mode."""
        if self.main_menu_mode:
            self._clamp_counter(MAIN_MENU_LAST)
        elif self.tycoon_mode and not self.npc_list_mode:
            self._clamp_counter(TYCOON_MENU_LAST)
        elif self.tycoon_mode and self.npc_list_mode:
            self._clamp_counter(NPC_LIST_LAST)

        if self.sim_mode:
            self.simulation.sim_tick()
        elif self.tycoon_mode:
            self.simulation.tycoon_tick()

    # ------------------------------------------------------------------ menus
    def _load_weapons(self) -> None:
        self.simulation.apply_weapons(load_weapons(self.weapons_dir))

    def _load_equipment(self) -> None:
        self._load_weapons()
        self.simulation.apply_armor(load_armor(self.armor_dir))

    def _selected_npc(self) -> int:
        kill_sort = self.simulation.kill_sort
        if not 0 <= self.counter < len(kill_sort):
            raise IndexError(f"no gladiator at list position {self.counter}")
        return kill_sort[self.counter]

    def _refresh_owned(self) -> None:
        sim = self.simulation
        sim.kill_sort = list(range(sim.npc_num))
        sim.owned_list.extend(n for n, npc in enumerate(sim.npcs) if npc.owned)
        sim.tycoon_check_new_fight()

    def _main_menu_select(self) -> None:
        if self.counter == 0:
            self._load_equipment()
        elif self.counter == 1:
            self.sim_mode = True
            self.main_menu_mode = False
            self.simulation.reset_arenas()
        elif self.counter == 2:
            self.simulation.load(self.saves_dir)
        elif self.counter == 3:
            self.tycoon_mode = True
            self.main_menu_mode = False
            for npc in self.simulation.npcs:
                npc.fighting = False

    def _tycoon_menu_select(self) -> None:
        sim = self.simulation
        if self.counter == 0:
            self.npc_list_mode = True
            self.buy_mode = True
            self.counter = 0
        elif self.counter == 1:
            self.npc_list_mode = True
            self.sell_mode = True
            self.counter = 0
        elif self.counter == 2:
            sim.ticket_price += 1
        elif self.counter == 3:
            sim.ticket_price = max(sim.ticket_price - 1, 0)
        elif self.counter == 4:
            self.npc_list_mode = True
            self.schedule_mode = True

    def _npc_list_select(self) -> None:
        sim = self.simulation
        if self.buy_mode:
            npc = sim.npcs[self._selected_npc()]
            if npc.price <= sim.gold:
                npc.owned = True
                sim.gold -= npc.price
                self._refresh_owned()
        if self.sell_mode:
            npc = sim.npcs[self._selected_npc()]
            if npc.owned:
                npc.owned = False
                sim.gold += npc.price
                self._refresh_owned()

    def mode_switch(self) -> None:
        """Act on the menu entry under the cursor."""
        if self.main_menu_mode:
            self._main_menu_select()
        elif self.tycoon_mode and not self.npc_list_mode:
            self._tycoon_menu_select()
        elif self.tycoon_mode and self.npc_list_mode:
            self._npc_list_select()

    def quit(self) -> None:
        """Leave the current screen; from the main menu, stop the application."""
        if self.sim_mode:
            self.saves_dir.mkdir(parents=True, exist_ok=True)
            self.simulation.save(self.saves_dir)
        if self.main_menu_mode:
            self.running = False
        elif self.npc_list_mode:
            self.npc_list_mode = False
            self.tycoon_mode = True
            self.buy_mode = False
            self.sell_mode = False
            self.schedule_mode = False
        elif self.sim_mode:
            self.sim_mode = False
            self.main_menu_mode = True
        elif self.tycoon_mode:
            self.tycoon_mode = False
            self.main_menu_mode = True

    def increment_counter(self) -> None:
        """Move the cursor down."""
        self.counter = min(self.counter + 1, _INT_MAX)

    def decrement_counter(self) -> None:
        """Move the cursor up."""
        self.counter = max(self.counter - 1, _INT_MIN)

    # ------------------------------------------------------------------ input
    def handle_key(self, key: str, ctrl: bool = False) -> AppEvent | None:
        """Translate a key into the application event it requests, if any."""
        if key in ("esc", "q"):
            return AppEvent.QUIT
        if ctrl and key in ("c", "C"):
            return AppEvent.QUIT
        if key == "down":
            return AppEvent.INCREMENT
        if key == "up":
            return AppEvent.DECREMENT
        if key == "enter":
            return AppEvent.SELECT_OPTION
        return None

    def _dispatch(self, app_event: AppEvent) -> None:
        actions = {
            AppEvent.INCREMENT: self.increment_counter,
            AppEvent.DECREMENT: self.decrement_counter,
            AppEvent.QUIT: self.quit,
            AppEvent.LOAD_WEAPON: self._load_weapons,
            AppEvent.SELECT_OPTION: self.mode_switch,
        }
        actions[app_event]()

    def handle_event(self, event: Event) -> None:
        """React to a tick, a key press or an application event."""
        if isinstance(event, Tick):
            self.tick()
        elif isinstance(event, KeyPress):
            app_event = self.handle_key(event.key, event.ctrl)
            if app_event is not None:
                self._dispatch(app_event)
        elif isinstance(event, AppEvent):
            self._dispatch(event)
        else:
            raise TypeError(f"unknown event: {event!r}")