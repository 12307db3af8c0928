# chasm

chasm is a terminal arena game. It has two hundred gladiators, and they fight
in pairs across fourteen small arenas. A small feed-forward neural network
steers each gladiator, and a per-gladiator Q-table weighs the network's output.
When a gladiator scores a kill, its network is copied into the loser. Fighters
who enter an arena get slightly mutated networks. Over many ticks the
population drifts toward better fighters.

## Installing

```
pip install .
```

The package needs no third-party libraries. It draws the screen with Python's
standard `curses` module. That module is not part of the standard library on
Windows, so the terminal front end runs on POSIX systems.

## Running

```
chasm
```

Options:

- `--weapons DIR` is the folder of weapon files. The default is `Weapons/`.
- `--armor DIR` is the folder of armour files. The default is `Armor/`.
- `--saves DIR` is the folder for saved gladiators. The default is `Saves/`.
- `--seed N` seeds the random numbers, so a run can be repeated.

File formats:

- A weapon file holds the weapon's name on the first line and its damage dice
  on the second, for example `2d6`. Weapon files are read in file-name order.
- An armour file holds the armour's name on the first line and its armour
  class, a whole number, on the second.
- A save file holds one gladiator: its name, its kill count, and then one
  network weight per line.

## Controls

- **Up** and **Down** move the selection.
- **Enter** chooses the highlighted option.
- **Esc** or **q** goes back one screen. On the main menu it quits.

## Main menu

1. **Load Custom Weapons and Armor** reads the weapon and armour folders. Each
   folder must hold at least one file.
2. **Start Simulation** resets the arenas and runs them. The left panel draws
   the arenas. The right panel shows the top gladiator's stats and the share of
   the population that uses each weapon and armour. Leaving the simulation
   writes every gladiator to the saves folder. The folder is created if it is
   missing.
3. **Load Saved Gladiators** reads the save files in file-name order into the
   first slots of the population.
4. **Tycoon Mode** runs one arena as a business:
   - **Buy Gladiator** and **Sell Gladiator** list the first 25 gladiators with
     their prices.
   - **Increase Ticket Price** and **Decrease Ticket Price** change the ticket
     price. It never goes below zero.
   - **Schedule Fight** lists the gladiators you own.

   A gladiator's price grows with its kills and with the damage it has dealt.
   Fights happen only when you own at least two gladiators. The number of
   spectators, and the gold their tickets bring in, rise or fall at random each
   tick. It leans upward when your gladiators are worth enough compared with
   the ticket price.

## Using it as a library

The game logic does not depend on the terminal:

- `chasm.world.World` holds the population, the arenas and the combat rules.
  Its `save` and `load` methods write and read the save folder.
- `chasm.simulation.Simulation` extends `World`. It advances the game one step
  at a time, with `sim_tick` for the training arenas and `tycoon_tick` for the
  tycoon arena.
- `chasm.app.App` is the menu state machine. `App.handle_event` takes a
  `Tick`, a `KeyPress` or an `AppEvent` from `chasm.events`.
- `chasm.events.EventHandler` puts ticks and key presses on one queue from a
  background thread.
- `chasm.ui.render_left` and `chasm.ui.render_right` return the text of the
  two panels.
- `chasm.tui.run` draws an `App` in a curses window. `chasm.tui.main` is the
  `chasm` command.

`chasm.nn` holds the network helpers. `chasm.storage` reads weapon, armour and
save files and writes save files.