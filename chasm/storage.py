"""Reading weapon and armour definitions and saving gladiators to disk."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from chasm.nn import Network, zero_network


@dataclass
class Weapon:
    """A weapon: its description and damage dice (``dice`` d ``sides``)."""

    name: str = ""
    dice: int = 1
    sides: int = 1


@dataclass
class Armor:
    """A suit of armour and its armour class."""

    name: str = ""
    ac: int = 0


@dataclass
class GladiatorRecord:
    """What is kept of a gladiator between runs."""

    name: str
    kill_count: int
    network: Network = field(default_factory=zero_network)


def _entries(directory: str | Path) -> list[Path]:
    return sorted(Path(directory).iterdir())


def _lines(path: Path) -> list[str]:
    if not path.is_file():
        return []
    return path.read_text(encoding="utf-8").splitlines()


def _parse_dice(text: str) -> tuple[int, int]:
    parts = text.split("d")
    if len(parts) < 2:
        raise ValueError(f"bad dice notation: {text!r}")
    return int(parts[0]), int(parts[1])


def load_weapons(directory: str | Path) -> list[Weapon]:
    """Load one weapon per file: a name line, then a dice line such as ``1d6``."""
    weapons = []
    for path in _entries(directory):
        weapon = Weapon()
        lines = _lines(path)
        if lines:
            weapon.name = lines[0]
        if len(lines) > 1:
            weapon.dice, weapon.sides = _parse_dice(lines[1])
        weapons.append(weapon)
    return weapons


def load_armor(directory: str | Path) -> list[Armor]:
    """Load one armour per file: a name line, then its armour class."""
    armors = []
    for path in _entries(directory):
        armor = Armor()
        lines = _lines(path)
        if lines:
            armor.name = lines[0]
        if len(lines) > 1:
            armor.ac = int(lines[1])
        armors.append(armor)
    return armors


def _format_weight(value: float) -> str:
    if value.is_integer():
        text = str(int(value))
        return "-0" if text == "0" and str(value).startswith("-") else text
    return repr(value)


def save_records(directory: str | Path, records) -> None:
    """Write each record to ``<directory>/<name>.txt``."""
    base = Path(directory)
    for record in records:
        lines = [record.name, str(record.kill_count)]
        lines.extend(
            _format_weight(float(weight))
            for layer in record.network
            for row in layer
            for weight in row
        )
        (base / f"{record.name}.txt").write_text("\n".join(lines), encoding="utf-8")


def load_records(directory: str | Path, limit: int) -> list[GladiatorRecord]:
    """Read saved gladiators, at most ``limit`` of them, in file-name order."""
    records: list[GladiatorRecord] = []
    for path in _entries(directory):
        lines = path.read_text(encoding="utf-8").splitlines()
        if len(lines) < 2:
            raise ValueError(f"{path}: missing name or kill count")
        name, kill_count = lines[0], int(lines[1])
        weights = iter(lines[2:])
        network = zero_network()
        try:
            for layer in network:
                for row in layer:
                    for j in range(len(row)):
                        row[j] = float(next(weights))
        except StopIteration:
            raise ValueError(f"{path}: too few network weights") from None
        records.append(GladiatorRecord(name, kill_count, network))
        if len(records) >= limit:
            break
    return records