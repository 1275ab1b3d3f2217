"""Machine / part-name facets and the inventory filter."""

from typing import Iterable, Sequence

from .models import Part

ALL = "all"


def machines(parts: Iterable[Part]) -> list[str]:
    return sorted({p.machine_id for p in parts})


def part_names(parts: Iterable[Part]) -> list[str]:
    return sorted({p.name for p in parts})


def facets(parts: Sequence[Part]) -> dict[str, list[str]]:
    return {"machines": machines(parts), "part_names": part_names(parts)}


def apply_filter(parts: Iterable[Part], machine: str = ALL, name: str = ALL) -> list[Part]:
    """Parts matching both the machine and the name selection, in inventory order."""
    machine = machine or ALL
    name = name or ALL
    return [
        p for p in parts
        if (machine == ALL or p.machine_id == machine)
        and (name == ALL or p.name == name)
    ]


def follow_machine(selected: str, machine_id: str) -> str:
    """Machine filter to show after saving a part on ``machine_id``; 'all' is left alone."""
    selected = selected or ALL
    if selected != ALL and selected != machine_id:
        return machine_id
    return selected
