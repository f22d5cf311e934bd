"""Process-table snapshot and its tabular listing."""

from __future__ import annotations

import enum
from dataclasses import dataclass

from .memory import NPROC
from .printf import format_message

HEADER = "NAME\tPID\tSTATUS\t\tPRIORITY\n"


class ProcState(enum.IntEnum):
    UNUSED = 0
    USED = 1
    SLEEPING = 2
    RUNNABLE = 3
    RUNNING = 4
    ZOMBIE = 5


_LABELS = {
    ProcState.USED: "USED\t\t",
    ProcState.UNUSED: "UNUSED\t\t",
    ProcState.SLEEPING: "SLEEPING\t",
    ProcState.RUNNABLE: "RUNNABLE\t",
    ProcState.RUNNING: "RUNNING\t\t",
    ProcState.ZOMBIE: "ZOMBIE\t\t",
}


@dataclass
class ProcInfo:
    """One slot of the process table."""

    name: str
    pid: int
    state: ProcState = ProcState.UNUSED
    inuse: bool = True
    effective_priority: int = 0
    real_priority: int = 0
    ticks: int = 0


def format_table(entries):
    """Render the in-use slots of a process table as text."""
    entries = list(entries)
    if len(entries) > NPROC:
        raise ValueError(f"a process table holds at most {NPROC} slots")
    lines = [HEADER]
    for entry in entries:
        if not entry.inuse:
            continue
        lines.append(format_message("%s\t%d\t", entry.name, entry.pid))
        lines.append(_LABELS[ProcState(entry.state)])
        lines.append(format_message("%d\n", entry.effective_priority))
    return "".join(lines)