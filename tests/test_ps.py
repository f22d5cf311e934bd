import pytest

from rvsix.memory import NPROC
from rvsix.ps import ProcInfo, ProcState, format_table


def test_empty_table_has_header_only():
    assert format_table([]) == "NAME\tPID\tSTATUS\t\tPRIORITY\n"


def test_rows_and_labels():
    table = format_table([
        ProcInfo("init", 1, ProcState.SLEEPING, effective_priority=5),
        ProcInfo("sh", 2, ProcState.RUNNING, effective_priority=-3),
        ProcInfo("zombie", 3, ProcState.ZOMBIE),
    ])
    lines = table.splitlines()
    assert lines[1] == "init\t1\tSLEEPING\t5"
    assert lines[2] == "sh\t2\tRUNNING\t\t-3"
    assert lines[3] == "zombie\t3\tZOMBIE\t\t0"


def test_unused_slots_skipped():
    table = format_table([
        ProcInfo("gone", 7, ProcState.RUNNABLE, inuse=False),
        ProcInfo("here", 8, ProcState.RUNNABLE),
    ])
    assert "gone" not in table
    assert table.splitlines()[1] == "here\t8\tRUNNABLE\t0"


@pytest.mark.parametrize("state, label", [
    (ProcState.USED, "USED\t\t"),
    (ProcState.UNUSED, "UNUSED\t\t"),
    (ProcState.RUNNABLE, "RUNNABLE\t"),
])
def test_state_label(state, label):
    table = format_table([ProcInfo("p", 4, state)])
    assert table.splitlines(keepends=True)[1] == f"p\t4\t{label}0\n"


def test_too_many_entries():
    with pytest.raises(ValueError):
        format_table([ProcInfo("p", i) for i in range(NPROC + 1)])