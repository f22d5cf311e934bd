# rvsix

`rvsix` models the moving parts of a small Unix-like teaching kernel for
RISC-V. It is written in pure Python and has no dependencies.

- **`rvsix.memory`**: system parameters (`NPROC`, `FSSIZE`, `MAXPATH`, …),
  control-register bit constants and Sv39 address arithmetic:
  `pg_round_up`, `pg_round_down`, `pa_to_pte`, `pte_to_pa`, `pte_flags`,
  `px` and `make_satp`.
- **`rvsix.vm`**: a simulated physical memory and three-level page tables.
  - `PhysicalMemory` hands out pages (`alloc`), takes them back (`free`)
    and reads and writes bytes and page-table entries.
  - `PageTable` walks, maps (`map_pages`), unmaps, grows, shrinks, frees
    and copies address spaces (`copy_to`), and revokes user access
    (`clear_user`).
  - `PageTable.copy_out`, `copy_in` and `copy_in_str` move bytes and
    NUL-terminated strings in and out of user memory.
  - Errors are raised as `KernelPanic`, `OutOfMemory` and `BadAddress`.
- **`rvsix.mkfs`**: builds a file system image. `make_image` and
  `ImageBuilder` write the boot block, superblock, log area, inodes,
  bitmap and data blocks, with `Superblock` and `DiskInode` describing the
  on-disk records.
- **`rvsix.shell`**: the shell grammar. `parse_command` turns a command
  line into a tree of `ExecCmd`, `RedirCmd`, `PipeCmd`, `ListCmd` and
  `BackCmd`; `Tokenizer` splits the line. Bad input raises
  `ShellSyntaxError`.
- **`rvsix.grep`**: a small regular-expression matcher supporting
  `^ . * $` (`match`, `match_here`, `match_star`) and `grep` over a stream.
- **`rvsix.printf`**: the minimal formatter for `%d %l %x %p %s %c %%`,
  as `format_message` and `fprintf`.
- **`rvsix.ulib`**: `atoi`, `strcmp` and `gets`.
- **`rvsix.umalloc`**: a next-fit free-list allocator, `Allocator`, over a
  simulated heap with a size limit.
- **`rvsix.rand`**: the Park–Miller generator, `ParkMiller` and `do_rand`.
- **`rvsix.tools`** and **`rvsix.fileops`**: the classic utilities (`wc`,
  `cat`, `echo`, `ls`, `kill`, `ln`, `mkdir`, `rm`) working on host files
  and processes. `count` returns the `Counts` of a byte string; `fmtname`
  pads a name the way `ls` prints it.
- **`rvsix.ps`**: formats a process table from `ProcInfo` entries with a
  `ProcState` each, using `format_table`.

## Installing

```
pip install .
```

To run the tests, install the test extra and run pytest:

```
pip install ".[test]"
pytest
```

## Commands

Build a file system image from a list of files:

```
rvsix-mkfs fs.img README user/_cat user/_echo
```

A leading `user/` in a file name is dropped, and so is a leading `_`. The
example above stores the files as `README`, `cat` and `echo` in the root
directory. Names that still contain `/` are refused.

Each utility has its own command:

```
rvsix-grep 'ab*c$' notes.txt
rvsix-wc notes.txt
rvsix-cat notes.txt
rvsix-echo hello world
rvsix-ls .
rvsix-kill 12345
rvsix-ln old new
rvsix-mkdir newdir
rvsix-rm oldfile
```

`rvsix-rm` removes files and empty directories. `rvsix-mkdir` and
`rvsix-rm` stop at the first name they cannot handle.

## Library use

Page-table arithmetic:

```python
from rvsix.memory import pg_round_up, pg_round_down

pg_round_up(1)       # 4096
pg_round_down(8191)  # 4096
```

Address spaces:

```python
from rvsix.vm import PhysicalMemory, PageTable

memory = PhysicalMemory(64, 0x80000000)
table = PageTable(memory)
size = table.grow(0, 8192, 0)
table.copy_out(100, b"hello\0")
table.copy_in_str(100, 64)  # b"hello"
```

Parsing a shell command:

```python
from rvsix.shell import parse_command

tree = parse_command("cat < in | grep x > out; echo done &")
```

Matching text:

```python
from rvsix.grep import match

match("^ab*c$", "abbbc")  # True
```

## What it does not do

There is no running kernel here: no processes, scheduler, traps, devices
or system calls. The page tables live in a simulated memory and are never
used to run code. `rvsix.mkfs` writes images but nothing reads them back
as a file system. The shell module only parses command lines; it does not
run them, and there is no interactive shell command. `rvsix.ps` formats
the entries it is given but has no way to collect a process table.