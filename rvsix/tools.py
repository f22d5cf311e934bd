"""Small file utilities: wc, cat, echo and ls."""

from __future__ import annotations

import os
import stat
import sys
from dataclasses import dataclass

from .mkfs import DIRSIZ, T_DEVICE, T_DIR, T_FILE
from .printf import format_message

_CHUNK = 512
_SEPARATORS = b" \r\t\n\v\0"


@dataclass
class Counts:
    lines: int = 0
    words: int = 0
    chars: int = 0


def count(data):
    """Count lines, words and bytes in ``data``."""
    result = Counts()
    inword = False
    for byte in bytes(data):
        result.chars += 1
        if byte == 0x0A:
            result.lines += 1
        if byte in _SEPARATORS:
            inword = False
        elif not inword:
            result.words += 1
            inword = True
    return result


def _stdin_bytes():
    buffer = getattr(sys.stdin, "buffer", None)
    if buffer is None:
        return sys.stdin.read().encode("latin-1")
    return buffer.read()


def _write_stdout_bytes(data):
    buffer = getattr(sys.stdout, "buffer", None)
    if buffer is None:
        sys.stdout.write(data.decode("latin-1"))
        return
    sys.stdout.flush()
    buffer.write(data)
    buffer.flush()


def _report(counts, name):
    sys.stdout.write(format_message("%d %d %d %s\n", counts.lines, counts.words, counts.chars, name))


def wc_main(argv=None):
    """Print line, word and byte counts of each file or of standard input."""
    args = sys.argv[1:] if argv is None else list(argv)
    if not args:
        _report(count(_stdin_bytes()), "")
        return 0
    for name in args:
        try:
            with open(name, "rb") as f:
                data = f.read()
        except OSError:
            sys.stdout.write(f"wc: cannot open {name}\n")
            return 1
        _report(count(data), name)
    return 0


def _cat_stream(stream):
    while chunk := stream.read(_CHUNK):
        _write_stdout_bytes(chunk)


def cat_main(argv=None):
    """Copy each file, or standard input, to standard output."""
    args = sys.argv[1:] if argv is None else list(argv)
    if not args:
        _write_stdout_bytes(_stdin_bytes())
        return 0
    for name in args:
        try:
            f = open(name, "rb")
        except OSError:
            sys.stderr.write(f"cat: cannot open {name}\n")
            return 1
        with f:
            try:
                _cat_stream(f)
            except OSError:
                sys.stderr.write("cat: read error\n")
                return 1
    return 0


def echo_main(argv=None):
    """Write the arguments separated by blanks and ended by a newline."""
    args = sys.argv[1:] if argv is None else list(argv)
    if args:
        sys.stdout.write(" ".join(args) + "\n")
    return 0


def fmtname(path):
    """Last path component, blank-padded to the directory name width."""
    name = path[path.rfind("/") + 1:]
    if len(name) >= DIRSIZ:
        return name
    return name.ljust(DIRSIZ)


def _file_type(mode):
    if stat.S_ISDIR(mode):
        return T_DIR
    if stat.S_ISREG(mode):
        return T_FILE
    return T_DEVICE


def _ls(path):
    try:
        st = os.stat(path)
    except OSError:
        sys.stderr.write(f"ls: cannot open {path}\n")
        return
    kind = _file_type(st.st_mode)
    if kind != T_DIR:
        sys.stdout.write(format_message("%s %d %d %l\n", fmtname(path), kind, st.st_ino, st.st_size))
        return
    if len(path) + 1 + DIRSIZ + 1 > _CHUNK:
        sys.stdout.write("ls: path too long\n")
        return
    try:
        names = sorted(os.listdir(path))
    except OSError:
        sys.stderr.write(f"ls: cannot open {path}\n")
        return
    for name in [".", "..", *names]:
        full = f"{path}/{name}"
        try:
            st = os.stat(full)
        except OSError:
            sys.stdout.write(f"ls: cannot stat {full}\n")
            continue
        sys.stdout.write(
            format_message("%s %d %d %d\n", fmtname(full), _file_type(st.st_mode), st.st_ino, st.st_size)
        )


def ls_main(argv=None):
    """List files and directory contents with type, inode number and size."""
    args = sys.argv[1:] if argv is None else list(argv)
    for path in args or ["."]:
        _ls(path)
    return 0