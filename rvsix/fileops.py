"""File and process utilities: kill, ln, mkdir and rm."""

from __future__ import annotations

import os
import signal
import sys

from .ulib import atoi

_KILL_SIGNAL = getattr(signal, "SIGKILL", signal.SIGTERM)


def kill_main(argv=None):
    """Terminate each process named by pid; failures are ignored."""
    args = sys.argv[1:] if argv is None else list(argv)
    if not args:
        sys.stderr.write("usage: kill pid...\n")
        return 1
    for arg in args:
        pid = atoi(arg)
        if pid <= 0:
            continue  # there is no such process
        try:
            os.kill(pid, _KILL_SIGNAL)
        except OSError:
            pass
    return 0


def ln_main(argv=None):
    """Create a hard link ``new`` to ``old``."""
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) != 2:
        sys.stderr.write("Usage: ln old new\n")
        return 1
    old, new = args
    try:
        os.link(old, new)
    except OSError:
        sys.stderr.write(f"link {old} {new}: failed\n")
    return 0


def mkdir_main(argv=None):
    """Create each directory, stopping at the first failure."""
    args = sys.argv[1:] if argv is None else list(argv)
    if not args:
        sys.stderr.write("Usage: mkdir files...\n")
        return 1
    for name in args:
        try:
            os.mkdir(name)
        except OSError:
            sys.stderr.write(f"mkdir: {name} failed to create\n")
            break
    return 0


def _unlink(name):
    if os.path.isdir(name) and not os.path.islink(name):
        os.rmdir(name)  # only empty directories may be removed
    else:
        os.unlink(name)


def rm_main(argv=None):
    """Remove each file or empty directory, stopping at the first failure."""
    args = sys.argv[1:] if argv is None else list(argv)
    if not args:
        sys.stderr.write("Usage: rm files...\n")
        return 1
    for name in args:
        try:
            _unlink(name)
        except OSError:
            sys.stderr.write(f"rm: {name} failed to delete\n")
            break
    return 0