"""A small grep supporting the ^ . * $ regular-expression operators."""

from __future__ import annotations

import sys


def _here(regex, ri, text, ti):
    while True:
        if ri >= len(regex):
            return True
        if ri + 1 < len(regex) and regex[ri + 1] == "*":
            return _star(regex[ri], regex, ri + 2, text, ti)
        if regex[ri] == "$" and ri + 1 == len(regex):
            return ti >= len(text)
        if ti < len(text) and (regex[ri] == "." or regex[ri] == text[ti]):
            ri += 1
            ti += 1
            continue
        return False


def _star(c, regex, ri, text, ti):
    while True:
        if _here(regex, ri, text, ti):
            return True
        if ti < len(text) and (text[ti] == c or c == "."):
            ti += 1
            continue
        return False


def match(regex, text):
    """Return True if ``regex`` matches anywhere in ``text``."""
    if regex.startswith("^"):
        return _here(regex, 1, text, 0)
    return any(_here(regex, 0, text, start) for start in range(len(text) + 1))


def match_here(regex, text):
    """Return True if ``regex`` matches at the beginning of ``text``."""
    return _here(regex, 0, text, 0)


def match_star(c, regex, text):
    """Return True if ``c*`` followed by ``regex`` matches at the start of ``text``."""
    return _star(c, regex, 0, text, 0)


def grep(pattern, stream, out):
    """Write every newline-terminated line of ``stream`` that matches ``pattern``."""
    lines = stream.read().split("\n")
    # The piece after the last newline is not a complete line.
    for line in lines[:-1]:
        if match(pattern, line):
            out.write(line + "\n")


def main(argv=None):
    """Run grep over the named files, or standard input; return the exit status."""
    args = sys.argv[1:] if argv is None else list(argv)
    if not args:
        sys.stderr.write("usage: grep pattern [file ...]\n")
        return 1
    pattern = args[0]
    if len(args) == 1:
        grep(pattern, sys.stdin, sys.stdout)
        return 0
    for name in args[1:]:
        try:
            f = open(name, encoding="latin-1", newline="")
        except OSError:
            sys.stdout.write(f"grep: cannot open {name}\n")
            return 1
        with f:
            grep(pattern, f, sys.stdout)
    return 0