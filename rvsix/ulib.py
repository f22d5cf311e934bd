"""Small string and input helpers used by the user programs."""

from __future__ import annotations


def atoi(s):
    """Parse the leading decimal digits of ``s``; no sign or blanks are accepted."""
    n = 0
    for c in s:
        if not "0" <= c <= "9":
            break
        n = n * 10 + (ord(c) - ord("0"))
    return n


def _as_bytes(value):
    return value.encode("utf-8") if isinstance(value, str) else bytes(value)


def strcmp(p, q):
    """Compare two strings byte by byte; return the difference at the first mismatch."""
    a, b = _as_bytes(p), _as_bytes(q)
    for x, y in zip(a, b):
        if x != y:
            return x - y
    if len(a) == len(b):
        return 0
    return a[len(b)] if len(a) > len(b) else -b[len(a)]


def gets(stream, maximum):
    """Read a line of at most ``maximum - 1`` characters, keeping its terminator."""
    out = []
    while len(out) + 1 < maximum:
        c = stream.read(1)
        if not c:
            break
        out.append(c)
        if c in "\n\r":
            break
    return "".join(out)