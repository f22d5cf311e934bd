"""Park–Miller minimal standard pseudo-random number generator."""

from __future__ import annotations

_ULONG_MASK = (1 << 64) - 1


def do_rand(ctx):
    """Advance the state ``ctx`` and return the new value, in [0, 0x7ffffffd].

    Computes (7^5 * x) mod (2^31 - 1) using Schrage's method.
    """
    x = (ctx & _ULONG_MASK) % 0x7FFFFFFE + 1
    hi, lo = divmod(x, 127773)
    x = 16807 * lo - 2836 * hi
    if x < 0:
        x += 0x7FFFFFFF
    return x - 1


class ParkMiller:
    """A generator whose state is replaced by each value it produces."""

    def __init__(self, seed=1):
        self.state = seed & _ULONG_MASK

    def next(self):
        self.state = do_rand(self.state)
        return self.state