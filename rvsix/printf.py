"""Minimal formatted output understanding %d, %l, %x, %p, %s, %c and %%."""

from __future__ import annotations

DIGITS = "0123456789ABCDEF"

_INT_MASK = 0xFFFFFFFF
_UINT64_MASK = (1 << 64) - 1


def _format_int(value, base, signed):
    """Render a value the way a 32-bit C int is rendered in ``base``."""
    x = int(value) & _INT_MASK
    negative = False
    if signed and x >= 1 << 31:
        negative = True
        x = (1 << 32) - x
    out = []
    while True:
        out.append(DIGITS[x % base])
        x //= base
        if x == 0:
            break
    if negative:
        out.append("-")
    return "".join(reversed(out))


def _format_pointer(value):
    return "0x" + "".join(
        DIGITS[(int(value) & _UINT64_MASK) >> shift & 0xF] for shift in range(60, -1, -4)
    )


def _format_char(value):
    if isinstance(value, str):
        if len(value) != 1:
            raise ValueError("%c needs a single character")
        return value
    return chr(int(value) & 0xFF)


def format_message(fmt, *args):
    """Format ``fmt`` with ``args`` and return the resulting text."""
    remaining = iter(args)

    def take():
        try:
            return next(remaining)
        except StopIteration:
            raise ValueError(f"not enough arguments for format {fmt!r}") from None

    out = []
    pending = False
    for c in fmt:
        if not pending:
            if c == "%":
                pending = True
            else:
                out.append(c)
            continue
        pending = False
        if c == "d":
            out.append(_format_int(take(), 10, True))
        elif c == "l":
            out.append(_format_int(take(), 10, False))
        elif c == "x":
            out.append(_format_int(take(), 16, False))
        elif c == "p":
            out.append(_format_pointer(take()))
        elif c == "s":
            s = take()
            out.append("(null)" if s is None else str(s))
        elif c == "c":
            out.append(_format_char(take()))
        elif c == "%":
            out.append("%")
        else:
            # Unknown sequences are echoed to draw attention.
            out.append("%" + c)
    return "".join(out)


def fprintf(stream, fmt, *args):
    """Write the formatted text to a text stream."""
    stream.write(format_message(fmt, *args))