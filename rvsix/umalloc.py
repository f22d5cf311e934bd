"""A next-fit free-list allocator over a growable simulated heap."""

from __future__ import annotations

HEADER_SIZE = 16  # bytes in one block header; also the allocation unit
MIN_GROWTH = 4096  # fewest units requested from the heap at a time
DEFAULT_LIMIT = 64 * 1024 * 1024

_BASE = 0  # address of the zero-sized sentinel block, below the heap


class Allocator:
    """Hands out byte addresses from a heap that grows up to ``limit`` bytes."""

    def __init__(self, limit=DEFAULT_LIMIT):
        if limit < 0:
            raise ValueError("limit must not be negative")
        self.limit = limit
        self._brk = 1  # next unused unit; unit 0 is the sentinel
        self._size = {}
        self._next = {}
        self._freep = None
        self._allocated = set()

    @property
    def heap_size(self):
        """Bytes obtained from the heap so far."""
        return (self._brk - 1) * HEADER_SIZE

    def _morecore(self, nunits):
        nunits = max(nunits, MIN_GROWTH)
        if self.heap_size + nunits * HEADER_SIZE > self.limit:
            return None
        block = self._brk
        self._brk += nunits
        self._size[block] = nunits
        self._release(block)
        return self._freep

    def malloc(self, nbytes):
        """Allocate ``nbytes`` and return the block's address."""
        if nbytes < 0:
            raise ValueError("size must not be negative")
        nunits = (nbytes + HEADER_SIZE - 1) // HEADER_SIZE + 1
        if self._freep is None:
            self._next[_BASE] = _BASE
            self._size[_BASE] = 0
            self._freep = _BASE
        prevp = self._freep
        p = self._next[prevp]
        while True:
            if self._size[p] >= nunits:
                if self._size[p] == nunits:
                    self._next[prevp] = self._next.pop(p)
                else:
                    self._size[p] -= nunits
                    p += self._size[p]
                    self._size[p] = nunits
                self._freep = prevp
                self._allocated.add(p)
                return (p + 1) * HEADER_SIZE
            if p == self._freep:
                p = self._morecore(nunits)
                if p is None:
                    raise MemoryError(f"cannot allocate {nbytes} bytes")
            prevp = p
            p = self._next[p]

    def free(self, address):
        """Return a block obtained from ``malloc``."""
        if address % HEADER_SIZE:
            raise ValueError(f"address {address:#x} was not allocated")
        block = address // HEADER_SIZE - 1
        if block not in self._allocated:
            raise ValueError(f"address {address:#x} was not allocated")
        self._allocated.discard(block)
        self._release(block)

    def _release(self, bp):
        nxt, size = self._next, self._size
        p = self._freep
        while not (p < bp < nxt[p]):
            if p >= nxt[p] and (bp > p or bp < nxt[p]):
                break
            p = nxt[p]
        after = nxt[p]
        if bp + size[bp] == after:
            size[bp] += size.pop(after)
            nxt[bp] = nxt.pop(after)
        else:
            nxt[bp] = after
        if p + size[p] == bp:
            size[p] += size.pop(bp)
            nxt[p] = nxt.pop(bp)
        else:
            nxt[p] = bp
        self._freep = p

    def free_units(self):
        """Total units currently on the free list."""
        if self._freep is None:
            return 0
        total = 0
        p = self._next[_BASE]
        while p != _BASE:
            total += self._size[p]
            p = self._next[p]
        return total