"""Sv39 user page tables over a simulated pool of physical pages."""

from __future__ import annotations

from .memory import (
    MAXVA,
    PGSIZE,
    PTE_R,
    PTE_SIZE,
    PTE_U,
    PTE_V,
    PTE_W,
    PTE_X,
    pa_to_pte,
    pg_round_down,
    pg_round_up,
    pte_flags,
    pte_to_pa,
    px,
)

DEFAULT_BASE = 0x80000000


class KernelPanic(RuntimeError):
    """An invariant of the virtual-memory system was violated."""


class OutOfMemory(Exception):
    """No physical page was available."""


class BadAddress(Exception):
    """A user virtual address is not mapped for user access."""


class PhysicalMemory:
    """A contiguous range of physical pages with a page allocator."""

    def __init__(self, npages, base=DEFAULT_BASE):
        if base % PGSIZE:
            raise ValueError("physical base must be page aligned")
        if npages < 0:
            raise ValueError("page count must not be negative")
        self.base = base
        self.size = npages * PGSIZE
        self._data = bytearray(self.size)
        # Pages freed in ascending order, so the highest page is handed out first.
        self._free = list(range(base, base + self.size, PGSIZE))
        self._free_set = set(self._free)

    def _offset(self, pa, n):
        if pa < self.base or pa + n > self.base + self.size or n < 0:
            raise KernelPanic(f"physical address {pa:#x} out of range")
        return pa - self.base

    def alloc(self):
        """Hand out one page; raise OutOfMemory when none is left."""
        if not self._free:
            raise OutOfMemory("no free physical pages")
        pa = self._free.pop()
        self._free_set.discard(pa)
        return pa

    def free(self, pa):
        """Return a page to the pool."""
        if pa % PGSIZE or not self.base <= pa < self.base + self.size:
            raise KernelPanic("kfree")
        if pa in self._free_set:
            raise KernelPanic("kfree")
        self._free.append(pa)
        self._free_set.add(pa)

    def read(self, pa, n):
        off = self._offset(pa, n)
        return bytes(self._data[off:off + n])

    def write(self, pa, data):
        data = bytes(data)
        off = self._offset(pa, len(data))
        self._data[off:off + len(data)] = data

    def read_pte(self, addr):
        return int.from_bytes(self.read(addr, PTE_SIZE), "little")

    def write_pte(self, addr, value):
        self.write(addr, value.to_bytes(PTE_SIZE, "little"))


class PageTable:
    """A three-level Sv39 page table rooted in one physical page."""

    def __init__(self, memory):
        self.memory = memory
        self.root = memory.alloc()
        memory.write(self.root, bytes(PGSIZE))

    def walk(self, va, alloc=False):
        """Return the physical address of the leaf PTE for ``va``.

        Returns None when an intermediate table is missing and ``alloc`` is
        false; raises OutOfMemory when a needed table cannot be allocated.
        """
        if va >= MAXVA:
            raise KernelPanic("walk")
        table = self.root
        for level in (2, 1):
            pte_addr = table + PTE_SIZE * px(level, va)
            pte = self.memory.read_pte(pte_addr)
            if pte & PTE_V:
                table = pte_to_pa(pte)
            else:
                if not alloc:
                    return None
                table = self.memory.alloc()
                self.memory.write(table, bytes(PGSIZE))
                self.memory.write_pte(pte_addr, pa_to_pte(table) | PTE_V)
        return table + PTE_SIZE * px(0, va)

    def walkaddr(self, va):
        """Physical address of a user page, or None if not user-mapped."""
        if va >= MAXVA:
            return None
        pte_addr = self.walk(va)
        if pte_addr is None:
            return None
        pte = self.memory.read_pte(pte_addr)
        if not pte & PTE_V or not pte & PTE_U:
            return None
        return pte_to_pa(pte)

    def map_pages(self, va, size, pa, perm):
        """Map ``[va, va+size)`` to physical memory starting at ``pa``."""
        if size == 0:
            raise KernelPanic("mappages: size")
        a = pg_round_down(va)
        last = pg_round_down(va + size - 1)
        while True:
            pte_addr = self.walk(a, alloc=True)
            if self.memory.read_pte(pte_addr) & PTE_V:
                raise KernelPanic("mappages: remap")
            self.memory.write_pte(pte_addr, pa_to_pte(pa) | perm | PTE_V)
            if a == last:
                break
            a += PGSIZE
            pa += PGSIZE

    def unmap(self, va, npages, do_free):
        """Remove ``npages`` existing mappings from ``va``, optionally freeing them."""
        if va % PGSIZE:
            raise KernelPanic("uvmunmap: not aligned")
        for a in range(va, va + npages * PGSIZE, PGSIZE):
            pte_addr = self.walk(a)
            if pte_addr is None:
                raise KernelPanic("uvmunmap: walk")
            pte = self.memory.read_pte(pte_addr)
            if not pte & PTE_V:
                raise KernelPanic("uvmunmap: not mapped")
            if pte_flags(pte) == PTE_V:
                raise KernelPanic("uvmunmap: not a leaf")
            if do_free:
                self.memory.free(pte_to_pa(pte))
            self.memory.write_pte(pte_addr, 0)

    def load_first(self, src):
        """Place initial code at virtual address 0; it must fit in a page."""
        src = bytes(src)
        if len(src) >= PGSIZE:
            raise KernelPanic("uvmfirst: more than a page")
        mem = self.memory.alloc()
        self.memory.write(mem, bytes(PGSIZE))
        self.map_pages(0, PGSIZE, mem, PTE_W | PTE_R | PTE_X | PTE_U)
        self.memory.write(mem, src)

    def grow(self, oldsz, newsz, xperm=0):
        """Grow the address space to ``newsz`` with zeroed pages; return the new size."""
        if newsz < oldsz:
            return oldsz
        oldsz = pg_round_up(oldsz)
        for a in range(oldsz, newsz, PGSIZE):
            try:
                mem = self.memory.alloc()
            except OutOfMemory:
                self.shrink(a, oldsz)
                raise
            self.memory.write(mem, bytes(PGSIZE))
            try:
                self.map_pages(a, PGSIZE, mem, PTE_R | PTE_U | xperm)
            except OutOfMemory:
                self.memory.free(mem)
                self.shrink(a, oldsz)
                raise
        return newsz

    def shrink(self, oldsz, newsz):
        """Release pages so the size drops from ``oldsz`` to ``newsz``."""
        if newsz >= oldsz:
            return oldsz
        new_top, old_top = pg_round_up(newsz), pg_round_up(oldsz)
        if new_top < old_top:
            self.unmap(new_top, (old_top - new_top) // PGSIZE, True)
        return newsz

    def _free_walk(self, table):
        for pte_addr in range(table, table + PGSIZE, PTE_SIZE):
            pte = self.memory.read_pte(pte_addr)
            if pte & PTE_V and not pte & (PTE_R | PTE_W | PTE_X):
                self._free_walk(pte_to_pa(pte))
                self.memory.write_pte(pte_addr, 0)
            elif pte & PTE_V:
                raise KernelPanic("freewalk: leaf")
        self.memory.free(table)

    def free_walk(self):
        """Free every page-table page; all leaves must already be gone."""
        self._free_walk(self.root)

    def free(self, sz):
        """Free the user pages below ``sz`` and then the table itself."""
        if sz > 0:
            self.unmap(0, pg_round_up(sz) // PGSIZE, True)
        self.free_walk()

    def copy_to(self, other, sz):
        """Duplicate the first ``sz`` bytes of this address space into ``other``."""
        copied = 0
        try:
            for va in range(0, sz, PGSIZE):
                pte_addr = self.walk(va)
                if pte_addr is None:
                    raise KernelPanic("uvmcopy: pte should exist")
                pte = self.memory.read_pte(pte_addr)
                if not pte & PTE_V:
                    raise KernelPanic("uvmcopy: page not present")
                mem = self.memory.alloc()
                self.memory.write(mem, self.memory.read(pte_to_pa(pte), PGSIZE))
                try:
                    other.map_pages(va, PGSIZE, mem, pte_flags(pte))
                except OutOfMemory:
                    self.memory.free(mem)
                    raise
                copied += 1
        except OutOfMemory:
            other.unmap(0, copied, True)
            raise

    def clear_user(self, va):
        """Revoke user access to the page at ``va``."""
        pte_addr = self.walk(va)
        if pte_addr is None:
            raise KernelPanic("uvmclear")
        self.memory.write_pte(pte_addr, self.memory.read_pte(pte_addr) & ~PTE_U)

    def _user_pages(self, va, length):
        """Yield (physical address, chunk length) pieces covering a user range."""
        while length > 0:
            va0 = pg_round_down(va)
            pa0 = self.walkaddr(va0)
            if pa0 is None:
                raise BadAddress(f"address {va:#x} not mapped for user")
            n = min(PGSIZE - (va - va0), length)
            yield pa0 + (va - va0), n
            length -= n
            va = va0 + PGSIZE

    def copy_out(self, dstva, data):
        """Write ``data`` to user virtual address ``dstva``."""
        data = bytes(data)
        offset = 0
        for pa, n in self._user_pages(dstva, len(data)):
            self.memory.write(pa, data[offset:offset + n])
            offset += n

    def copy_in(self, srcva, length):
        """Read ``length`` bytes from user virtual address ``srcva``."""
        return b"".join(self.memory.read(pa, n) for pa, n in self._user_pages(srcva, length))

    def copy_in_str(self, srcva, maximum):
        """Read a NUL-terminated string of at most ``maximum`` bytes, NUL excluded."""
        out = bytearray()
        try:
            for pa, n in self._user_pages(srcva, maximum):
                chunk = self.memory.read(pa, n)
                nul = chunk.find(0)
                if nul >= 0:
                    out += chunk[:nul]
                    return bytes(out)
                out += chunk
        except BadAddress:
            raise
        raise BadAddress("string not terminated within limit")