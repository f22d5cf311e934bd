import pytest

from rvsix.umalloc import HEADER_SIZE, MIN_GROWTH, Allocator


def units_for(nbytes):
    return (nbytes + HEADER_SIZE - 1) // HEADER_SIZE + 1


def test_fresh_allocator_has_nothing_free():
    assert Allocator().free_units() == 0


def test_first_allocation_grows_heap_by_minimum():
    alloc = Allocator()
    alloc.malloc(10)
    assert alloc.heap_size == MIN_GROWTH * HEADER_SIZE
    assert alloc.free_units() == MIN_GROWTH - units_for(10)


def test_free_and_reallocate_same_size_reuses_address():
    alloc = Allocator()
    a = alloc.malloc(100)
    alloc.free(a)
    assert alloc.malloc(100) == a


def test_freeing_everything_coalesces():
    alloc = Allocator()
    addrs = [alloc.malloc(n) for n in (10, 200, 37, 1000)]
    for a in addrs:
        alloc.free(a)
    assert alloc.free_units() == MIN_GROWTH


def test_blocks_do_not_overlap():
    alloc = Allocator()
    sizes = [5, 64, 300, 17, 1024, 1]
    blocks = sorted((alloc.malloc(n), n) for n in sizes)
    for (a, n), (b, _) in zip(blocks, blocks[1:]):
        assert a + n <= b
    assert all(a % HEADER_SIZE == 0 for a, _ in blocks)


def test_exhaustion_raises_memory_error():
    alloc = Allocator(limit=100)
    with pytest.raises(MemoryError):
        alloc.malloc(10)


def test_allocate_all_free_all_allocate_again():
    alloc = Allocator(limit=2 * MIN_GROWTH * HEADER_SIZE)
    held = []
    with pytest.raises(MemoryError):
        while True:
            held.append(alloc.malloc(10001))
    assert len(held) > 0
    for a in held:
        alloc.free(a)
    assert alloc.free_units() * HEADER_SIZE == alloc.heap_size
    assert alloc.malloc(1024 * 20) % HEADER_SIZE == 0


def test_large_request_grows_beyond_minimum():
    alloc = Allocator()
    nbytes = MIN_GROWTH * HEADER_SIZE * 2
    alloc.malloc(nbytes)
    assert alloc.heap_size == units_for(nbytes) * HEADER_SIZE
    assert alloc.free_units() == 0


def test_double_free_rejected():
    alloc = Allocator()
    a = alloc.malloc(8)
    alloc.free(a)
    with pytest.raises(ValueError):
        alloc.free(a)


def test_unknown_address_rejected():
    alloc = Allocator()
    alloc.malloc(8)
    with pytest.raises(ValueError):
        alloc.free(HEADER_SIZE * 3 + 1)


def test_negative_size_rejected():
    with pytest.raises(ValueError):
        Allocator().malloc(-1)