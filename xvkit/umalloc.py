"""A first-fit free-list allocator over a simulated, growable heap."""

HEADER_SIZE = 8
MIN_GROWTH_UNITS = 4096

_BASE = 0


class Allocator:
    """Hands out addresses from a heap grown through a program break.

    Every block carries one header; the free list is circular, ordered by
    address, and adjacent free blocks are merged when released.
    """

    def __init__(self, heap_start=4096, limit=None):
        if heap_start <= _BASE:
            raise ValueError("heap must start above address 0")
        self._start = heap_start
        self._brk = heap_start
        self._limit = limit
        self._ptr = {}
        self._size = {}
        self._allocated = set()
        self._freep = None

    def sbrk(self, n):
        """Move the break by ``n`` bytes and return the old break."""
        old = self._brk
        new = old + n
        if new < self._start or (self._limit is not None and new - self._start > self._limit):
            raise MemoryError(f"cannot move break by {n} bytes")
        self._brk = new
        return old

    def malloc(self, nbytes):
        """Return the address of a block of at least ``nbytes`` bytes."""
        if nbytes < 0:
            raise ValueError("size must not be negative")
        nunits = (nbytes + HEADER_SIZE - 1) // HEADER_SIZE + 1
        if self._freep is None:
            self._ptr[_BASE] = _BASE
            self._size[_BASE] = 0
            self._freep = _BASE
        prevp = self._freep
        p = self._ptr[prevp]
        while True:
            if self._size[p] >= nunits:
                if self._size[p] == nunits:
                    self._ptr[prevp] = self._ptr.pop(p)
                else:
                    self._size[p] -= nunits
                    p += self._size[p] * HEADER_SIZE
                    self._size[p] = nunits
                self._freep = prevp
                self._allocated.add(p)
                return p + HEADER_SIZE
            if p == self._freep:
                p = self._morecore(nunits)
            prevp, p = p, self._ptr[p]

    def free(self, address):
        """Return a block obtained from ``malloc`` to the free list."""
        bp = address - HEADER_SIZE
        if bp not in self._allocated:
            raise ValueError(f"{address:#x} is not an allocated block")
        self._allocated.remove(bp)
        self._release(bp)

    def _morecore(self, nunits):
        nunits = max(nunits, MIN_GROWTH_UNITS)
        hp = self.sbrk(nunits * HEADER_SIZE)
        self._size[hp] = nunits
        self._release(hp)
        return self._freep

    def _release(self, bp):
        ptr, size = self._ptr, self._size
        p = self._freep
        while not (p < bp < ptr[p]):
            if p >= ptr[p] and (bp > p or bp < ptr[p]):
                break
            p = ptr[p]
        nxt = ptr[p]
        if bp + size[bp] * HEADER_SIZE == nxt:
            size[bp] += size.pop(nxt)
            ptr[bp] = ptr.pop(nxt)
        else:
            ptr[bp] = nxt
        if p + size[p] * HEADER_SIZE == bp:
            size[p] += size.pop(bp)
            ptr[p] = ptr.pop(bp)
        else:
            ptr[p] = bp
        self._freep = p