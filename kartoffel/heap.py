"""A compacting RAM heap of small blocks owned by (instance, handle) pairs.

Each block is laid out as ``instance, handle, length, data...`` and the
block list ends at the first block whose instance byte is 255. Freeing a
block shifts everything after it down, so the heap never fragments.
"""

from __future__ import annotations

import struct
from collections.abc import Iterator

MAIN_HEAP_HANDLE = 1
UNUSED_HEAP = 255
HEAP_SIZE = 4242

_INSTANCE = 0
_HANDLE = 1
_LEN = 2
_OVERHEAD = 3
_MAX_BLOCK = 255


class HeapError(Exception):
    """A heap operation failed; ``code`` identifies the failure."""

    def __init__(self, code: int, info: int, message: str) -> None:
        super().__init__(f"{message} (code {code}, info {info})")
        self.code = code
        self.info = info


class Heap:
    """Blocks of up to 255 bytes in a fixed-size byte area."""

    def __init__(self, size: int = HEAP_SIZE) -> None:
        self.data = bytearray(size)
        self.data[0] = UNUSED_HEAP

    def _heads(self) -> Iterator[int]:
        head = 0
        while self.data[head] != UNUSED_HEAP:
            yield head
            head += self.data[head + _LEN] + _OVERHEAD

    def end(self) -> int:
        """Offset of the end-of-heap marker."""
        head = 0
        while self.data[head] != UNUSED_HEAP:
            head += self.data[head + _LEN] + _OVERHEAD
        return head

    def available(self) -> int:
        """Bytes left after the end-of-heap marker's position."""
        return len(self.data) - self.end()

    def _find(self, instance: int, handle: int) -> int | None:
        for head in self._heads():
            if self.data[head + _HANDLE] == handle and self.data[head + _INSTANCE] == instance:
                return head
        return None

    def _head(self, instance: int, handle: int) -> int:
        head = self._find(instance, handle)
        if head is None:
            raise HeapError(28, 0, f"no heap block {handle} for instance {instance}")
        return head

    def alloc(self, instance: int, handle: int, size: int) -> int:
        """Append a block of ``size`` bytes and return its handle."""
        if not 0 <= size <= _MAX_BLOCK:
            raise ValueError(f"heap block size must be 0..{_MAX_BLOCK}, not {size}")
        if not 0 <= instance < UNUSED_HEAP:
            raise ValueError(f"invalid instance {instance}")
        limit = len(self.data)
        head = 0
        while head + _OVERHEAD + size < limit and self.data[head] != UNUSED_HEAP:
            head += self.data[head + _LEN] + _OVERHEAD
        if head + _OVERHEAD + size >= limit:
            raise HeapError(27, handle, "out of heap memory")
        self.data[head + _INSTANCE] = instance
        self.data[head + _HANDLE] = handle
        self.data[head + _LEN] = size
        self.data[head + _OVERHEAD + size] = UNUSED_HEAP
        if size:
            self.data[head + _OVERHEAD] = 0
        return handle

    def exists(self, instance: int, handle: int) -> bool:
        return self._find(instance, handle) is not None

    def size_of(self, instance: int, handle: int) -> int:
        return self.data[self._head(instance, handle) + _LEN]

    def _free_at(self, head: int) -> None:
        n = self.data[head + _LEN] + _OVERHEAD
        limit = len(self.data)
        self.data[head:limit - n] = self.data[head + n:limit]

    def free(self, instance: int, handle: int) -> None:
        self._free_at(self._head(instance, handle))

    def free_all(self, instance: int) -> None:
        """Free every block of ``instance`` and renumber later instances down by one."""
        while (head := next((h for h in self._heads() if self.data[h] == instance), None)) is not None:
            self._free_at(head)
        for head in self._heads():
            if self.data[head + _INSTANCE] > instance:
                self.data[head + _INSTANCE] -= 1

    def _data_offset(self, instance: int, handle: int, address: int, code: int) -> int:
        head = self._head(instance, handle)
        if not 0 <= address < self.data[head + _LEN]:
            raise HeapError(code, address, f"address {address} outside heap block {handle}")
        return head + _OVERHEAD + address

    def get(self, instance: int, handle: int, address: int) -> int:
        return self.data[self._data_offset(instance, handle, address, 29)]

    def set(self, instance: int, handle: int, address: int, value: int) -> None:
        self.data[self._data_offset(instance, handle, address, 30)] = value

    def get_float(self, instance: int, handle: int, address: int) -> float:
        raw = bytes(self.get(instance, handle, address + i) for i in range(4))
        return struct.unpack("<f", raw)[0]

    def set_float(self, instance: int, handle: int, address: int, value: float) -> None:
        for offset, byte in enumerate(struct.pack("<f", value)):
            self.set(instance, handle, address + offset, byte)

    def delete_fragment(self, instance: int, handle: int, address: int, delta: int) -> None:
        """Remove ``delta`` bytes at ``address`` inside a block, shrinking it."""
        head = self._head(instance, handle)
        begin = head + _OVERHEAD + address
        end = self.end()
        stop = end - delta + 1
        if stop > begin:
            self.data[begin:stop] = self.data[begin + delta:end + 1]
        self.data[head + _LEN] -= delta