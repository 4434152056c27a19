""" Double-ended iteration over the positions of set or unset bits in a little-endian byte buffer """
from __future__ import annotations

from typing import Iterator, Union

ByteBuffer = Union[bytes, bytearray]


class BitIndices:
    """
    A single-pass iterator over indices of bits equal to :value:, where bit i is ``raw[i // 8] >> (i % 8) & 1``.

    Iteration can proceed from both ends: ``next(it)`` advances a forward cursor from index 0 upwards,
    ``it.next_back()`` advances a backward cursor from the top index downwards. The two cursors never cross,
    so interleaving them visits every matching index exactly once.

    :param raw: little-endian bytes to scan
    :param value: True to yield indices of "1" bits, False for "0" bits
    :param owned: if True, take a private copy of :raw:, so the iterator is unaffected by later changes
      to the source. Otherwise read :raw: in place: the caller must not mutate it while iterating.
    """

    __slots__ = ("_raw", "_value", "_front", "_back")

    def __init__(self, raw: ByteBuffer, value: bool = True, owned: bool = False):
        self._raw = bytes(raw) if owned else raw
        self._value = bool(value)
        self._front, self._back = 0, len(raw) * 8

    def _bit(self, index: int) -> bool:
        return bool(self._raw[index // 8] & (1 << (index % 8)))

    def __iter__(self) -> BitIndices:
        return self

    def __next__(self) -> int:
        while self._front < self._back:
            index = self._front
            self._front += 1
            if self._bit(index) == self._value:
                return index
        raise StopIteration

    def next_back(self) -> int:
        """Yield the highest matching index not consumed yet, raise StopIteration if there is none"""
        while self._front < self._back:
            self._back -= 1
            if self._bit(self._back) == self._value:
                return self._back
        raise StopIteration

    def __reversed__(self) -> Iterator[int]:
        while True:
            try:
                yield self.next_back()
            except StopIteration:
                return

    def remaining(self) -> int:
        """Count matching indices between the two cursors without consuming them"""
        return sum(self._bit(index) == self._value for index in range(self._front, self._back))

    def __repr__(self):
        kind = "ones" if self._value else "zeroes"
        return f"{self.__class__.__name__}({kind}, front={self._front}, back={self._back})"
