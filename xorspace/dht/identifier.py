""" A fixed-width identifier that names both nodes and keys in a Kademlia-style DHT, plus XOR-distance arithmetic """
from __future__ import annotations

from collections.abc import Iterable
from typing import Any, List, Optional, Sequence, Union

from xorspace.dht.bits import BitIndices
from xorspace.utils.providers import (
    DigestFunction,
    EntropySource,
    compute_digest,
    read_entropy,
    sha1_digest,
    system_entropy,
)
from xorspace.utils.serializer import MSGPackSerializer

BinaryNodeID = bytes


@MSGPackSerializer.ext_serializable(0x50)
class NodeID:
    """
    A 160-bit identifier stored least-significant byte first: bit ``i`` lives in ``raw[i // 8]`` at ``1 << (i % 8)``.
    Ordering treats the identifier as an unsigned integer; distance between two identifiers is their bitwise XOR.

    :param raw: exactly HASH_NBYTES bytes in little-endian order, see :meth:`to_bytes`
    :note: identifiers are values. The only mutator is :meth:`flip_bit`; never flip bits of an identifier
      that is currently used as a dict key or stored in a set.
    """

    HASH_FUNC: DigestFunction = staticmethod(sha1_digest)
    ENTROPY_FUNC: EntropySource = staticmethod(system_entropy)
    HASH_NBYTES = 20  # SHA1 produces a 20-byte (aka 160bit) number
    HASH_NBITS = HASH_NBYTES * 8
    RANGE = MIN, MAX = 0, 2 ** HASH_NBITS  # inclusive min, exclusive max

    __slots__ = ("_raw",)

    def __init__(self, raw: Union[bytes, bytearray]):
        if len(raw) != self.HASH_NBYTES:
            raise ValueError(f"{self.__class__.__name__} must be exactly {self.HASH_NBYTES} bytes, got {len(raw)}")
        self._raw = bytearray(raw)

    @classmethod
    def blank(cls) -> NodeID:
        """An identifier with every bit set to 0"""
        return cls(bytes(cls.HASH_NBYTES))

    @classmethod
    def random(cls, entropy: Optional[EntropySource] = None) -> NodeID:
        """
        Generates a random identifier

        :param entropy: a callable returning the requested number of random bytes; defaults to ENTROPY_FUNC
        """
        entropy = cls.ENTROPY_FUNC if entropy is None else entropy
        return cls(read_entropy(entropy, cls.HASH_NBYTES))

    @classmethod
    def from_content_hash(cls, data: Any, hash_func: Optional[DigestFunction] = None) -> NodeID:
        """
        Derives an identifier from content: the same data always maps to the same identifier

        :param data: bytes are hashed as is, strings as their utf-8 encoding; anything else
          is converted to bytes with MSGPackSerializer first
        :param hash_func: a callable mapping bytes to a HASH_NBYTES-long digest; defaults to HASH_FUNC (sha1)
        """
        if isinstance(data, str):
            data = data.encode("utf-8")
        elif not isinstance(data, (bytes, bytearray, memoryview)):
            data = MSGPackSerializer.dumps(data)
        hash_func = cls.HASH_FUNC if hash_func is None else hash_func
        return cls(compute_digest(hash_func, bytes(data), cls.HASH_NBYTES))

    @classmethod
    def random_at_distance(
        cls, reference: NodeID, distance: int, entropy: Optional[EntropySource] = None
    ) -> NodeID:
        """
        Creates a random identifier x such that ``(x ^ reference).height() == distance``.

        Starting from a random identifier, clear the bits where it differs from :reference: one by one,
        highest first, and stop as soon as the highest differing bit is exactly :distance:. If that bit
        is skipped over, flip bit :distance: instead. The result is always at the requested distance, but
        it is NOT sampled uniformly from all identifiers at that distance.

        :param reference: identifier to measure the distance from
        :param distance: height of the resulting XOR distance, in [0, HASH_NBITS)
        :param entropy: optional entropy source, see :meth:`random`
        """
        if not 0 <= distance < cls.HASH_NBITS:
            raise ValueError(f"distance must be in [0, {cls.HASH_NBITS}) but got {distance}")

        candidate = cls.random(entropy)
        for index in reversed((candidate ^ reference).into_ones()):
            candidate.flip_bit(index)
            height = (candidate ^ reference).height()
            if height == distance:
                return candidate
            if height is None or height < distance:
                break

        # the XOR distance is now below :distance: (or zero), so setting that bit makes it the highest one
        candidate.flip_bit(distance)
        return candidate

    @classmethod
    def from_int(cls, value: int) -> NodeID:
        if not cls.MIN <= value < cls.MAX:
            raise ValueError(f"{cls.__name__} must be in [{cls.MIN}, {cls.MAX}) but got {value}")
        return cls(value.to_bytes(cls.HASH_NBYTES, byteorder="little"))

    @classmethod
    def from_bytes(cls, raw: bytes) -> NodeID:
        """reverse of to_bytes"""
        return cls(raw)

    def to_bytes(self) -> BinaryNodeID:
        """A standard way to serialize NodeID into bytes: HASH_NBYTES little-endian bytes with no framing"""
        return bytes(self._raw)

    @property
    def raw(self) -> bytes:
        return bytes(self._raw)

    def packb(self) -> bytes:
        return self.to_bytes()

    @classmethod
    def unpackb(cls, raw: bytes) -> NodeID:
        return cls.from_bytes(raw)

    def copy(self) -> NodeID:
        return self.__class__(self._raw)

    def __copy__(self) -> NodeID:
        return self.copy()

    def __deepcopy__(self, memo) -> NodeID:
        return self.copy()

    def height(self) -> Optional[int]:
        """:returns: index of the most significant "1" bit, or None if every bit is 0"""
        for byte_index in reversed(range(self.HASH_NBYTES)):
            byte = self._raw[byte_index]
            if byte:
                return 8 * byte_index + byte.bit_length() - 1
        return None

    def flip_bit(self, position: int) -> None:
        """Toggle the bit at :position:; positions outside [0, HASH_NBITS) are ignored"""
        if not 0 <= position < self.HASH_NBITS:
            return
        self._raw[position // 8] ^= 1 << (position % 8)

    def ones(self, owned: bool = False) -> BitIndices:
        """Iterate over indices of "1" bits, see BitIndices for the meaning of :owned:"""
        return BitIndices(self._raw, value=True, owned=owned)

    def zeroes(self, owned: bool = False) -> BitIndices:
        """Iterate over indices of "0" bits, see BitIndices for the meaning of :owned:"""
        return BitIndices(self._raw, value=False, owned=owned)

    def into_ones(self) -> BitIndices:
        return self.ones(owned=True)

    def into_zeroes(self) -> BitIndices:
        return self.zeroes(owned=True)

    def xor(self, other: NodeID) -> NodeID:
        """Bytewise exclusive-or of two identifiers, neither operand is modified"""
        return self.__class__(bytes(ours ^ theirs for ours, theirs in zip(self._raw, other._raw)))

    def __xor__(self, other: NodeID) -> NodeID:
        if not isinstance(other, NodeID):
            return NotImplemented
        return self.xor(other)

    def xor_distance(self, other: Union[NodeID, Sequence[NodeID]]) -> Union[int, List[int]]:
        """
        :param other: one or multiple NodeIDs. If given multiple NodeIDs as other, this function
         will compute distance from self to each of NodeIDs in other.
        :return: a number or a list of numbers whose binary representations equal bitwise xor between NodeIDs.
        """
        if isinstance(other, Iterable):
            return list(map(self.xor_distance, other))
        return int(self ^ other)

    @classmethod
    def longest_common_prefix_length(cls, *ids: NodeID) -> int:
        """:returns: the number of most significant bits shared by all :ids:, HASH_NBITS if they are all equal"""
        if not ids:
            raise ValueError("longest_common_prefix_length needs at least one id")
        heights = [(ids[0] ^ other).height() for other in ids[1:]]
        highest_difference = max((height for height in heights if height is not None), default=None)
        return cls.HASH_NBITS if highest_difference is None else cls.HASH_NBITS - 1 - highest_difference

    def partial_compare(self, other: NodeID) -> Optional[int]:
        """
        Compare as unsigned integers, most significant byte first.

        :returns: -1 if self < other, 1 if self > other and None (rather than 0) if the identifiers are equal
        """
        for ours, theirs in zip(reversed(self._raw), reversed(other._raw)):
            if ours != theirs:
                return -1 if ours < theirs else 1
        return None

    def compare(self, other: NodeID) -> int:
        """Total order over identifiers: -1, 0 or 1"""
        order = self.partial_compare(other)
        return 0 if order is None else order

    def __eq__(self, other):
        if not isinstance(other, NodeID):
            return NotImplemented
        return self._raw == other._raw

    def __hash__(self):
        return hash(bytes(self._raw))

    def __lt__(self, other):
        if not isinstance(other, NodeID):
            return NotImplemented
        return self.compare(other) < 0

    def __le__(self, other):
        if not isinstance(other, NodeID):
            return NotImplemented
        return self.compare(other) <= 0

    def __gt__(self, other):
        if not isinstance(other, NodeID):
            return NotImplemented
        return self.compare(other) > 0

    def __ge__(self, other):
        if not isinstance(other, NodeID):
            return NotImplemented
        return self.compare(other) >= 0

    def __int__(self):
        return int.from_bytes(self._raw, byteorder="little")

    def __bytes__(self):
        return self.to_bytes()

    def __str__(self):
        # most significant byte first, leading zero bytes dropped
        return f"0x[{bytes(reversed(self._raw)).lstrip(bytes(1)).hex().upper()}]"

    def __repr__(self):
        return f"{self.__class__.__name__}({self})"
