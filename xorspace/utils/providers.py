"""
Entropy and digest capabilities consumed by identifier constructors.

Both are plain callables so that tests (or a node with its own CSPRNG / hash backend) can pass
deterministic replacements instead of relying on process-wide state.
"""
import hashlib
import os
from typing import Callable

EntropySource = Callable[[int], bytes]  # nbytes -> exactly nbytes of randomness
DigestFunction = Callable[[bytes], bytes]  # data -> fixed-size digest

DIGEST_NBYTES = 20  # SHA1 produces a 20-byte (aka 160bit) digest


class ProviderError(ValueError):
    """An entropy source or digest function returned output of the wrong shape"""


def system_entropy(nbytes: int) -> bytes:
    """Kernel-supplied randomness, suitable for node ids"""
    return os.urandom(nbytes)


def sha1_digest(data: bytes) -> bytes:
    return hashlib.sha1(data).digest()


def read_entropy(source: EntropySource, nbytes: int) -> bytes:
    """Call :source: and ensure it produced exactly :nbytes: bytes"""
    raw = source(nbytes)
    if not isinstance(raw, (bytes, bytearray)) or len(raw) != nbytes:
        raise ProviderError(f"Entropy source {source!r} must return {nbytes} bytes, got {raw!r}")
    return bytes(raw)


def compute_digest(digest_func: DigestFunction, data: bytes, nbytes: int = DIGEST_NBYTES) -> bytes:
    """Hash :data: with :digest_func: and ensure the digest is exactly :nbytes: long"""
    digest = digest_func(data)
    if not isinstance(digest, (bytes, bytearray)) or len(digest) != nbytes:
        raise ProviderError(f"Digest function {digest_func!r} must return {nbytes} bytes, got {digest!r}")
    return bytes(digest)
