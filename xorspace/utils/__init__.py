from xorspace.utils.logging import get_logger
from xorspace.utils.providers import (
    DigestFunction,
    EntropySource,
    ProviderError,
    compute_digest,
    read_entropy,
    sha1_digest,
    system_entropy,
)
from xorspace.utils.serializer import MSGPackSerializer

__all__ = [
    "DigestFunction",
    "EntropySource",
    "MSGPackSerializer",
    "ProviderError",
    "compute_digest",
    "get_logger",
    "read_entropy",
    "sha1_digest",
    "system_entropy",
]
