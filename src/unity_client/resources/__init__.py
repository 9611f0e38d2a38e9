"""Resource-specific convenience wrappers."""
from .luns import VMwareLunsResource
from .pools import PoolsResource

__all__ = [
    "PoolsResource",
    "VMwareLunsResource",
]
