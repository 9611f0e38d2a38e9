"""Authentication strategies for Unity."""
from .base import AuthStrategy
from .basic import BasicAuth

__all__ = ["AuthStrategy", "BasicAuth"]
