"""High-level Unity client entrypoints."""
from .capabilities import CapabilityProfile, PoolCompressionProbe
from .client import UnityClient
from .config import ClientConfig
from .dispatcher import AutoApprove, AutoDeny, DispatchReport, InteractiveConfirm, LunCreator
from .exceptions import UnityError, ValidationError
from .models import AccessMask, ParameterSet, TieringPolicy, VMwareLun

__all__ = [
    "UnityClient",
    "ClientConfig",
    "UnityError",
    "ValidationError",
    "CapabilityProfile",
    "PoolCompressionProbe",
    "LunCreator",
    "DispatchReport",
    "AutoApprove",
    "AutoDeny",
    "InteractiveConfirm",
    "ParameterSet",
    "AccessMask",
    "TieringPolicy",
    "VMwareLun",
]
