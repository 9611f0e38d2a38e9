"""Capability matrix and feature flags for Unity operating-environment releases."""

from __future__ import annotations

import logging
import re
import warnings
from collections.abc import Sequence
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Protocol

from .exceptions import CapabilityProbeError, UnityError

if TYPE_CHECKING:  # pragma: no cover - import-time guard
    from .client import UnityClient

VersionTuple = tuple[int, int, int]

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CapabilityProfile:
    """Represents the feature surface supported by a Unity OE release family."""

    label: str
    min_version: VersionTuple
    supports_compression: bool
    detected_release: str | None = None
    is_future_release: bool = False

    def describe_release(self) -> str:
        return self.detected_release or self.label


_BASE_PROFILES: Sequence[CapabilityProfile] = (
    CapabilityProfile(
        label="4.0",
        min_version=(4, 0, 0),
        supports_compression=False,
    ),
    CapabilityProfile(
        label="4.1",
        min_version=(4, 1, 0),
        supports_compression=True,
    ),
    CapabilityProfile(
        label="4.2",
        min_version=(4, 2, 0),
        supports_compression=True,
    ),
    CapabilityProfile(
        label="5.0",
        min_version=(5, 0, 0),
        supports_compression=True,
    ),
)


_RELEASE_PATTERN = re.compile(r"(\d+)(?:\.(\d+))?(?:\.(\d+))?")


def resolve_capabilities(release: str | None) -> CapabilityProfile:
    """Pick the newest release family that ``release`` has reached.

    Unknown or unparseable releases get the newest family.
    """

    newest = _BASE_PROFILES[-1]
    version = _parse_release(release)
    if version is None:
        return replace(newest, detected_release=release or newest.label)

    reached = [profile for profile in _BASE_PROFILES if version >= profile.min_version]
    if not reached:
        warnings.warn(
            f"Unity OE {release} predates {_BASE_PROFILES[0].label}; using the oldest known profile.",
            stacklevel=2,
        )
    is_future_release = version[0] > newest.min_version[0]
    if is_future_release:
        warnings.warn(
            f"Unity OE {release} is newer than any known release; assuming {newest.label} behavior.",
            stacklevel=2,
        )
    base = reached[-1] if reached else _BASE_PROFILES[0]
    return replace(base, detected_release=release, is_future_release=is_future_release)


def _parse_release(release: str | None) -> VersionTuple | None:
    # softwareVersion looks like "5.3.0.0.5.120"; only major.minor.patch matter.
    match = _RELEASE_PATTERN.search(release or "")
    if match is None:
        return None
    major, minor, patch = (int(part or 0) for part in match.groups())
    return major, minor, patch


class CapabilityProbe(Protocol):
    """Resolve defaults that depend on the state of the target array."""

    def supports_compression_default(self, session: UnityClient, pool_id: str) -> bool:
        ...


class PoolCompressionProbe:
    """Derive the compression default from the release profile and the target pool.

    Compression is only offered on releases that support it and, on those,
    only enabled by default for pools built entirely from flash drives.
    """

    def supports_compression_default(self, session: UnityClient, pool_id: str) -> bool:
        try:
            profile = session.capabilities
            if not profile.supports_compression:
                logger.debug(
                    "Release %s has no inline compression; defaulting to disabled",
                    profile.describe_release(),
                )
                return False
            pool = session.pools.get(pool_id)
        except UnityError as exc:
            raise CapabilityProbeError(
                f"Unable to resolve compression default for pool '{pool_id}': {exc}",
                status_code=exc.status_code,
                details=exc.details,
            ) from exc
        is_all_flash = pool.get("isAllFlash")
        if not isinstance(is_all_flash, bool):
            raise CapabilityProbeError(
                f"Pool '{pool_id}' did not report isAllFlash; cannot infer compression default.",
                details=pool,
            )
        return is_all_flash


__all__ = [
    "CapabilityProbe",
    "CapabilityProfile",
    "PoolCompressionProbe",
    "resolve_capabilities",
]
