"""Compile a `ParameterSet` into a ``createVmwareLun`` request document."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .models import (
    LunParameters,
    ParameterSet,
    RequestDocument,
    SnapScheduleParameters,
)

if TYPE_CHECKING:  # pragma: no cover - import-time guard
    from .capabilities import CapabilityProbe
    from .client import UnityClient


def build_request_document(
    params: ParameterSet,
    name: str,
    compression_default: bool | None = None,
) -> RequestDocument:
    """Build the document for one LUN name.

    ``compression_default`` is only consulted when the caller left
    ``is_compression_enabled`` unbound; it must then be supplied.
    """

    if params.is_compression_enabled is not None:
        is_compression_enabled = params.is_compression_enabled
    elif compression_default is not None:
        is_compression_enabled = compression_default
    else:
        raise ValueError("compression_default is required when compression is not bound.")

    lun_parameters = LunParameters(
        pool_id=params.pool_id,
        size=params.size,
        tiering_policy=params.tiering_policy,
        is_compression_enabled=is_compression_enabled,
        host_access=params.host_access_grants(),
        # Unset rather than False: the array is left to apply its own default.
        is_thin_enabled=True if params.is_thin_enabled else None,
    )

    snap_schedule_parameters = None
    if params.snap_schedule:
        snap_schedule_parameters = SnapScheduleParameters(
            schedule_id=params.snap_schedule,
            is_paused=params.is_snap_schedule_paused,
        )

    return RequestDocument(
        name=name,
        description=params.description or None,
        lun_parameters=lun_parameters,
        snap_schedule_parameters=snap_schedule_parameters,
    )


def resolve_compression_default(
    params: ParameterSet,
    session: UnityClient,
    probe: CapabilityProbe,
) -> bool | None:
    """Ask the probe for the compression default only when the caller did not bind it."""

    if params.is_compression_enabled is not None:
        return None
    return probe.supports_compression_default(session, params.pool_id)
