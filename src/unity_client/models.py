"""Typed parameters, request documents and domain objects for VMware LUN creation."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation, localcontext
from enum import Enum
from typing import Any

from .exceptions import UnexpectedResponseError, ValidationError

SIZE_UNIT_MULTIPLIERS: dict[str, int] = {
    "bytes": 1,
    "b": 1,
    "kb": 1000,
    "mb": 1000**2,
    "gb": 1000**3,
    "tb": 1000**4,
    "kib": 1024,
    "mib": 1024**2,
    "gib": 1024**3,
    "tib": 1024**4,
}

# Sizes travel as unsigned 64-bit byte counts.
MAX_SIZE_BYTES = 2**64 - 1


class _ParsableEnum(str, Enum):
    @classmethod
    def parse(cls, value: Any):
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower()
        for member in cls:
            if member.value.lower() == text or member.name.lower() == text:
                return member
        choices = ", ".join(member.value for member in cls)
        raise ValidationError(f"Invalid {cls.__name__} '{value}'. Expected one of: {choices}")


class AccessMask(_ParsableEnum):
    """Permission level a host has to a LUN and its snapshots."""

    NO_ACCESS = "NoAccess"
    PRODUCTION = "Production"
    SNAPSHOT = "Snapshot"
    BOTH = "Both"


class TieringPolicy(_ParsableEnum):
    """FAST VP data placement policy."""

    AUTOTIER_HIGH = "Autotier_High"
    AUTOTIER = "Autotier"
    HIGHEST = "Highest"
    LOWEST = "Lowest"
    NO_DATA_MOVEMENT = "No_Data_Movement"
    MIXED = "Mixed"


def size_to_bytes(value: float | int | str, unit: str = "bytes") -> int:
    """Convert a size expressed in ``unit`` to a whole number of bytes.

    kb/mb/gb/tb are decimal (powers of 1000); kib/mib/gib/tib are binary
    (powers of 1024). The value is parsed exactly, so non-finite sizes and
    sizes that do not land on a whole byte are rejected rather than rounded.
    """
    normalized_unit = unit.lower()
    if normalized_unit not in SIZE_UNIT_MULTIPLIERS:
        raise ValidationError(
            f"Invalid unit: {unit}. Supported units: {', '.join(SIZE_UNIT_MULTIPLIERS)}"
        )
    if isinstance(value, bool):
        raise ValidationError(f"Invalid size: {value!r}")
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as exc:
        raise ValidationError(f"Invalid size: {value!r}") from exc
    if not number.is_finite():
        raise ValidationError(f"Size must be a finite number, got {value!r}.")
    multiplier = SIZE_UNIT_MULTIPLIERS[normalized_unit]
    if number.adjusted() > len(str(MAX_SIZE_BYTES)):
        raise ValidationError(f"Size {value!r} {unit} exceeds {MAX_SIZE_BYTES} bytes.")
    with localcontext() as context:
        context.prec = len(number.as_tuple().digits) + len(str(multiplier))
        total = number * multiplier
    if total != total.to_integral_value():
        raise ValidationError(f"Size {value!r} {unit} is not a whole number of bytes.")
    if total > MAX_SIZE_BYTES:
        raise ValidationError(f"Size {value!r} {unit} exceeds {MAX_SIZE_BYTES} bytes.")
    return int(total)


# Request document ----------------------------------------------------------


@dataclass(frozen=True, slots=True)
class HostAccessGrant:
    host_id: str
    access_mask: AccessMask

    def to_dict(self) -> dict[str, Any]:
        return {"host": {"id": self.host_id}, "accessMask": self.access_mask.value}


@dataclass(frozen=True, slots=True)
class LunParameters:
    """The ``lunParameters`` block; ``None`` fields are left out of the wire document."""

    pool_id: str
    size: int
    is_compression_enabled: bool
    tiering_policy: TieringPolicy | None = None
    host_access: tuple[HostAccessGrant, ...] = ()
    is_thin_enabled: bool | None = None

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"pool": {"id": self.pool_id}, "size": self.size}
        if self.tiering_policy is not None:
            body["fastVPParameters"] = {"tieringPolicy": self.tiering_policy.value}
        body["isCompressionEnabled"] = self.is_compression_enabled
        if self.host_access:
            body["hostAccess"] = [grant.to_dict() for grant in self.host_access]
        if self.is_thin_enabled is not None:
            body["isThinEnabled"] = self.is_thin_enabled
        return body


@dataclass(frozen=True, slots=True)
class SnapScheduleParameters:
    schedule_id: str
    is_paused: bool

    def to_dict(self) -> dict[str, Any]:
        return {"snapSchedule": {"id": self.schedule_id}, "isSnapSchedulePaused": self.is_paused}


@dataclass(frozen=True, slots=True)
class RequestDocument:
    """Body of a ``createVmwareLun`` action, serialized in a fixed key order."""

    name: str
    lun_parameters: LunParameters
    description: str | None = None
    snap_schedule_parameters: SnapScheduleParameters | None = None

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"name": self.name}
        if self.description is not None:
            body["description"] = self.description
        body["lunParameters"] = self.lun_parameters.to_dict()
        if self.snap_schedule_parameters is not None:
            body["snapScheduleParameters"] = self.snap_schedule_parameters.to_dict()
        return body


# User input ----------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ParameterSet:
    """Validated inputs for one creation invocation.

    Optional fields hold ``None`` when the caller did not bind them, which is
    distinct from binding them to their default value.
    """

    names: tuple[str, ...]
    pool_id: str
    size: int
    description: str | None = None
    is_thin_enabled: bool = True
    is_compression_enabled: bool | None = None
    tiering_policy: TieringPolicy | None = None
    host_ids: tuple[str, ...] = ()
    access_mask: AccessMask = AccessMask.PRODUCTION
    snap_schedule: str | None = None
    is_snap_schedule_paused: bool = False

    def __post_init__(self) -> None:
        names = _as_tuple(self.names)
        if not names:
            raise ValidationError("At least one LUN name is required.")
        for name in names:
            if not isinstance(name, str) or not name.strip():
                raise ValidationError("LUN names must be non-empty strings.")
        if not isinstance(self.pool_id, str) or not self.pool_id.strip():
            raise ValidationError("A pool identifier is required.")
        if isinstance(self.size, bool) or not isinstance(self.size, int) or self.size <= 0:
            raise ValidationError(f"Size must be a positive number of bytes, got {self.size!r}.")
        if self.size > MAX_SIZE_BYTES:
            raise ValidationError(f"Size {self.size} exceeds {MAX_SIZE_BYTES} bytes.")
        host_ids = _as_tuple(self.host_ids)
        for host_id in host_ids:
            if not isinstance(host_id, str) or not host_id.strip():
                raise ValidationError("Host identifiers must be non-empty strings.")
        object.__setattr__(self, "names", names)
        object.__setattr__(self, "host_ids", host_ids)
        object.__setattr__(self, "access_mask", AccessMask.parse(self.access_mask))
        if self.tiering_policy is not None:
            object.__setattr__(self, "tiering_policy", TieringPolicy.parse(self.tiering_policy))

    def host_access_grants(self) -> tuple[HostAccessGrant, ...]:
        return tuple(HostAccessGrant(host_id, self.access_mask) for host_id in self.host_ids)


def _as_tuple(values: Iterable[str] | str | None) -> tuple[str, ...]:
    if values is None:
        return ()
    if isinstance(values, str):
        return (values,)
    return tuple(values)


# Domain objects ------------------------------------------------------------


def _ref_id(value: Any) -> str | None:
    if isinstance(value, Mapping):
        candidate = value.get("id")
        return str(candidate) if candidate is not None else None
    return None


@dataclass(slots=True)
class VMwareLun:
    """A VMware VMFS LUN storage resource as reported by the array."""

    id: str
    name: str | None = None
    description: str | None = None
    type: Any | None = None
    size_total: int | None = None
    size_allocated: int | None = None
    thin_status: Any | None = None
    relocation_policy: Any | None = None
    pool_ids: list[str] = field(default_factory=list)
    lun_ids: list[str] = field(default_factory=list)
    snap_schedule_id: str | None = None
    is_snap_schedule_paused: bool | None = None
    host_access: list[dict[str, Any]] = field(default_factory=list)
    session: str | None = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any], *, session: str | None = None) -> VMwareLun:
        content = payload.get("content", payload)
        if not isinstance(content, Mapping) or not content.get("id"):
            raise UnexpectedResponseError(
                "Storage resource payload did not include an id.", details=payload
            )
        pool_ids = [ref for ref in map(_ref_id, content.get("pools") or []) if ref]
        lun_ids = [ref for ref in map(_ref_id, content.get("luns") or []) if ref]
        host_access = [
            dict(entry) for entry in content.get("blockHostAccess") or [] if isinstance(entry, Mapping)
        ]
        return cls(
            id=str(content["id"]),
            name=content.get("name"),
            description=content.get("description"),
            type=content.get("type"),
            size_total=content.get("sizeTotal"),
            size_allocated=content.get("sizeAllocated"),
            thin_status=content.get("thinStatus"),
            relocation_policy=content.get("relocationPolicy"),
            pool_ids=pool_ids,
            lun_ids=lun_ids,
            snap_schedule_id=_ref_id(content.get("snapSchedule")),
            is_snap_schedule_paused=content.get("isSnapSchedulePaused"),
            host_access=host_access,
            session=session,
            raw=dict(content),
        )

    def to_row(self) -> dict[str, Any]:
        return {
            "session": self.session,
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "sizeTotal": self.size_total,
            "sizeAllocated": self.size_allocated,
            "pools": self.pool_ids,
            "luns": self.lun_ids,
            "snapSchedule": self.snap_schedule_id,
            "isSnapSchedulePaused": self.is_snap_schedule_paused,
        }
