"""Fan a VMware LUN creation out across sessions and names."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Iterable, Iterator, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol

from .builder import build_request_document, resolve_compression_default
from .capabilities import CapabilityProbe, PoolCompressionProbe
from .client import UnityClient
from .exceptions import APIError, CapabilityProbeError, UnityError
from .models import ParameterSet, VMwareLun
from .resources.luns import extract_storage_resource_id

logger = logging.getLogger(__name__)


class ConfirmPolicy(Protocol):
    """Decide whether a single (session, name) creation may proceed."""

    def confirm(self, session: UnityClient, name: str) -> bool:
        ...


class AutoApprove:
    def confirm(self, session: UnityClient, name: str) -> bool:
        return True


class AutoDeny:
    def confirm(self, session: UnityClient, name: str) -> bool:
        return False


@dataclass(slots=True)
class InteractiveConfirm:
    """Ask an operator through ``prompt``, which receives a question and returns the answer."""

    prompt: Callable[[str], bool]

    def confirm(self, session: UnityClient, name: str) -> bool:
        return bool(self.prompt(f"Create VMware LUN '{name}' on {session.label}?"))


@dataclass(slots=True)
class PairFailure:
    session: str
    name: str
    kind: str
    message: str
    status_code: int | None = None
    details: Any | None = None

    def to_row(self) -> dict[str, Any]:
        return {
            "session": self.session,
            "name": self.name,
            "error": self.kind,
            "statusCode": self.status_code,
            "message": self.message,
        }


@dataclass(slots=True)
class DispatchReport:
    """Per-pair outcomes of one invocation."""

    created: list[VMwareLun] = field(default_factory=list)
    skipped: list[tuple[str, str]] = field(default_factory=list)
    failures: list[PairFailure] = field(default_factory=list)
    disconnected: list[str] = field(default_factory=list)
    attempts: int = 0
    cancelled: bool = False

    @property
    def failed(self) -> bool:
        return bool(self.failures or self.disconnected)


class LunCreator:
    """Create VMware LUNs for every (session, name) pair, one at a time."""

    def __init__(self, probe: CapabilityProbe | None = None) -> None:
        self._probe = probe or PoolCompressionProbe()

    def execute(
        self,
        sessions: Iterable[UnityClient],
        names: Sequence[str],
        params: ParameterSet,
        confirm: ConfirmPolicy,
        *,
        report: DispatchReport | None = None,
        cancel: Callable[[], bool] | None = None,
    ) -> Iterator[VMwareLun]:
        """Yield each created LUN in session-then-name order.

        Failures are recorded on ``report`` and never stop the remaining
        pairs. ``cancel`` is checked once before each session.
        """

        if report is None:
            report = DispatchReport()
        for session in sessions:
            if cancel is not None and cancel():
                report.cancelled = True
                logger.warning("Creation cancelled before session %s", session.label)
                return
            if not session.is_connected:
                self._record_disconnected(report, session)
                continue
            for name in names:
                if not session.is_connected:
                    self._record_disconnected(report, session)
                    break
                lun = self._create_one(session, name, params, confirm, report)
                if lun is not None:
                    yield lun

    def _create_one(
        self,
        session: UnityClient,
        name: str,
        params: ParameterSet,
        confirm: ConfirmPolicy,
        report: DispatchReport,
    ) -> VMwareLun | None:
        try:
            compression_default = self._compression_default(session, params)
        except UnityError as exc:
            self._record_failure(report, session, name, exc)
            return None
        document = build_request_document(params, name, compression_default).to_dict()
        logger.debug(
            "createVmwareLun document for %s on %s: %s", name, session.label, json.dumps(document)
        )

        if not confirm.confirm(session, name):
            logger.warning("Skipping VMware LUN %s on %s: not confirmed", name, session.label)
            report.skipped.append((session.label, name))
            return None

        report.attempts += 1
        try:
            response = session.luns.create(document)
            if response.status_code != 200:
                raise APIError(
                    f"Unity API error {response.status_code} creating VMware LUN '{name}'",
                    status_code=response.status_code,
                    details=response.data,
                )
            resource_id = extract_storage_resource_id(response.data)
            lun = session.luns.get(resource_id)
        except UnityError as exc:
            self._record_failure(report, session, name, exc)
            return None

        logger.info("Created VMware LUN %s (%s) on %s", name, lun.id, session.label)
        report.created.append(lun)
        return lun

    def _compression_default(self, session: UnityClient, params: ParameterSet) -> bool | None:
        try:
            default = resolve_compression_default(params, session, self._probe)
        except UnityError:
            raise
        except Exception as exc:
            raise CapabilityProbeError(
                f"Compression default lookup for pool '{params.pool_id}' failed: {exc!r}"
            ) from exc
        if params.is_compression_enabled is None and not isinstance(default, bool):
            raise CapabilityProbeError(
                f"Compression default for pool '{params.pool_id}' is not a boolean: {default!r}",
                details=default,
            )
        return default

    @staticmethod
    def _record_failure(
        report: DispatchReport, session: UnityClient, name: str, exc: UnityError
    ) -> None:
        logger.error("VMware LUN %s on %s failed: %s", name, session.label, exc)
        report.failures.append(
            PairFailure(
                session=session.label,
                name=name,
                kind=exc.__class__.__name__,
                message=str(exc),
                status_code=exc.status_code,
                details=exc.details,
            )
        )

    @staticmethod
    def _record_disconnected(report: DispatchReport, session: UnityClient) -> None:
        logger.warning("Session %s is not connected; skipping it", session.label)
        if session.label not in report.disconnected:
            report.disconnected.append(session.label)
