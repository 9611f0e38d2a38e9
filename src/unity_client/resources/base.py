"""Common helpers for resource wrappers."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from ..exceptions import UnexpectedResponseError

if TYPE_CHECKING:  # pragma: no cover - import-time guard
    from ..client import UnityClient
    from ..http import HttpResponse


class ResourceBase:
    """Provide shared helpers for resource modules."""

    def __init__(self, client: UnityClient) -> None:
        self._client = client

    def _get_instance(
        self,
        resource_type: str,
        resource_id: str,
        *,
        fields: Iterable[str] | None = None,
    ) -> dict[str, Any]:
        params = {"fields": ",".join(fields)} if fields else None
        payload = self._client.request(
            "GET", f"/api/instances/{resource_type}/{resource_id}", params=params
        )
        return _unwrap_content(payload, f"{resource_type}/{resource_id}")

    def _post_action(
        self,
        resource_type: str,
        action: str,
        payload: Mapping[str, Any],
    ) -> HttpResponse:
        return self._client.send(
            "POST", f"/api/types/{resource_type}/action/{action}", json_payload=payload
        )


def _unwrap_content(payload: Any, label: str) -> dict[str, Any]:
    if isinstance(payload, Mapping):
        content = payload.get("content")
        if isinstance(content, Mapping):
            return dict(content)
    raise UnexpectedResponseError(f"Response for {label} did not include content.", details=payload)
