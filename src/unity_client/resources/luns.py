"""VMware VMFS LUN operations."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..exceptions import UnexpectedResponseError
from ..http import HttpResponse
from ..models import VMwareLun
from .base import ResourceBase

CREATE_ACTION = "createVmwareLun"
STORAGE_RESOURCE_FIELDS = (
    "id",
    "name",
    "description",
    "type",
    "sizeTotal",
    "sizeAllocated",
    "thinStatus",
    "relocationPolicy",
    "pools",
    "luns",
    "snapSchedule",
    "isSnapSchedulePaused",
    "blockHostAccess",
)


class VMwareLunsResource(ResourceBase):
    """Create and look up VMware LUN storage resources."""

    def create(self, payload: Mapping[str, Any]) -> HttpResponse:
        return self._post_action("storageResource", CREATE_ACTION, payload)

    def get(self, storage_resource_id: str) -> VMwareLun:
        content = self._get_instance(
            "storageResource", storage_resource_id, fields=STORAGE_RESOURCE_FIELDS
        )
        return VMwareLun.from_payload(content, session=self._client.label)


def extract_storage_resource_id(body: Any) -> str:
    """Return ``content.storageResource.id`` from a creation response."""

    content = body.get("content") if isinstance(body, Mapping) else None
    resource = content.get("storageResource") if isinstance(content, Mapping) else None
    resource_id = resource.get("id") if isinstance(resource, Mapping) else None
    if not isinstance(resource_id, str) or not resource_id:
        raise UnexpectedResponseError(
            "Creation response did not include content.storageResource.id.", details=body
        )
    return resource_id
