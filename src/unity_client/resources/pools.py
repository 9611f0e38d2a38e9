"""Storage pool helpers."""

from __future__ import annotations

from typing import Any

from .base import ResourceBase

POOL_FIELDS = ("id", "name", "sizeFree", "sizeTotal", "isAllFlash", "isHarvestEnabled")


class PoolsResource(ResourceBase):
    """Work with Unity storage pools."""

    def get(self, pool_id: str) -> dict[str, Any]:
        return self._get_instance("pool", pool_id, fields=POOL_FIELDS)
