"""Configuration helpers for the Unity client."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

REST_CLIENT_HEADER = "X-EMC-REST-CLIENT"
CSRF_TOKEN_HEADER = "EMC-CSRF-TOKEN"


@dataclass(slots=True)
class ClientConfig:
    """Typed configuration for `UnityClient`."""

    base_url: str
    verify_ssl: bool | str = True
    timeout: float = 30.0
    default_headers: Mapping[str, str] | None = None
    query_defaults: Mapping[str, str] | None = None
    release_version: str | None = None

    def resolved_headers(self) -> dict[str, str]:
        headers: dict[str, str] = {
            "Accept": "application/json",
            "Content-Type": "application/json",
            REST_CLIENT_HEADER: "true",
        }
        if self.default_headers:
            headers.update(self.default_headers)
        return headers

    def resolved_query(self) -> dict[str, str]:
        return dict(self.query_defaults or {})
