"""High-level Unity REST client."""

from __future__ import annotations

import logging
from collections.abc import Mapping, MutableMapping
from typing import Any
from urllib.parse import urljoin, urlparse

import requests
import urllib3
from urllib3.exceptions import InsecureRequestWarning

from .auth.base import AuthStrategy
from .capabilities import CapabilityProfile, resolve_capabilities
from .config import CSRF_TOKEN_HEADER, ClientConfig
from .exceptions import (
    APIError,
    AuthenticationError,
    NotConnectedError,
    TransportError,
    UnexpectedResponseError,
)
from .http import HttpResponse
from .http import request as http_request
from .resources import PoolsResource, VMwareLunsResource

LOGIN_PATH = "/api/types/loginSessionInfo/instances"
SYSTEM_INFO_PATH = "/api/types/basicSystemInfo/instances"

logger = logging.getLogger(__name__)


class UnityClient:
    """A connected management session against one Unity array."""

    def __init__(
        self,
        *,
        base_url: str,
        auth_strategy: AuthStrategy,
        verify_ssl: bool | str = True,
        timeout: float = 30.0,
        default_headers: Mapping[str, str] | None = None,
        query_defaults: Mapping[str, str] | None = None,
        session: requests.Session | None = None,
        release_version: str | None = None,
    ) -> None:
        self.config = ClientConfig(
            base_url=base_url.rstrip("/"),
            verify_ssl=verify_ssl,
            timeout=timeout,
            default_headers=default_headers,
            query_defaults=query_defaults,
            release_version=release_version,
        )
        self._suppress_insecure_warning_if_needed()
        self._session = session or requests.Session()
        self._auth = auth_strategy
        self._csrf_token: str | None = None
        self._connected = False
        self._capabilities: CapabilityProfile | None = (
            resolve_capabilities(release_version) if release_version else None
        )
        self.pools = PoolsResource(self)
        self.luns = VMwareLunsResource(self)

    def __repr__(self) -> str:
        state = "connected" if self._connected else "disconnected"
        return f"<UnityClient {self.label} ({state})>"

    # Context manager helpers -------------------------------------------------
    def __enter__(self) -> UnityClient:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # pragma: no cover - passthrough
        self.close()

    # Session state -----------------------------------------------------------
    @property
    def label(self) -> str:
        parsed = urlparse(self.config.base_url)
        return parsed.netloc or self.config.base_url

    @property
    def is_connected(self) -> bool:
        return self._connected

    @property
    def capabilities(self) -> CapabilityProfile:
        """Capability profile of the array, discovered on first use when not configured."""
        if self._capabilities is None:
            release = self._discover_release()
            self.config.release_version = release
            self._capabilities = resolve_capabilities(release)
        return self._capabilities

    def connect(self) -> UnityClient:
        """Log in, capture the CSRF token and mark the session as connected."""

        url = self._resolve_url(LOGIN_PATH)
        self._log_request("GET", url)
        try:
            response = self._perform_request(
                "GET",
                url,
                params=self.config.resolved_query(),
                headers=self._prepare_headers("GET"),
                json_payload=None,
            )
        except APIError as exc:
            self._connected = False
            if exc.status_code in (401, 403):
                raise AuthenticationError(
                    f"Authentication failed for {self.label} as {self._auth.describe()}",
                    status_code=exc.status_code,
                    details=exc.details,
                ) from exc
            raise
        except TransportError:
            self._connected = False
            raise
        self._csrf_token = response.headers.get(CSRF_TOKEN_HEADER)
        self._connected = True
        logger.info("Connected to Unity %s as %s", self.label, self._auth.describe())
        return self

    # Public API --------------------------------------------------------------
    def request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, str] | None = None,
        json_payload: Mapping[str, Any] | None = None,
    ) -> Any:
        return self.send(method, path, params=params, json_payload=json_payload).data

    def send(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, str] | None = None,
        json_payload: Mapping[str, Any] | None = None,
    ) -> HttpResponse:
        """Issue a request and return the full response envelope."""

        if not self._connected:
            raise NotConnectedError(f"Session {self.label} is not connected.")
        url = self._resolve_url(path)
        headers = self._prepare_headers(method)
        merged_params = self._prepare_params(params)
        self._log_request(method, url)
        return self._perform_request(
            method,
            url,
            params=merged_params,
            headers=headers,
            json_payload=json_payload,
        )

    def close(self) -> None:
        self._session.close()
        self._connected = False
        self._csrf_token = None

    # Internal helpers -------------------------------------------------------
    def _resolve_url(self, path: str) -> str:
        parsed = urlparse(path)
        if parsed.scheme and parsed.netloc:
            return path
        return urljoin(f"{self.config.base_url}/", path.lstrip("/"))

    def _discover_release(self) -> str:
        payload = self.request("GET", SYSTEM_INFO_PATH, params={"fields": "softwareVersion"})
        entries = payload.get("entries") if isinstance(payload, Mapping) else None
        if isinstance(entries, list) and entries:
            content = entries[0].get("content") if isinstance(entries[0], Mapping) else None
            if isinstance(content, Mapping):
                candidate = content.get("softwareVersion")
                if isinstance(candidate, str) and candidate.strip():
                    return candidate.strip()
        raise UnexpectedResponseError(
            f"Unable to determine Unity software version from {SYSTEM_INFO_PATH}.",
            details=payload,
        )

    def _prepare_headers(self, method: str) -> MutableMapping[str, str]:
        headers = self.config.resolved_headers()
        self._auth.apply(headers)
        if method.upper() != "GET" and self._csrf_token:
            headers[CSRF_TOKEN_HEADER] = self._csrf_token
        return headers

    def _prepare_params(self, params: Mapping[str, str] | None) -> MutableMapping[str, str]:
        merged: MutableMapping[str, str] = self.config.resolved_query()
        if params:
            merged.update(params)
        return merged

    def _perform_request(
        self,
        method: str,
        url: str,
        *,
        params: Mapping[str, str] | None,
        headers: MutableMapping[str, str],
        json_payload: Mapping[str, Any] | None,
    ) -> HttpResponse:
        try:
            return http_request(
                self._session,
                method,
                url,
                params=params,
                headers=headers,
                json_payload=json_payload,
                timeout=self.config.timeout,
                verify=self.config.verify_ssl,
            )
        except requests.RequestException as exc:
            reason = str(exc).strip() or exc.__class__.__name__
            raise TransportError(
                f"Failed to communicate with Unity API: {reason}", details=reason
            ) from exc

    def _log_request(self, method: str, url: str) -> None:
        logger.info("Unity request %s %s (session=%s)", method.upper(), url, self.label)

    def _suppress_insecure_warning_if_needed(self) -> None:
        if isinstance(self.config.verify_ssl, bool) and not self.config.verify_ssl:
            urllib3.disable_warnings(InsecureRequestWarning)
