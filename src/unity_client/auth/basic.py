"""HTTP Basic authentication support."""

from __future__ import annotations

from collections.abc import MutableMapping
from dataclasses import dataclass, field

from .base import AuthStrategy


@dataclass(slots=True)
class BasicAuth(AuthStrategy):
    """Apply HTTP Basic auth headers.

    Unity management accepts Basic credentials on every request; the session
    cookie it hands back is kept by the underlying ``requests.Session``.
    """

    username: str
    password: str = field(repr=False)

    def apply(self, headers: MutableMapping[str, str]) -> None:
        from requests.auth import _basic_auth_str

        headers["Authorization"] = _basic_auth_str(self.username, self.password)

    def describe(self) -> str:
        return self.username
