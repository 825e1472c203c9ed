# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Immutable CORS policy and allowed-origin parsing.

A :class:`CorsPolicy` is built once at startup and shared read-only by every
request. Construction validates the configuration and raises
:class:`~crossgate.kernel.exceptions.ConfigurationException` on anything
ambiguous, so a process never starts serving with a half-valid policy.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING
from urllib.parse import urlsplit

from crossgate.kernel.exceptions import ConfigurationException, InvalidOriginException

if TYPE_CHECKING:
    from crossgate.config.properties.cors import CorsProperties

WILDCARD = "*"

DEFAULT_ALLOWED_METHODS: tuple[str, ...] = ("GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH")
DEFAULT_MAX_AGE = 3600

_ALLOWED_SCHEMES = ("http", "https")
_DEFAULT_PORTS = {"http": 80, "https": 443}


def validate_origin(origin: str) -> str:
    """Check that *origin* is a bare ``scheme://host[:port]`` exactly as a browser sends it."""
    if any(ch.isspace() for ch in origin):
        raise InvalidOriginException(origin, "contains whitespace")

    parts = urlsplit(origin)
    if parts.scheme not in _ALLOWED_SCHEMES or not origin.startswith(f"{parts.scheme}://"):
        raise InvalidOriginException(origin, "scheme must be http or https")
    if not parts.hostname:
        raise InvalidOriginException(origin, "missing host")
    if parts.username is not None or parts.password is not None:
        raise InvalidOriginException(origin, "must not contain user info")
    if parts.path or parts.query or parts.fragment or origin.endswith(("?", "#")):
        raise InvalidOriginException(origin, "must not contain a path, query or fragment")
    try:
        port = parts.port
    except ValueError:
        raise InvalidOriginException(origin, "invalid port") from None

    # Browsers serialize origins with a lowercase host and without the default port.
    host = f"[{parts.hostname}]" if ":" in parts.hostname else parts.hostname
    canonical = f"{parts.scheme}://{host}"
    if port is not None and port != _DEFAULT_PORTS[parts.scheme]:
        canonical += f":{port}"
    if origin != canonical:
        raise InvalidOriginException(origin, f"not in the form browsers send, expected {canonical!r}")
    return origin


def parse_allowed_origins(value: str | None) -> tuple[str, ...]:
    """Split a comma-separated origin list into validated, de-duplicated origins.

    ``"*"`` on its own yields the wildcard marker. Empty entries, whitespace
    inside an entry and wildcards mixed with explicit origins are rejected.
    """
    if value is None or not value.strip():
        raise ConfigurationException(
            "No allowed origins configured; set crossgate.web.cors.allowed-origins "
            "(or CROSSGATE_WEB_CORS_ALLOWED_ORIGINS) to a comma-separated list of origins"
        )

    origins: list[str] = []
    for entry in value.split(","):
        if not entry:
            raise InvalidOriginException(entry, "empty entry in origin list")
        if entry == WILDCARD:
            origins.append(entry)
            continue
        origin = validate_origin(entry)
        if origin not in origins:
            origins.append(origin)

    if WILDCARD in origins and len(origins) > 1:
        raise ConfigurationException(
            "Wildcard origin '*' cannot be combined with explicit origins",
            context={"origins": origins},
        )
    return tuple(origins)


@dataclass(frozen=True)
class CorsPolicy:
    """Cross-origin policy applied to every request.

    Defaults: methods GET, POST, PUT, DELETE, OPTIONS, PATCH; any request
    header; credentials allowed; preflight cache of 3600 seconds; all paths.
    """

    allowed_origins: tuple[str, ...]
    allowed_methods: tuple[str, ...] = DEFAULT_ALLOWED_METHODS
    allowed_headers: tuple[str, ...] = (WILDCARD,)
    allow_credentials: bool = True
    max_age: int = DEFAULT_MAX_AGE
    url_patterns: tuple[str, ...] = ("/*",)
    _origin_set: frozenset[str] = field(init=False, repr=False, compare=False)
    _header_set: frozenset[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        # Accept lists from callers; store tuples so the policy stays hashable.
        for name in ("allowed_origins", "allowed_methods", "allowed_headers", "url_patterns"):
            object.__setattr__(self, name, tuple(getattr(self, name)))

        if not self.allowed_origins:
            raise ConfigurationException("CorsPolicy requires at least one allowed origin")
        if self.allow_credentials and WILDCARD in self.allowed_origins:
            raise ConfigurationException(
                "Wildcard origin '*' is not allowed when credentials are enabled; list origins explicitly",
                context={"origins": list(self.allowed_origins)},
            )
        if self.max_age < 0:
            raise ConfigurationException(f"max_age must be >= 0, got {self.max_age}")

        object.__setattr__(self, "allowed_methods", tuple(m.upper() for m in self.allowed_methods))
        object.__setattr__(self, "_origin_set", frozenset(self.allowed_origins))
        object.__setattr__(self, "_header_set", frozenset(h.lower() for h in self.allowed_headers))

    @classmethod
    def from_origins(cls, value: str | None, **kwargs: object) -> CorsPolicy:
        """Build a policy from a comma-separated origin string."""
        return cls(allowed_origins=parse_allowed_origins(value), **kwargs)  # type: ignore[arg-type]

    @classmethod
    def from_properties(cls, properties: CorsProperties) -> CorsPolicy:
        """Build a policy from bound ``crossgate.web.cors`` properties."""
        return cls(
            allowed_origins=parse_allowed_origins(properties.allowed_origins),
            allow_credentials=properties.allow_credentials,
            max_age=properties.max_age,
        )

    @property
    def allows_any_origin(self) -> bool:
        return WILDCARD in self._origin_set

    @property
    def allows_any_header(self) -> bool:
        return WILDCARD in self._header_set

    @property
    def methods_header(self) -> str:
        """Value of ``Access-Control-Allow-Methods``."""
        return ", ".join(self.allowed_methods)

    def allows_origin(self, origin: str) -> bool:
        """Exact, case-sensitive origin membership check."""
        return self.allows_any_origin or origin in self._origin_set

    def allowed_headers_for(self, requested: str | None) -> str | None:
        """Return the ``Access-Control-Allow-Headers`` value for a preflight.

        With a wildcard header policy the requested headers are echoed back.
        Otherwise only the requested headers that the policy lists are kept.
        Returns ``None`` when nothing was requested or nothing matched.
        """
        if not requested or not requested.strip():
            return None
        names = [h.strip() for h in requested.split(",") if h.strip()]
        if not self.allows_any_header:
            names = [h for h in names if h.lower() in self._header_set]
        return ", ".join(names) or None
