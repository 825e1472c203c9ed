"""Exception hierarchy for crossgate.

All crossgate errors inherit from CrossgateException so callers can catch a
single base type at startup.

Categories:
- ConfigurationException: the CORS policy cannot be built from configuration
- InvalidOriginException: a single allowed-origin entry is malformed
"""

from __future__ import annotations


class CrossgateException(Exception):
    """Base exception for all crossgate errors.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "CORS_CONFIG").
        context: Arbitrary key-value pairs describing the failure.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


class ConfigurationException(CrossgateException):
    """The CORS configuration is missing, empty or contradictory."""

    def __init__(self, message: str, code: str | None = "CORS_CONFIG", context: dict | None = None) -> None:
        super().__init__(message, code=code, context=context)


class InvalidOriginException(ConfigurationException):
    """An allowed-origin entry is not a valid ``scheme://host[:port]`` origin."""

    def __init__(self, origin: str, reason: str) -> None:
        super().__init__(
            f"Invalid allowed origin {origin!r}: {reason}",
            code="CORS_ORIGIN",
            context={"origin": origin, "reason": reason},
        )
        self.origin = origin
        self.reason = reason
