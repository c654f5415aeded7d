"""Error classes raised across the request/response/display pipeline."""

from __future__ import annotations

from typing import Any, Optional


class CCBOCError(Exception):
    """Base error class for CLI errors."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for structured output."""
        result: dict[str, Any] = {"error": self.message}
        if self.details:
            result["details"] = self.details
        return result


class TransportError(CCBOCError):
    """The request never produced a usable response (network, unparsable error body)."""


class ApplicationError(CCBOCError):
    """The server answered with an error envelope."""

    def __init__(self, message: str, status_code: int = 0, details: Optional[dict[str, Any]] = None):
        super().__init__(message, details)
        self.status_code = status_code

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.status_code:
            result["status_code"] = self.status_code
        return result


class ValidationError(CCBOCError):
    """Local input rejected before any network call."""


class DecodeError(CCBOCError):
    """A response body did not match the declared resource shape."""


class ConfigError(CCBOCError):
    """Configuration file could not be used."""


class ConfigNotFoundError(ConfigError):
    pass


class ConfigParseError(ConfigError):
    pass


class ConfigWriteError(ConfigError):
    pass
