"""Core CLI components - configuration, API client, decoding and errors."""

from ccboc.core.api_client import APIClient, APIResponse, ErrorEnvelope
from ccboc.core.config import CLIConfig, Credential, load_credential, save_credential
from ccboc.core.decoder import Envelope, decode
from ccboc.core.errors import (
    ApplicationError,
    CCBOCError,
    ConfigError,
    DecodeError,
    TransportError,
    ValidationError,
)

__all__ = [
    "APIClient",
    "APIResponse",
    "ApplicationError",
    "CCBOCError",
    "CLIConfig",
    "ConfigError",
    "Credential",
    "DecodeError",
    "Envelope",
    "ErrorEnvelope",
    "TransportError",
    "ValidationError",
    "decode",
    "load_credential",
    "save_credential",
]
