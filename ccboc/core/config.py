"""CLI configuration and the persisted API credential."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from pydantic import AnyUrl, BaseModel, TypeAdapter, field_validator
from pydantic import ValidationError as PydanticValidationError

from ccboc import __app_name__
from ccboc.core.errors import (
    ConfigError,
    ConfigNotFoundError,
    ConfigParseError,
    ConfigWriteError,
    ValidationError,
)

DEFAULT_CONFIG_DIR = Path(".config") / __app_name__
DEFAULT_CONFIG_FILE_NAME = "config"

_url_adapter = TypeAdapter(AnyUrl)


class Credential(BaseModel):
    """API server URL and bearer token written by `login`."""

    api_url: str
    token: str

    @field_validator("api_url")
    @classmethod
    def _absolute_uri(cls, value: str) -> str:
        try:
            url = _url_adapter.validate_python(value)
        except PydanticValidationError as e:
            raise ValueError(f"non valid URL: {value!r}") from e
        if not url.scheme or not url.host:
            raise ValueError(f"non valid URL: {value!r} is not an absolute URI")
        return value

    @classmethod
    def create(cls, api_url: str, token: str) -> "Credential":
        """Build a credential, reporting a bad URL as a ValidationError."""
        try:
            return cls(api_url=api_url, token=token)
        except PydanticValidationError as e:
            raise ValidationError(
                f"config validation failed: non valid URL {api_url!r}",
                details={"errors": e.errors(include_url=False, include_context=False)},
            ) from e


def default_config_path(home: Optional[Path] = None) -> Path:
    """Get the per-user config file path (<home>/.config/ccboc/config)."""
    home = home if home is not None else Path.home()
    return home / DEFAULT_CONFIG_DIR / DEFAULT_CONFIG_FILE_NAME


def load_credential(path: Path) -> Credential:
    """Read and parse the credential file."""
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise ConfigNotFoundError(
            f"couldn't read file {path}: run 'ccboc login --url <url> --token <token>' first"
        ) from e
    except OSError as e:
        raise ConfigNotFoundError(f"couldn't read file {path}: {e}") from e

    try:
        return Credential.model_validate_json(raw)
    except PydanticValidationError as e:
        raise ConfigParseError(
            f"couldn't unmarshal config {path}",
            details={"errors": e.errors(include_url=False, include_context=False)},
        ) from e


def save_credential(credential: Credential, path: Path) -> Path:
    """Validate and write the credential, replacing any existing file.

    The write is not atomic. The file is left readable by the owner only.
    """
    credential = Credential.create(credential.api_url, credential.token)

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        # Created owner-only; an existing file is narrowed before the token is written
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        os.chmod(path, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(json.dumps(credential.model_dump(), indent=1))
    except OSError as e:
        raise ConfigWriteError(f"couldn't write to file {path}: {e}") from e

    return path


def results_file_path(
    file_name: str,
    download_dir: Optional[Path] = None,
    config_path: Optional[Path] = None,
) -> Path:
    """Resolve where a downloaded results archive is written.

    Without a download directory the file lands next to the config file.
    """
    if download_dir is None:
        config_path = config_path or default_config_path()
        return config_path.parent / Path(file_name).name

    if not download_dir.is_dir():
        raise ConfigError(f"couldn't stat path {download_dir}: not an existing directory")
    return download_dir / Path(file_name).name


def write_results_file(body: bytes, path: Path) -> Path:
    """Write downloaded bytes verbatim."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(body)
    except OSError as e:
        raise ConfigWriteError(f"couldn't write the calculation results to {path}: {e}") from e
    return path


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class CLIConfig:
    """Process-level settings for the ccboc CLI."""

    # Credential file
    config_path: Path = field(default_factory=default_config_path)

    # Transport settings; the API server runs with self-signed certificates
    verify_tls: bool = False
    timeout: Optional[float] = None

    # Output
    log_level: str = "INFO"
    results_dir: Optional[Path] = None

    @classmethod
    def from_env(cls) -> "CLIConfig":
        """Create config from environment variables."""
        config_path = os.getenv("CCBOC_CONFIG")
        timeout = os.getenv("CCBOC_TIMEOUT")
        results_dir = os.getenv("CCBOC_RESULTS_DIR")
        try:
            timeout_value = float(timeout) if timeout else None
        except ValueError as e:
            raise ConfigError(f"CCBOC_TIMEOUT must be a number of seconds, got {timeout!r}") from e

        return cls(
            config_path=Path(config_path).expanduser() if config_path else default_config_path(),
            verify_tls=_env_flag("CCBOC_VERIFY_TLS"),
            timeout=timeout_value,
            log_level=os.getenv("CCBOC_LOG_LEVEL", "INFO").upper(),
            results_dir=Path(results_dir).expanduser() if results_dir else None,
        )
