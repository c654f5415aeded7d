"""API Client for communicating with the calculation API server."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Optional

import httpx

from ccboc.core.config import Credential
from ccboc.core.errors import ApplicationError, TransportError
from ccboc.core.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ErrorEnvelope:
    """Error body the server returns with any non-200 status."""
    message: str
    status_code: int

    @classmethod
    def from_body(cls, body: bytes) -> "ErrorEnvelope":
        """Parse an error body; anything else is a transport-level failure."""
        try:
            data = json.loads(body)
            if not isinstance(data, dict):
                raise TypeError(f"expected an object, got {type(data).__name__}")
            # Missing fields are zero-valued
            return cls(message=str(data.get("message") or ""), status_code=int(data.get("status_code") or 0))
        except (json.JSONDecodeError, UnicodeDecodeError, TypeError, ValueError) as e:
            raise TransportError(f"error unmarshaling json response: {e}") from e


@dataclass
class APIResponse:
    """Wrapper for API responses."""
    body: bytes = b""
    error: Optional[ErrorEnvelope] = None
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return self.error is None

    def raise_for_envelope(self) -> "APIResponse":
        """Turn an error envelope into an ApplicationError."""
        if self.error is not None:
            raise ApplicationError(self.error.message, status_code=self.error.status_code)
        return self

    def download_name(self) -> str:
        """File name supplied by the `Content-Disposition` header."""
        header = self.headers.get("content-disposition", "")
        if not header:
            raise TransportError("couldn't retrieve Content-Disposition header")
        parts = header.split("=")
        name = parts[1].split(";")[0].strip().strip('"') if len(parts) > 1 else ""
        if not name:
            raise TransportError(f"couldn't parse Content-Disposition header {header!r}")
        return name


class APIClient:
    """HTTP client for the calculation API server."""

    def __init__(
        self,
        credential: Credential,
        verify_tls: bool = False,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = credential.api_url.rstrip("/")
        self.token = credential.token
        self.verify_tls = verify_tls
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    @property
    def client(self) -> httpx.Client:
        """Lazy-initialize the HTTP client."""
        if self._client is None:
            kwargs: dict[str, Any] = {"verify": self.verify_tls}
            if self.timeout is not None:
                kwargs["timeout"] = self.timeout
            if self._transport is not None:
                kwargs["transport"] = self._transport
            self._client = httpx.Client(**kwargs)
        return self._client

    def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> "APIClient":
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def execute(
        self,
        method: str,
        endpoint: str,
        content: Optional[bytes] = None,
        params: Optional[dict[str, str]] = None,
    ) -> APIResponse:
        """Make an authenticated HTTP request to the API.

        Args:
            method: HTTP method (GET, POST, DELETE)
            endpoint: API endpoint path
            content: Raw request body
            params: Query parameters

        Returns:
            The body on HTTP 200, otherwise the server's error envelope.

        Raises:
            TransportError: When no response arrives or the error body is unreadable.
        """
        url = f"{self.base_url}{endpoint}"
        headers = {
            "Authorization": f"Bearer {self.token}",
            "Accept": "application/json",
        }
        logger.debug("%s %s", method, url)

        try:
            response = self.client.request(method, url, content=content, params=params, headers=headers)
        except httpx.TimeoutException as e:
            raise TransportError(f"error on response: request timed out ({e})") from e
        except httpx.HTTPError as e:
            raise TransportError(f"error on response: {type(e).__name__}: {e}") from e

        body = response.content
        response_headers = {k.lower(): v for k, v in response.headers.items()}

        if response.status_code != httpx.codes.OK:
            return APIResponse(error=ErrorEnvelope.from_body(body), headers=response_headers)

        return APIResponse(body=body, headers=response_headers)

    # Calculations
    def list_calculations(self) -> APIResponse:
        return self.execute("GET", "/calculations")

    def get_calculation(self, calc_id: str) -> APIResponse:
        return self.execute("GET", f"/calculation/{calc_id}")

    def create_calculation(self, teff: float, logg: float) -> APIResponse:
        """Create a calculation.

        The server expects both values as formatted strings.
        """
        payload = {"teff": f"{teff:0.1f}", "logG": f"{logg:0.2f}"}
        return self.execute("POST", "/calculations/create", content=json.dumps(payload).encode("utf-8"))

    # Calculation bulks
    def list_bulks(self) -> APIResponse:
        return self.execute("GET", "/bulks")

    def get_bulk(self, bulk_id: str) -> APIResponse:
        return self.execute("GET", f"/bulk/{bulk_id}")

    def create_bulk(self, bulk_json: bytes) -> APIResponse:
        """Submit the contents of a bulk file as-is."""
        return self.execute("POST", "/bulk/create", content=bulk_json)

    def delete_bulk(self, name: str) -> APIResponse:
        return self.execute("DELETE", f"/bulks/delete/{name}")

    # Worker pools
    def list_workerpools(self) -> APIResponse:
        return self.execute("GET", "/workerpools")

    def get_workerpool(self, name: str) -> APIResponse:
        return self.execute("GET", f"/workerpool/{name}")

    def create_workerpool(self, name: str) -> APIResponse:
        return self.execute("POST", "/workerpool/create", params={"name": name})

    def delete_workerpool(self, name: str) -> APIResponse:
        return self.execute("DELETE", f"/workerpools/delete/{name}")

    # Results
    def results_by_params(self, teff: float, logg: float) -> APIResponse:
        return self.execute(
            "GET",
            "/calculations/results",
            params={"teff": f"{teff:0.1f}", "logg": f"{logg:0.2f}"},
        )

    def results_by_id(self, calc_id: str) -> APIResponse:
        return self.execute("GET", f"/calculations/results/{calc_id}")
