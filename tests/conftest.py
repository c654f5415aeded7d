"""Pytest configuration and shared fixtures."""

import io
import json
import re
import shutil
import tempfile
from pathlib import Path

import httpx
import pytest
from rich.console import Console

from ccboc.core.api_client import APIClient
from ccboc.core.config import CLIConfig, Credential
from ccboc.ui.theme import get_theme

ANSI_ESCAPE = re.compile(r"\x1b\[[0-9;?]*[A-Za-z]")


def plain(text: str) -> str:
    """Strip terminal control sequences from captured output."""
    return ANSI_ESCAPE.sub("", text)


@pytest.fixture
def temp_directory():
    """
    Create a temporary directory for tests that need filesystem access.
    Automatically cleaned up after test completes.
    """
    dir_path = tempfile.mkdtemp()
    yield Path(dir_path)
    shutil.rmtree(dir_path, ignore_errors=True)


@pytest.fixture
def credential():
    return Credential(api_url="https://api.example.org", token="secret-token")


@pytest.fixture
def cli_config(temp_directory):
    """Config pointing at a credential file inside the temp directory."""
    return CLIConfig(config_path=temp_directory / ".config" / "ccboc" / "config")


@pytest.fixture
def record_console():
    """A themed, colourless console that records what it prints."""
    return Console(
        file=io.StringIO(),
        record=True,
        width=120,
        color_system=None,
        theme=get_theme().to_rich_theme(),
    )


class FakeServer:
    """Routes requests to canned responses and remembers what it received."""

    def __init__(self):
        self.routes = {}
        self.requests = []

    def add(self, method, path, status=200, body=None, content=None, headers=None):
        if content is None:
            content = json.dumps(body if body is not None else {}).encode("utf-8")
        self.routes[(method, path)] = (status, content, headers or {})

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, request.url.path)
        if key not in self.routes:
            return httpx.Response(404, json={"message": f"no route {key}", "status_code": 404})
        status, content, headers = self.routes[key]
        return httpx.Response(status, content=content, headers=headers)


@pytest.fixture
def server():
    return FakeServer()


@pytest.fixture
def api(credential, server):
    client = APIClient(credential, transport=httpx.MockTransport(server.handler))
    yield client
    client.close()


@pytest.fixture
def calculation_payload():
    """A calculation in the flat shape."""
    return {"name": "calc-1", "teff": 10000, "logG": 4.0, "phase": "Completed", "assign": "worker-1"}


@pytest.fixture
def calculation_list_payload():
    """Three calculations in the Kubernetes object shape."""
    return {
        "items": [
            {
                "metadata": {"name": f"calc-{i}"},
                "spec": {"teff": 10000 + 500 * i, "logG": 4.0 + 0.25 * i},
                "phase": phase,
                "assign": f"worker-{i}",
            }
            for i, phase in enumerate(["Created", "Processing", "Completed"], 1)
        ]
    }


@pytest.fixture
def bulk_payload():
    """A bulk whose calculations come as an id-keyed map."""
    return {
        "metadata": {"name": "bulk-vega"},
        "calculations": {
            "calc-b": {"params": {"teff": 11000.0, "logG": 4.5}, "phase": "Processing"},
            "calc-a": {"params": {"teff": 10432.6, "logG": 4.256}, "phase": "Completed"},
            "calc-c": {"params": {"teff": 12000.0, "logG": 3.75}, "phase": "Failed"},
        },
    }


@pytest.fixture
def workerpool_list_payload():
    return {
        "items": [
            {
                "metadata": {"name": "workerpool-vega"},
                "spec": {"workers": {"w-2": {"name": "worker-2"}, "w-1": {"name": "worker-1"}}},
            },
            {"metadata": {"name": "workerpool-empty"}, "spec": {}},
        ]
    }
