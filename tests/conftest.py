"""
Pytest configuration and fixtures for Parse SDK tests.
"""

import sys
from pathlib import Path

import pytest

# Add the repository root to path for imports
# This allows `from parse_sdk import ...` to work
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from parse_sdk.config import ClientSettings
from parse_sdk.controllers import Capability, ControllerRegistry, TransportResponse, reset_registry
from parse_sdk.user import CurrentUserController, ParseUser


class RecordingTransport:
    """Transport that records calls and replays a scripted outcome."""

    def __init__(self, response=None, error=None):
        self.calls = []
        self.response = response or TransportResponse(status=200, body={"ok": True})
        self.error = error

    async def send(self, method, url, body, headers):
        self.calls.append(
            {"method": method, "url": url, "body": body, "headers": dict(headers)}
        )
        if self.error is not None:
            raise self.error
        return self.response


class FixedInstallation:
    def __init__(self, installation_id="iid-123"):
        self.installation_id = installation_id
        self.calls = 0

    async def current_installation_id(self):
        self.calls += 1
        return self.installation_id


@pytest.fixture(autouse=True)
def _reset_default_registry():
    reset_registry()
    yield
    reset_registry()


@pytest.fixture
def settings():
    return ClientSettings(
        application_id="app-id",
        javascript_key="js-key",
        master_key="master-secret",
        server_url="https://api.example.com/parse",
        version="python0.1.0",
    )


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def installation():
    return FixedInstallation()


@pytest.fixture
def registry(transport, installation):
    registry = ControllerRegistry()
    registry.bind(Capability.REQUEST, transport)
    registry.bind(Capability.INSTALLATION, installation)
    return registry


@pytest.fixture
def logged_in_user():
    return ParseUser(object_id="u1", username="alice", session_token="r:session")


@pytest.fixture
def user_controller(logged_in_user):
    return CurrentUserController(logged_in_user)
