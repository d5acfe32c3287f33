"""
Pytest configuration and shared fixtures for myday-deploy tests.

This module provides reusable fixtures and test utilities used across
the test suite.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
import requests

from mydaydeploy.config import load_deployment_config
from mydaydeploy.io import ApiClient
from mydaydeploy.logging import SilentLogger, set_global_logger

API_URL = "https://api.myday.test"
IDSRV_URL = "https://identity.myday.test"
TOKEN_ENDPOINT = f"{IDSRV_URL}/connect/token"
ACCESS_TOKEN = "eyJ0eXAiOiJKV1QiLCJhbGciOiJSUzI1NiJ9.test-token"
PACKAGE_CONTENT = b"PK\x03\x04 fake zip archive"


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path: Path):
    """
    Keep tests away from the developer's environment.

    Removes MYDAY_* variables, runs each test in an empty working directory
    (so no stray .env is picked up) and resets the global logger.
    """
    import os

    for name in list(os.environ):
        if name.startswith("MYDAY_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    yield
    set_global_logger(SilentLogger())


@pytest.fixture
def package_file(tmp_path: Path) -> Path:
    """Provide a fake app package archive."""
    path = tmp_path / "timesheet.zip"
    path.write_bytes(PACKAGE_CONTENT)
    return path


@pytest.fixture
def base_options(package_file: Path) -> dict[str, Any]:
    """
    Provide a complete, valid set of deployment options.

    Tests override single keys to exercise validation.
    """
    return {
        "appId": "acme.timesheet",
        "file": str(package_file),
        "platform": "v3",
        "apiUrl": API_URL,
        "idSrvUrl": IDSRV_URL,
        "clientId": "deploy-bot",
        "clientSecret": "s3cret-value",
    }


@pytest.fixture
def make_config(base_options: dict[str, Any]):
    """
    Factory fixture for DeploymentConfig objects.

    Usage:
        config = make_config(platform="v2", dryRun=True)
    """

    def _create(**overrides: Any):
        return load_deployment_config({**base_options, **overrides})

    return _create


@pytest.fixture
def api_client():
    """Provide an authenticated API client on a fresh session."""
    with requests.Session() as session:
        yield ApiClient(session).with_bearer(ACCESS_TOKEN)


def legacy_record(app_id: str, version: str, name: str = "Timesheet") -> dict[str, Any]:
    """Build an app record as returned by the v2 API."""
    return {"id": app_id, "name": name, "version": version}


def current_record(app_id: str, version: str, name: str = "Timesheet") -> dict[str, Any]:
    """Build an app record as returned by the v3 app store."""
    return {"id": app_id, "names": {"en-GB": name}, "version": version}


def current_listing_entry(app_id: str, version: str) -> dict[str, Any]:
    """Build an entry of the v3 app store listing (record plus history)."""
    return {
        "model": current_record(app_id, version),
        "versions": [{"version": version}],
    }


def register_identity_server(m, *, discovery: bool = True) -> None:
    """Register Identity Server endpoints on a requests_mock.Mocker."""
    if discovery:
        m.get(
            f"{IDSRV_URL}/.well-known/openid-configuration",
            json={"issuer": IDSRV_URL, "token_endpoint": TOKEN_ENDPOINT},
        )
    m.post(
        TOKEN_ENDPOINT,
        json={"access_token": ACCESS_TOKEN, "token_type": "Bearer", "expires_in": 3600},
    )
