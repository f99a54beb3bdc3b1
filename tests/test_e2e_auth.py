"""E2E tests for the auth endpoints.

These tests require a running server and are executed in CI or manually.
Run with: pytest -m e2e
"""

import os
import time
from typing import Generator

import pytest
import requests

BASE_URL = os.getenv("SCOOP_E2E_BASE_URL", "http://localhost:3000")

pytestmark = pytest.mark.e2e


@pytest.fixture(scope="module")
def wait_for_server() -> Generator[None, None, None]:
    """Wait for server to be ready."""
    max_retries = 30
    for i in range(max_retries):
        try:
            r = requests.get(f"{BASE_URL}/healthz", timeout=2)
            if r.status_code == 200:
                break
        except requests.RequestException:
            if i == max_retries - 1:
                raise Exception("Server failed to start within 30 seconds")
            time.sleep(1)
    yield


def test_healthz_endpoint(wait_for_server):
    r = requests.get(f"{BASE_URL}/healthz")
    assert r.status_code == 200
    assert r.json()["ok"] is True


def test_status_is_signed_out_without_cookie(wait_for_server):
    r = requests.get(f"{BASE_URL}/api/auth/status")
    assert r.status_code == 401
    assert r.json()["authenticated"] is False


def test_callback_without_code_goes_back_to_signin(wait_for_server):
    r = requests.get(f"{BASE_URL}/api/auth/callback", allow_redirects=False)
    assert r.status_code == 302
    assert r.headers["location"].endswith("/signin?error=no_code")


def test_logout_clears_cookies(wait_for_server):
    r = requests.post(f"{BASE_URL}/api/auth/logout")
    assert r.status_code == 200
    assert r.json()["ok"] is True
    assert "max-age=0" in r.headers.get("set-cookie", "").lower()
