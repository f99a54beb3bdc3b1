"""
Pytest config.

Local imports like `import scoop` rely on the repo root being on sys.path.

In some environments (e.g. when invoking a global `pytest` entrypoint), that doesn't
happen reliably during collection. We pin the behavior here so tests can always import
the local `scoop/` package.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import pytest
import requests


def _ensure_repo_root_on_syspath() -> None:
    repo_root = Path(__file__).resolve().parents[1]
    repo_root_str = str(repo_root)
    if repo_root_str not in sys.path:
        sys.path.insert(0, repo_root_str)


_ensure_repo_root_on_syspath()

from scoop.auth.config import load_auth_config  # noqa: E402

AUTH_ENV_VARS = (
    "AUTH0_DOMAIN",
    "AUTH0_CLIENT_ID",
    "AUTH0_CLIENT_SECRET",
    "AUTH0_SECRET",
    "AUTH0_BASE_URL",
    "AUTH0_ISSUER_BASE_URL",
    "VERCEL_URL",
    "AUTH_COOKIE_SECURE",
)

BASE_URL = "https://app.example.com"
ISSUER = "https://tenant.example.auth0.com"

_NOT_JSON = object()


@pytest.fixture(autouse=True)
def _isolated_auth_config(monkeypatch: pytest.MonkeyPatch):
    """Every test starts from an empty Auth0 environment and a fresh config cache."""
    for name in AUTH_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    load_auth_config.cache_clear()
    yield
    load_auth_config.cache_clear()


@pytest.fixture
def auth_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AUTH0_DOMAIN", "tenant.example.auth0.com")
    monkeypatch.setenv("AUTH0_CLIENT_ID", "test-client-id")
    monkeypatch.setenv("AUTH0_CLIENT_SECRET", "test-client-secret")
    monkeypatch.setenv("AUTH0_SECRET", "test-secret-key-for-testing-purposes-only")
    monkeypatch.setenv("AUTH0_BASE_URL", BASE_URL)
    load_auth_config.cache_clear()


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, text: str = ""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def json(self) -> Any:
        if self._payload is _NOT_JSON:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._payload


class FakeHttp:
    """
    Stand-in for the `requests` module functions used by the app.

    Routes match on (method, URL substring). A route may hold a response, an
    exception to raise, or a list consumed one item per call.
    """

    NOT_JSON = _NOT_JSON

    def __init__(self) -> None:
        self.routes: List[Tuple[str, str, Any]] = []
        self.calls: List[Tuple[str, str, Dict[str, Any]]] = []

    def add(self, method: str, fragment: str, result: Any) -> "FakeHttp":
        self.routes.append((method.upper(), fragment, result))
        return self

    def _dispatch(self, method: str, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append((method, url, kwargs))
        for m, fragment, result in self.routes:
            if m != method or fragment not in url:
                continue
            if isinstance(result, list):
                result = result.pop(0)
            if isinstance(result, BaseException):
                raise result
            return result
        raise requests.ConnectionError(f"no fake route for {method} {url}")

    def post(self, url: str, **kwargs: Any) -> FakeResponse:
        return self._dispatch("POST", url, **kwargs)

    def get(self, url: str, **kwargs: Any) -> FakeResponse:
        return self._dispatch("GET", url, **kwargs)

    def put(self, url: str, **kwargs: Any) -> FakeResponse:
        return self._dispatch("PUT", url, **kwargs)

    def calls_to(self, fragment: str) -> List[Dict[str, Any]]:
        return [kw for _m, url, kw in self.calls if fragment in url]


@pytest.fixture
def fake_http(monkeypatch: pytest.MonkeyPatch) -> FakeHttp:
    fake = FakeHttp()
    monkeypatch.setattr(requests, "post", fake.post)
    monkeypatch.setattr(requests, "get", fake.get)
    monkeypatch.setattr(requests, "put", fake.put)
    return fake


def set_cookies(response: Any) -> Dict[str, Tuple[str, str]]:
    """Map cookie name -> (raw value, full Set-Cookie header) for a response."""
    out: Dict[str, Tuple[str, str]] = {}
    for header in response.headers.get_list("set-cookie"):
        name, rest = header.split("=", 1)
        out[name.strip()] = (rest.split(";", 1)[0], header)
    return out


def cookie_attr(header: str, attr: str) -> Optional[str]:
    for part in header.split(";")[1:]:
        key, _, value = part.strip().partition("=")
        if key.lower() == attr.lower():
            return value or key
    return None
