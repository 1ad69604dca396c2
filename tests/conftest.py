"""Shared pytest fixtures for fastapi-userauth tests."""

from collections.abc import Callable
from typing import Any
from urllib.parse import quote

import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient
from starlette.requests import Request as StarletteRequest

from fastapi_userauth import create_config, install_userauth
from fastapi_userauth.core.config import UserAuthConfig

SSO_LOGIN_URL = "https://sso.example/login"
SECRET_KEY = "test-secret"

_UNSET: Any = object()


def login_url_formatter(callback_url: str, root_path: str) -> str:
    """Fake identity provider URL carrying the callback."""
    callback = quote(callback_url, safe="")
    return f"{SSO_LOGIN_URL}?callback={callback}&root={quote(root_path, safe='')}"


class Hooks:
    """Recording auth hooks.

    get_user resolves ``{"id": <int>}`` from the X-User header or the
    ``user`` query parameter.
    """

    def __init__(self) -> None:
        self.get_user_calls = 0
        self.login_calls: list[Any] = []
        self.logout_calls: list[Any] = []

    async def get_user(self, request: Request) -> dict[str, int] | None:
        self.get_user_calls += 1
        user_id = request.headers.get("x-user") or request.query_params.get("user")
        return {"id": int(user_id)} if user_id else None

    async def login_callback(self, request: Request, user: Any) -> tuple[Any, str | None]:
        self.login_calls.append(user)
        return user, None

    async def logout_callback(self, request: Request, user: Any) -> str | None:
        self.logout_calls.append(user)
        return None


@pytest.fixture
def hooks() -> Hooks:
    return Hooks()


def build_app(
    hooks: Hooks, match: Any = "/admin*", *, sessions: bool = True, **options: Any
) -> FastAPI:
    """Build a FastAPI app guarded by user auth with a few probe routes."""
    app = FastAPI()

    @app.get("/")
    async def index() -> dict[str, str]:
        return {"page": "home"}

    @app.get("/public")
    async def public() -> dict[str, str]:
        return {"page": "public"}

    @app.get("/admin/panel")
    async def admin_panel(request: Request) -> dict[str, Any]:
        return {"page": "admin", "session": dict(request.session)}

    @app.get("/app/admin/panel")
    async def mounted_admin_panel(request: Request) -> dict[str, Any]:
        return {"page": "mounted-admin", "session": dict(request.session)}

    options.setdefault("get_user", hooks.get_user)
    options.setdefault("login_callback", hooks.login_callback)
    options.setdefault("logout_callback", hooks.logout_callback)
    options.setdefault("login_url_formatter", login_url_formatter)

    install_userauth(app, match, secret_key=SECRET_KEY if sessions else None, **options)
    return app


@pytest.fixture
def make_client(hooks: Hooks) -> Callable[..., TestClient]:
    """Return a factory building a non-redirect-following TestClient.

    Accepts the same arguments as build_app (minus hooks).
    """

    def _make(match: Any = "/admin*", *, sessions: bool = True, **options: Any) -> TestClient:
        app = build_app(hooks, match, sessions=sessions, **options)
        return TestClient(app, follow_redirects=False)

    return _make


@pytest.fixture
def client(make_client: Callable[..., TestClient]) -> TestClient:
    """Default client: "/admin*" protected, cookie sessions enabled."""
    return make_client()


@pytest.fixture
def config(hooks: Hooks) -> UserAuthConfig:
    return create_config(
        "/admin*",
        get_user=hooks.get_user,
        login_callback=hooks.login_callback,
        logout_callback=hooks.logout_callback,
        login_url_formatter=login_url_formatter,
    )


@pytest.fixture
def make_request() -> Callable[..., StarletteRequest]:
    """Return a factory building a bare Starlette request from an ASGI scope.

    Pass ``session=None`` to build a request with no session collaborator.
    """

    def _make(
        path: str = "/",
        *,
        query: str = "",
        headers: dict[str, str] | None = None,
        session: dict[str, Any] | None = _UNSET,
    ) -> StarletteRequest:
        all_headers = {"host": "testserver"}
        all_headers.update({key.lower(): value for key, value in (headers or {}).items()})
        scope: dict[str, Any] = {
            "type": "http",
            "method": "GET",
            "scheme": "http",
            "server": ("testserver", 80),
            "root_path": "",
            "path": path,
            "query_string": query.encode("latin-1"),
            "headers": [
                (key.lower().encode("latin-1"), value.encode("latin-1"))
                for key, value in all_headers.items()
            ],
        }
        if session is _UNSET:
            scope["session"] = {}
        elif session is not None:
            scope["session"] = session
        return StarletteRequest(scope)

    return _make
