"""Shared fixtures for concurrency integration tests.

One FastAPI app (and so one AuthGate and one frozen config) serves every
simulated user. Each user gets its own httpx.AsyncClient so cookie jars
never mix, while all of them share a single ASGITransport.
"""

import asyncio
from typing import Any

import pytest
from fastapi import FastAPI, Request

from ...conftest import Hooks, build_app

CONCURRENT_REQUESTS = 50


class SlowHooks(Hooks):
    """Hooks that yield to the event loop so requests interleave."""

    async def get_user(self, request: Request) -> dict[str, int] | None:
        await asyncio.sleep(0)
        user = await super().get_user(request)
        await asyncio.sleep(0)
        return user

    async def login_callback(self, request: Request, user: Any) -> tuple[Any, str | None]:
        await asyncio.sleep(0)
        return await super().login_callback(request, user)


@pytest.fixture
def slow_hooks() -> SlowHooks:
    return SlowHooks()


@pytest.fixture
def app(slow_hooks: SlowHooks) -> FastAPI:
    return build_app(slow_hooks)
