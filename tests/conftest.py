# tests/conftest.py
from __future__ import annotations

import sys
from pathlib import Path
from typing import Any
from collections.abc import Awaitable, Callable

import httpx
import pytest

# Make the `localcooks` package importable without an editable install
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from localcooks.api_client import ApplicationApiClient
from localcooks.store import ApplicationFormStore

Handler = Callable[[httpx.Request], httpx.Response | Awaitable[httpx.Response]]

PERSONAL_INFO: dict[str, Any] = {
    'full_name': 'Jane Doe',
    'email': 'jane@x.com',
    'phone': '+1 (709) 555-0100',
}


class FakeIdentity:
    """Stands in for the identity provider: fixed token and user id."""

    def __init__(self, user_id: str | None = 'u-1', token: str | None = 'token-abc') -> None:
        self.user_id = user_id
        self.token = token

    async def get_token(self) -> str | None:
        return self.token

    def current_user_id(self) -> str | None:
        return self.user_id


class NetworkSpy:
    """Records every request that reaches the mock transport."""

    def __init__(self, handler: Handler) -> None:
        self.requests: list[httpx.Request] = []
        self._handler = handler
        self.transport = httpx.MockTransport(self._handle)

    async def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self._handler(request)
        if not isinstance(response, httpx.Response):
            response = await response
        return response

    def paths(self) -> list[str]:
        return [request.url.path for request in self.requests]


def json_response(status_code: int, body: Any) -> Callable[[httpx.Request], httpx.Response]:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, json=body)
    return handler


def make_client(spy: NetworkSpy) -> ApplicationApiClient:
    return ApplicationApiClient(base_url='http://backend.test', timeout=5.0, transport=spy.transport)


@pytest.fixture
def store() -> ApplicationFormStore:
    return ApplicationFormStore()


@pytest.fixture
def completed_store() -> ApplicationFormStore:
    """A draft that passed all three steps, cursor on the last step."""
    store = ApplicationFormStore()
    store.update_form_data({
        **PERSONAL_INFO,
        'kitchen_preference': 'home',
        'food_safety_license': 'no',
        'food_establishment_cert': 'notSure',
    })
    store.set_current_step(3)
    return store
