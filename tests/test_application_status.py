# tests/test_application_status.py
from __future__ import annotations

import pytest

from conftest import FakeIdentity, NetworkSpy, json_response, make_client

from localcooks.application_status import (
    fetch_active_application,
    has_active_application,
    is_application_active,
)
from localcooks.errors import ApplicationLookupError

def test_is_application_active() -> None:
    for status in ('new', 'inReview', 'approved'):
        assert is_application_active({'status': status}), f"'{status}' should count as active"
    for status in ('cancelled', 'rejected'):
        assert not is_application_active({'status': status}), f"'{status}' should not count as active"

def test_has_active_application() -> None:
    assert not has_active_application(None)
    assert not has_active_application([])
    assert not has_active_application([{'status': 'rejected'}, {'status': 'cancelled'}])
    assert has_active_application([{'status': 'rejected'}, {'status': 'inReview'}])

@pytest.mark.asyncio
async def test_fetch_active_application_returns_first_active() -> None:
    spy = NetworkSpy(json_response(200, [
        {'id': 1, 'status': 'cancelled'},
        {'id': 2, 'status': 'inReview'},
        {'id': 3, 'status': 'new'},
    ]))
    application = await fetch_active_application(make_client(spy), FakeIdentity())

    assert application == {'id': 2, 'status': 'inReview'}
    request = spy.requests[0]
    assert request.url.path == '/api/applications/my-applications'
    assert request.headers['authorization'] == 'Bearer token-abc'
    assert request.headers['x-user-id'] == 'u-1'

@pytest.mark.asyncio
async def test_fetch_active_application_none_when_all_closed() -> None:
    spy = NetworkSpy(json_response(200, [{'id': 1, 'status': 'rejected'}]))
    assert await fetch_active_application(make_client(spy), FakeIdentity()) is None

@pytest.mark.asyncio
async def test_signed_out_user_has_no_application() -> None:
    spy = NetworkSpy(json_response(200, []))
    assert await fetch_active_application(make_client(spy), FakeIdentity(user_id=None)) is None
    assert spy.requests == []

@pytest.mark.asyncio
async def test_lookup_failures_raise() -> None:
    spy = NetworkSpy(json_response(500, {'error': 'db down'}))
    with pytest.raises(ApplicationLookupError, match='db down'):
        await fetch_active_application(make_client(spy), FakeIdentity())

    spy = NetworkSpy(json_response(200, {'unexpected': True}))
    with pytest.raises(ApplicationLookupError):
        await fetch_active_application(make_client(spy), FakeIdentity())
