# localcooks/application_status.py
from __future__ import annotations
from typing import Any
from collections.abc import Iterable

from .api_client import ApplicationApiClient, auth_headers
from .identity import IdentityProvider

INACTIVE_STATUSES: frozenset[str] = frozenset({'cancelled', 'rejected'})

def is_application_active(application: dict[str, Any]) -> bool:
    """An application stays active until it is cancelled or rejected."""
    return application.get('status') not in INACTIVE_STATUSES

def has_active_application(applications: Iterable[dict[str, Any]] | None) -> bool:
    if not applications:
        return False
    return any(is_application_active(application) for application in applications)

async def fetch_active_application(api_client: ApplicationApiClient,
                                   identity: IdentityProvider) -> dict[str, Any] | None:
    """
    Returns the applicant's first active application, or None.
    Signed-out callers have none. Lookup failures raise ApplicationLookupError.
    """
    token = await identity.get_token()
    user_id = identity.current_user_id()
    if not token or not user_id:
        return None
    applications = await api_client.list_my_applications(auth_headers(token, user_id))
    return next((app for app in applications if is_application_active(app)), None)
