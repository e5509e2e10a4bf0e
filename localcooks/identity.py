# localcooks/identity.py
from __future__ import annotations
import logging
from typing import Any, Protocol
from collections.abc import MutableMapping

import httpx

from . import config
from .errors import AuthenticationError

logger = logging.getLogger(__name__)

UID_KEY: str = 'uid'
TOKEN_KEY: str = 'id_token'
EMAIL_KEY: str = 'email'
AUTHENTICATED_KEY: str = 'authenticated'

FIREBASE_ERROR_MESSAGES: dict[str, str] = {
    'EMAIL_NOT_FOUND': "No account found with this email address.",
    'INVALID_PASSWORD': "Incorrect email or password.",
    'INVALID_LOGIN_CREDENTIALS': "Incorrect email or password.",
    'INVALID_EMAIL': "Please enter a valid email address.",
    'USER_DISABLED': "This account has been disabled.",
    'TOO_MANY_ATTEMPTS_TRY_LATER': "Too many attempts. Please try again later.",
}

class IdentityProvider(Protocol):
    """The narrow contract the wizard depends on. Both return None when signed out."""

    async def get_token(self) -> str | None: ...

    def current_user_id(self) -> str | None: ...

class SessionIdentity:
    """
    Identity kept in a per-user session mapping (NiceGUI's `app.storage.user`
    in the web app). `sign_in` makes it ready, `sign_out` tears it down.
    """

    def __init__(self, storage: MutableMapping[str, Any]) -> None:
        self._storage = storage

    async def get_token(self) -> str | None:
        if not self._storage.get(AUTHENTICATED_KEY):
            return None
        return self._storage.get(TOKEN_KEY) or None

    def current_user_id(self) -> str | None:
        if not self._storage.get(AUTHENTICATED_KEY):
            return None
        return self._storage.get(UID_KEY) or None

    @property
    def email(self) -> str | None:
        return self._storage.get(EMAIL_KEY)

    @property
    def is_authenticated(self) -> bool:
        return bool(self._storage.get(AUTHENTICATED_KEY) and self._storage.get(UID_KEY))

    def sign_in(self, uid: str, token: str, email: str | None = None) -> None:
        self._storage[UID_KEY] = uid
        self._storage[TOKEN_KEY] = token
        self._storage[EMAIL_KEY] = email
        self._storage[AUTHENTICATED_KEY] = True
        logger.info(f"User '{uid}' signed in.")

    def sign_out(self) -> None:
        uid = self._storage.get(UID_KEY)
        for key in (UID_KEY, TOKEN_KEY, EMAIL_KEY, AUTHENTICATED_KEY):
            self._storage.pop(key, None)
        if uid:
            logger.info(f"User '{uid}' signed out.")

class FirebaseAuthClient:
    """Email/password sign-in against the Firebase Auth REST API."""

    def __init__(self, api_key: str = config.FIREBASE_API_KEY,
                 base_url: str = config.FIREBASE_AUTH_URL,
                 timeout: float = config.REQUEST_TIMEOUT_SECONDS,
                 transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._api_key = api_key
        self._base_url = base_url
        self._timeout = timeout
        self._transport = transport

    async def sign_in_with_password(self, email: str, password: str) -> dict[str, Any]:
        """Returns the Firebase payload (`idToken`, `localId`, `email`, ...)."""
        if not self._api_key:
            raise AuthenticationError("Sign-in is not configured (FIREBASE_API_KEY is missing).")

        payload = {'email': email, 'password': password, 'returnSecureToken': True}
        try:
            async with httpx.AsyncClient(base_url=self._base_url, timeout=self._timeout,
                                         transport=self._transport) as client:
                response = await client.post('/accounts:signInWithPassword',
                                             params={'key': self._api_key}, json=payload)
        except httpx.HTTPError as e:
            logger.error(f"Sign-in request for '{email}' failed: {e}")
            raise AuthenticationError("Could not reach the sign-in service. Please try again.") from e

        if response.is_success:
            data = response.json()
            if not data.get('idToken') or not data.get('localId'):
                raise AuthenticationError("Sign-in response was incomplete.")
            return data

        code = _firebase_error_code(response)
        logger.warning(f"Sign-in for '{email}' rejected: {code}")
        raise AuthenticationError(FIREBASE_ERROR_MESSAGES.get(code, "Sign-in failed. Please try again."))

def _firebase_error_code(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return ''
    error = body.get('error') if isinstance(body, dict) else None
    message = error.get('message', '') if isinstance(error, dict) else ''
    # e.g. "TOO_MANY_ATTEMPTS_TRY_LATER : Access to this account has been temporarily disabled..."
    return str(message).split(':')[0].strip()
