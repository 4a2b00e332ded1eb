"""Hosted identity service client (GoTrue REST API).

Provides password sign-in, sign-up and sign-out. Results are Identity objects
carrying the access token that the record store forwards for row-level
security.
"""

import logging
from typing import Any, Optional

import requests

from prayerspot_finder.constants import BackendConfig
from prayerspot_finder.core.errors import AuthError
from prayerspot_finder.model.prayer_spot import Identity

logger = logging.getLogger(__name__)


class AuthService:
    """Password authentication against the hosted identity service.

    Example:
        auth = AuthService()
        identity = auth.sign_in(email="a@b.org", password="secret")
    """

    def __init__(
        self,
        base_url: str = BackendConfig.URL,
        api_key: str = BackendConfig.ANON_KEY,
        session: Optional[requests.Session] = None,
        timeout: float = BackendConfig.REQUEST_TIMEOUT_S,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._session = session or requests.Session()

    def _post(self, path: str, json: dict[str, Any], token: Optional[str] = None) -> Any:
        """POST to the identity API.

        Raises:
            AuthError: On connection failure or rejected request.
        """
        url = f"{self.base_url}{BackendConfig.AUTH_PATH}{path}"
        headers = {"apikey": self.api_key, "Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        try:
            response = self._session.post(url, json=json, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"[AUTH] POST {path} failed: {e}")
            raise AuthError("Identity service unreachable") from e

        if response.status_code >= 400:
            reason = _error_reason(response)
            logger.warning(f"[AUTH] POST {path} rejected ({response.status_code}): {reason}")
            raise AuthError(reason)

        if not response.content:
            return None
        return response.json()

    def sign_in(self, email: str, password: str) -> Identity:
        """Password sign-in. Returns the identity with its access token."""
        payload = self._post("/token?grant_type=password", json={"email": email, "password": password})
        identity = _identity_from_session(payload)
        logger.info(f"[AUTH] Signed in {identity!r}")
        return identity

    def sign_up(self, email: str, password: str) -> Optional[Identity]:
        """Register a new account.

        Returns:
            Identity when the project signs users in immediately, None when
            the account must first be confirmed by email.
        """
        payload = self._post("/signup", json={"email": email, "password": password})
        if not payload or not payload.get("access_token"):
            logger.info(f"[AUTH] Sign-up for {email} awaiting email confirmation")
            return None
        return _identity_from_session(payload)

    def sign_out(self, identity: Identity) -> None:
        """Revoke the session server-side. Local state is cleared by the AuthGate."""
        if identity.access_token:
            self._post("/logout", json={}, token=identity.access_token)
        logger.info(f"[AUTH] Signed out {identity!r}")


def _identity_from_session(payload: Any) -> Identity:
    if not isinstance(payload, dict) or "user" not in payload:
        raise AuthError("Identity service returned no user")
    user = payload["user"]
    return Identity(id=str(user["id"]), email=user.get("email"), access_token=payload.get("access_token"))


def _error_reason(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return f"HTTP {response.status_code}"
    if isinstance(body, dict):
        return body.get("error_description") or body.get("msg") or body.get("message") or f"HTTP {response.status_code}"
    return f"HTTP {response.status_code}"
