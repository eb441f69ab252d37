"""
Access token verification for the Micropub endpoint.

Micropub requests carry a bearer token. The endpoint delegates checking it
to a verifier:

    StaticTokenVerifier    compares against a token read from a Docker secret
    TokenEndpointVerifier  asks an IndieAuth token endpoint about the token

Usage:
    >>> verifier = verifier_from_config(config)
    >>> if verifier.verify(token):
    ...     # token may create posts

References:
    - IndieAuth token verification: https://indieauth.spec.indieweb.org/#access-token-verification
"""

import hmac
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import requests

from config import read_secret_file


logger = logging.getLogger(__name__)

TOKEN_USER_AGENT = "Micropub endpoint (+https://micropub.spec.indieweb.org/)"
DEFAULT_TIMEOUT = 10.0

# Scopes that allow creating posts ("post" is the legacy scope name)
CREATE_SCOPES = {"create", "post"}


class TokenVerificationError(Exception):
    """Raised when a token endpoint cannot be reached or replies unusably."""


class TokenVerifier(ABC):
    """Decides whether a bearer token may create posts."""

    @abstractmethod
    def verify(self, token: str) -> bool:
        """Return True if the token is allowed to create posts."""


class StaticTokenVerifier(TokenVerifier):
    """Accept exactly one pre-shared token."""

    def __init__(self, token: str):
        if not token:
            raise ValueError("StaticTokenVerifier requires a non-empty token")
        self._token = token

    def verify(self, token: str) -> bool:
        if not token:
            return False
        return hmac.compare_digest(token.encode(), self._token.encode())


class TokenEndpointVerifier(TokenVerifier):
    """Verify tokens against an IndieAuth token endpoint.

    Attributes:
        token_endpoint: URL of the token endpoint
        me: Optional profile URL the token must belong to
        timeout: Request timeout in seconds
    """

    def __init__(self, token_endpoint: str, me: Optional[str] = None,
                 timeout: float = DEFAULT_TIMEOUT, session: Optional[requests.Session] = None):
        self.token_endpoint = token_endpoint
        self.me = me.rstrip("/") if me else None
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers["User-Agent"] = TOKEN_USER_AGENT

    def lookup(self, token: str) -> Dict[str, Any]:
        """Fetch the token endpoint's description of a token.

        Returns:
            The JSON response (me, client_id, scope, ...), or an empty dict
            if the endpoint rejected the token

        Raises:
            TokenVerificationError: On connection errors or non-JSON replies
        """
        try:
            response = self.session.get(
                self.token_endpoint,
                headers={
                    "Authorization": f"Bearer {token}",
                    "Accept": "application/json",
                },
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            raise TokenVerificationError(f"Token endpoint request failed: {e}") from e

        if response.status_code in (400, 401, 403):
            logger.info(f"Token endpoint rejected token: status={response.status_code}")
            return {}
        if not response.ok:
            raise TokenVerificationError(f"Token endpoint returned status {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise TokenVerificationError("Token endpoint returned invalid JSON") from e
        if not isinstance(data, dict):
            raise TokenVerificationError("Token endpoint returned an unexpected response")
        return data

    def verify(self, token: str) -> bool:
        if not token:
            return False

        data = self.lookup(token)
        if not data or data.get("active") is False:
            return False

        if self.me and str(data.get("me", "")).rstrip("/") != self.me:
            logger.warning(f"Token belongs to {data.get('me')!r}, expected {self.me!r}")
            return False

        scopes = set(str(data.get("scope", "")).split())
        if not scopes & CREATE_SCOPES:
            logger.warning(f"Token lacks create scope: scope={data.get('scope')!r}")
            return False

        return True


def verifier_from_config(config: Dict[str, Any]) -> Optional[TokenVerifier]:
    """Pick a token verifier from the micropub configuration section.

    An external token endpoint takes precedence over a static token secret.
    Returns None when neither is configured.
    """
    section = config.get("micropub", {}) or {}

    token_endpoint = section.get("token_endpoint")
    if token_endpoint:
        logger.info(f"Verifying Micropub tokens with {token_endpoint}")
        return TokenEndpointVerifier(
            token_endpoint,
            me=section.get("me"),
            timeout=section.get("token_timeout", DEFAULT_TIMEOUT),
        )

    token_file = section.get("token_file")
    if token_file:
        token = read_secret_file(token_file)
        if token:
            logger.info("Verifying Micropub tokens against static token secret")
            return StaticTokenVerifier(token)
        logger.warning(f"Micropub token file {token_file} is missing or empty")

    return None
