"""
Session-held customer authentication.

The shop API issues a JWT at login. The storefront keeps it in the session and
only decodes it (without verifying the signature) to know who is logged in;
the API itself verifies the token on every authenticated call.
"""
import json
import logging
from typing import Optional

import jwt

from ..entities import SessionUser
from ..serializers import TokenUserSerializer

logger = logging.getLogger(__name__)

SESSION_TOKEN_KEY = 'auth_token'


def unwrap_token(raw) -> str:
    """Accepts a bare JWT or a stored `{"token": "..."}` JSON blob."""
    if not raw:
        return ''
    raw = str(raw).strip()
    if raw.startswith('{'):
        try:
            parsed = json.loads(raw)
        except ValueError:
            return raw
        if isinstance(parsed, dict) and parsed.get('token'):
            return str(parsed['token'])
    return raw


def decode_token(token: str) -> Optional[dict]:
    """Returns the JWT claims, or None for an expired or undecodable token."""
    if not token:
        return None
    try:
        return jwt.decode(
            token,
            options={'verify_signature': False, 'verify_exp': True},
            algorithms=['HS256', 'HS384', 'HS512', 'RS256'],
        )
    except jwt.ExpiredSignatureError:
        logger.info("Stored token has expired")
    except jwt.InvalidTokenError as e:
        logger.warning("Failed to decode token: %s", e)
    return None


class SessionAuth:
    """Login state of the current visitor, backed by the Django session."""

    def __init__(self, session):
        self.session = session
        self._claims = None
        self._decoded = False

    @property
    def token(self) -> str:
        return unwrap_token(self.session.get(SESSION_TOKEN_KEY))

    @property
    def claims(self) -> Optional[dict]:
        if not self._decoded:
            self._claims = decode_token(self.token)
            self._decoded = True
        return self._claims

    @property
    def user(self) -> Optional[SessionUser]:
        claims = self.claims
        if not claims:
            return None
        serializer = TokenUserSerializer(data=claims.get('User') or {})
        if not serializer.is_valid():
            logger.warning("Token has no usable User claim: %s", serializer.errors)
            return None
        return serializer.save()

    def is_logged_in(self) -> bool:
        return self.claims is not None

    def get_user_id(self) -> Optional[str]:
        user = self.user
        return user.user_id if user else None

    def login(self, token: str):
        self.session[SESSION_TOKEN_KEY] = unwrap_token(token)
        self._decoded = False

    def logout(self):
        self.session.pop(SESSION_TOKEN_KEY, None)
        self._claims = None
        self._decoded = True
