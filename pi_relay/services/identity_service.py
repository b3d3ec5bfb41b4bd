"""
Identity Service - Verifies Pi user access tokens.

Every protected request is re-verified against the Pi API (GET /me); nothing
is cached between requests, so a revoked token is rejected on its next use.

Usage:
    from pi_relay.services.identity_service import IdentityService

    token = IdentityService.parse_bearer(request.headers.get("Authorization"))
    user = IdentityService.verify_token(token)
    user.uid  # upstream-assigned id, the only uid handlers may use
"""

from dataclasses import dataclass
from typing import Optional

from pi_relay.exceptions import AuthFailure, InvalidCredential, MissingCredential
from pi_relay.services.pi_api import UpstreamError, pi_get_as_user

BEARER_PREFIX = "Bearer "


@dataclass(frozen=True)
class PiUser:
    """Verified identity for the lifetime of one request."""

    uid: str
    username: str
    wallet_address: Optional[str] = None


class IdentityService:
    """Service for verifying end-user credentials against the Pi API."""

    @staticmethod
    def parse_bearer(auth_header: Optional[str]) -> str:
        """
        Extract the token from an Authorization header.
        Raises MissingCredential if the header is absent, uses another
        scheme, or carries an empty token.
        """
        if not auth_header or not auth_header.startswith(BEARER_PREFIX):
            raise MissingCredential()

        token = auth_header[len(BEARER_PREFIX):].strip()
        if not token:
            raise MissingCredential()
        return token

    @staticmethod
    def verify_token(access_token: str) -> PiUser:
        """
        Confirm the token belongs to a real Pi user and return its identity.

        Raises:
            MissingCredential: empty token
            InvalidCredential: upstream answered without a uid
            AuthFailure: upstream call failed (status passed through if known)
        """
        if not access_token:
            raise MissingCredential()

        try:
            data = pi_get_as_user("/me", access_token)
        except UpstreamError as e:
            print(f"[AUTH] Token verification failed: {e.describe()}")
            raise AuthFailure.from_upstream(e) from e

        uid = data.get("uid")
        if not uid:
            print("[AUTH] /me returned no uid - rejecting token")
            raise InvalidCredential()

        return PiUser(
            uid=str(uid),
            username=data.get("username") or "",
            wallet_address=data.get("wallet_address"),
        )
