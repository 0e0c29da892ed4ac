"""Bearer-token authentication against Supabase Auth.

Routes depend on ``get_current_user_id``; the provider behind it is itself a
dependency (``get_identity_provider``) so tests and other deployments can
swap it through ``app.dependency_overrides``.
"""
import logging
from typing import Optional

from fastapi import Depends, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from supabase import Client, create_client

from event_platform.config import settings
from event_platform.errors import Unauthenticated

logger = logging.getLogger(__name__)

# auto_error=False so a missing header reaches our own 401 payload.
security = HTTPBearer(auto_error=False)


class IdentityProvider:
    """Turns a bearer token into a verified user id."""

    def __init__(self, client: Client):
        self.client = client

    def resolve(self, token: str) -> str:
        try:
            response = self.client.auth.get_user(jwt=token)
        except Exception as exc:
            logger.info("Token rejected by auth provider: %s", exc)
            raise Unauthenticated("Invalid token")
        if response is None or response.user is None:
            raise Unauthenticated("Invalid token")
        return str(response.user.id)


_client: Optional[Client] = None


def get_supabase() -> Client:
    global _client
    if _client is None:
        _client = create_client(settings.SUPABASE_URL, settings.SUPABASE_ANON_KEY)
    return _client


def get_identity_provider() -> IdentityProvider:
    return IdentityProvider(get_supabase())


def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security),
    provider: IdentityProvider = Depends(get_identity_provider),
) -> str:
    """Verified caller id; every data operation runs as this user."""
    if credentials is None or not credentials.credentials:
        raise Unauthenticated("No authorization header")
    return provider.resolve(credentials.credentials)
