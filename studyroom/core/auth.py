"""Owner identity resolution, exposed as a FastAPI dependency.

Public interface:
    ``require_owner`` returns an OwnerContext or raises 401.

Authentication itself lives in an external service. This module only turns
a bearer token into the opaque owner id every study operation is scoped to.
When ``settings.auth_enabled`` is False all requests act as
``settings.dev_owner_id`` so the development workflow is unbroken.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .config import settings
from .token_factory import decode_token
from ..exceptions import AuthenticationError

logger = logging.getLogger(__name__)

_bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class OwnerContext:
    """Identity of the caller. Passed explicitly into every service call."""

    owner_id: str


def require_owner(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
) -> OwnerContext:
    """Require a valid JWT and return the caller's OwnerContext."""
    if not settings.auth_enabled:
        return OwnerContext(owner_id=settings.dev_owner_id)

    if credentials is None:
        raise AuthenticationError("Missing authentication token")

    payload = decode_token(
        credentials.credentials, settings.jwt_secret_key, settings.jwt_algorithm
    )
    if payload is None:
        raise AuthenticationError("Invalid or expired token")

    return OwnerContext(owner_id=payload.sub)
