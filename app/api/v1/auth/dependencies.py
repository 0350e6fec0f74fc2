"""
Authentication dependencies
Resolve who a cart request is acting for
"""

from typing import Optional
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from app.core.config import settings
from app.core.exceptions import UnauthorizedException
from app.services.identity import IdentityResolver, ResolvedIdentity

# Optional bearer: guests have no Authorization header
security = HTTPBearer(auto_error=False)

_resolver = IdentityResolver()

def get_identity_resolver() -> IdentityResolver:
    """Overridable hook for the auth collaborator"""
    return _resolver

async def get_resolved_identity(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    resolver: IdentityResolver = Depends(get_identity_resolver),
) -> ResolvedIdentity:
    """
    Resolve the request identity
    A valid bearer token wins; otherwise the session header; otherwise none
    """
    token = credentials.credentials if credentials else None
    session_token = request.headers.get(settings.SESSION_HEADER)
    return resolver.resolve(token, session_token)

async def require_user(
    resolved: ResolvedIdentity = Depends(get_resolved_identity),
) -> ResolvedIdentity:
    """Signed-in user required (raises 401 otherwise)"""
    if not resolved.is_authenticated:
        raise UnauthorizedException("Invalid or missing access token")
    return resolved
