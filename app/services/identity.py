"""
Cart identity resolution
Turns a request's bearer token and session header into a cart identity
"""

from dataclasses import dataclass
from typing import Optional
import logging

from app.core.exceptions import InvalidSessionException
from app.core.security import JWTAuthResolver
from app.schemas.cart import CartIdentity
from app.utils.validators import validate_session_token

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class ResolvedIdentity:
    """
    The identity a request acts as, plus the guest session it arrived with.
    A signed-in user keeps the session id around so it can be merged.
    """
    identity: Optional[CartIdentity] = None
    session_id: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return self.identity is not None and self.identity.is_user

    @property
    def user_id(self) -> Optional[str]:
        return self.identity.value if self.is_authenticated else None

class IdentityResolver:
    """
    Resolves cart identities.

    Args:
        auth: collaborator exposing validate(token) -> user id or None.
            Defaults to the JWT validator.
    """

    def __init__(self, auth=None):
        self.auth = auth or JWTAuthResolver()

    def resolve(
        self,
        bearer_token: Optional[str] = None,
        session_token: Optional[str] = None
    ) -> ResolvedIdentity:
        """
        Raises:
            InvalidSessionException: If the session token is too long to store
        """
        try:
            session_id = validate_session_token(session_token)
        except ValueError as e:
            raise InvalidSessionException(str(e))

        user_id = self.auth.validate(bearer_token) if bearer_token else None
        if user_id:
            return ResolvedIdentity(CartIdentity.user(user_id), session_id)

        if session_id:
            return ResolvedIdentity(CartIdentity.session(session_id), session_id)

        return ResolvedIdentity(None, None)
