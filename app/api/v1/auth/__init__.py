"""Request identity dependencies"""

from .dependencies import get_resolved_identity, require_user

__all__ = ["get_resolved_identity", "require_user"]
