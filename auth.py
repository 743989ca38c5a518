"""
Maps the verified bearer token of the current request to a profile.
Tokens are issued by the identity provider; the subject claim is the
profile id.
"""
from flask_jwt_extended import get_jwt, get_jwt_identity

from core.errors import AuthorizationError
from database import get_store
from services.profile_service import ProfileService


def current_profile():
    """Profile of the caller, or None for an anonymous request."""
    user_id = get_jwt_identity()
    if user_id is None:
        return None
    return ProfileService(get_store()).get_or_create(str(user_id), get_jwt())


def require_admin():
    profile = current_profile()
    if profile is None or not profile.get('is_admin'):
        raise AuthorizationError("Admin access required")
    return profile
