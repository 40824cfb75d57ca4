# Mock Backend Security

from .auth import BearerAuth, TokenUser, create_access_token, optional_user, require_user

__all__ = ["BearerAuth", "TokenUser", "create_access_token", "optional_user", "require_user"]
