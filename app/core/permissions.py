"""Role-based access control."""

from enum import Enum
from typing import Annotated, Any, Callable

from fastapi import Depends

from app.api.deps import get_current_active_user
from app.core.exceptions import AuthorizationError
from app.models.user import User


class UserRole(str, Enum):
    """User roles in the system."""

    USER = "user"
    HOST = "host"
    ADMIN = "admin"


def require_role(*allowed_roles: UserRole) -> Callable[..., Any]:
    """Dependency to require specific roles."""

    async def role_checker(current_user: Annotated[User, Depends(get_current_active_user)]) -> User:
        if UserRole(current_user.role) not in allowed_roles:
            raise AuthorizationError(
                f"Role '{current_user.role}' is not authorized for this action"
            )
        return current_user

    return role_checker


# Convenience dependencies
require_admin = require_role(UserRole.ADMIN)
require_host = require_role(UserRole.HOST, UserRole.ADMIN)
