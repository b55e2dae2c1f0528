from enum import Enum
from typing import Dict, Optional, Set

import bcrypt
from fastapi import Request

from app.core.errors import AuthorizationError, DomainConflictError
from app.models.db_models import User
from app.services.db_service import UserStore

# bcrypt only looks at the first 72 bytes
BCRYPT_MAX_BYTES = 72


class Role(str, Enum):
    NONE = "none"
    ADMIN = "admin"
    SUPERADMIN = "superadmin"


class Operation(str, Enum):
    READ_BOOKINGS = "read_bookings"
    UPDATE_BOOKING = "update_booking"
    CANCEL_BOOKING = "cancel_booking"
    NOTIFY_BOOKING = "notify_booking"
    LIST_USERS = "list_users"
    CREATE_USER = "create_user"
    UPDATE_USER = "update_user"
    DELETE_USER = "delete_user"


STAFF = {Role.ADMIN, Role.SUPERADMIN}

PERMISSIONS: Dict[Operation, Set[Role]] = {
    Operation.READ_BOOKINGS: STAFF,
    Operation.UPDATE_BOOKING: STAFF,
    Operation.CANCEL_BOOKING: STAFF,
    Operation.NOTIFY_BOOKING: STAFF,
    Operation.LIST_USERS: STAFF,
    Operation.CREATE_USER: {Role.SUPERADMIN},
    Operation.UPDATE_USER: {Role.SUPERADMIN},
    Operation.DELETE_USER: {Role.SUPERADMIN},
}


def authorize(role: Role, operation: Operation) -> None:
    """Raises AuthorizationError unless ``role`` may perform ``operation``."""
    if role not in PERMISSIONS.get(operation, set()):
        raise AuthorizationError("Unauthorized")


def authorize_user_deletion(target: User) -> None:
    """The superadmin account can never be deleted, whoever asks."""
    if target.role == Role.SUPERADMIN.value:
        raise DomainConflictError("Cannot delete superadmin")


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8")[:BCRYPT_MAX_BYTES], bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8")[:BCRYPT_MAX_BYTES], password_hash.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def role_of(user: Optional[User]) -> Role:
    if user is None:
        return Role.NONE
    try:
        return Role(user.role)
    except ValueError:
        return Role.NONE


async def get_session_user(request: Request) -> Optional[User]:
    """The account behind the session cookie, or None if absent or since deleted."""
    user_id = request.session.get("user_id")
    if user_id is None:
        return None
    return await UserStore(request.app.state.db).get(user_id)


async def resolve_role(request: Request) -> Role:
    return role_of(await get_session_user(request))


def require(operation: Operation):
    """
    Route dependency guarding ``operation``.
    Usage: ``role: Role = Depends(require(Operation.READ_BOOKINGS))``
    """
    async def verify_role(request: Request) -> Role:
        role = await resolve_role(request)
        authorize(role, operation)
        return role

    return verify_role
