from typing import List, Optional

from app.core.errors import AuthorizationError, NotFoundError, ValidationError
from app.core.logger import logger
from app.core.security import Role, authorize_user_deletion, hash_password, verify_password
from app.models.db_models import User
from app.services.db_service import UserStore


class UserService:
    def __init__(self, store: UserStore):
        self.store = store

    async def list_users(self) -> List[User]:
        return await self.store.list_all()

    async def get_user(self, user_id: int) -> User:
        user = await self.store.get(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    async def create_user(self, name: Optional[str], password: Optional[str], role: Role = Role.ADMIN) -> User:
        """New accounts are admins unless a role is given explicitly (bootstrap / script)."""
        name = (name or "").strip()
        if not name or not password:
            raise ValidationError("Name and password are required")

        user = await self.store.insert(name=name, password_hash=hash_password(password), role=role.value)
        logger.info(f"🆕 User '{user.name}' created with role {user.role}")
        return user

    async def update_user(self, user_id: Optional[int], name: Optional[str] = None, password: Optional[str] = None) -> User:
        """Changes only the fields that are given and non-empty."""
        if user_id is None:
            raise ValidationError("User ID required")
        await self.get_user(user_id)

        changes = {}
        if name and name.strip():
            changes["name"] = name.strip()
        if password:
            changes["password"] = hash_password(password)
        if not changes:
            raise ValidationError("Nothing to update")

        if not await self.store.update(user_id, changes):
            raise NotFoundError("User not found")
        logger.info(f"✏️ User {user_id} updated ({', '.join(changes)})")
        return await self.get_user(user_id)

    async def delete_user(self, user_id: Optional[int]) -> None:
        if user_id is None:
            raise ValidationError("User ID required")
        user = await self.get_user(user_id)
        authorize_user_deletion(user)

        await self.store.delete(user_id)
        logger.info(f"🗑️ User '{user.name}' ({user_id}) deleted")

    async def authenticate(self, name: Optional[str], password: Optional[str]) -> User:
        if not name or not password:
            raise AuthorizationError("Invalid name or password")

        user = await self.store.get_by_name(name.strip())
        if user is None or not verify_password(password, user.password):
            logger.warning(f"⚠️ Failed login for '{name}'")
            raise AuthorizationError("Invalid name or password")
        return user

    async def ensure_superadmin(self, name: str, password: str) -> Optional[User]:
        """Startup bootstrap: creates the superadmin if no account has that name yet."""
        if not name or not password:
            return None
        existing = await self.store.get_by_name(name)
        if existing is not None:
            return existing
        return await self.create_user(name, password, role=Role.SUPERADMIN)

    async def upsert_account(self, name: str, password: str, role: Role) -> User:
        """Creates the account or resets its password and role."""
        existing = await self.store.get_by_name(name)
        if existing is None:
            return await self.create_user(name, password, role=role)

        await self.store.update(existing.id, {"password": hash_password(password), "role": role.value})
        logger.info(f"🔑 Account '{name}' reset with role {role.value}")
        return await self.get_user(existing.id)
