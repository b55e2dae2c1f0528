import argparse
import asyncio
import getpass

from app.core.config import settings
from app.core.logger import setup_logging, logger
from app.core.security import Role
from app.services.db_service import Database, UserStore
from app.services.user_service import UserService


async def create_admin(database_url: str, name: str, password: str, role: Role):
    db = Database(database_url)
    try:
        db.init_schema()
        user = await UserService(UserStore(db)).upsert_account(name, password, role)
        logger.info(f"✅ Account '{user.name}' ready with role {user.role}")
    finally:
        db.dispose()


def main():
    parser = argparse.ArgumentParser(description="Create or reset an admin account.")
    parser.add_argument("name")
    parser.add_argument("--role", choices=[Role.ADMIN.value, Role.SUPERADMIN.value], default=Role.ADMIN.value)
    parser.add_argument("--database-url", default=settings.DATABASE_URL)
    args = parser.parse_args()

    password = getpass.getpass(f"Password for {args.name}: ")
    if not password:
        parser.error("password must not be empty")

    setup_logging()
    asyncio.run(create_admin(args.database_url, args.name, password, Role(args.role)))


if __name__ == "__main__":
    main()
