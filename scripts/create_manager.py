"""
Create a client-manager account.

Registration through the API always creates client-user accounts, so
manager accounts for the web console are provisioned here.

Usage:
    python scripts/create_manager.py manager@example.com "Jane Manager"
"""
import argparse
import asyncio
import getpass
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from authcore.kernel.identity.password import BCRYPT_MAX_BYTES, password_too_long  # noqa: E402


async def main(email: str, name: str, password: str) -> int:
    from authcore.config import get_settings
    from authcore.database import async_session_maker, close_db, init_db
    from authcore.kernel.identity.password import hash_password_async
    from authcore.kernel.identity.user_repository import SqlAlchemyUserRepository
    from authcore.kernel.models.user import UserRole

    settings = get_settings()
    await init_db()
    try:
        async with async_session_maker() as session:
            users = SqlAlchemyUserRepository(session, bcrypt_rounds=settings.bcrypt_rounds)
            if await users.find_by_email(email) is not None:
                print(f"{email} already exists")
                return 1
            user = await users.create({
                "email": email,
                "name": name,
                "password_hash": await hash_password_async(password, settings.bcrypt_rounds),
                "role": UserRole.CLIENT_MANAGER.value,
            })
            await session.commit()
            print(f"Created manager {user.email} ({user.id})")
            return 0
    finally:
        await close_db()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("email")
    parser.add_argument("name")
    args = parser.parse_args()
    password = getpass.getpass("Password: ")
    if password_too_long(password):
        print(f"Password must be at most {BCRYPT_MAX_BYTES} bytes")
        sys.exit(1)
    if password != getpass.getpass("Confirm password: "):
        print("Passwords do not match")
        sys.exit(1)
    sys.exit(asyncio.run(main(args.email, args.name, password)))
