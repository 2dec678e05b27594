"""
Reset a user's password through the credential store.

Usage:
    python scripts/reset_pw.py alice@example.com
"""
import argparse
import asyncio
import getpass
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from authcore.kernel.identity.password import BCRYPT_MAX_BYTES, password_too_long  # noqa: E402


async def main(email: str, password: str) -> int:
    from authcore.config import get_settings
    from authcore.database import async_session_maker, close_db
    from authcore.kernel.identity.user_repository import SqlAlchemyUserRepository

    settings = get_settings()
    try:
        async with async_session_maker() as session:
            users = SqlAlchemyUserRepository(session, bcrypt_rounds=settings.bcrypt_rounds)
            user = await users.find_by_email(email)
            if user is None:
                print(f"No user with email {email}")
                return 1
            await users.change_password(user.id, password)
            await session.commit()
            print(f"Updated password for {email}")
            return 0
    finally:
        await close_db()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Reset a user's password")
    parser.add_argument("email")
    args = parser.parse_args()
    password = getpass.getpass("New password: ")
    if password_too_long(password):
        print(f"Password must be at most {BCRYPT_MAX_BYTES} bytes")
        sys.exit(1)
    sys.exit(asyncio.run(main(args.email, password)))
