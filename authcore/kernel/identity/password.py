"""
bcrypt password hashing.

Hashes are salted per call, so the same password never hashes to the same
string twice. bcrypt only reads the first 72 bytes of its input, so longer
passwords are refused rather than truncated. The async variants run bcrypt
in a worker thread to keep the event loop free during login and
registration.
"""

import asyncio

import bcrypt

BCRYPT_ROUNDS = 10
BCRYPT_MAX_BYTES = 72


def password_too_long(password: str) -> bool:
    return len(password.encode("utf-8")) > BCRYPT_MAX_BYTES


class PasswordHasher:

    @classmethod
    def hash(cls, password: str, rounds: int = BCRYPT_ROUNDS) -> str:
        if password_too_long(password):
            raise ValueError(f"Password exceeds {BCRYPT_MAX_BYTES} bytes")
        return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("ascii")

    @classmethod
    def verify(cls, plain_password: str, hashed_password: str) -> bool:
        """False unless the password matches; malformed hashes never match."""
        # hash() refuses these, so none can be stored
        if password_too_long(plain_password):
            return False
        try:
            return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
        except ValueError:
            return False


def hash_password(password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    return PasswordHasher.hash(password, rounds)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return PasswordHasher.verify(plain_password, hashed_password)


async def hash_password_async(password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    return await asyncio.to_thread(PasswordHasher.hash, password, rounds)


async def verify_password_async(plain_password: str, hashed_password: str) -> bool:
    return await asyncio.to_thread(PasswordHasher.verify, plain_password, hashed_password)
