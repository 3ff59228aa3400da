"""bcrypt password hashing, run off the event loop."""

import asyncio

import bcrypt


def _hash(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def _verify(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


async def hash_password(password: str) -> str:
    """Hash a password with a fresh salt."""
    return await asyncio.to_thread(_hash, password)


async def verify_password(password: str, password_hash: str) -> bool:
    """Check a password against a stored bcrypt hash."""
    return await asyncio.to_thread(_verify, password, password_hash)
