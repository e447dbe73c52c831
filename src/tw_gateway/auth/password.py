"""Admin password checks with bcrypt (>=4.0, used directly, no passlib)."""

import bcrypt


def hash_password(plain: str) -> str:
    """Hash a plain-text password. Used to produce ADMIN_PASSWORD_HASH."""
    hashed_bytes: bytes = bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt())
    return hashed_bytes.decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    if not hashed:
        return False
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # malformed hash in configuration
        return False
