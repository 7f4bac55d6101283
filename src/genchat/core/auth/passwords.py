"""Password hashing via passlib (argon2)."""

from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Return ``False`` (never raise) for a malformed or foreign hash."""
    try:
        return pwd_context.verify(password, password_hash)
    except (ValueError, TypeError):
        return False
