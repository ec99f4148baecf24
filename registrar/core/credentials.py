"""Credentials — salted bcrypt password hashes via passlib.

Invariants:
    - hash_password() never returns the same string twice (per-hash random salt)
    - verify_password() is the only way to compare a password with a stored hash
    - An empty or foreign stored hash never verifies; it does not raise
"""

from passlib.context import CryptContext
from passlib.exc import UnknownHashError

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    if not password_hash:
        return False
    try:
        return pwd_context.verify(password, password_hash)
    except (UnknownHashError, ValueError):
        return False
