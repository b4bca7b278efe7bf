from __future__ import annotations

from passlib.context import CryptContext


class PasswordHasher:
    """One-way password verifier; the stored hash never leaves the users service."""

    def __init__(self) -> None:
        self._ctx = CryptContext(schemes=["argon2"], deprecated="auto")

    def hash(self, plain_password: str) -> str:
        return self._ctx.hash(plain_password)

    def verify(self, plain_password: str, password_hash: str) -> bool:
        try:
            return self._ctx.verify(plain_password, password_hash)
        except (ValueError, TypeError):
            # Unknown or malformed hash format.
            return False
