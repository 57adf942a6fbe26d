from typing import Optional

from passlib.context import CryptContext

from ..core.config import get_settings


class PasswordHasher:
    """One-way bcrypt hashing of user passwords."""

    def __init__(self, rounds: int = 12):
        self.pwd_context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds,
        )

    def hash(self, password: str) -> str:
        return self.pwd_context.hash(password)

    def verify(self, plain: str, hashed: Optional[str]) -> bool:
        if not hashed:
            return False
        try:
            return self.pwd_context.verify(plain, hashed)
        except (ValueError, TypeError):
            # Unrecognised or corrupt digest
            return False


_password_hasher: Optional[PasswordHasher] = None


def get_password_hasher() -> PasswordHasher:
    global _password_hasher
    if _password_hasher is None:
        _password_hasher = PasswordHasher(rounds=get_settings().bcrypt_rounds)
    return _password_hasher
