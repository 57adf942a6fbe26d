import uuid
from typing import Optional

from sqlalchemy import select, exists
from sqlalchemy.orm import Session

from ..models.user import User


class CredentialStore:
    """Users and their hashed credentials."""

    def __init__(self, db: Session):
        self._db = db

    def find_by_id(self, user_id: uuid.UUID) -> Optional[User]:
        return self._db.get(User, user_id)

    def find_by_username(self, username: str) -> Optional[User]:
        return self._db.execute(select(User).where(User.username == username)).scalars().first()

    def find_by_email(self, email: str) -> Optional[User]:
        return self._db.execute(select(User).where(User.email == email)).scalars().first()

    def exists_by_username(self, username: str) -> bool:
        return bool(self._db.scalar(select(exists().where(User.username == username))))

    def exists_by_email(self, email: str) -> bool:
        return bool(self._db.scalar(select(exists().where(User.email == email))))

    def save(self, user: User) -> User:
        self._db.add(user)
        self._db.commit()
        self._db.refresh(user)
        return user

    def rollback(self) -> None:
        self._db.rollback()
