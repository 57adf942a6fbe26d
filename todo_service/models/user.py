import uuid
from typing import Iterable, Set
from sqlalchemy import Column, String, Boolean, DateTime, Uuid
from ..core.database import Base

DEFAULT_ROLES = frozenset({"USER"})


class User(Base):
    __tablename__ = "users"
    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    username = Column(String(50), unique=True, index=True, nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    # Comma-joined role names
    roles_value = Column("roles", String(255), nullable=False, default="USER")
    enabled = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False)

    @property
    def roles(self) -> Set[str]:
        return {role for role in (self.roles_value or "").split(",") if role}

    @roles.setter
    def roles(self, value: Iterable[str]) -> None:
        self.roles_value = ",".join(sorted(set(value)))

    def __repr__(self):
        return f"<User(id={self.id}, username='{self.username}')>"
