"""Business logic for the Todo Service."""
from fastapi import Depends
from sqlalchemy.orm import Session

from ..core.database import get_db
from ..core.security import TokenService, get_token_service
from ..repositories.task_store import TaskStore
from ..repositories.user_store import CredentialStore
from ..utils.security import PasswordHasher, get_password_hasher
from .task_service import TaskService
from .user_service import UserService


def get_task_service(db: Session = Depends(get_db)) -> TaskService:
    return TaskService(TaskStore(db))


def get_user_service(
    db: Session = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenService = Depends(get_token_service),
) -> UserService:
    return UserService(CredentialStore(db), hasher, tokens)
