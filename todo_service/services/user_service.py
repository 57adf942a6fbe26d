import logging
import uuid

from sqlalchemy.exc import IntegrityError

from ..core.exceptions import (
    DuplicateEmailError,
    DuplicateUsernameError,
    InvalidCredentialsError,
    NotFoundError,
)
from ..core.security import TokenService
from ..models.user import DEFAULT_ROLES, User
from ..repositories.user_store import CredentialStore
from ..schemas.user import AuthResponse
from ..utils.security import PasswordHasher
from ..utils.timeutils import utcnow

logger = logging.getLogger(__name__)


class UserService:
    """Registration and login."""

    def __init__(self, store: CredentialStore, hasher: PasswordHasher, tokens: TokenService):
        self.store = store
        self.hasher = hasher
        self.tokens = tokens

    def register(self, username: str, email: str, password: str) -> User:
        logger.info(f"Registering new user with username: {username}")

        # Username is checked first so it wins when both collide
        if self.store.exists_by_username(username):
            logger.warning(f"Username {username} is already taken")
            raise DuplicateUsernameError(username)
        if self.store.exists_by_email(email):
            logger.warning(f"Email {email} is already in use")
            raise DuplicateEmailError(email)

        user = User(
            id=uuid.uuid4(),
            username=username,
            email=email,
            hashed_password=self.hasher.hash(password),
            enabled=True,
            created_at=utcnow(),
        )
        user.roles = DEFAULT_ROLES

        try:
            user = self.store.save(user)
        except IntegrityError:
            # Lost a race with a concurrent registration
            self.store.rollback()
            if self.store.exists_by_username(username):
                raise DuplicateUsernameError(username)
            raise DuplicateEmailError(email)

        logger.info(f"User registered successfully with ID: {user.id}")
        return user

    def authenticate(self, username: str, password: str) -> AuthResponse:
        logger.info(f"Authenticating user: {username}")

        user = self.store.find_by_username(username)
        if user is None or not self.hasher.verify(password, user.hashed_password) or not user.enabled:
            logger.warning(f"Authentication failed for user {username}")
            raise InvalidCredentialsError()

        token = self.tokens.issue(user.id, user.username, sorted(user.roles))
        logger.info(f"User authenticated successfully: {user.username}")
        return AuthResponse(token=token, user_id=user.id, username=user.username)

    def get_by_id(self, user_id: uuid.UUID) -> User:
        logger.info(f"Fetching user with ID: {user_id}")
        user = self.store.find_by_id(user_id)
        if user is None:
            logger.warning(f"User not found with ID: {user_id}")
            raise NotFoundError("User", user_id)
        return user

    def is_username_available(self, username: str) -> bool:
        return not self.store.exists_by_username(username)

    def is_email_available(self, email: str) -> bool:
        return not self.store.exists_by_email(email)
