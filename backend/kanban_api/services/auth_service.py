"""
Registration, login and token issuance.

Emails are normalized (trimmed, lowercased) before every lookup or write.
Login failures are deliberately indistinguishable: an unknown email and a
wrong password raise the same InvalidCredentialsError after comparable work.
"""

import logging
from datetime import datetime
from typing import Callable, Optional, Tuple
from kanban_api.core.errors import (
    InternalError,
    InvalidCredentialsError,
    InvalidInputError,
    NotFoundError,
)
from kanban_api.core.security import (
    TokenSettings,
    create_access_token,
    dummy_verify,
    get_password_hash,
    verify_password,
)
from kanban_api.models.user import User
from kanban_api.repositories.base import UserRepository, utcnow

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


class AuthService:
    def __init__(
        self,
        users: UserRepository,
        token_settings: TokenSettings,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._users = users
        self._token_settings = token_settings
        self._clock = clock or utcnow

    def register(self, email: str, password: str) -> Tuple[User, str]:
        """Create an account and return it together with a fresh token"""
        email = normalize_email(email)
        if not email or not password:
            raise InvalidInputError("email and password required")

        # Store only the salted hash; AlreadyExistsError propagates unchanged
        password_hash = get_password_hash(password)
        user = self._users.create(email, password_hash)
        logger.info("Registered user %s", user.id)
        return user, self.issue_token(user)

    def login(self, email: str, password: str) -> Tuple[User, str]:
        email = normalize_email(email)
        try:
            user = self._users.get_by_email(email)
        except NotFoundError:
            dummy_verify()
            logger.info("Login failed")
            raise InvalidCredentialsError()
        except InternalError as exc:
            # A store failure looks exactly like a bad login to the caller
            dummy_verify()
            logger.warning("Login lookup failed: %s", exc.message)
            raise InvalidCredentialsError() from exc

        if not verify_password(password, user.password_hash):
            logger.info("Login failed")
            raise InvalidCredentialsError()

        logger.info("User %s logged in", user.id)
        return user, self.issue_token(user)

    def get_user(self, user_id: str) -> User:
        return self._users.get_by_id(user_id)

    def issue_token(self, user: User) -> str:
        return create_access_token(
            self._token_settings,
            subject=user.id,
            email=user.email,
            now=self._clock(),
        )
