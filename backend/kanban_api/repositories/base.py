from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Callable, List
from kanban_api.models.board import Board
from kanban_api.models.user import User

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserRepository(ABC):
    """
    Storage for user accounts.

    Emails arrive already normalized from the auth service.
    create() must reject a second account for the same email even when
    two registrations race each other.
    """

    @abstractmethod
    def create(self, email: str, password_hash: str) -> User:
        """Insert a new user. Raises AlreadyExistsError if the email is taken."""
        pass

    @abstractmethod
    def get_by_email(self, email: str) -> User:
        """Raises NotFoundError if no user has this email."""
        pass

    @abstractmethod
    def get_by_id(self, user_id: str) -> User:
        """Raises NotFoundError if no user has this id."""
        pass


class BoardRepository(ABC):
    """
    Storage for boards.

    Title validation happens in the board service; the repository stores
    whatever title it is given.
    """

    @abstractmethod
    def list(self) -> List[Board]:
        """All boards, newest first."""
        pass

    @abstractmethod
    def get(self, board_id: str) -> Board:
        pass

    @abstractmethod
    def create(self, title: str) -> Board:
        pass

    @abstractmethod
    def update(self, board_id: str, title: str) -> Board:
        """Replace the title and refresh updated_at; created_at is kept."""
        pass

    @abstractmethod
    def delete(self, board_id: str) -> None:
        pass
