"""
In-process repositories.

Each store guards its dictionaries with one ReadWriteLock: lookups share it,
mutations hold it exclusively. Check-then-act sequences (email uniqueness
check plus insert, get plus update) run inside a single write section.
Entities are frozen dataclasses, so readers only ever see whole records.
"""

import dataclasses
import logging
from typing import Dict, List, Optional

from kanban_api.core.errors import AlreadyExistsError, NotFoundError
from kanban_api.core.ids import new_id
from kanban_api.models.board import Board
from kanban_api.models.user import User
from kanban_api.repositories.base import BoardRepository, Clock, UserRepository, utcnow
from kanban_api.repositories.locking import ReadWriteLock

logger = logging.getLogger(__name__)


class MemoryUserRepository(UserRepository):
    def __init__(self, clock: Optional[Clock] = None) -> None:
        self._clock = clock or utcnow
        self._lock = ReadWriteLock()
        self._users: Dict[str, User] = {}
        # Secondary index, always updated together with _users
        self._email_index: Dict[str, str] = {}

    def create(self, email: str, password_hash: str) -> User:
        with self._lock.write():
            if email in self._email_index:
                raise AlreadyExistsError()
            user = User(
                id=new_id(),
                email=email,
                password_hash=password_hash,
                created_at=self._clock(),
            )
            self._users[user.id] = user
            self._email_index[email] = user.id
        return user

    def get_by_email(self, email: str) -> User:
        with self._lock.read():
            user_id = self._email_index.get(email)
            if user_id is None:
                raise NotFoundError("user not found")
            return self._users[user_id]

    def get_by_id(self, user_id: str) -> User:
        with self._lock.read():
            user = self._users.get(user_id)
        if user is None:
            raise NotFoundError("user not found")
        return user


class MemoryBoardRepository(BoardRepository):
    def __init__(self, clock: Optional[Clock] = None) -> None:
        self._clock = clock or utcnow
        self._lock = ReadWriteLock()
        # Insertion ordered; list() relies on it to break created_at ties
        self._boards: Dict[str, Board] = {}

    def list(self) -> List[Board]:
        with self._lock.read():
            newest_inserted_first = list(reversed(self._boards.values()))
        # sorted() is stable, so equal timestamps keep newest-inserted first
        return sorted(newest_inserted_first, key=lambda board: board.created_at, reverse=True)

    def get(self, board_id: str) -> Board:
        with self._lock.read():
            board = self._boards.get(board_id)
        if board is None:
            raise NotFoundError()
        return board

    def create(self, title: str) -> Board:
        now = self._clock()
        board = Board(id=new_id(), title=title, created_at=now, updated_at=now)
        with self._lock.write():
            self._boards[board.id] = board
        return board

    def update(self, board_id: str, title: str) -> Board:
        with self._lock.write():
            current = self._boards.get(board_id)
            if current is None:
                raise NotFoundError()
            updated = dataclasses.replace(current, title=title, updated_at=self._clock())
            self._boards[board_id] = updated
        return updated

    def delete(self, board_id: str) -> None:
        with self._lock.write():
            if self._boards.pop(board_id, None) is None:
                raise NotFoundError()
        logger.debug("Deleted board %s from memory store", board_id)
