"""
SQLAlchemy-backed repositories.

Each operation runs in its own short session. Integrity of the email index is
left to the database unique constraint, and board updates lock the row
(SELECT ... FOR UPDATE where supported) before writing it back.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from kanban_api.core.errors import AlreadyExistsError, InternalError, NotFoundError
from kanban_api.core.ids import new_id
from kanban_api.models.board import Board, BoardRow
from kanban_api.models.user import User, UserRow
from kanban_api.repositories.base import BoardRepository, Clock, UserRepository, utcnow

logger = logging.getLogger(__name__)

DATABASE_ERROR_MESSAGE = "database error occurred"


def _as_utc(value: datetime) -> datetime:
    # SQLite drops tzinfo; values are always written in UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _user_from_row(row: UserRow) -> User:
    return User(
        id=row.id,
        email=row.email,
        password_hash=row.password_hash,
        created_at=_as_utc(row.created_at),
    )


def _board_from_row(row: BoardRow) -> Board:
    return Board(
        id=row.id,
        title=row.title,
        created_at=_as_utc(row.created_at),
        updated_at=_as_utc(row.updated_at),
    )


class SqlUserRepository(UserRepository):
    def __init__(self, session_factory: sessionmaker, clock: Optional[Clock] = None) -> None:
        self._session_factory = session_factory
        self._clock = clock or utcnow

    def create(self, email: str, password_hash: str) -> User:
        row = UserRow(
            id=new_id(),
            email=email,
            password_hash=password_hash,
            created_at=self._clock(),
        )
        db: Session = self._session_factory()
        try:
            db.add(row)
            db.commit()
            return _user_from_row(row)
        except IntegrityError:
            # Concurrent registration with the same email lost the race
            db.rollback()
            raise AlreadyExistsError()
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error("Failed to create user: %s", exc)
            raise InternalError(DATABASE_ERROR_MESSAGE) from exc
        finally:
            db.close()

    def get_by_email(self, email: str) -> User:
        return self._get_one(UserRow.email == email)

    def get_by_id(self, user_id: str) -> User:
        return self._get_one(UserRow.id == user_id)

    def _get_one(self, criterion) -> User:
        db: Session = self._session_factory()
        try:
            row = db.query(UserRow).filter(criterion).first()
        except SQLAlchemyError as exc:
            logger.error("Failed to load user: %s", exc)
            raise InternalError(DATABASE_ERROR_MESSAGE) from exc
        finally:
            db.close()
        if row is None:
            raise NotFoundError("user not found")
        return _user_from_row(row)


class SqlBoardRepository(BoardRepository):
    def __init__(self, session_factory: sessionmaker, clock: Optional[Clock] = None) -> None:
        self._session_factory = session_factory
        self._clock = clock or utcnow

    def list(self) -> List[Board]:
        db: Session = self._session_factory()
        try:
            rows = db.query(BoardRow).order_by(BoardRow.created_at.desc()).all()
            return [_board_from_row(row) for row in rows]
        except SQLAlchemyError as exc:
            logger.error("Failed to list boards: %s", exc)
            raise InternalError(DATABASE_ERROR_MESSAGE) from exc
        finally:
            db.close()

    def get(self, board_id: str) -> Board:
        db: Session = self._session_factory()
        try:
            row = db.query(BoardRow).filter(BoardRow.id == board_id).first()
        except SQLAlchemyError as exc:
            logger.error("Failed to load board %s: %s", board_id, exc)
            raise InternalError(DATABASE_ERROR_MESSAGE) from exc
        finally:
            db.close()
        if row is None:
            raise NotFoundError()
        return _board_from_row(row)

    def create(self, title: str) -> Board:
        now = self._clock()
        row = BoardRow(id=new_id(), title=title, created_at=now, updated_at=now)
        db: Session = self._session_factory()
        try:
            db.add(row)
            db.commit()
            return _board_from_row(row)
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error("Failed to create board: %s", exc)
            raise InternalError(DATABASE_ERROR_MESSAGE) from exc
        finally:
            db.close()

    def update(self, board_id: str, title: str) -> Board:
        db: Session = self._session_factory()
        try:
            row = (
                db.query(BoardRow)
                .filter(BoardRow.id == board_id)
                .with_for_update()
                .first()
            )
            if row is None:
                db.rollback()
                raise NotFoundError()
            row.title = title
            row.updated_at = self._clock()
            db.commit()
            return _board_from_row(row)
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error("Failed to update board %s: %s", board_id, exc)
            raise InternalError(DATABASE_ERROR_MESSAGE) from exc
        finally:
            db.close()

    def delete(self, board_id: str) -> None:
        db: Session = self._session_factory()
        try:
            deleted = db.query(BoardRow).filter(BoardRow.id == board_id).delete()
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error("Failed to delete board %s: %s", board_id, exc)
            raise InternalError(DATABASE_ERROR_MESSAGE) from exc
        finally:
            db.close()
        if deleted == 0:
            raise NotFoundError()
