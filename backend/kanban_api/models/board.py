from dataclasses import dataclass
from datetime import datetime
from sqlalchemy import Column, String, DateTime
from kanban_api.core.database import Base


@dataclass(frozen=True)
class Board:
    """
    A board. Title is never blank while the board exists;
    updated_at moves forward on every title change.
    """
    id: str
    title: str
    created_at: datetime
    updated_at: datetime


class BoardRow(Base):
    __tablename__ = "boards"

    id = Column(String(36), primary_key=True)
    title = Column(String, nullable=False)
    # Indexed for the newest-first listing
    created_at = Column(DateTime(timezone=True), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False)
