from dataclasses import dataclass
from datetime import datetime
from sqlalchemy import Column, String, DateTime
from kanban_api.core.database import Base


@dataclass(frozen=True)
class User:
    """
    A registered account.

    Email is stored normalized (trimmed, lowercase) and is unique.
    The password hash never leaves the service layer; API schemas
    copy only id, email and created_at.
    """
    id: str
    email: str
    password_hash: str
    created_at: datetime


class UserRow(Base):
    """Table model backing the SQL user repository"""
    __tablename__ = "users"

    id = Column(String(36), primary_key=True)
    # Unique constraint is what enforces one account per email under concurrency
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
