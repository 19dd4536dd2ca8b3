"""
Arboriza Backend - User Model
==============================

What:  ORM model for the `users` table.
Who:   Written by registration, read by login and joined by comment listings.

Table Design:
    - username is stored lowercased; the UNIQUE constraint on it is what
      actually guarantees case-insensitive uniqueness under concurrent
      registrations.
    - password is stored and compared as plaintext. This is a known security
      defect kept for compatibility with the existing mobile client; hashing
      must land together with a client-side migration.
"""

from datetime import datetime

from sqlalchemy import DateTime, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from arboriza.database import Base


class User(Base):
    """A registered user. Created by registration; never updated or deleted."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    username: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Lowercased login name",
    )

    # TODO: replace with a password hash once the client stops relying on exact-match login
    password: Mapped[str] = mapped_column(String(255), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    __table_args__ = (
        UniqueConstraint("username", name="uq_users_username"),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}')>"
