"""
Arboriza Backend - Auth Service
================================

What:  User registration and login.
How:   Usernames are lowercased before every lookup and insert. Passwords are
       stored and compared as given (see the note in models/user.py).
       No session or token is issued; clients re-send credentials.

Registration Flow:
    BEGIN
      SELECT id FROM users WHERE username = :username   → ConflictError if found
      INSERT INTO users (username, password) ...         → IntegrityError → ConflictError
    COMMIT

    The SELECT only exists to return a friendly error. Two concurrent
    registrations can both pass it; the UNIQUE constraint on users.username
    then rejects the second insert, which is reported the same way.
"""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from arboriza.exceptions import (
    ConflictError,
    NotFoundError,
    StoreError,
    UnauthorizedError,
    ValidationError,
)
from arboriza.models.user import User
from arboriza.schemas.auth import UserPublic

logger = logging.getLogger(__name__)


def _require_credentials(username: Optional[str], password: Optional[str]) -> None:
    if not username or not password:
        raise ValidationError(
            message="Username and password are required",
            context={"fields": ["username", "password"]},
        )


class AuthService:
    """Stateless; receives the request's session on every call."""

    async def register(
        self,
        db: AsyncSession,
        username: Optional[str],
        password: Optional[str],
    ) -> UserPublic:
        """
        Create a user after checking the (lowercased) username is free.

        Raises:
            ValidationError: username or password missing (→ 400)
            ConflictError:   username already taken (→ 400)
            StoreError:      any other store failure, rolled back (→ 500)
        """
        _require_credentials(username, password)
        normalized = username.lower()

        try:
            async with db.begin():
                existing = await db.execute(
                    select(User.id).where(User.username == normalized)
                )
                if existing.scalar_one_or_none() is not None:
                    raise ConflictError(context={"username": normalized})

                user = User(username=normalized, password=password)
                db.add(user)
                await db.flush()
        except IntegrityError:
            logger.info("Registration lost a race for username %r", normalized)
            raise ConflictError(context={"username": normalized})
        except SQLAlchemyError as e:
            logger.error("Registration error: %s", str(e), exc_info=True)
            raise StoreError(message="Could not register user")

        logger.info("User %s registered (id=%s)", user.username, user.id)
        return UserPublic(id=user.id, username=user.username)

    async def login(
        self,
        db: AsyncSession,
        username: Optional[str],
        password: Optional[str],
    ) -> UserPublic:
        """
        Check a username/password pair.

        Raises:
            ValidationError:   username or password missing (→ 400)
            NotFoundError:     no such username (→ 404)
            UnauthorizedError: password differs from the stored one (→ 401)
            StoreError:        lookup failed (→ 500)
        """
        _require_credentials(username, password)
        normalized = username.lower()

        try:
            result = await db.execute(select(User).where(User.username == normalized))
            user = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Login error: %s", str(e), exc_info=True)
            raise StoreError(message="Internal error while processing login")

        if user is None:
            raise NotFoundError(resource="user", message="User not found")

        if password != user.password:
            raise UnauthorizedError()

        return UserPublic(id=user.id, username=user.username)


auth_service = AuthService()
