"""
marketplace.db.repositories.users

Repository for `User` entities.

Responsibilities:
- Look up identities by username.
- Insert identities, translating a username UNIQUE violation into `UserExists`.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from marketplace.db.models import User
from marketplace.db.records import UserRecord
from marketplace.db.session import session_scope
from marketplace.errors import TransientStoreError, UserExists


def _to_record(user: User) -> UserRecord:
    return UserRecord(
        id=user.id,
        username=user.username,
        password_hash=user.password_hash,
        created_at=user.created_at,
    )


class UserRepo:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._sessions = session_factory

    async def get_by_username(self, username: str) -> UserRecord | None:
        stmt = select(User).where(User.username == username)
        try:
            async with session_scope(self._sessions) as session:
                user = (await session.execute(stmt)).scalar_one_or_none()
                return _to_record(user) if user is not None else None
        except SQLAlchemyError as e:
            raise TransientStoreError("users.get_by_username") from e

    async def create(self, *, username: str, password_hash: str) -> UserRecord:
        try:
            async with session_scope(self._sessions) as session:
                user = User(username=username, password_hash=password_hash)
                session.add(user)
                await session.flush()
                return _to_record(user)
        except IntegrityError as e:
            # Lost a concurrent registration race: same outcome as the pre-check.
            raise UserExists() from e
        except SQLAlchemyError as e:
            raise TransientStoreError("users.create") from e
