"""
marketplace.services.auth_service

Registration and login.

Responsibilities:
- Register identities (uniqueness pre-check + database constraint as final authority).
- Authenticate credentials and issue session tokens.
- Resolve bearer tokens into a typed `Principal`.

Unknown usernames and wrong passwords fail identically, and both paths run one
bcrypt verification, so neither the error nor the response time reveals
whether a username is registered.
"""

from __future__ import annotations

from datetime import timedelta

from marketplace.auth.models import Principal
from marketplace.auth.passwords import PasswordHasher
from marketplace.auth.tokens import TokenManager
from marketplace.db.records import UserView
from marketplace.db.repositories.base import UserRepository
from marketplace.errors import InvalidCredentials, UserExists
from marketplace.observability.logging import get_logger

log = get_logger(__name__)


class AuthService:
    def __init__(
        self,
        *,
        users: UserRepository,
        hasher: PasswordHasher,
        tokens: TokenManager,
        token_ttl: timedelta,
    ) -> None:
        self._users = users
        self._hasher = hasher
        self._tokens = tokens
        self._token_ttl = token_ttl

    async def register(self, *, username: str, password: str) -> UserView:
        if await self._users.get_by_username(username) is not None:
            log.info("register_rejected", reason="user_exists")
            raise UserExists()

        digest = await self._hasher.hash(password)
        try:
            record = await self._users.create(username=username, password_hash=digest)
        except UserExists:
            log.info("register_rejected", reason="user_exists_on_insert")
            raise

        log.info("user_registered", user_id=record.id)
        return UserView.from_record(record)

    async def login(self, *, username: str, password: str) -> str:
        user = await self._users.get_by_username(username)
        if user is None:
            await self._hasher.verify_dummy(password)
            log.info("login_failed")
            raise InvalidCredentials()

        if not await self._hasher.verify(password, user.password_hash):
            log.info("login_failed")
            raise InvalidCredentials()

        token = self._tokens.issue(user_id=user.id, username=user.username, ttl=self._token_ttl)
        log.info("login_succeeded", user_id=user.id)
        return token

    def authenticate(self, token: str) -> Principal:
        return Principal.from_claims(self._tokens.verify(token))
