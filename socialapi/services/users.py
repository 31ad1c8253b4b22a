"""User use-cases: registration, login, profiles, search."""
from __future__ import annotations

import logging
from typing import Callable, Optional

from socialapi.auth import create_access_token, hash_password, verify_password
from socialapi.db.interfaces import UserRepository
from socialapi.errors import (
    DuplicateEmailError, DuplicateUsernameError, InvalidCredentialsError,
    NotFoundError, SocialError,
)
from socialapi.models import User
from socialapi.services.base import BaseService, validated


class UserService(BaseService):

    def __init__(
        self,
        users: UserRepository,
        token_issuer: Callable[[str], str] = create_access_token,
        logger: Optional[logging.Logger] = None,
    ):
        super().__init__(logger)
        self.users = users
        self.token_issuer = token_issuer

    async def register(self, name: str, username: str, email: str, password: str) -> User:
        """Create an account. The returned user has an empty password field.

        The email/username pre-checks are a fast path only; a concurrent
        registration that slips past them is still caught by the unique
        constraints and reported with the same Duplicate* errors.
        """
        self.log.info(f"Registering user username={username} email={email}")
        user = validated(User, name=name, username=username, email=email, password=password)

        if await self._exists(self.users.get_by_email, email, "check email"):
            self.log.warning(f"Registration rejected, email taken: {email}")
            raise DuplicateEmailError()
        if await self._exists(self.users.get_by_username, username, "check username"):
            self.log.warning(f"Registration rejected, username taken: {username}")
            raise DuplicateUsernameError()

        try:
            user.password = hash_password(password)
        except ValueError as exc:
            self.log.exception("Failed to hash password")
            raise SocialError("failed to hash password") from exc

        try:
            created = await self.users.create(user)
        except (DuplicateEmailError, DuplicateUsernameError):
            self.log.warning(f"Registration lost a race on username={username} email={email}")
            raise
        except Exception as exc:
            self.log.exception("Failed to create user")
            raise SocialError("failed to create user") from exc

        self.log.info(f"User registered id={created.id} username={username}")
        return created.sanitized()

    async def _exists(self, lookup, value: str, action: str) -> bool:
        try:
            await lookup(value)
        except NotFoundError:
            return False
        except Exception as exc:
            self.log.exception(f"Failed to {action}")
            raise SocialError(f"failed to {action}") from exc
        return True

    async def authenticate(self, email: str, password: str) -> User:
        """Check credentials and return the sanitized user.

        Unknown email and wrong password are indistinguishable to the caller.
        """
        self.log.info(f"Login attempt email={email}")
        try:
            user = await self.users.get_by_email(email)
        except NotFoundError:
            self.log.warning("Login failed: unknown email")
            raise InvalidCredentialsError() from None
        except Exception as exc:
            self.log.exception("Failed to get user")
            raise SocialError("failed to get user") from exc

        if not verify_password(password, user.password):
            self.log.warning(f"Login failed: bad password for user id={user.id}")
            raise InvalidCredentialsError()

        self.log.info(f"User logged in id={user.id}")
        return user.sanitized()

    async def login(self, email: str, password: str) -> str:
        user = await self.authenticate(email, password)
        return self.issue_token(user.id)

    def issue_token(self, user_id: str) -> str:
        return self.token_issuer(user_id)

    async def _load(self, lookup, key: str) -> User:
        try:
            return await lookup(key)
        except NotFoundError:
            self.log.warning(f"User not found: {key}")
            raise
        except Exception as exc:
            self.log.exception(f"Failed to get user {key}")
            raise SocialError("failed to get user") from exc

    async def get_profile(self, username: str) -> User:
        user = await self._load(self.users.get_by_username, username)
        return user.sanitized()

    async def get_by_id(self, user_id: str) -> User:
        user = await self._load(self.users.get_by_id, user_id)
        return user.sanitized()

    async def update_profile(
        self,
        user_id: str,
        name: Optional[str] = None,
        bio: Optional[str] = None,
        image_url: Optional[str] = None,
    ) -> User:
        """Apply only the fields that were provided; ``None`` leaves a field unchanged."""
        self.log.info(f"Updating profile id={user_id}")
        current = await self._load(self.users.get_by_id, user_id)

        merged = current.model_dump()
        if name is not None:
            merged["name"] = name
        if bio is not None:
            merged["bio"] = bio
        if image_url is not None:
            merged["image_url"] = image_url
        user = validated(User, **merged)

        try:
            updated = await self.users.update(user)
        except NotFoundError:
            raise
        except Exception as exc:
            self.log.exception(f"Failed to update profile id={user_id}")
            raise SocialError("failed to update profile") from exc

        self.log.info(f"Profile updated id={user_id}")
        return updated.sanitized()

    async def search_users(self, query: str, limit: int, offset: int) -> list[User]:
        try:
            users = await self.users.search(query, limit, offset)
        except Exception as exc:
            self.log.exception(f"Failed to search users query={query!r}")
            raise SocialError("failed to search users") from exc
        self.log.info(f"User search query={query!r} results={len(users)}")
        return [u.sanitized() for u in users]
