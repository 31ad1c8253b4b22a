"""Repository interfaces the services depend on.

Services only see these abstractions; ``socialapi.db.repository`` provides the
SQLAlchemy implementations and tests substitute in-memory fakes.
"""
from __future__ import annotations

from abc import ABC, abstractmethod

from socialapi.models import Comment, Follow, Like, Post, User


class UserRepository(ABC):

    @abstractmethod
    async def create(self, user: User) -> User:
        """Insert a user whose ``password`` already holds the hash.

        Raises DuplicateEmailError / DuplicateUsernameError on unique violations.
        """

    @abstractmethod
    async def get_by_id(self, user_id: str) -> User: ...

    @abstractmethod
    async def get_by_email(self, email: str) -> User: ...

    @abstractmethod
    async def get_by_username(self, username: str) -> User: ...

    @abstractmethod
    async def update(self, user: User) -> User: ...

    @abstractmethod
    async def search(self, query: str, limit: int, offset: int) -> list[User]: ...


class PostRepository(ABC):

    @abstractmethod
    async def create(self, post: Post) -> Post: ...

    @abstractmethod
    async def get_by_id(self, post_id: str) -> Post: ...

    @abstractmethod
    async def get_by_author_id(self, author_id: str, limit: int, offset: int) -> list[Post]: ...

    @abstractmethod
    async def get_feed(self, user_id: str, limit: int, offset: int) -> list[Post]: ...

    @abstractmethod
    async def update(self, post: Post) -> Post: ...

    @abstractmethod
    async def delete(self, post_id: str) -> None:
        """Delete the post together with its comments and likes."""


class CommentRepository(ABC):

    @abstractmethod
    async def create(self, comment: Comment) -> Comment: ...

    @abstractmethod
    async def get_by_id(self, comment_id: str) -> Comment: ...

    @abstractmethod
    async def get_by_post_id(self, post_id: str, limit: int, offset: int) -> list[Comment]: ...

    @abstractmethod
    async def delete(self, comment_id: str) -> None: ...


class LikeRepository(ABC):

    @abstractmethod
    async def create(self, like: Like) -> None:
        """Insert-or-ignore."""

    @abstractmethod
    async def delete(self, user_id: str, post_id: str) -> None: ...

    @abstractmethod
    async def exists(self, user_id: str, post_id: str) -> bool: ...


class FollowRepository(ABC):

    @abstractmethod
    async def create(self, follow: Follow) -> None:
        """Insert-or-ignore."""

    @abstractmethod
    async def delete(self, user_id: str, follower_id: str) -> None: ...

    @abstractmethod
    async def exists(self, user_id: str, follower_id: str) -> bool: ...

    @abstractmethod
    async def get_followers(self, user_id: str, limit: int, offset: int) -> list[User]: ...

    @abstractmethod
    async def get_following(self, follower_id: str, limit: int, offset: int) -> list[User]: ...
