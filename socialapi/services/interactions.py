"""Likes and follows."""
from __future__ import annotations

import logging
from typing import Optional

from socialapi.db.interfaces import FollowRepository, LikeRepository, PostRepository, UserRepository
from socialapi.errors import CannotFollowSelfError, NotFoundError, SocialError
from socialapi.models import Follow, Like, User
from socialapi.services.base import BaseService


class InteractionService(BaseService):

    def __init__(
        self,
        likes: LikeRepository,
        follows: FollowRepository,
        users: UserRepository,
        posts: PostRepository,
        logger: Optional[logging.Logger] = None,
    ):
        super().__init__(logger)
        self.likes = likes
        self.follows = follows
        self.users = users
        self.posts = posts

    # ── Likes ─────────────────────────────────────────────────────────────

    async def like_post(self, post_id: str, user_id: str) -> None:
        """Idempotent: liking twice leaves a single like."""
        try:
            await self.posts.get_by_id(post_id)
            await self.likes.create(Like(user_id=user_id, post_id=post_id))
        except NotFoundError:
            self.log.warning(f"Like rejected, post not found: {post_id}")
            raise
        except Exception as exc:
            self.log.exception(f"Failed to like post={post_id} user={user_id}")
            raise SocialError("failed to like post") from exc
        self.log.info(f"Post liked post={post_id} user={user_id}")

    async def unlike_post(self, post_id: str, user_id: str) -> None:
        try:
            await self.likes.delete(user_id, post_id)
        except NotFoundError:
            self.log.warning(f"Unlike of missing like post={post_id} user={user_id}")
            raise
        except Exception as exc:
            self.log.exception(f"Failed to unlike post={post_id} user={user_id}")
            raise SocialError("failed to unlike post") from exc
        self.log.info(f"Post unliked post={post_id} user={user_id}")

    async def is_liked(self, post_id: str, user_id: str) -> bool:
        try:
            return await self.likes.exists(user_id, post_id)
        except Exception as exc:
            raise SocialError("failed to check like") from exc

    # ── Follows ───────────────────────────────────────────────────────────

    async def follow_user(self, user_id: str, follower_id: str) -> None:
        """``follower_id`` starts following ``user_id``. Idempotent."""
        if user_id == follower_id:
            self.log.warning(f"User {user_id} attempted to follow themselves")
            raise CannotFollowSelfError()
        try:
            await self.follows.create(Follow(user_id=user_id, follower_id=follower_id))
        except Exception as exc:
            self.log.exception(f"Failed to follow user={user_id} follower={follower_id}")
            raise SocialError("failed to follow user") from exc
        self.log.info(f"User followed user={user_id} follower={follower_id}")

    async def unfollow_user(self, user_id: str, follower_id: str) -> None:
        try:
            await self.follows.delete(user_id, follower_id)
        except NotFoundError:
            self.log.warning(f"Unfollow of missing edge user={user_id} follower={follower_id}")
            raise
        except Exception as exc:
            self.log.exception(f"Failed to unfollow user={user_id} follower={follower_id}")
            raise SocialError("failed to unfollow user") from exc
        self.log.info(f"User unfollowed user={user_id} follower={follower_id}")

    async def is_following(self, user_id: str, follower_id: str) -> bool:
        try:
            return await self.follows.exists(user_id, follower_id)
        except Exception as exc:
            raise SocialError("failed to check follow") from exc

    async def _resolve(self, username: str) -> User:
        try:
            return await self.users.get_by_username(username)
        except NotFoundError:
            self.log.warning(f"User not found: {username}")
            raise
        except Exception as exc:
            self.log.exception(f"Failed to get user {username}")
            raise SocialError("failed to get user") from exc

    async def get_followers(self, username: str, limit: int, offset: int) -> list[User]:
        user = await self._resolve(username)
        try:
            followers = await self.follows.get_followers(user.id, limit, offset)
        except Exception as exc:
            self.log.exception(f"Failed to get followers of user={user.id}")
            raise SocialError("failed to get followers") from exc
        return [u.sanitized() for u in followers]

    async def get_following(self, username: str, limit: int, offset: int) -> list[User]:
        user = await self._resolve(username)
        try:
            following = await self.follows.get_following(user.id, limit, offset)
        except Exception as exc:
            self.log.exception(f"Failed to get following of user={user.id}")
            raise SocialError("failed to get following") from exc
        return [u.sanitized() for u in following]
