"""Post use-cases, including the follow feed."""
from __future__ import annotations

import logging
from typing import Optional

from socialapi.db.interfaces import PostRepository, UserRepository
from socialapi.errors import NotFoundError, SocialError, UnauthorizedError
from socialapi.models import Post
from socialapi.services.base import BaseService, validated


class PostService(BaseService):

    def __init__(
        self,
        posts: PostRepository,
        users: UserRepository,
        logger: Optional[logging.Logger] = None,
    ):
        super().__init__(logger)
        self.posts = posts
        self.users = users

    async def create_post(self, author_id: str, content: str, image_url: Optional[str] = None) -> Post:
        post = validated(Post, author_id=author_id, content=content, image_url=image_url)
        try:
            created = await self.posts.create(post)
        except Exception as exc:
            self.log.exception(f"Failed to create post for author={author_id}")
            raise SocialError("failed to create post") from exc
        self.log.info(f"Post created id={created.id} author={author_id}")
        return created

    async def get_post_by_id(self, post_id: str) -> Post:
        try:
            return await self.posts.get_by_id(post_id)
        except NotFoundError:
            self.log.warning(f"Post not found: {post_id}")
            raise
        except Exception as exc:
            self.log.exception(f"Failed to get post {post_id}")
            raise SocialError("failed to get post") from exc

    async def get_posts_by_user(self, username: str, limit: int, offset: int) -> list[Post]:
        """Newest first."""
        try:
            user = await self.users.get_by_username(username)
        except NotFoundError:
            self.log.warning(f"User not found: {username}")
            raise
        except Exception as exc:
            self.log.exception(f"Failed to get user {username}")
            raise SocialError("failed to get user") from exc

        try:
            posts = await self.posts.get_by_author_id(user.id, limit, offset)
        except Exception as exc:
            self.log.exception(f"Failed to get posts for user={user.id}")
            raise SocialError("failed to get posts") from exc
        return posts

    async def _owned_post(self, post_id: str, requester_id: str, action: str) -> Post:
        post = await self.get_post_by_id(post_id)
        if post.author_id != requester_id:
            self.log.warning(f"Unauthorized {action} of post={post_id} by user={requester_id}")
            raise UnauthorizedError()
        return post

    async def update_post(
        self,
        post_id: str,
        requester_id: str,
        content: str,
        image_url: Optional[str] = None,
    ) -> Post:
        """Replace the content; ``image_url=None`` keeps the current image."""
        post = await self._owned_post(post_id, requester_id, "update")

        merged = post.model_dump()
        merged["content"] = content
        if image_url is not None:
            merged["image_url"] = image_url
        post = validated(Post, **merged)

        try:
            updated = await self.posts.update(post)
        except NotFoundError:
            raise
        except Exception as exc:
            self.log.exception(f"Failed to update post {post_id}")
            raise SocialError("failed to update post") from exc
        self.log.info(f"Post updated id={post_id}")
        return updated

    async def delete_post(self, post_id: str, requester_id: str) -> None:
        await self._owned_post(post_id, requester_id, "delete")
        try:
            await self.posts.delete(post_id)
        except NotFoundError:
            raise
        except Exception as exc:
            self.log.exception(f"Failed to delete post {post_id}")
            raise SocialError("failed to delete post") from exc
        self.log.info(f"Post deleted id={post_id}")

    async def get_feed(self, user_id: str, limit: int, offset: int) -> list[Post]:
        """Posts by everyone ``user_id`` follows, newest first."""
        try:
            posts = await self.posts.get_feed(user_id, limit, offset)
        except Exception as exc:
            self.log.exception(f"Failed to get feed for user={user_id}")
            raise SocialError("failed to get feed") from exc
        self.log.info(f"Feed fetched user={user_id} posts={len(posts)}")
        return posts
