"""Comment use-cases."""
from __future__ import annotations

import logging
from typing import Optional

from socialapi.db.interfaces import CommentRepository, PostRepository
from socialapi.errors import NotFoundError, SocialError, UnauthorizedError
from socialapi.models import Comment
from socialapi.services.base import BaseService, validated


class CommentService(BaseService):

    def __init__(
        self,
        comments: CommentRepository,
        posts: PostRepository,
        logger: Optional[logging.Logger] = None,
    ):
        super().__init__(logger)
        self.comments = comments
        self.posts = posts

    async def _require_post(self, post_id: str) -> None:
        try:
            await self.posts.get_by_id(post_id)
        except NotFoundError:
            self.log.warning(f"Post not found: {post_id}")
            raise
        except Exception as exc:
            self.log.exception(f"Failed to get post {post_id}")
            raise SocialError("failed to get post") from exc

    async def add_comment(self, post_id: str, author_id: str, content: str) -> Comment:
        await self._require_post(post_id)
        comment = validated(Comment, post_id=post_id, author_id=author_id, content=content)
        try:
            created = await self.comments.create(comment)
        except Exception as exc:
            self.log.exception(f"Failed to add comment to post={post_id}")
            raise SocialError("failed to add comment") from exc
        self.log.info(f"Comment added id={created.id} post={post_id}")
        return created

    async def get_comments(self, post_id: str, limit: int, offset: int) -> list[Comment]:
        """Oldest first."""
        await self._require_post(post_id)
        try:
            return await self.comments.get_by_post_id(post_id, limit, offset)
        except Exception as exc:
            self.log.exception(f"Failed to get comments for post={post_id}")
            raise SocialError("failed to get comments") from exc

    async def delete_comment(
        self, comment_id: str, requester_id: str, post_id: Optional[str] = None,
    ) -> None:
        """Only the comment's author may delete it.

        When ``post_id`` is given the comment must belong to that post.
        """
        try:
            comment = await self.comments.get_by_id(comment_id)
        except NotFoundError:
            self.log.warning(f"Comment not found: {comment_id}")
            raise
        except Exception as exc:
            self.log.exception(f"Failed to get comment {comment_id}")
            raise SocialError("failed to get comment") from exc

        if post_id is not None and comment.post_id != post_id:
            self.log.warning(f"Comment {comment_id} is not on post={post_id}")
            raise NotFoundError()

        if comment.author_id != requester_id:
            self.log.warning(f"Unauthorized delete of comment={comment_id} by user={requester_id}")
            raise UnauthorizedError()

        try:
            await self.comments.delete(comment_id)
        except NotFoundError:
            raise
        except Exception as exc:
            self.log.exception(f"Failed to delete comment {comment_id}")
            raise SocialError("failed to delete comment") from exc
        self.log.info(f"Comment deleted id={comment_id}")
