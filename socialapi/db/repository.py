"""SQLAlchemy repositories: DB CRUD operations + Pydantic conversion.

Every method maps to one statement (or one short unit of work) and translates
driver errors into the taxonomy in ``socialapi.errors``: missing rows become
NotFoundError, unique violations on users become the Duplicate* sentinels and
anything else is re-raised as a generic SocialError with the cause chained.
"""
from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import select, delete, func, or_
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from socialapi.db.interfaces import (
    CommentRepository, FollowRepository, LikeRepository, PostRepository, UserRepository,
)
from socialapi.db.tables import CommentRow, FollowRow, LikeRow, PostRow, UserRow
from socialapi.errors import (
    DuplicateEmailError, DuplicateUsernameError, NotFoundError, SocialError,
)
from socialapi.models import Comment, Follow, Like, Post, User


def _escape_like(value: str) -> str:
    """Escape LIKE wildcard characters in user input."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


# SQLite reports "table.column"; PostgreSQL reports the constraint/index name
_EMAIL_CONSTRAINTS = ("users.email", "users_email_key")
_USERNAME_CONSTRAINTS = ("users.username", "ix_users_username", "users_username_key")


def _duplicate_user_error(exc: IntegrityError) -> SocialError:
    detail = str(exc.orig)
    if any(name in detail for name in _EMAIL_CONSTRAINTS):
        return DuplicateEmailError()
    if any(name in detail for name in _USERNAME_CONSTRAINTS):
        return DuplicateUsernameError()
    return SocialError("failed to create user")


def _row_to_user(row: UserRow) -> User:
    return User(
        id=row.id,
        name=row.name,
        username=row.username,
        email=row.email,
        password=row.password_hash,
        bio=row.bio,
        image_url=row.image_url,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _row_to_post(row: PostRow) -> Post:
    return Post.model_validate(row)


def _row_to_comment(row: CommentRow) -> Comment:
    return Comment.model_validate(row)


class _SQLRepository:
    """Shared session handling for the concrete repositories."""

    def __init__(self, session: AsyncSession):
        self.session = session

    def _insert(self, table):
        """Dialect-aware INSERT that supports ON CONFLICT DO NOTHING."""
        dialect = self.session.get_bind().dialect.name
        if dialect == "postgresql":
            return postgresql.insert(table)
        return sqlite.insert(table)

    async def _commit(self, action: str) -> None:
        try:
            await self.session.commit()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            raise SocialError(f"failed to {action}") from exc


class SQLUserRepository(_SQLRepository, UserRepository):

    async def create(self, user: User) -> User:
        row = UserRow(
            name=user.name,
            username=user.username,
            email=user.email,
            password_hash=user.password,
            bio=user.bio,
            image_url=user.image_url,
        )
        self.session.add(row)
        try:
            await self.session.commit()
        except IntegrityError as exc:
            await self.session.rollback()
            raise _duplicate_user_error(exc) from exc
        except SQLAlchemyError as exc:
            await self.session.rollback()
            raise SocialError("failed to create user") from exc
        await self.session.refresh(row)
        return _row_to_user(row)

    async def _get_by(self, column, value, action: str) -> User:
        try:
            result = await self.session.execute(select(UserRow).where(column == value))
        except SQLAlchemyError as exc:
            raise SocialError(f"failed to {action}") from exc
        row = result.scalar_one_or_none()
        if row is None:
            raise NotFoundError()
        return _row_to_user(row)

    async def get_by_id(self, user_id: str) -> User:
        return await self._get_by(UserRow.id, user_id, "get user by id")

    async def get_by_email(self, email: str) -> User:
        return await self._get_by(UserRow.email, email, "get user by email")

    async def get_by_username(self, username: str) -> User:
        return await self._get_by(UserRow.username, username, "get user by username")

    async def update(self, user: User) -> User:
        row = await self.session.get(UserRow, user.id)
        if row is None:
            raise NotFoundError()
        row.name = user.name
        row.bio = user.bio
        row.image_url = user.image_url
        row.updated_at = datetime.now(timezone.utc)
        await self._commit("update user")
        await self.session.refresh(row)
        return _row_to_user(row)

    async def search(self, query: str, limit: int, offset: int) -> list[User]:
        pattern = f"%{_escape_like(query)}%"
        stmt = (
            select(UserRow)
            .where(or_(
                UserRow.name.ilike(pattern, escape="\\"),
                UserRow.username.ilike(pattern, escape="\\"),
            ))
            .order_by(UserRow.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as exc:
            raise SocialError("failed to search users") from exc
        return [_row_to_user(r) for r in result.scalars().all()]


class SQLPostRepository(_SQLRepository, PostRepository):

    async def create(self, post: Post) -> Post:
        row = PostRow(author_id=post.author_id, content=post.content, image_url=post.image_url)
        self.session.add(row)
        await self._commit("create post")
        await self.session.refresh(row)
        return _row_to_post(row)

    async def get_by_id(self, post_id: str) -> Post:
        try:
            row = await self.session.get(PostRow, post_id)
        except SQLAlchemyError as exc:
            raise SocialError("failed to get post by id") from exc
        if row is None:
            raise NotFoundError()
        return _row_to_post(row)

    async def _list(self, stmt, action: str) -> list[Post]:
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as exc:
            raise SocialError(f"failed to {action}") from exc
        return [_row_to_post(r) for r in result.scalars().all()]

    async def get_by_author_id(self, author_id: str, limit: int, offset: int) -> list[Post]:
        stmt = (
            select(PostRow)
            .where(PostRow.author_id == author_id)
            .order_by(PostRow.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        return await self._list(stmt, "get posts by author id")

    async def get_feed(self, user_id: str, limit: int, offset: int) -> list[Post]:
        stmt = (
            select(PostRow)
            .join(FollowRow, FollowRow.user_id == PostRow.author_id)
            .where(FollowRow.follower_id == user_id)
            .order_by(PostRow.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        return await self._list(stmt, "get feed")

    async def update(self, post: Post) -> Post:
        row = await self.session.get(PostRow, post.id)
        if row is None:
            raise NotFoundError()
        row.content = post.content
        row.image_url = post.image_url
        row.updated_at = datetime.now(timezone.utc)
        await self._commit("update post")
        await self.session.refresh(row)
        return _row_to_post(row)

    async def delete(self, post_id: str) -> None:
        try:
            await self.session.execute(delete(CommentRow).where(CommentRow.post_id == post_id))
            await self.session.execute(delete(LikeRow).where(LikeRow.post_id == post_id))
            result = await self.session.execute(delete(PostRow).where(PostRow.id == post_id))
        except SQLAlchemyError as exc:
            await self.session.rollback()
            raise SocialError("failed to delete post") from exc
        if result.rowcount == 0:
            await self.session.rollback()
            raise NotFoundError()
        await self._commit("delete post")


class SQLCommentRepository(_SQLRepository, CommentRepository):

    async def create(self, comment: Comment) -> Comment:
        row = CommentRow(post_id=comment.post_id, author_id=comment.author_id, content=comment.content)
        self.session.add(row)
        await self._commit("create comment")
        await self.session.refresh(row)
        return _row_to_comment(row)

    async def get_by_id(self, comment_id: str) -> Comment:
        try:
            row = await self.session.get(CommentRow, comment_id)
        except SQLAlchemyError as exc:
            raise SocialError("failed to get comment by id") from exc
        if row is None:
            raise NotFoundError()
        return _row_to_comment(row)

    async def get_by_post_id(self, post_id: str, limit: int, offset: int) -> list[Comment]:
        stmt = (
            select(CommentRow)
            .where(CommentRow.post_id == post_id)
            .order_by(CommentRow.created_at.asc())
            .limit(limit)
            .offset(offset)
        )
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as exc:
            raise SocialError("failed to get comments by post id") from exc
        return [_row_to_comment(r) for r in result.scalars().all()]

    async def delete(self, comment_id: str) -> None:
        try:
            result = await self.session.execute(delete(CommentRow).where(CommentRow.id == comment_id))
        except SQLAlchemyError as exc:
            await self.session.rollback()
            raise SocialError("failed to delete comment") from exc
        if result.rowcount == 0:
            raise NotFoundError()
        await self._commit("delete comment")


class SQLLikeRepository(_SQLRepository, LikeRepository):

    async def create(self, like: Like) -> None:
        stmt = (
            self._insert(LikeRow)
            .values(user_id=like.user_id, post_id=like.post_id, created_at=datetime.now(timezone.utc))
            .on_conflict_do_nothing()
        )
        try:
            await self.session.execute(stmt)
        except SQLAlchemyError as exc:
            await self.session.rollback()
            raise SocialError("failed to create like") from exc
        await self._commit("create like")

    async def delete(self, user_id: str, post_id: str) -> None:
        try:
            result = await self.session.execute(
                delete(LikeRow).where(LikeRow.user_id == user_id, LikeRow.post_id == post_id)
            )
        except SQLAlchemyError as exc:
            await self.session.rollback()
            raise SocialError("failed to delete like") from exc
        if result.rowcount == 0:
            raise NotFoundError("like not found")
        await self._commit("delete like")

    async def exists(self, user_id: str, post_id: str) -> bool:
        stmt = select(func.count()).select_from(LikeRow).where(
            LikeRow.user_id == user_id, LikeRow.post_id == post_id,
        )
        try:
            count = (await self.session.execute(stmt)).scalar() or 0
        except SQLAlchemyError as exc:
            raise SocialError("failed to check if like exists") from exc
        return count > 0


class SQLFollowRepository(_SQLRepository, FollowRepository):

    async def create(self, follow: Follow) -> None:
        stmt = (
            self._insert(FollowRow)
            .values(user_id=follow.user_id, follower_id=follow.follower_id, created_at=datetime.now(timezone.utc))
            .on_conflict_do_nothing()
        )
        try:
            await self.session.execute(stmt)
        except SQLAlchemyError as exc:
            await self.session.rollback()
            raise SocialError("failed to create follow") from exc
        await self._commit("create follow")

    async def delete(self, user_id: str, follower_id: str) -> None:
        try:
            result = await self.session.execute(
                delete(FollowRow).where(FollowRow.user_id == user_id, FollowRow.follower_id == follower_id)
            )
        except SQLAlchemyError as exc:
            await self.session.rollback()
            raise SocialError("failed to delete follow") from exc
        if result.rowcount == 0:
            raise NotFoundError("follow relationship not found")
        await self._commit("delete follow")

    async def exists(self, user_id: str, follower_id: str) -> bool:
        stmt = select(func.count()).select_from(FollowRow).where(
            FollowRow.user_id == user_id, FollowRow.follower_id == follower_id,
        )
        try:
            count = (await self.session.execute(stmt)).scalar() or 0
        except SQLAlchemyError as exc:
            raise SocialError("failed to check if follow exists") from exc
        return count > 0

    async def _related_users(self, join_on, where, action: str, limit: int, offset: int) -> list[User]:
        stmt = (
            select(UserRow)
            .join(FollowRow, join_on)
            .where(where)
            .order_by(FollowRow.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as exc:
            raise SocialError(f"failed to {action}") from exc
        return [_row_to_user(r) for r in result.scalars().all()]

    async def get_followers(self, user_id: str, limit: int, offset: int) -> list[User]:
        return await self._related_users(
            FollowRow.follower_id == UserRow.id, FollowRow.user_id == user_id,
            "get followers", limit, offset,
        )

    async def get_following(self, follower_id: str, limit: int, offset: int) -> list[User]:
        return await self._related_users(
            FollowRow.user_id == UserRow.id, FollowRow.follower_id == follower_id,
            "get following", limit, offset,
        )
