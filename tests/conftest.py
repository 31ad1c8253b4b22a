"""Shared test fixtures, single test DB for all test modules."""
from __future__ import annotations

import itertools
import uuid
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession

from socialapi.db.tables import Base
from socialapi.db.engine import get_session

# Use a shared in-memory DB with check_same_thread=False and StaticPool
# This ensures all connections see the same in-memory database.
from sqlalchemy.pool import StaticPool

TEST_DB_URL = "sqlite+aiosqlite:///file:test?mode=memory&cache=shared&uri=true"

test_engine = create_async_engine(
    TEST_DB_URL,
    echo=False,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestSession = async_sessionmaker(test_engine, expire_on_commit=False, class_=AsyncSession)


async def override_get_session():
    async with TestSession() as session:
        yield session


# Import app and override BEFORE any test module imports app
from socialapi.api.main import app  # noqa: E402

app.dependency_overrides[get_session] = override_get_session

import socialapi.db.engine as _engine_mod  # noqa: E402
_engine_mod.async_session = TestSession
_engine_mod.engine = test_engine


@pytest_asyncio.fixture(autouse=True)
async def setup_db():
    """Create tables before each test, drop after."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture
async def client():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def db_session():
    """Session for seeding data or exercising repositories directly."""
    async with TestSession() as session:
        yield session


@pytest.fixture
def register(client):
    """Register a user over HTTP; returns ``(auth_headers, user_json)``."""

    async def _register(username: str, **overrides):
        body = {
            "name": username.title(),
            "username": username,
            "email": f"{username}@example.com",
            "password": "hunter22",
        }
        body.update(overrides)
        resp = await client.post("/register", json=body)
        assert resp.status_code == 201, resp.text
        data = resp.json()
        return {"Authorization": f"Bearer {data['token']}"}, data["user"]

    return _register


# ── In-memory repositories for service-level tests ───────────────────────────

from socialapi.db.interfaces import (  # noqa: E402
    CommentRepository, FollowRepository, LikeRepository, PostRepository, UserRepository,
)
from socialapi.errors import DuplicateEmailError, DuplicateUsernameError, NotFoundError  # noqa: E402

_tick = itertools.count()
_EPOCH = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _now() -> datetime:
    # Strictly increasing so ordering assertions are deterministic
    return _EPOCH + timedelta(seconds=next(_tick))


def _page(items, limit, offset):
    return items[offset:offset + limit]


class FakeUserRepository(UserRepository):

    def __init__(self):
        self.rows = {}
        self.calls = []

    async def create(self, user):
        self.calls.append("create")
        for row in self.rows.values():
            if row.email == user.email:
                raise DuplicateEmailError()
            if row.username == user.username:
                raise DuplicateUsernameError()
        ts = _now()
        row = user.model_copy(update={"id": str(uuid.uuid4()), "created_at": ts, "updated_at": ts})
        self.rows[row.id] = row
        return row

    async def _find(self, pred):
        for row in self.rows.values():
            if pred(row):
                return row
        raise NotFoundError()

    async def get_by_id(self, user_id):
        return await self._find(lambda u: u.id == user_id)

    async def get_by_email(self, email):
        return await self._find(lambda u: u.email == email)

    async def get_by_username(self, username):
        return await self._find(lambda u: u.username == username)

    async def update(self, user):
        if user.id not in self.rows:
            raise NotFoundError()
        current = self.rows[user.id]
        row = current.model_copy(update={
            "name": user.name, "bio": user.bio, "image_url": user.image_url, "updated_at": _now(),
        })
        self.rows[user.id] = row
        return row

    async def search(self, query, limit, offset):
        q = query.lower()
        hits = [u for u in self.rows.values() if q in u.name.lower() or q in u.username.lower()]
        hits.sort(key=lambda u: u.created_at, reverse=True)
        return _page(hits, limit, offset)


class FakePostRepository(PostRepository):

    def __init__(self, follows=None):
        self.rows = {}
        self.follows = follows
        self.deleted = []

    async def create(self, post):
        ts = _now()
        row = post.model_copy(update={"id": str(uuid.uuid4()), "created_at": ts, "updated_at": ts})
        self.rows[row.id] = row
        return row

    async def get_by_id(self, post_id):
        if post_id not in self.rows:
            raise NotFoundError()
        return self.rows[post_id]

    async def get_by_author_id(self, author_id, limit, offset):
        posts = sorted(
            (p for p in self.rows.values() if p.author_id == author_id),
            key=lambda p: p.created_at, reverse=True,
        )
        return _page(posts, limit, offset)

    async def get_feed(self, user_id, limit, offset):
        followed = {f.user_id for f in self.follows.rows if f.follower_id == user_id}
        posts = sorted(
            (p for p in self.rows.values() if p.author_id in followed),
            key=lambda p: p.created_at, reverse=True,
        )
        return _page(posts, limit, offset)

    async def update(self, post):
        if post.id not in self.rows:
            raise NotFoundError()
        row = post.model_copy(update={"updated_at": _now()})
        self.rows[post.id] = row
        return row

    async def delete(self, post_id):
        if self.rows.pop(post_id, None) is None:
            raise NotFoundError()
        self.deleted.append(post_id)


class FakeCommentRepository(CommentRepository):

    def __init__(self):
        self.rows = {}

    async def create(self, comment):
        row = comment.model_copy(update={"id": str(uuid.uuid4()), "created_at": _now()})
        self.rows[row.id] = row
        return row

    async def get_by_id(self, comment_id):
        if comment_id not in self.rows:
            raise NotFoundError()
        return self.rows[comment_id]

    async def get_by_post_id(self, post_id, limit, offset):
        comments = sorted(
            (c for c in self.rows.values() if c.post_id == post_id), key=lambda c: c.created_at,
        )
        return _page(comments, limit, offset)

    async def delete(self, comment_id):
        if self.rows.pop(comment_id, None) is None:
            raise NotFoundError()


class FakeLikeRepository(LikeRepository):

    def __init__(self):
        self.rows = set()

    async def create(self, like):
        self.rows.add((like.user_id, like.post_id))

    async def delete(self, user_id, post_id):
        if (user_id, post_id) not in self.rows:
            raise NotFoundError()
        self.rows.remove((user_id, post_id))

    async def exists(self, user_id, post_id):
        return (user_id, post_id) in self.rows


class FakeFollowRepository(FollowRepository):

    def __init__(self, users):
        self.rows = []
        self.users = users
        self.calls = []

    async def create(self, follow):
        self.calls.append("create")
        if not any(f.user_id == follow.user_id and f.follower_id == follow.follower_id for f in self.rows):
            self.rows.append(follow.model_copy(update={"created_at": _now()}))

    async def delete(self, user_id, follower_id):
        for f in self.rows:
            if f.user_id == user_id and f.follower_id == follower_id:
                self.rows.remove(f)
                return
        raise NotFoundError()

    async def exists(self, user_id, follower_id):
        return any(f.user_id == user_id and f.follower_id == follower_id for f in self.rows)

    async def get_followers(self, user_id, limit, offset):
        edges = sorted((f for f in self.rows if f.user_id == user_id), key=lambda f: f.created_at, reverse=True)
        return _page([self.users.rows[f.follower_id] for f in edges], limit, offset)

    async def get_following(self, follower_id, limit, offset):
        edges = sorted((f for f in self.rows if f.follower_id == follower_id), key=lambda f: f.created_at, reverse=True)
        return _page([self.users.rows[f.user_id] for f in edges], limit, offset)


@pytest.fixture
def repos():
    """A consistent set of in-memory repositories."""
    users = FakeUserRepository()
    follows = FakeFollowRepository(users)
    return SimpleNamespace(
        users=users,
        follows=follows,
        posts=FakePostRepository(follows),
        comments=FakeCommentRepository(),
        likes=FakeLikeRepository(),
    )


@pytest.fixture
def services(repos):
    from socialapi.services import CommentService, InteractionService, PostService, UserService

    return SimpleNamespace(
        users=UserService(repos.users, token_issuer=lambda uid: f"token-{uid}"),
        posts=PostService(repos.posts, repos.users),
        comments=CommentService(repos.comments, repos.posts),
        interactions=InteractionService(repos.likes, repos.follows, repos.users, repos.posts),
    )
