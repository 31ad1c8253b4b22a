"""Request/response bodies for the HTTP API."""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from socialapi.models import Comment, Post, User


# ── Requests ──────────────────────────────────────────────────────────────────


class RegisterRequest(BaseModel):
    name: str
    username: str
    email: str
    password: str


class LoginRequest(BaseModel):
    email: str
    password: str


class UpdateProfileRequest(BaseModel):
    name: Optional[str] = None
    bio: Optional[str] = None
    image_url: Optional[str] = None


class PostRequest(BaseModel):
    content: str
    image_url: Optional[str] = None


class CommentRequest(BaseModel):
    content: str


# ── Responses ─────────────────────────────────────────────────────────────────


class UserResponse(BaseModel):
    """Public view of a user. There is deliberately no password field."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    username: str
    email: str
    bio: Optional[str] = None
    image_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def of(cls, user: User) -> "UserResponse":
        return cls.model_validate(user)


class AuthResponse(BaseModel):
    token: str
    user: UserResponse


class UserListResponse(BaseModel):
    users: list[UserResponse]


class PostResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    author_id: str
    content: str
    image_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def of(cls, post: Post) -> "PostResponse":
        return cls.model_validate(post)


class PostListResponse(BaseModel):
    posts: list[PostResponse]


class CommentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    post_id: str
    author_id: str
    content: str
    created_at: Optional[datetime] = None

    @classmethod
    def of(cls, comment: Comment) -> "CommentResponse":
        return cls.model_validate(comment)


class CommentListResponse(BaseModel):
    comments: list[CommentResponse]
