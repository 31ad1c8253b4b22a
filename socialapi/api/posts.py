"""Post API: posts, feed, likes, comments."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from socialapi.api.dependencies import (
    Page, get_comment_service, get_interaction_service, get_post_service, pagination, parse_id,
)
from socialapi.api.schemas import (
    CommentListResponse, CommentRequest, CommentResponse, PostListResponse, PostRequest, PostResponse,
)
from socialapi.auth import require_user_id
from socialapi.services import CommentService, InteractionService, PostService

router = APIRouter(tags=["posts"])


# ── Posts ─────────────────────────────────────────────────────────────────────


@router.get("/posts/{post_id}", response_model=PostResponse)
async def get_post(post_id: str, posts: PostService = Depends(get_post_service)):
    return PostResponse.of(await posts.get_post_by_id(parse_id(post_id, "post")))


@router.post("/posts", status_code=201, response_model=PostResponse)
async def create_post(
    req: PostRequest,
    user_id: str = Depends(require_user_id),
    posts: PostService = Depends(get_post_service),
):
    return PostResponse.of(await posts.create_post(user_id, req.content, req.image_url))


@router.put("/posts/{post_id}", response_model=PostResponse)
async def update_post(
    post_id: str,
    req: PostRequest,
    user_id: str = Depends(require_user_id),
    posts: PostService = Depends(get_post_service),
):
    """Edit your own post."""
    post = await posts.update_post(parse_id(post_id, "post"), user_id, req.content, req.image_url)
    return PostResponse.of(post)


@router.delete("/posts/{post_id}", status_code=204)
async def delete_post(
    post_id: str,
    user_id: str = Depends(require_user_id),
    posts: PostService = Depends(get_post_service),
):
    """Delete your own post along with its comments and likes."""
    await posts.delete_post(parse_id(post_id, "post"), user_id)
    return Response(status_code=204)


@router.get("/feed", response_model=PostListResponse)
async def get_feed(
    page: Page = Depends(pagination),
    user_id: str = Depends(require_user_id),
    posts: PostService = Depends(get_post_service),
):
    """Posts from everyone you follow, newest first."""
    found = await posts.get_feed(user_id, page.limit, page.offset)
    return PostListResponse(posts=[PostResponse.of(p) for p in found])


# ── Likes ─────────────────────────────────────────────────────────────────────


@router.post("/posts/{post_id}/like", status_code=204)
async def like_post(
    post_id: str,
    user_id: str = Depends(require_user_id),
    interactions: InteractionService = Depends(get_interaction_service),
):
    await interactions.like_post(parse_id(post_id, "post"), user_id)
    return Response(status_code=204)


@router.delete("/posts/{post_id}/like", status_code=204)
async def unlike_post(
    post_id: str,
    user_id: str = Depends(require_user_id),
    interactions: InteractionService = Depends(get_interaction_service),
):
    await interactions.unlike_post(parse_id(post_id, "post"), user_id)
    return Response(status_code=204)


# ── Comments ──────────────────────────────────────────────────────────────────


@router.post("/posts/{post_id}/comments", status_code=201, response_model=CommentResponse)
async def add_comment(
    post_id: str,
    req: CommentRequest,
    user_id: str = Depends(require_user_id),
    comments: CommentService = Depends(get_comment_service),
):
    comment = await comments.add_comment(parse_id(post_id, "post"), user_id, req.content)
    return CommentResponse.of(comment)


@router.get("/posts/{post_id}/comments", response_model=CommentListResponse)
async def get_comments(
    post_id: str,
    page: Page = Depends(pagination),
    _: str = Depends(require_user_id),
    comments: CommentService = Depends(get_comment_service),
):
    """Oldest first."""
    found = await comments.get_comments(parse_id(post_id, "post"), page.limit, page.offset)
    return CommentListResponse(comments=[CommentResponse.of(c) for c in found])


@router.delete("/posts/{post_id}/comments/{comment_id}", status_code=204)
async def delete_comment(
    post_id: str,
    comment_id: str,
    user_id: str = Depends(require_user_id),
    comments: CommentService = Depends(get_comment_service),
):
    """Delete your own comment."""
    pid = parse_id(post_id, "post")
    await comments.delete_comment(parse_id(comment_id, "comment"), user_id, post_id=pid)
    return Response(status_code=204)
