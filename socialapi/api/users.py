"""User API: profiles, search, follows."""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from socialapi.api.dependencies import (
    Page, get_interaction_service, get_post_service, get_user_service, pagination,
)
from socialapi.api.schemas import (
    PostListResponse, PostResponse, UpdateProfileRequest, UserListResponse, UserResponse,
)
from socialapi.auth import require_user_id
from socialapi.services import InteractionService, PostService, UserService

router = APIRouter(tags=["users"])


# ── Own profile ───────────────────────────────────────────────────────────────


@router.get("/profile", response_model=UserResponse)
async def get_my_profile(
    user_id: str = Depends(require_user_id),
    users: UserService = Depends(get_user_service),
):
    return UserResponse.of(await users.get_by_id(user_id))


@router.put("/profile", response_model=UserResponse)
async def update_profile(
    req: UpdateProfileRequest,
    user_id: str = Depends(require_user_id),
    users: UserService = Depends(get_user_service),
):
    """Partial update: omitted fields keep their current value."""
    user = await users.update_profile(user_id, name=req.name, bio=req.bio, image_url=req.image_url)
    return UserResponse.of(user)


# ── Public lookups ────────────────────────────────────────────────────────────


@router.get("/users/search", response_model=UserListResponse)
async def search_users(
    q: Optional[str] = Query(None, description="Substring of name or username"),
    page: Page = Depends(pagination),
    users: UserService = Depends(get_user_service),
):
    if not q:
        raise HTTPException(400, "query parameter 'q' is required")
    found = await users.search_users(q, page.limit, page.offset)
    return UserListResponse(users=[UserResponse.of(u) for u in found])


@router.get("/users/{username}", response_model=UserResponse)
async def get_profile(username: str, users: UserService = Depends(get_user_service)):
    return UserResponse.of(await users.get_profile(username))


@router.get("/users/{username}/posts", response_model=PostListResponse)
async def get_posts_by_user(
    username: str,
    page: Page = Depends(pagination),
    posts: PostService = Depends(get_post_service),
):
    found = await posts.get_posts_by_user(username, page.limit, page.offset)
    return PostListResponse(posts=[PostResponse.of(p) for p in found])


# ── Follows ───────────────────────────────────────────────────────────────────


@router.post("/users/{username}/follow", status_code=204)
async def follow_user(
    username: str,
    follower_id: str = Depends(require_user_id),
    users: UserService = Depends(get_user_service),
    interactions: InteractionService = Depends(get_interaction_service),
):
    """Follow ``username``. Following twice is a no-op."""
    target = await users.get_profile(username)
    await interactions.follow_user(target.id, follower_id)
    return Response(status_code=204)


@router.delete("/users/{username}/follow", status_code=204)
async def unfollow_user(
    username: str,
    follower_id: str = Depends(require_user_id),
    users: UserService = Depends(get_user_service),
    interactions: InteractionService = Depends(get_interaction_service),
):
    target = await users.get_profile(username)
    await interactions.unfollow_user(target.id, follower_id)
    return Response(status_code=204)


@router.get("/users/{username}/followers", response_model=UserListResponse)
async def get_followers(
    username: str,
    page: Page = Depends(pagination),
    _: str = Depends(require_user_id),
    interactions: InteractionService = Depends(get_interaction_service),
):
    found = await interactions.get_followers(username, page.limit, page.offset)
    return UserListResponse(users=[UserResponse.of(u) for u in found])


@router.get("/users/{username}/following", response_model=UserListResponse)
async def get_following(
    username: str,
    page: Page = Depends(pagination),
    _: str = Depends(require_user_id),
    interactions: InteractionService = Depends(get_interaction_service),
):
    found = await interactions.get_following(username, page.limit, page.offset)
    return UserListResponse(users=[UserResponse.of(u) for u in found])
