"""Lenient limit/offset parsing and paged list endpoints."""
from __future__ import annotations

import pytest

from socialapi.api.dependencies import DEFAULT_LIMIT, MAX_LIMIT, pagination


@pytest.mark.parametrize("limit,offset,expected", [
    (None, None, (DEFAULT_LIMIT, 0)),
    ("5", "10", (5, 10)),
    ("0", None, (DEFAULT_LIMIT, 0)),
    ("-3", None, (DEFAULT_LIMIT, 0)),
    ("abc", "xyz", (DEFAULT_LIMIT, 0)),
    ("500", None, (MAX_LIMIT, 0)),
    ("100", "-1", (100, 0)),
])
def test_pagination_rules(limit, offset, expected):
    page = pagination(limit=limit, offset=offset)
    assert (page.limit, page.offset) == expected


@pytest.mark.asyncio
async def test_paged_posts(client, register):
    headers, _ = await register("alice")
    for i in range(5):
        await client.post("/posts", json={"content": f"post {i}"}, headers=headers)

    resp = await client.get("/users/alice/posts", params={"limit": 2})
    assert [p["content"] for p in resp.json()["posts"]] == ["post 4", "post 3"]

    resp = await client.get("/users/alice/posts", params={"limit": 2, "offset": 4})
    assert [p["content"] for p in resp.json()["posts"]] == ["post 0"]

    resp = await client.get("/users/alice/posts", params={"offset": 50})
    assert resp.status_code == 200
    assert resp.json()["posts"] == []

    resp = await client.get("/users/alice/posts", params={"limit": "lots", "offset": "-2"})
    assert resp.status_code == 200
    assert len(resp.json()["posts"]) == 5


@pytest.mark.asyncio
async def test_paged_comments_never_exceed_limit(client, register):
    headers, _ = await register("alice")
    pid = (await client.post("/posts", json={"content": "talk"}, headers=headers)).json()["id"]
    for i in range(4):
        await client.post(f"/posts/{pid}/comments", json={"content": f"c{i}"}, headers=headers)

    resp = await client.get(f"/posts/{pid}/comments", params={"limit": 3}, headers=headers)
    assert [c["content"] for c in resp.json()["comments"]] == ["c0", "c1", "c2"]

    resp = await client.get(f"/posts/{pid}/comments", params={"limit": 3, "offset": 3}, headers=headers)
    assert [c["content"] for c in resp.json()["comments"]] == ["c3"]
