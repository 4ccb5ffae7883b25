"""Analytics endpoints."""

import uuid

from httpx import AsyncClient


async def _track(client: AsyncClient, event_type: str, resource_type: str, resource_id: str):
    resp = await client.post(
        "/api/analytics/track",
        json={
            "event_type": event_type,
            "resource_type": resource_type,
            "resource_id": resource_id,
        },
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


async def test_track_rejects_unknown_event_type(client: AsyncClient):
    resp = await client.post(
        "/api/analytics/track",
        json={"event_type": "hover", "resource_type": "link", "resource_id": str(uuid.uuid4())},
    )
    assert resp.status_code == 422


async def test_summary_and_top_lists(client: AsyncClient):
    site = (await client.post("/api/subsites", json={"name": "Home"})).json()
    link = (
        await client.post(
            "/api/links",
            json={"subsite_id": site["id"], "name": "Docs", "url": "https://docs.example.com"},
        )
    ).json()

    await _track(client, "view", "subsite", site["id"])
    await _track(client, "view", "subsite", site["id"])
    event = await _track(client, "click", "link", link["id"])
    assert event["resource_id"] == link["id"]

    summary = (await client.get("/api/analytics/summary")).json()
    assert summary == {"subsite_views": 2, "link_clicks": 1, "total_events": 3}

    top_subsites = (await client.get("/api/analytics/top-subsites")).json()
    assert top_subsites == [{"id": site["id"], "name": "Home", "views": 2}]

    top_links = (await client.get("/api/analytics/top-links", params={"limit": 1})).json()
    assert top_links == [{"id": link["id"], "name": "Docs", "clicks": 1}]

    recent = (await client.get("/api/analytics/recent")).json()
    assert [e["event_type"] for e in recent] == ["click", "view", "view"]


async def test_limit_bounds(client: AsyncClient):
    assert (await client.get("/api/analytics/top-subsites", params={"limit": 0})).status_code == 422
    assert (await client.get("/api/analytics/recent", params={"limit": 500})).status_code == 422
