"""Subsite endpoints: CRUD, tree navigation, reorder and view tracking."""

import uuid

from httpx import AsyncClient

from portal.services.content_store import SqlContentStore


async def _create(client: AsyncClient, name: str, **fields) -> dict:
    resp = await client.post("/api/subsites", json={"name": name, **fields})
    assert resp.status_code == 201, resp.text
    return resp.json()


async def test_create_and_get_subsite(client: AsyncClient):
    created = await _create(
        client,
        "Engineering",
        description="Internal tools",
        url="https://eng.example.com",
        custom_domain="Eng.Example.COM",
        icon={"kind": "symbol", "name": "Server"},
    )
    assert created["custom_domain"] == "eng.example.com"
    assert created["icon"] == {"kind": "symbol", "name": "Server"}
    assert created["order"] == 0
    assert created["parent_id"] is None

    resp = await client.get(f"/api/subsites/{created['id']}")
    assert resp.status_code == 200
    assert resp.json()["name"] == "Engineering"


async def test_legacy_icon_url_is_classified(client: AsyncClient):
    symbol = await _create(client, "A", icon_url="Briefcase")
    image = await _create(client, "B", icon_url="https://cdn.example.com/logo.png")

    assert symbol["icon"] == {"kind": "symbol", "name": "Briefcase"}
    assert image["icon"] == {"kind": "image", "url": "https://cdn.example.com/logo.png"}


async def test_create_subsite_validation(client: AsyncClient):
    resp = await client.post("/api/subsites", json={"name": ""})
    assert resp.status_code == 422
    assert resp.headers["content-type"] == "application/problem+json"

    resp = await client.post("/api/subsites", json={"name": "X", "url": "ftp://files"})
    assert resp.status_code == 422

    resp = await client.post("/api/subsites", json={"name": "X", "custom_domain": "not a domain"})
    assert resp.status_code == 422

    resp = await client.post(
        "/api/subsites", json={"name": "X", "icon": {"kind": "symbol", "name": "NoSuchIcon"}}
    )
    assert resp.status_code == 422


async def test_create_with_unknown_parent_is_400(client: AsyncClient):
    resp = await client.post(
        "/api/subsites", json={"name": "Orphan", "parent_id": str(uuid.uuid4())}
    )
    assert resp.status_code == 400
    body = resp.json()
    assert body["title"] == "Invalid Parent"
    assert body["instance"] == "/api/subsites"


async def test_missing_subsite_is_404(client: AsyncClient):
    missing = uuid.uuid4()
    assert (await client.get(f"/api/subsites/{missing}")).status_code == 404
    assert (await client.patch(f"/api/subsites/{missing}", json={"name": "x"})).status_code == 404
    assert (await client.delete(f"/api/subsites/{missing}")).status_code == 404
    assert (await client.get(f"/api/subsites/{missing}/breadcrumb")).status_code == 404
    assert (await client.post(f"/api/subsites/{missing}/view")).status_code == 404


async def test_update_subsite(client: AsyncClient):
    created = await _create(client, "Old", url="https://old.example.com")

    resp = await client.patch(
        f"/api/subsites/{created['id']}", json={"name": "New", "url": ""}
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["name"] == "New"
    assert body["url"] is None
    assert body["updated_at"] is not None


async def test_update_rejects_null_name(client: AsyncClient):
    created = await _create(client, "Keep")
    resp = await client.patch(f"/api/subsites/{created['id']}", json={"name": None})
    assert resp.status_code == 422


async def test_update_rejects_cycle(client: AsyncClient):
    root = await _create(client, "Root")
    child = await _create(client, "Child", parent_id=root["id"])

    resp = await client.patch(f"/api/subsites/{root['id']}", json={"parent_id": child["id"]})

    assert resp.status_code == 400
    assert (await client.get(f"/api/subsites/{root['id']}")).json()["parent_id"] is None


async def test_children_and_breadcrumb(client: AsyncClient):
    root = await _create(client, "Root")
    child = await _create(client, "Child", parent_id=root["id"])
    await _create(client, "Sibling", parent_id=root["id"], order=-1)

    resp = await client.get(f"/api/subsites/{root['id']}/children")
    assert [s["name"] for s in resp.json()] == ["Sibling", "Child"]

    resp = await client.get(f"/api/subsites/{child['id']}/breadcrumb")
    assert resp.status_code == 200
    assert [s["name"] for s in resp.json()] == ["Root", "Child"]


async def test_delete_cascades_links_and_orphans_children(client: AsyncClient):
    root = await _create(client, "Root")
    child = await _create(client, "Child", parent_id=root["id"])
    link = (
        await client.post(
            "/api/links",
            json={"subsite_id": root["id"], "name": "Docs", "url": "https://docs.example.com"},
        )
    ).json()

    resp = await client.delete(f"/api/subsites/{root['id']}")
    assert resp.status_code == 204

    assert (await client.get(f"/api/links/{link['id']}")).status_code == 404
    assert (await client.get(f"/api/subsites/{root['id']}/links")).json() == []
    resp = await client.get(f"/api/subsites/{child['id']}/breadcrumb")
    assert [s["id"] for s in resp.json()] == [child["id"]]


async def test_reorder_subsites(client: AsyncClient):
    a = await _create(client, "A")
    b = await _create(client, "B")

    resp = await client.post("/api/subsites/reorder", json={"ids": [b["id"], a["id"]]})
    assert resp.status_code == 200
    assert [(s["name"], s["order"]) for s in resp.json()] == [("B", 0), ("A", 1)]

    listed = (await client.get("/api/subsites")).json()
    assert [s["name"] for s in listed] == ["B", "A"]


async def test_reorder_subsites_unknown_id_is_404(client: AsyncClient):
    a = await _create(client, "A", order=3)

    resp = await client.post(
        "/api/subsites/reorder", json={"ids": [a["id"], str(uuid.uuid4())]}
    )

    assert resp.status_code == 404
    assert (await client.get(f"/api/subsites/{a['id']}")).json()["order"] == 3


async def test_reorder_rejects_duplicates_and_empty(client: AsyncClient):
    a = await _create(client, "A")
    resp = await client.post("/api/subsites/reorder", json={"ids": [a["id"], a["id"]]})
    assert resp.status_code == 422
    resp = await client.post("/api/subsites/reorder", json={"ids": []})
    assert resp.status_code == 422


async def test_reorder_links_within_subsite(client: AsyncClient):
    site = await _create(client, "Site")
    ids = []
    for name in ("One", "Two", "Three"):
        resp = await client.post(
            "/api/links",
            json={"subsite_id": site["id"], "name": name, "url": "https://example.com"},
        )
        ids.append(resp.json()["id"])

    resp = await client.post(
        f"/api/subsites/{site['id']}/links/reorder", json={"ids": list(reversed(ids))}
    )
    assert resp.status_code == 200

    listed = (await client.get(f"/api/subsites/{site['id']}/links")).json()
    assert [link["name"] for link in listed] == ["Three", "Two", "One"]


async def test_view_records_event(client: AsyncClient):
    site = await _create(client, "Site")

    resp = await client.post(f"/api/subsites/{site['id']}/view")
    assert resp.status_code == 200
    assert resp.json()["id"] == site["id"]

    summary = (await client.get("/api/analytics/summary")).json()
    assert summary["subsite_views"] == 1


async def test_view_survives_tracking_failure(client: AsyncClient, memory_store, monkeypatch):
    site = await _create(client, "Site")

    async def broken_add_event(*args, **kwargs):
        raise RuntimeError("event log unavailable")

    monkeypatch.setattr(memory_store, "add_event", broken_add_event)

    resp = await client.post(f"/api/subsites/{site['id']}/view")

    assert resp.status_code == 200
    assert resp.json()["name"] == "Site"


async def test_sql_backend_cascade_delete(sql_client: AsyncClient):
    site = (await sql_client.post("/api/subsites", json={"name": "Site"})).json()
    link = (
        await sql_client.post(
            "/api/links",
            json={"subsite_id": site["id"], "name": "Docs", "url": "https://docs.example.com"},
        )
    ).json()

    assert (await sql_client.delete(f"/api/subsites/{site['id']}")).status_code == 204
    assert (await sql_client.get(f"/api/links/{link['id']}")).status_code == 404
    assert (await sql_client.get("/api/subsites")).json() == []


async def test_sql_view_survives_failed_event_flush(sql_client: AsyncClient, monkeypatch):
    """A failed event insert is rolled back; the view still succeeds and nothing is lost."""
    site = (await sql_client.post("/api/subsites", json={"name": "Site"})).json()

    insert_event = SqlContentStore.add_event

    async def add_event_without_resource(self, event_type, resource_type, resource_id):
        # NULL resource_id violates NOT NULL, so the flush itself fails
        return await insert_event(self, event_type, resource_type, None)

    monkeypatch.setattr(SqlContentStore, "add_event", add_event_without_resource)

    resp = await sql_client.post(f"/api/subsites/{site['id']}/view")
    assert resp.status_code == 200
    assert resp.json()["name"] == "Site"

    resp = await sql_client.get(f"/api/subsites/{site['id']}")
    assert resp.status_code == 200
    summary = (await sql_client.get("/api/analytics/summary")).json()
    assert summary["total_events"] == 0

    monkeypatch.undo()
    assert (await sql_client.post(f"/api/subsites/{site['id']}/view")).status_code == 200
    summary = (await sql_client.get("/api/analytics/summary")).json()
    assert summary["subsite_views"] == 1
