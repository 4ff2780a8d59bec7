"""HTTP surface tests driven through httpx against the ASGI app."""

from __future__ import annotations

from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from draftpress.config import Settings
from draftpress.main import create_app
from draftpress.utils.sandbox import SANDBOX_CSP

CALLER = {"X-Caller-Id": "user-1", "X-Caller-Email": "baker@example.com"}


@pytest.fixture
async def client(session_factory: async_sessionmaker[AsyncSession]) -> AsyncGenerator[AsyncClient, None]:
    app = create_app(Settings(cors_origins="http://localhost:3000"))
    # ASGITransport does not run the lifespan; point the app at the test database directly.
    app.state.session_factory = session_factory
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


async def _create(client: AsyncClient, slug: str = "my-bakery") -> dict:
    resp = await client.post("/api/v1/projects", json={"name": "My Bakery", "slug": slug}, headers=CALLER)
    assert resp.status_code == 201
    return resp.json()


class TestHealth:
    async def test_health(self, client: AsyncClient) -> None:
        resp = await client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}


class TestProjects:
    async def test_create_and_get(self, client: AsyncClient) -> None:
        created = await _create(client)
        assert created["slug"] == "my-bakery"
        assert created["initialized"] is True

        resp = await client.get(f"/api/v1/projects/{created['project_id']}")
        assert resp.status_code == 200
        body = resp.json()
        assert body["owner_id"] == "user-1"
        assert body["draft_version_id"] == created["draft_version_id"]
        assert body["files"] == []

    async def test_anonymous_caller(self, client: AsyncClient) -> None:
        created = (await client.post("/api/v1/projects", json={"name": "Anon", "slug": "anon"})).json()
        body = (await client.get(f"/api/v1/projects/{created['project_id']}")).json()
        assert body["owner_id"] == "anonymous"

    async def test_list(self, client: AsyncClient) -> None:
        await _create(client)
        resp = await client.get("/api/v1/projects")
        assert [p["slug"] for p in resp.json()] == ["my-bakery"]

    async def test_invalid_slug_is_422(self, client: AsyncClient) -> None:
        resp = await client.post("/api/v1/projects", json={"name": "x", "slug": "Not Valid"})
        assert resp.status_code == 422

    async def test_duplicate_slug_is_409(self, client: AsyncClient) -> None:
        await _create(client)
        resp = await client.post("/api/v1/projects", json={"name": "Again", "slug": "my-bakery"})
        assert resp.status_code == 409
        assert resp.json()["error"] == "conflict"

    async def test_unknown_project_is_404(self, client: AsyncClient) -> None:
        resp = await client.get("/api/v1/projects/00000000-0000-0000-0000-000000000000")
        assert resp.status_code == 404
        assert resp.json()["error"] == "not_found"

    async def test_update_settings(self, client: AsyncClient) -> None:
        created = await _create(client)
        url = f"/api/v1/projects/{created['project_id']}"

        resp = await client.patch(url, json={"is_public": True})
        assert resp.status_code == 200
        assert resp.json()["is_public"] is True
        assert resp.json()["name"] == "My Bakery"

        assert (await client.patch(url, json={})).status_code == 400
        cleared = await client.patch(url, json={"name": None})
        assert cleared.status_code == 400
        assert cleared.json()["error"] == "validation"

    async def test_delete_requires_confirm(self, client: AsyncClient) -> None:
        created = await _create(client)
        url = f"/api/v1/projects/{created['project_id']}"

        assert (await client.delete(url)).status_code == 400
        assert (await client.get(url)).status_code == 200
        assert (await client.delete(url, params={"confirm": "true"})).status_code == 204
        assert (await client.get(url)).status_code == 404


class TestFilesAndVersions:
    async def test_write_read_delete(self, client: AsyncClient) -> None:
        created = await _create(client)
        url = f"/api/v1/projects/{created['project_id']}/files"

        resp = await client.put(
            url,
            json=[
                {"path": "index.html", "content": "<h1>Hi</h1>"},
                {"path": "../nope.txt", "content": ""},
            ],
        )
        assert resp.status_code == 200
        assert [r["ok"] for r in resp.json()] == [True, False]

        files = (await client.get(url, params={"path": "index.html"})).json()
        assert files == [{"path": "index.html", "content": "<h1>Hi</h1>", "content_type": "text/html"}]

        resp = await client.delete(url, params=[("path", "index.html"), ("path", "missing.css")])
        assert resp.json() == {"deleted": 1}
        assert (await client.get(url)).json() == []

    async def test_publish_rollback_and_restore_conflict(self, client: AsyncClient) -> None:
        created = await _create(client)
        pid = created["project_id"]

        await client.put(f"/api/v1/projects/{pid}/files", json=[{"path": "index.html", "content": "v1"}])
        published = await client.post(f"/api/v1/projects/{pid}/publish", json={"message": "Launch"})
        assert published.status_code == 200
        assert published.json()["live_url"] == "/app/my-bakery"

        await client.put(f"/api/v1/projects/{pid}/files", json=[{"path": "index.html", "content": "v2"}])

        versions = (await client.get(f"/api/v1/projects/{pid}/versions")).json()
        assert [v["version_number"] for v in versions] == [2, 1]
        assert versions[1]["message"] == "Launch"

        resp = await client.post(f"/api/v1/projects/{pid}/versions/{versions[1]['id']}/rollback")
        assert resp.json() == {"version_number": 1, "files_copied": 1}
        files = (await client.get(f"/api/v1/projects/{pid}/files")).json()
        assert files[0]["content"] == "v1"

        resp = await client.post(f"/api/v1/projects/{pid}/versions/draft")
        assert resp.status_code == 409
        assert resp.json()["error"] == "state"

    async def test_publish_without_body(self, client: AsyncClient) -> None:
        created = await _create(client)
        resp = await client.post(f"/api/v1/projects/{created['project_id']}/publish")
        assert resp.status_code == 200
        assert resp.json()["version_number"] == 1


class TestServing:
    async def test_preview_and_live(self, client: AsyncClient) -> None:
        created = await _create(client)
        pid = created["project_id"]
        await client.put(
            f"/api/v1/projects/{pid}/files",
            json=[
                {"path": "index.html", "content": "<h1>Bread</h1>"},
                {"path": "css/style.css", "content": "h1 {}"},
            ],
        )

        assert (await client.get("/app/my-bakery")).status_code == 404

        preview = await client.get("/preview/my-bakery")
        assert preview.status_code == 200
        assert preview.text == "<h1>Bread</h1>"
        assert preview.headers["content-type"].startswith("text/html")
        assert preview.headers["content-security-policy"] == SANDBOX_CSP

        url = (await client.get(f"/api/v1/projects/{pid}/preview-url")).json()
        assert url == {"preview_url": "/preview/my-bakery", "slug": "my-bakery"}

        await client.post(f"/api/v1/projects/{pid}/publish")
        await client.put(f"/api/v1/projects/{pid}/files", json=[{"path": "index.html", "content": "<h1>Cake</h1>"}])

        live = await client.get("/app/my-bakery/")
        assert live.text == "<h1>Bread</h1>"
        css = await client.get("/app/my-bakery/css/style.css")
        assert css.headers["content-type"].startswith("text/css")
        assert (await client.get("/preview/my-bakery/index.html")).text == "<h1>Cake</h1>"

    async def test_missing_file(self, client: AsyncClient) -> None:
        await _create(client)
        resp = await client.get("/preview/my-bakery/nope.js")
        assert resp.status_code == 404

    async def test_unknown_slug(self, client: AsyncClient) -> None:
        assert (await client.get("/app/nobody")).status_code == 404


class TestTools:
    async def test_definitions(self, client: AsyncClient) -> None:
        resp = await client.get("/api/v1/tools")
        assert len(resp.json()) == 12

    async def test_call(self, client: AsyncClient) -> None:
        resp = await client.post(
            "/api/v1/tools/create_project", json={"name": "My Bakery", "slug": "my-bakery"}, headers=CALLER
        )
        assert resp.status_code == 200
        assert resp.json()["status"] == "ok"

        listed = (await client.post("/api/v1/tools/list_projects")).json()
        assert [p["slug"] for p in listed["data"]] == ["my-bakery"]

    async def test_failures_are_results(self, client: AsyncClient) -> None:
        resp = await client.post("/api/v1/tools/get_project", json={"project_id": "nope"})
        assert resp.status_code == 200
        assert resp.json()["error"]["kind"] == "validation"
