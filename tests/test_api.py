"""Tests for API endpoints and the redirect handler."""

import asyncio
import pytest
from unittest.mock import AsyncMock
from httpx import ASGITransport, AsyncClient

from url_registry.app import lifespan, sweep_periodically
from url_registry.config import Config
from url_registry.lib.errors import PersistenceError
from url_registry.lib.common.logging_config import setup_logging
from url_registry.web_app import create_app


@pytest.fixture
def config():
    """Create test configuration."""
    return Config(
        storage_backend="memory",
        base_url="http://testserver",
        _env_file=None,
    )


@pytest.fixture
def app(registry, config):
    """Create test FastAPI app."""
    return create_app(registry=registry, config=config)


@pytest.fixture
async def client(app):
    """Create test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac


class TestAPIEndpoints:
    """Test API endpoints."""

    async def test_create_link(self, client, sample_urls):
        """Test POST /api/links."""
        response = await client.post("/api/links", json={"url": sample_urls[0]})

        assert response.status_code == 201
        data = response.json()
        assert data["original_url"] == sample_urls[0]
        assert data["clicks"] == 0
        assert data["short_url"] == f"http://testserver/{data['id']}"
        assert data["expired"] is False

    async def test_create_uses_forwarded_origin(self, client, sample_urls):
        """Test short URL follows the proxy's origin."""
        response = await client.post(
            "/api/links",
            json={"url": sample_urls[0]},
            headers={"X-Forwarded-Proto": "https", "X-Forwarded-Host": "sho.rt"},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["short_url"] == f"https://sho.rt/{data['id']}"

    async def test_create_with_alias(self, client, sample_urls):
        """Test POST /api/links with custom alias."""
        response = await client.post(
            "/api/links",
            json={"url": sample_urls[0], "custom_alias": "My Repo"},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["id"] == "my-repo"
        assert data["custom_name"] == "My Repo"

    async def test_create_duplicate_alias(self, client, sample_urls):
        """Test alias conflict."""
        await client.post("/api/links", json={"url": sample_urls[0], "custom_alias": "demo"})
        response = await client.post("/api/links", json={"url": sample_urls[1], "custom_alias": "demo"})

        assert response.status_code == 409
        assert "already in use" in response.json()["detail"]

    async def test_create_invalid_url(self, client):
        """Test invalid URL."""
        response = await client.post("/api/links", json={"url": "ftp://example.com"})

        assert response.status_code == 400
        assert "Invalid URL" in response.json()["detail"]

    async def test_create_reserved_alias(self, client, sample_urls):
        """Test reserved alias."""
        response = await client.post("/api/links", json={"url": sample_urls[0], "custom_alias": "api"})

        assert response.status_code == 400

    async def test_create_storage_failure(self, client, store, sample_urls, monkeypatch):
        """Test storage failure maps to 500."""
        async def fail(key, value):
            raise PersistenceError("quota exceeded")

        monkeypatch.setattr(store, "write", fail)

        response = await client.post("/api/links", json={"url": sample_urls[0]})

        assert response.status_code == 500
        assert response.json()["detail"] == "Failed to save URL data: quota exceeded"

    @pytest.mark.parametrize("method,path", [
        ("GET", "/api/links"),
        ("GET", "/api/links/abc12"),
        ("DELETE", "/api/links/abc12"),
        ("POST", "/api/links/sweep"),
        ("GET", "/api/stats"),
        ("GET", "/abc12"),
    ])
    async def test_read_failure_maps_to_500(self, client, store, monkeypatch, method, path):
        """Test an unreadable store returns a 500 with a detail message."""
        async def fail(key):
            raise PersistenceError("connection refused")

        monkeypatch.setattr(store, "read", fail)

        response = await client.request(method, path)

        assert response.status_code == 500
        assert response.json()["detail"].endswith("connection refused")

    async def test_list_links_newest_first(self, client, clock, sample_urls):
        """Test GET /api/links ordering."""
        for url in sample_urls:
            await client.post("/api/links", json={"url": url})
            clock.advance(minutes=1)

        response = await client.get("/api/links")

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 3
        assert [link["original_url"] for link in data["links"]] == list(reversed(sample_urls))

    async def test_get_link(self, client, sample_urls):
        """Test GET /api/links/{id}."""
        created = (await client.post("/api/links", json={"url": sample_urls[0]})).json()

        response = await client.get(f"/api/links/{created['id']}")

        assert response.status_code == 200
        assert response.json()["original_url"] == sample_urls[0]

    async def test_get_missing_link(self, client):
        """Test GET /api/links/{id} for unknown id."""
        response = await client.get("/api/links/missing")
        assert response.status_code == 404

    async def test_delete_link(self, client, sample_urls):
        """Test DELETE /api/links/{id}."""
        created = (await client.post("/api/links", json={"url": sample_urls[0]})).json()

        response = await client.delete(f"/api/links/{created['id']}")
        assert response.status_code == 204

        response = await client.delete(f"/api/links/{created['id']}")
        assert response.status_code == 404

    async def test_sweep(self, client, clock, sample_urls):
        """Test POST /api/links/sweep."""
        await client.post("/api/links", json={"url": sample_urls[0]})
        clock.advance(days=4)
        await client.post("/api/links", json={"url": sample_urls[1]})

        response = await client.post("/api/links/sweep")

        assert response.status_code == 200
        assert response.json() == {"removed": 1}
        assert (await client.get("/api/links")).json()["count"] == 1

    async def test_statistics(self, client, sample_urls):
        """Test GET /api/stats."""
        created = (await client.post("/api/links", json={"url": sample_urls[0]})).json()
        await client.post("/api/links", json={"url": sample_urls[1]})
        await client.get(f"/{created['id']}")

        response = await client.get("/api/stats")

        assert response.status_code == 200
        data = response.json()
        assert data["total_links"] == 2
        assert data["active_links"] == 2
        assert data["total_clicks"] == 1
        assert data["top_links"][0]["id"] == created["id"]

    async def test_health(self, client):
        """Test GET /api/health."""
        response = await client.get("/api/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["store"] == "healthy"


class TestRedirect:
    """Test the redirect handler."""

    async def test_redirect_counts_click(self, client, registry, sample_urls):
        """Test GET /{id} redirects and counts."""
        created = (await client.post("/api/links", json={"url": sample_urls[0]})).json()

        response = await client.get(f"/{created['id']}")

        assert response.status_code == 302
        assert response.headers["location"] == sample_urls[0]
        assert (await registry.resolve(created["id"])).clicks == 1

    async def test_redirect_missing(self, client):
        """Test unknown id."""
        response = await client.get("/missing")

        assert response.status_code == 404
        assert response.json()["detail"] == "URL not found"

    async def test_redirect_expired(self, client, clock, sample_urls):
        """Test expired link."""
        created = (await client.post("/api/links", json={"url": sample_urls[0]})).json()
        clock.advance(days=3, seconds=1)

        response = await client.get(f"/{created['id']}")

        assert response.status_code == 410
        assert response.json()["detail"] == "This link has expired"

    async def test_redirect_with_path_prefix(self, registry, sample_urls):
        """Test redirects are served under the configured prefix."""
        config = Config(storage_backend="memory", path_prefix="/r", _env_file=None)
        app = create_app(registry=registry, config=config)
        record = await registry.create_link(sample_urls[0])

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
            response = await ac.get(f"/r/{record.id}")

        assert response.status_code == 302


class TestBackgroundSweep:
    """Test the periodic sweep and lifespan."""

    async def test_sweep_periodically(self, registry, clock, logger, sample_urls):
        """Test the background loop removes expired links."""
        await registry.create_link(sample_urls[0])
        clock.advance(days=4)

        task = asyncio.create_task(sweep_periodically(registry, 0.01, logger))
        await asyncio.sleep(0.05)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert await registry.list_links() == []

    async def test_sweep_periodically_survives_store_errors(self, registry, store, logger, monkeypatch):
        """Test a failing sweep does not stop the loop."""
        calls = []

        async def failing_sweep():
            calls.append(1)
            raise PersistenceError("disk full")

        monkeypatch.setattr(registry, "sweep_expired", failing_sweep)

        task = asyncio.create_task(sweep_periodically(registry, 0.01, logger))
        await asyncio.sleep(0.05)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert len(calls) > 1

    async def test_lifespan_creates_registry(self, config):
        """Test startup wires a registry and shutdown stops the sweep."""
        app = create_app(registry=None, config=config, lifespan=lifespan)
        app.state.logger = setup_logging(level="DEBUG")

        async with lifespan(app):
            registry = app.state.registry
            assert registry is not None
            record = await registry.create_link("example.com")
            assert await registry.resolve(record.id) == record

    async def test_sweep_periodically_survives_unexpected_errors(self, registry, logger, monkeypatch):
        """Test errors other than storage failures do not stop the loop."""
        calls = []

        async def broken_sweep():
            calls.append(1)
            raise UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte")

        monkeypatch.setattr(registry, "sweep_expired", broken_sweep)

        task = asyncio.create_task(sweep_periodically(registry, 0.01, logger))
        await asyncio.sleep(0.05)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert len(calls) > 1

    async def test_lifespan_closes_registry(self, config, registry, monkeypatch):
        """Test shutdown closes the registry after a failing sweep."""
        async def broken_sweep():
            raise RuntimeError("sweep exploded")

        close = AsyncMock()
        monkeypatch.setattr(registry, "sweep_expired", broken_sweep)
        monkeypatch.setattr(registry, "close", close)
        monkeypatch.setattr("url_registry.app.create_registry", lambda config, logger=None: registry)

        app = create_app(registry=None, config=config, lifespan=lifespan)
        app.state.logger = setup_logging(level="DEBUG")

        async with lifespan(app):
            await asyncio.sleep(0.01)

        close.assert_awaited_once()
