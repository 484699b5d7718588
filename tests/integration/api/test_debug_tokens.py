"""
Integration tests for GET /api/debug/tokens
"""
import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_lists_tokens_then_cleans_up(client: AsyncClient, app, admin_headers):
    """Expired tokens appear in the listing of the same call that sweeps them"""
    manager = app.state.reset_token_manager
    await manager.store_token("abc123", "a@example.com")

    # Issue the second token 20 minutes later; the first has expired by then
    real_clock = manager.clock
    manager.clock = lambda: real_clock() + manager.ttl + manager.ttl / 3
    await manager.store_token("def456", "b@example.com")

    response = await client.get("/api/debug/tokens", headers=admin_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["tokenCount"] == 2
    assert body["tokensCleanedUp"] == 1
    assert [t["email"] for t in body["tokens"]] == ["a@example.com", "b@example.com"]
    for token in body["tokens"]:
        assert token["token"].endswith("...")
        assert len(token["token"]) == 11
        assert "abc123" not in token["token"]

    assert await manager.get_token_count() == 1


@pytest.mark.asyncio
async def test_empty_store(client: AsyncClient, admin_headers):
    response = await client.get("/api/debug/tokens", headers=admin_headers)

    assert response.status_code == 200
    assert response.json() == {"success": True, "tokenCount": 0, "tokensCleanedUp": 0, "tokens": []}


@pytest.mark.asyncio
async def test_requires_admin_key(client: AsyncClient):
    missing = await client.get("/api/debug/tokens")
    wrong = await client.get("/api/debug/tokens", headers={"X-Admin-API-Key": "nope"})

    assert missing.status_code == 401
    assert missing.json()["error"]["code"] == "UNAUTHORIZED"
    assert wrong.status_code == 401
    assert wrong.json()["error"]["code"] == "INVALID_API_KEY"


@pytest.mark.asyncio
async def test_hidden_when_disabled(client: AsyncClient, app, admin_headers):
    class DisabledConfig(app.state.config):
        DEBUG_ENDPOINTS_ENABLED = False

    app.state.config = DisabledConfig

    response = await client.get("/api/debug/tokens", headers=admin_headers)

    assert response.status_code == 404
