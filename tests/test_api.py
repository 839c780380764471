import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    response = await client.get("/api/health")
    assert response.status_code == 200, response.text
    data = response.json()
    assert data["status"] == "ok"
    assert data["modulesRegistered"] == 22
    assert data["levelsConfigured"] == [1, 2, 3]


@pytest.mark.asyncio
async def test_fuse_and_fetch_history(client: AsyncClient):
    payload = {
        "source_code": "const sparks = particles.map(p => Math.sin(p.t));",
        "level": 1,
        "options": {"innovation_level": 10},
    }
    response = await client.post("/api/fusion", json=payload)
    assert response.status_code == 200, response.text
    artifact = response.json()
    assert artifact["fusion_id"].startswith("fusion_level1_")
    assert "FusedEffect" in artifact["code"]
    assert artifact["transformation_report"]["enhancement_metrics"]["module_integration_success"] == pytest.approx(86.0)

    response = await client.get(f"/api/fusion/history/{artifact['fusion_id']}")
    assert response.status_code == 200, response.text
    record = response.json()
    assert record["level"] == 1
    assert record["artifact"]["code"] == artifact["code"]

    stats = (await client.get("/api/fusion/stats")).json()
    assert stats["total_fusions_performed"] == 1


@pytest.mark.asyncio
async def test_fuse_uses_default_level(client: AsyncClient):
    response = await client.post("/api/fusion", json={"source_code": "fade in"})
    assert response.status_code == 200, response.text
    assert response.json()["fusion_id"].startswith("fusion_level2_")


@pytest.mark.asyncio
async def test_fuse_invalid_level(client: AsyncClient):
    response = await client.post("/api/fusion", json={"source_code": "x", "level": 9})
    assert response.status_code == 422
    detail = response.json()["detail"]
    assert detail["error"] == "invalid_level"
    assert detail["available"] == [1, 2, 3]


@pytest.mark.asyncio
async def test_fuse_rejects_oversize_source(client: AsyncClient):
    response = await client.post("/api/fusion", json={"source_code": "x" * 5000, "level": 1})
    assert response.status_code == 413


@pytest.mark.asyncio
async def test_levels(client: AsyncClient):
    response = await client.get("/api/fusion/levels")
    assert response.status_code == 200, response.text
    assert [p["strategy"] for p in response.json()] == ["conservative", "balanced", "revolutionary"]

    response = await client.get("/api/fusion/levels/2")
    assert response.status_code == 200, response.text
    view = response.json()
    assert view["policy"]["name"] == "Professional Intelligence Fusion"
    assert len(view["modules"]) == 16
    assert view["modules"][0] == "code-optimizer-engine"

    response = await client.get("/api/fusion/levels/5")
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_unknown_fusion_is_404(client: AsyncClient):
    response = await client.get("/api/fusion/history/fusion_level1_missing")
    assert response.status_code == 404


@pytest.mark.asyncio
@pytest.mark.parametrize("value", ["NaN", "Infinity", "1e999"])
async def test_fuse_rejects_non_finite_options(client: AsyncClient, value: str):
    # httpx refuses to encode NaN, so send the body as raw JSON text
    body = '{"source_code": "fade in", "level": 1, "options": {"innovation_level": %s}}' % value
    response = await client.post(
        "/api/fusion", content=body, headers={"content-type": "application/json"}
    )
    assert response.status_code == 422, response.text
    detail = response.json()["detail"]
    assert detail["error"] == "invalid_options"
    assert "innovation_level" in detail["message"]

    stats = (await client.get("/api/fusion/stats")).json()
    assert stats["total_fusions_performed"] == 0
