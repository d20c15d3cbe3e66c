import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from pyleague.api import create_app
from pyleague.config import EngineSettings, LeagueClass
from pyleague.ingest import LeagueActivityClient
from pyleague.models import TradeFeedback, TradeOutcome, WeightVector
from pyleague.persistence import EngineStore
from pyleague.snapshots import SnapshotCache
from pyleague.weights import WeightStore


def _offline_activity(status: int = 503) -> LeagueActivityClient:
    def handler(request: httpx.Request) -> httpx.Response:
        if status != 200:
            return httpx.Response(status)
        if request.url.path.endswith("/users"):
            return httpx.Response(200, json=[{"user_id": str(index)} for index in range(12)])
        return httpx.Response(200, json=[])

    return LeagueActivityClient(weeks=[1], transport=httpx.MockTransport(handler))


@pytest.fixture
def engine_store(tmp_path):
    return EngineStore(tmp_path / "engine.sqlite")


@pytest.fixture
async def client(tmp_path, engine_store):
    settings = EngineSettings(db_path=tmp_path / "engine.sqlite")
    app = create_app(settings, store=engine_store, activity_client=_offline_activity())
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as async_client:
        async_client.app = app
        yield async_client


@pytest.mark.anyio
async def test_health(client: AsyncClient):
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


@pytest.mark.anyio
async def test_classify_endpoint(client: AsyncClient):
    resp = await client.post("/classify", json={"league_type": "Dynasty", "is_superflex": True})
    assert resp.status_code == 200
    body = resp.json()
    assert body["league_class"] == "DYN_SF"
    assert body["baseline_weights"]["market"] == pytest.approx(0.35)
    assert body["effective_weights"] == body["baseline_weights"]


@pytest.mark.anyio
async def test_weights_endpoint_includes_evolution(client: AsyncClient, engine_store):
    WeightStore(engine_store).append_evolution(
        LeagueClass.RED_SF,
        2023,
        WeightVector(market=0.4, impact=0.4, scarcity=0.1, demand=0.1),
        n_samples=33,
    )
    resp = await client.get("/weights/red_sf")
    assert resp.status_code == 200
    body = resp.json()
    assert body["league_class"] == "RED_SF"
    assert [entry["season"] for entry in body["evolution"]] == [2023]
    assert body["effective_weights"]["market"] == pytest.approx(0.4)


@pytest.mark.anyio
async def test_weights_endpoint_unknown_class(client: AsyncClient):
    resp = await client.get("/weights/NOPE")
    assert resp.status_code == 404


@pytest.mark.anyio
async def test_liquidity_with_metrics(client: AsyncClient):
    payload = {
        "metrics": {
            "trades_last_30": 25,
            "active_managers": 12,
            "total_managers": 12,
            "avg_assets_per_trade": 6,
        }
    }
    resp = await client.post("/liquidity", json=payload)
    assert resp.status_code == 200
    assert resp.json() == {"score": 100, "confidence": "MODERATE", "source": "request"}


@pytest.mark.anyio
async def test_liquidity_upstream_failure_is_neutral(client: AsyncClient):
    resp = await client.post("/liquidity", json={"league_id": "L1"})
    assert resp.status_code == 200
    assert resp.json() == {"score": 50, "confidence": "LEARNING", "source": "unavailable"}


@pytest.mark.anyio
async def test_liquidity_upstream_success(tmp_path):
    store = EngineStore(tmp_path / "engine.sqlite")
    app = create_app(EngineSettings(db_path=tmp_path / "engine.sqlite"), store=store, activity_client=_offline_activity(200))
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
        resp = await client.post("/liquidity", json={"league_id": "L1"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["source"] == "upstream"
    assert body["confidence"] == "LEARNING"


@pytest.mark.anyio
async def test_latest_snapshot_endpoint(client: AsyncClient, engine_store):
    cache = SnapshotCache(engine_store)
    cache.write("L1", "Alice", "league_analyze", {"grade": "B"})
    cache.write("L1", "alice", "league_analyze", {"grade": "A"})

    resp = await client.get(
        "/snapshots/latest",
        params={"league_id": "L1", "username": "ALICE", "snapshot_type": "league_analyze"},
    )
    assert resp.status_code == 200
    assert resp.json()["payload"] == {"grade": "A"}

    missing = await client.get(
        "/snapshots/latest",
        params={"league_id": "L2", "username": "alice", "snapshot_type": "league_analyze"},
    )
    assert missing.status_code == 404

    invalid = await client.get(
        "/snapshots/latest",
        params={"league_id": "L1", "username": "alice", "snapshot_type": "bogus"},
    )
    assert invalid.status_code == 400


@pytest.mark.anyio
async def test_admin_recalibrate_runs_job(client: AsyncClient, engine_store):
    for index in range(40):
        engine_store.record_feedback(
            TradeFeedback(
                league_class=LeagueClass.DYN_SF,
                season=2024,
                outcome=TradeOutcome.ACCEPTED if index >= 20 else TradeOutcome.REJECTED,
                market=index / 39,
            )
        )

    resp = await client.post("/admin/recalibrate", json={"season": 2024})
    assert resp.status_code == 202
    job_id = resp.json()["job_id"]

    status = await client.get(f"/admin/jobs/{job_id}")
    assert status.status_code == 200
    body = status.json()
    assert body["state"] == "completed"
    assert body["result"]["classes_processed"] == 1
    assert body["result"]["classes_skipped"] == len(LeagueClass) - 1

    listing = await client.get("/admin/jobs")
    assert [job["job_id"] for job in listing.json()] == [job_id]

    weights = await client.get("/weights/DYN_SF")
    assert weights.json()["effective_weights"]["market"] > 0.35


@pytest.mark.anyio
async def test_admin_recalibrate_rejects_bad_season(client: AsyncClient):
    resp = await client.post("/admin/recalibrate", json={"season": "soon"})
    assert resp.status_code == 422


@pytest.mark.anyio
async def test_admin_job_not_found(client: AsyncClient):
    assert (await client.get("/admin/jobs/missing")).status_code == 404
    assert (await client.post("/admin/jobs/missing/cancel")).status_code == 404


@pytest.mark.anyio
async def test_cancel_completed_job_keeps_state(client: AsyncClient):
    resp = await client.post("/admin/recalibrate", json={"season": 2024})
    job_id = resp.json()["job_id"]

    cancelled = await client.post(f"/admin/jobs/{job_id}/cancel")
    assert cancelled.status_code == 200
    assert cancelled.json()["state"] == "completed"


@pytest.mark.anyio
async def test_classify_with_user_goal(client: AsyncClient):
    resp = await client.post("/classify", json={"league_type": "redraft", "user_goal": "rebuild"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["league_class"] == "RED_1QB"
    assert body["goal_weights"]["market"] == pytest.approx(0.7 * 0.20 + 0.3 * 0.50)

    plain = await client.post("/classify", json={"league_type": "redraft"})
    assert plain.json()["goal_weights"] is None


@pytest.mark.anyio
async def test_admin_triggers_share_one_in_flight_guard(client: AsyncClient, engine_store):
    for index in range(40):
        engine_store.record_feedback(
            TradeFeedback(
                league_class=LeagueClass.DYN_SF,
                season=2024,
                outcome=TradeOutcome.ACCEPTED if index >= 20 else TradeOutcome.REJECTED,
                market=index / 39,
            )
        )
    shared = client.app.state.recalibration_job
    assert shared._claim(LeagueClass.DYN_SF, 2024)
    try:
        resp = await client.post("/admin/recalibrate", json={"season": 2024})
    finally:
        shared._release(LeagueClass.DYN_SF, 2024)

    body = (await client.get(f"/admin/jobs/{resp.json()['job_id']}")).json()
    assert body["result"]["classes_processed"] == 0
    assert body["result"]["classes_skipped"] == len(LeagueClass)
    assert client.app.state.recalibration_job is shared
