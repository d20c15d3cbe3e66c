"""REST API for the pyleague engine."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import BackgroundTasks, FastAPI, HTTPException, Query

from pyleague.api.schemas import (
    ClassifyRequest,
    ClassifyResponse,
    EvolutionEntryResponse,
    JobStatusResponse,
    LiquidityRequest,
    LiquidityResponse,
    RecalibrateRequest,
    SnapshotResponse,
    WeightsResponse,
)
from pyleague.config import EngineSettings, load_settings, parse_league_class
from pyleague.exceptions import PyleagueError
from pyleague.ingest import LeagueActivityClient
from pyleague.market import compute_liquidity
from pyleague.models import SnapshotRecord
from pyleague.persistence import Clock, EngineStore
from pyleague.recalibration import JobStatus, JobStatusStore, RecalibrationJob
from pyleague.snapshots import SnapshotCache, normalize_key
from pyleague.weights import WeightStore, classify_league


logger = logging.getLogger(__name__)


def job_to_response(job: JobStatus) -> JobStatusResponse:
    return JobStatusResponse(
        job_id=job.job_id,
        state=job.state,
        season=job.season,
        created_at=job.created_at,
        updated_at=job.updated_at,
        message=job.message,
        cancel_requested_at=job.cancel_requested_at,
        completed_at=job.completed_at,
        result=job.result,
    )


def snapshot_to_response(record: SnapshotRecord) -> SnapshotResponse:
    return SnapshotResponse(
        snapshot_id=record.snapshot_id,
        league_id=record.league_id,
        username=record.username,
        snapshot_type=record.snapshot_type.value,
        context_key=record.context_key,
        season=record.season,
        payload=record.payload,
        fingerprint=record.fingerprint,
        created_at=record.created_at,
    )


def create_app(
    settings: EngineSettings | None = None,
    *,
    store: EngineStore | None = None,
    activity_client: LeagueActivityClient | None = None,
    clock: Clock | None = None,
) -> FastAPI:
    settings = settings or load_settings()
    app = FastAPI(title="pyleague engine")
    store = store or EngineStore(settings.db_path, clock=clock)
    weight_store = WeightStore(store, window_size=settings.blend_window)
    snapshots = SnapshotCache(store)
    jobs = JobStatusStore(clock=clock)
    recalibration = RecalibrationJob(weight_store, store, settings=settings, status_store=jobs)
    activity = activity_client or LeagueActivityClient(timeout=settings.fetch_timeout, clock=clock)
    app.state.engine_store = store
    app.state.job_store = jobs
    app.state.recalibration_job = recalibration

    def _resolve_class_or_404(value: str):
        league_class = parse_league_class(value)
        if league_class is None:
            raise HTTPException(status_code=404, detail=f"Unknown league class {value}")
        return league_class

    def _effective(league_class) -> dict[str, float]:
        try:
            return weight_store.effective_weights(league_class).as_dict()
        except PyleagueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/classify", response_model=ClassifyResponse)
    async def classify(request: ClassifyRequest):
        league_class = classify_league(request.league_type, request.specialty_format, request.is_superflex)
        goal_weights = None
        if request.user_goal is not None:
            try:
                goal_weights = weight_store.goal_adjusted_weights(league_class, request.user_goal, settings).as_dict()
            except PyleagueError as exc:
                raise HTTPException(status_code=400, detail=str(exc)) from exc
        return ClassifyResponse(
            league_class=league_class.value,
            baseline_weights=weight_store.get_baseline_weights(league_class).as_dict(),
            effective_weights=_effective(league_class),
            goal_weights=goal_weights,
        )

    @app.get("/weights/{league_class}", response_model=WeightsResponse)
    async def weights(league_class: str):
        resolved = _resolve_class_or_404(league_class)
        evolution = [
            EvolutionEntryResponse(
                record_id=record.record_id,
                season=record.season,
                weights=record.weights.as_dict(),
                n_samples=record.n_samples,
                created_at=record.created_at,
            )
            for record in weight_store.get_weight_evolution(resolved)
        ]
        return WeightsResponse(
            league_class=resolved.value,
            baseline_weights=weight_store.get_baseline_weights(resolved).as_dict(),
            effective_weights=_effective(resolved),
            evolution=evolution,
        )

    # Sync so the upstream fetch runs in the threadpool.
    @app.post("/liquidity", response_model=LiquidityResponse)
    def liquidity(request: LiquidityRequest):
        metrics: Any = request.metrics
        source = "request"
        if metrics is None and request.league_id:
            metrics = activity.fetch_metrics(request.league_id)
            source = "upstream" if metrics is not None else "unavailable"
        elif metrics is None:
            source = "unavailable"
        result = compute_liquidity(metrics, settings)
        return LiquidityResponse(score=result.score, confidence=result.confidence.value, source=source)

    @app.get("/snapshots/latest", response_model=SnapshotResponse)
    async def latest_snapshot(
        league_id: str = Query(...),
        username: str = Query(...),
        snapshot_type: str = Query(...),
        context_key: str | None = Query(None),
    ):
        if normalize_key(league_id, username, snapshot_type, context_key) is None:
            raise HTTPException(status_code=400, detail="Invalid snapshot key")
        record = snapshots.read(league_id, username, snapshot_type, context_key)
        if record is None:
            raise HTTPException(status_code=404, detail="Snapshot not found")
        return snapshot_to_response(record)

    @app.post("/admin/recalibrate", response_model=JobStatusResponse, status_code=202)
    async def recalibrate(request: RecalibrateRequest, background_tasks: BackgroundTasks):
        jobs.sweep_expired()
        job = jobs.create_job(request.season)

        def _run() -> None:
            try:
                recalibration.run_recalibration(request.season, job_id=job.job_id)
            except Exception as exc:
                logger.exception("Recalibration job %s failed", job.job_id)
                jobs.update_job_state(job.job_id, state="failed", message=str(exc))

        background_tasks.add_task(_run)
        return job_to_response(job)

    @app.get("/admin/jobs")
    async def list_jobs(limit: int = 50):
        jobs.sweep_expired()
        return [job_to_response(job) for job in jobs.list_jobs(limit=limit)]

    @app.get("/admin/jobs/{job_id}", response_model=JobStatusResponse)
    async def get_job(job_id: str):
        job = jobs.get_job(job_id)
        if job is None:
            raise HTTPException(status_code=404, detail="Job not found")
        return job_to_response(job)

    @app.post("/admin/jobs/{job_id}/cancel", response_model=JobStatusResponse)
    async def cancel_job(job_id: str):
        try:
            updated = jobs.mark_job_cancel_requested(job_id)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail="Job not found") from exc
        return job_to_response(updated)

    return app


__all__ = ["create_app", "job_to_response", "snapshot_to_response"]
