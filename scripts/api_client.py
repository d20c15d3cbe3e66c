"""Lightweight REST client for the pyleague API."""

from __future__ import annotations

import argparse
import json
import time

import httpx


def _print(resp: httpx.Response) -> None:
    print(json.dumps(resp.json(), indent=2))


def _wait_for_job(client: httpx.Client, job_id: str, poll: float, timeout: float) -> dict:
    deadline = time.monotonic() + timeout
    while True:
        resp = client.get(f"/admin/jobs/{job_id}")
        if resp.status_code == 404:
            raise SystemExit(f"job {job_id} not found")
        resp.raise_for_status()
        job = resp.json()
        if job["state"] in {"completed", "failed", "canceled"}:
            return job
        if time.monotonic() >= deadline:
            raise SystemExit(f"job {job_id} still {job['state']} after {timeout:.0f}s")
        time.sleep(poll)


def main() -> None:
    parser = argparse.ArgumentParser(description="Interact with the pyleague REST API")
    parser.add_argument("base_url", help="Base URL of the API, e.g. http://localhost:8000")
    parser.add_argument("--classify", metavar="LEAGUE_TYPE", help="Classify a league type")
    parser.add_argument("--superflex", action="store_true", help="Classify as superflex")
    parser.add_argument("--specialty", default=None, help="Specialty format for --classify")
    parser.add_argument("--weights", metavar="CLASS", help="Show weights for a league class")
    parser.add_argument("--liquidity", metavar="LEAGUE_ID", help="Score liquidity for a league")
    parser.add_argument("--recalibrate", metavar="SEASON", type=int, help="Trigger recalibration")
    parser.add_argument("--wait", action="store_true", help="Wait for a triggered recalibration to finish")
    parser.add_argument("--get-job", metavar="JOB_ID", help="Fetch a recalibration job")
    parser.add_argument("--cancel-job", metavar="JOB_ID", help="Request cancellation of a job")
    parser.add_argument("--timeout", type=float, default=300.0, help="Seconds to wait with --wait")
    args = parser.parse_args()

    with httpx.Client(base_url=args.base_url) as client:
        if args.classify:
            resp = client.post(
                "/classify",
                json={
                    "league_type": args.classify,
                    "specialty_format": args.specialty,
                    "is_superflex": args.superflex,
                },
            )
            resp.raise_for_status()
            _print(resp)
        if args.weights:
            resp = client.get(f"/weights/{args.weights}")
            if resp.status_code == 404:
                raise SystemExit(f"league class {args.weights} not found")
            resp.raise_for_status()
            _print(resp)
        if args.liquidity:
            resp = client.post("/liquidity", json={"league_id": args.liquidity})
            resp.raise_for_status()
            _print(resp)
        if args.recalibrate is not None:
            resp = client.post("/admin/recalibrate", json={"season": args.recalibrate})
            resp.raise_for_status()
            job = resp.json()
            if args.wait:
                job = _wait_for_job(client, job["job_id"], poll=2.0, timeout=args.timeout)
            print(json.dumps(job, indent=2))
        if args.get_job:
            resp = client.get(f"/admin/jobs/{args.get_job}")
            if resp.status_code == 404:
                raise SystemExit(f"job {args.get_job} not found")
            resp.raise_for_status()
            _print(resp)
        if args.cancel_job:
            resp = client.post(f"/admin/jobs/{args.cancel_job}/cancel")
            if resp.status_code == 404:
                raise SystemExit(f"job {args.cancel_job} not found")
            resp.raise_for_status()
            _print(resp)


if __name__ == "__main__":
    main()
