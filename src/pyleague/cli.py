"""Command-line interface for league classification, weights and recalibration."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Sequence

from pyleague.config import EngineSettings, load_settings, parse_league_class
from pyleague.config_loader import SettingsProfile
from pyleague.ingest import LeagueActivityClient
from pyleague.market import compute_liquidity
from pyleague.persistence import EngineStore
from pyleague.recalibration import RecalibrationJob
from pyleague.weights import WeightStore, classify_league


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="League weight learning and trade valuation engine")
    parser.add_argument("--settings", type=Path, default=None, help="Load settings overrides JSON")
    parser.add_argument("--save-settings", type=Path, default=None, help="Save effective overrides JSON")
    parser.add_argument(
        "--set",
        dest="overrides",
        action="append",
        default=[],
        help="Setting override (e.g., blend_window=4)",
    )
    parser.add_argument("--db", type=Path, default=None, help="Path to the engine sqlite database")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable info logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    classify = subparsers.add_parser("classify", help="Resolve the league class for a league")
    classify.add_argument("league_type", nargs="?", default=None, help="League type (dynasty, redraft, keeper)")
    classify.add_argument("--specialty", default=None, help="Specialty format, if any")
    classify.add_argument("--superflex", action="store_true", help="League starts a superflex slot")

    weights = subparsers.add_parser("weights", help="Show baseline and effective weights for a class")
    weights.add_argument("league_class", help="League class (e.g., DYN_SF)")
    weights.add_argument("--history", action="store_true", help="Include the evolution records")
    weights.add_argument("--goal", default=None, help="Blend in a user goal (win_now, rebuild, balanced)")

    recalibrate = subparsers.add_parser("recalibrate", help="Recalibrate class weights for a season")
    recalibrate.add_argument("season", type=int, help="Season to learn from")
    recalibrate.add_argument(
        "--class",
        dest="classes",
        action="append",
        default=[],
        help="Restrict to a league class (repeatable)",
    )

    liquidity = subparsers.add_parser("liquidity", help="Score league trade liquidity")
    liquidity.add_argument("--league-id", default=None, help="Fetch activity for this league")
    liquidity.add_argument(
        "--metric",
        action="append",
        default=[],
        help="Metric value (e.g., trades_last_30=12)",
    )
    return parser.parse_args(argv)


def _parse_mapping(entries: list[str]) -> dict[str, str]:
    mapping: dict[str, str] = {}
    for entry in entries:
        if "=" not in entry:
            raise ValueError(f"Invalid mapping entry '{entry}', expected key=value")
        key, value = entry.split("=", 1)
        mapping[key.strip()] = value.strip()
    return mapping


def _resolve_settings(args: argparse.Namespace) -> tuple[EngineSettings, dict]:
    settings = load_settings()
    overrides: dict = {}
    if args.settings:
        profile = SettingsProfile.load(args.settings)
        overrides.update(profile.overrides)
    overrides.update(_parse_mapping(args.overrides))
    if args.db:
        overrides["db_path"] = str(args.db)
    return settings.with_overrides(overrides), overrides


def _print_json(payload: object) -> None:
    print(json.dumps(payload, indent=2, default=str))


def main(argv: Sequence[str] | None = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)
    settings, overrides = _resolve_settings(args)
    if args.save_settings:
        SettingsProfile(overrides).save(args.save_settings)
        print(f"Saved settings profile to {args.save_settings}")

    if args.command == "classify":
        league_class = classify_league(args.league_type, args.specialty, args.superflex)
        print(league_class.value)
        return

    if args.command == "liquidity":
        metrics = None
        if args.metric:
            metrics = _parse_mapping(args.metric)
        elif args.league_id:
            client = LeagueActivityClient(timeout=settings.fetch_timeout)
            metrics = client.fetch_metrics(args.league_id)
        result = compute_liquidity(metrics, settings)
        _print_json({"score": result.score, "confidence": result.confidence.value})
        return

    store = EngineStore(settings.db_path)
    weight_store = WeightStore(store, window_size=settings.blend_window)

    if args.command == "weights":
        league_class = parse_league_class(args.league_class)
        if league_class is None:
            raise SystemExit(f"Unknown league class {args.league_class}")
        payload: dict = {
            "league_class": league_class.value,
            "baseline": weight_store.get_baseline_weights(league_class).as_dict(),
            "effective": weight_store.effective_weights(league_class).as_dict(),
        }
        if args.goal:
            payload["goal_adjusted"] = weight_store.goal_adjusted_weights(league_class, args.goal, settings).as_dict()
        if args.history:
            payload["evolution"] = [
                {
                    "season": record.season,
                    "weights": record.weights.as_dict(),
                    "n_samples": record.n_samples,
                    "created_at": record.created_at.isoformat(),
                }
                for record in weight_store.get_weight_evolution(league_class)
            ]
        _print_json(payload)
        return

    if args.command == "recalibrate":
        classes = None
        if args.classes:
            classes = []
            for value in args.classes:
                league_class = parse_league_class(value)
                if league_class is None:
                    raise SystemExit(f"Unknown league class {value}")
                classes.append(league_class)
        job = RecalibrationJob(weight_store, store, settings=settings, classes=classes)
        report = job.run_recalibration(args.season)
        _print_json(report.to_dict())
        if report.errors:
            preview = "; ".join(report.errors[:5])
            more = len(report.errors) - 5
            suffix = f", +{more} more" if more > 0 else ""
            print(f"Recalibration errors: {preview}{suffix}")
        return


if __name__ == "__main__":
    main()
