"""CLI entrypoint for running one cognitive assessment."""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime, time, timezone
from pathlib import Path

from dateutil import parser as dt_parser

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from cognitive_trends.config import AppConfig  # noqa: E402
from cognitive_trends.pipeline import CognitiveTrendPipeline  # noqa: E402


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Assess one elder's cognitive trend for a day.")
    parser.add_argument(
        "--config",
        type=str,
        default=str(PROJECT_ROOT / "config.yaml"),
        help="Path to YAML config.",
    )
    parser.add_argument("--elder", type=str, required=True, help="Elder id.")
    parser.add_argument(
        "--date",
        type=str,
        default=None,
        help="Assessment date (YYYY-MM-DD). Defaults to now.",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Compute the score without writing it.",
    )
    return parser.parse_args()


def _as_of(raw: str) -> datetime:
    day = dt_parser.parse(raw).date()
    return datetime.combine(day, time(23, 59, 59), tzinfo=timezone.utc)


def main() -> None:
    args = parse_args()
    config = AppConfig.from_yaml(args.config)
    logging.basicConfig(level=config.logging.level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    pipeline = CognitiveTrendPipeline(config)
    as_of = _as_of(args.date) if args.date else None

    if args.dry_run:
        metrics = pipeline.assess(args.elder, as_of)
        if metrics is None:
            print("Insufficient data: need more memories or questions to assess.")
            return
        for key, value in metrics.to_dict().items():
            print(f"{key}: {value}")
        return

    result = pipeline.assess_and_save(args.elder, as_of)
    if result is None:
        print("Insufficient data: need more memories or questions to assess.")
        return

    print(f"== Assessment {result.elder_id} {result.assessment_date.isoformat()} ==")
    for key, value in result.metrics.to_dict().items():
        print(f"{key}: {value}")
    print(f"saved: {result.saved}")
    print(f"alert_emitted: {result.alert_emitted}")
    if result.caregiver_note:
        print("\n== Caregiver Note ==")
        print(result.caregiver_note)


if __name__ == "__main__":
    main()
