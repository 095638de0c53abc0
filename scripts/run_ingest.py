"""CLI entrypoint for loading elder activity exports into the care store."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from cognitive_trends.config import AppConfig  # noqa: E402
from cognitive_trends.ingest import RecordIngestor  # noqa: E402
from cognitive_trends.storage import SQLiteCareStore  # noqa: E402


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Load memory/question/mood exports into the care store.")
    parser.add_argument(
        "--config",
        type=str,
        default=str(PROJECT_ROOT / "config.yaml"),
        help="Path to YAML config.",
    )
    parser.add_argument(
        "--input",
        action="append",
        required=True,
        help="JSON export file or directory (repeatable).",
    )
    parser.add_argument(
        "--elder",
        type=str,
        default=None,
        help="Elder id for exports that do not carry one.",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    config = AppConfig.from_yaml(args.config)
    logging.basicConfig(level=config.logging.level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    store = SQLiteCareStore(config.paths.sqlite_path)
    try:
        stats = RecordIngestor(store).ingest_paths(args.input, default_elder_id=args.elder)
    finally:
        store.close()

    print("Ingestion complete.")
    for key, value in stats.items():
        print(f"{key}: {value}")


if __name__ == "__main__":
    main()
