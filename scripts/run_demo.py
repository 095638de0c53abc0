"""End-to-end demo: seed activity -> assess -> persist -> alert -> history."""

from __future__ import annotations

import logging
import shutil
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import List

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from cognitive_trends.config import AppConfig  # noqa: E402
from cognitive_trends.ingest import RecordIngestor  # noqa: E402
from cognitive_trends.pipeline import CognitiveTrendPipeline  # noqa: E402
from cognitive_trends.schemas import CognitiveScoreRecord  # noqa: E402
from cognitive_trends.storage import SQLiteCareStore  # noqa: E402

ELDER_ID = "demo-elder"


def _seed_history(store: SQLiteCareStore, as_of: datetime, scores: List[float]) -> None:
    for offset, score in enumerate(scores, start=1):
        store.upsert_score(
            CognitiveScoreRecord(
                elder_id=ELDER_ID,
                assessment_date=(as_of - timedelta(days=offset)).date(),
                vocabulary_richness=score,
                sentence_complexity=score,
                topic_coherence=score,
                response_time_avg=5000.0,
                emotional_stability=score,
                memory_recall_accuracy=score,
                overall_score=score,
                trend_direction="stable",
            )
        )


def _seed_activity(store: SQLiteCareStore, as_of: datetime) -> None:
    def day(n: int) -> str:
        return (as_of - timedelta(days=n)).isoformat()

    export = {
        "memories": [
            {"text": "Went to the park.", "created_at": day(1)},
            {"text": "I am tired. Lunch was soup.", "created_at": day(2)},
            {"text": "My daughter called. She is well.", "created_at": day(4)},
        ],
        "questions": [
            {"question_text": "What day is it?", "answer_text": "It is Tuesday.", "created_at": day(1)},
        ],
        "moods": [
            {"mood": "okay", "created_at": day(1)},
            {"mood": "low", "created_at": day(2)},
            {"mood": "good", "created_at": day(3)},
        ],
    }
    RecordIngestor(store).ingest_export(ELDER_ID, export)


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    tmp_root = PROJECT_ROOT / "data" / "tmp_demo"
    if tmp_root.exists():
        shutil.rmtree(tmp_root)

    config = AppConfig.from_dict({"paths": {"sqlite_path": str(tmp_root / "care.db")}}, base_dir=PROJECT_ROOT)
    as_of = datetime.now(timezone.utc)

    store = SQLiteCareStore(config.paths.sqlite_path)
    _seed_history(store, as_of, [0.82, 0.84, 0.83, 0.85, 0.84, 0.86, 0.85])
    _seed_activity(store, as_of)

    pipeline = CognitiveTrendPipeline(config, store=store)
    result = pipeline.assess_and_save(ELDER_ID, as_of)
    if result is None:
        print("Insufficient data.")
        return

    print("== Assessment ==")
    for key, value in result.metrics.to_dict().items():
        print(f"{key}: {value}")
    print(f"saved={result.saved} alert_emitted={result.alert_emitted}")

    print("\n== Alerts ==")
    for alert in store.fetch_alerts(ELDER_ID):
        print(f"[{alert['severity']}] {alert['message']}")

    print("\n== 30-day History ==")
    for row in pipeline.history(ELDER_ID, days=30, as_of=as_of):
        print(f"{row['assessment_date']}: {row['overall_score']:.3f} ({row['trend_direction']})")

    store.close()


if __name__ == "__main__":
    main()
