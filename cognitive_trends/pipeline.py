"""Orchestration layer: fetch inputs, score, persist, alert."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import date, datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional, Tuple, TypeVar

from .assessment import alert_message, compute_metrics
from .config import AppConfig
from .notes import CaregiverNoteWriter
from .schemas import (
    Alert,
    AssessmentInputs,
    AssessmentResult,
    CognitiveMetrics,
    CognitiveScoreRecord,
    MemoryRecord,
    MoodEntry,
    QuestionRecord,
)
from .storage import CareStore, SQLiteCareStore


logger = logging.getLogger(__name__)

T = TypeVar("T")


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _collect_texts(memories: List[MemoryRecord], questions: List[QuestionRecord]) -> List[str]:
    texts = [m.text for m in memories if m.text]
    texts.extend(q.question_text for q in questions if q.question_text)
    texts.extend(q.answer_text for q in questions if q.answer_text)
    return texts


class CognitiveTrendPipeline:
    """Runs one cognitive assessment per elder per day against a care store."""

    def __init__(
        self,
        config: AppConfig,
        store: Optional[CareStore] = None,
        note_writer: Optional[CaregiverNoteWriter] = None,
    ):
        self.config = config
        self.store = store if store is not None else SQLiteCareStore(config.paths.sqlite_path)
        if note_writer is None and config.notes.enabled:
            note_writer = CaregiverNoteWriter(config.notes, google_api_key=config.google_api_key)
        self.note_writer = note_writer

    def _fetch_or_empty(self, name: str, elder_id: str, fetch: Callable[[], List[T]]) -> List[T]:
        try:
            return list(fetch())
        except Exception:
            logger.warning("Fetching %s for elder %s failed; continuing without it", name, elder_id, exc_info=True)
            return []

    def gather_inputs(self, elder_id: str, as_of: Optional[datetime] = None) -> AssessmentInputs:
        """Read text, mood and score history for the lookback window."""
        as_of = as_of or _utc_now()
        lookback = self.config.lookback
        since = as_of - timedelta(days=lookback.days)
        assessment_date = as_of.date()

        fetches: Dict[str, Callable[[], list]] = {
            "memories": lambda: self.store.fetch_memories(elder_id, since, as_of, limit=lookback.memory_limit),
            "questions": lambda: self.store.fetch_questions(elder_id, since, as_of, limit=lookback.question_limit),
            "moods": lambda: self.store.fetch_moods(elder_id, since, as_of),
            "history": lambda: self.store.fetch_score_history(
                elder_id, assessment_date, limit=lookback.history_limit
            ),
        }

        if self.config.pipeline.concurrent_fetch:
            with ThreadPoolExecutor(max_workers=len(fetches)) as pool:
                futures = {
                    name: pool.submit(self._fetch_or_empty, name, elder_id, fetch)
                    for name, fetch in fetches.items()
                }
                results = {name: future.result() for name, future in futures.items()}
        else:
            results = {name: self._fetch_or_empty(name, elder_id, fetch) for name, fetch in fetches.items()}

        memories: List[MemoryRecord] = results["memories"]
        questions: List[QuestionRecord] = results["questions"]
        moods: List[MoodEntry] = results["moods"]

        return AssessmentInputs(
            texts=_collect_texts(memories, questions),
            moods=[m.mood for m in moods],
            memory_count=len(memories),
            question_count=len(questions),
            history=[float(s) for s in results["history"]],
        )

    def assess(self, elder_id: str, as_of: Optional[datetime] = None) -> Optional[CognitiveMetrics]:
        """Score without writing anything. None means insufficient data."""
        inputs = self.gather_inputs(elder_id, as_of)
        metrics = compute_metrics(
            inputs,
            weights=self.config.weights,
            thresholds=self.config.trend,
            min_text_samples=self.config.lookback.min_text_samples,
        )
        if metrics is None:
            logger.info("No assessment for elder %s: insufficient data", elder_id)
        return metrics

    def save_score(self, elder_id: str, metrics: CognitiveMetrics, assessment_date: date) -> bool:
        """Upsert the day's record and raise an alert on rapid decline.

        Returns False if the upsert failed. Alert failures are logged and do
        not change the return value.
        """
        saved, _ = self._persist(elder_id, metrics, assessment_date)
        return saved

    def _persist(self, elder_id: str, metrics: CognitiveMetrics, assessment_date: date) -> Tuple[bool, bool]:
        record = CognitiveScoreRecord.from_metrics(elder_id, assessment_date, metrics)
        try:
            self.store.upsert_score(record)
        except Exception:
            logger.exception("Error saving cognitive score for elder %s on %s", elder_id, assessment_date)
            return False, False

        alert_emitted = False
        if metrics.alert_triggered:
            alert_emitted = self._emit_alert(elder_id, metrics)
        return True, alert_emitted

    def _emit_alert(self, elder_id: str, metrics: CognitiveMetrics) -> bool:
        alert = Alert(elder_id=elder_id, message=alert_message(metrics), metadata=metrics.to_dict())
        try:
            self.store.insert_alert(alert)
        except Exception:
            logger.exception("Error triggering cognitive decline alert for elder %s", elder_id)
            return False
        logger.warning("Cognitive decline alert raised for elder %s (score %.3f)", elder_id, metrics.overall_score)
        return True

    def assess_and_save(self, elder_id: str, as_of: Optional[datetime] = None) -> Optional[AssessmentResult]:
        """Full run: gather -> score -> classify -> upsert (+ alert)."""
        as_of = as_of or _utc_now()
        metrics = self.assess(elder_id, as_of)
        if metrics is None:
            return None

        assessment_date = as_of.date()
        saved, alert_emitted = self._persist(elder_id, metrics, assessment_date)

        note = self.note_writer.write_note(metrics) if self.note_writer else None
        logger.info(
            "Assessed elder %s on %s: score=%.3f trend=%s saved=%s",
            elder_id,
            assessment_date,
            metrics.overall_score,
            metrics.trend_direction,
            saved,
        )
        return AssessmentResult(
            elder_id=elder_id,
            assessment_date=assessment_date,
            metrics=metrics,
            saved=saved,
            alert_emitted=alert_emitted,
            caregiver_note=note,
        )

    def history(self, elder_id: str, days: int = 30, as_of: Optional[datetime] = None) -> List[Dict]:
        """Daily score records for the last ``days`` days, oldest first."""
        as_of = as_of or _utc_now()
        start = (as_of - timedelta(days=days)).date()
        try:
            return self.store.fetch_score_range(elder_id, start, as_of.date())
        except Exception:
            logger.exception("Error fetching cognitive history for elder %s", elder_id)
            return []
