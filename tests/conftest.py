"""Shared test fixtures for the cognitive trend test suite."""

from datetime import datetime, timedelta, timezone

import pytest

from cognitive_trends.config import AppConfig
from cognitive_trends.schemas import (
    CognitiveScoreRecord,
    LinguisticAnalysis,
    MemoryRecord,
    MoodEntry,
    QuestionRecord,
)
from cognitive_trends.storage import SQLiteCareStore


ELDER = "elder-1"


# ── Time ────────────────────────────────────────────────────────────────

@pytest.fixture
def as_of():
    """Fixed assessment instant: 2026-03-15T12:00:00Z."""
    return datetime(2026, 3, 15, 12, 0, 0, tzinfo=timezone.utc)


# ── Store / Config ──────────────────────────────────────────────────────

@pytest.fixture
def config(tmp_path):
    return AppConfig.from_dict({"paths": {"sqlite_path": str(tmp_path / "care.db")}})


@pytest.fixture
def store(config):
    s = SQLiteCareStore(config.paths.sqlite_path)
    yield s
    s.close()


# ── Seeding ─────────────────────────────────────────────────────────────

@pytest.fixture
def seed(store, as_of):
    """Helpers that write activity relative to ``as_of``.

    Usage:
        seed.memories(["ok.", "ok."], days_ago=1)
        seed.history([0.9, 0.9, 0.9])
    """

    class _Seeder:
        def memories(self, texts, days_ago=1, elder_id=ELDER):
            for text in texts:
                store.add_memory(
                    elder_id, MemoryRecord(text=text, created_at=as_of - timedelta(days=days_ago))
                )

        def question(self, question, answer=None, days_ago=1, elder_id=ELDER):
            store.add_question(
                elder_id,
                QuestionRecord(
                    question_text=question,
                    answer_text=answer,
                    created_at=as_of - timedelta(days=days_ago),
                ),
            )

        def moods(self, moods, days_ago=1, elder_id=ELDER):
            for mood in moods:
                store.add_mood(elder_id, MoodEntry(mood=mood, created_at=as_of - timedelta(days=days_ago)))

        def history(self, scores, elder_id=ELDER):
            """Scores ordered most recent first; the first lands on yesterday."""
            for offset, score in enumerate(scores, start=1):
                store.upsert_score(
                    make_score_record(elder_id, (as_of - timedelta(days=offset)).date(), score)
                )

    return _Seeder()


def make_score_record(elder_id, assessment_date, score, trend="stable"):
    return CognitiveScoreRecord(
        elder_id=elder_id,
        assessment_date=assessment_date,
        vocabulary_richness=score,
        sentence_complexity=score,
        topic_coherence=score,
        response_time_avg=5000.0,
        emotional_stability=score,
        memory_recall_accuracy=score,
        overall_score=score,
        trend_direction=trend,
        raw_metrics={"overall_score": score},
    )


def make_analysis(**overrides):
    defaults = {
        "word_count": 10,
        "unique_word_count": 10,
        "avg_sentence_length": 10.0,
        "complex_sentence_count": 0,
        "emotion_word_count": 0,
        "coherence_score": 0.5,
        "type_token_ratio": 1.0,
    }
    defaults.update(overrides)
    return LinguisticAnalysis(**defaults)
