"""SQLite-backed care record store: memories, questions, moods, scores, alerts."""

from __future__ import annotations

import json
import sqlite3
import threading
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional, Protocol

from dateutil import parser as dt_parser

from .schemas import Alert, CognitiveScoreRecord, MemoryRecord, MoodEntry, QuestionRecord


class CareStore(Protocol):
    """Read/write contracts the pipeline depends on."""

    def fetch_memories(
        self, elder_id: str, since: datetime, until: Optional[datetime] = None, limit: int = 50
    ) -> List[MemoryRecord]: ...

    def fetch_questions(
        self, elder_id: str, since: datetime, until: Optional[datetime] = None, limit: int = 50
    ) -> List[QuestionRecord]: ...

    def fetch_moods(
        self, elder_id: str, since: datetime, until: Optional[datetime] = None
    ) -> List[MoodEntry]: ...

    def fetch_score_history(self, elder_id: str, before: date, limit: int = 10) -> List[float]: ...

    def fetch_score_range(self, elder_id: str, start_date: date, end_date: Optional[date] = None) -> List[Dict]: ...

    def upsert_score(self, record: CognitiveScoreRecord) -> None: ...

    def insert_alert(self, alert: Alert) -> None: ...


def _to_utc_iso(value: Optional[datetime]) -> str:
    """Fixed-width UTC timestamp so string comparison matches time order."""
    if value is None:
        value = datetime.now(timezone.utc)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f+00:00")


def _parse_ts(raw: Optional[str]) -> Optional[datetime]:
    if not raw:
        return None
    return dt_parser.isoparse(raw)


class SQLiteCareStore:
    """Persists elder activity, daily cognitive scores and alerts."""

    def __init__(self, db_path: str):
        if db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        # The pipeline reads from worker threads; access is serialized by the lock.
        self.conn = sqlite3.connect(db_path, check_same_thread=False)
        self.conn.row_factory = sqlite3.Row
        self._lock = threading.RLock()
        self._init_schema()

    def _init_schema(self) -> None:
        with self._lock:
            self.conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS memories (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    elder_id TEXT NOT NULL,
                    text TEXT NOT NULL,
                    emotional_tone TEXT,
                    created_at TEXT NOT NULL
                );
                CREATE TABLE IF NOT EXISTS questions (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    elder_id TEXT NOT NULL,
                    question_text TEXT NOT NULL,
                    answer_text TEXT,
                    created_at TEXT NOT NULL
                );
                CREATE TABLE IF NOT EXISTS mood_entries (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    elder_id TEXT NOT NULL,
                    mood TEXT NOT NULL,
                    created_at TEXT NOT NULL
                );
                CREATE TABLE IF NOT EXISTS cognitive_scores (
                    elder_id TEXT NOT NULL,
                    assessment_date TEXT NOT NULL,
                    vocabulary_richness REAL NOT NULL,
                    sentence_complexity REAL NOT NULL,
                    topic_coherence REAL NOT NULL,
                    response_time_avg REAL NOT NULL,
                    emotional_stability REAL NOT NULL,
                    memory_recall_accuracy REAL NOT NULL,
                    overall_score REAL NOT NULL,
                    trend_direction TEXT NOT NULL,
                    alert_triggered INTEGER NOT NULL,
                    raw_metrics TEXT NOT NULL,
                    updated_at TEXT NOT NULL DEFAULT (datetime('now')),
                    PRIMARY KEY (elder_id, assessment_date)
                );
                CREATE TABLE IF NOT EXISTS alerts (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    elder_id TEXT NOT NULL,
                    type TEXT NOT NULL,
                    severity TEXT NOT NULL,
                    message TEXT NOT NULL,
                    metadata TEXT NOT NULL,
                    created_at TEXT NOT NULL DEFAULT (datetime('now'))
                );
                CREATE INDEX IF NOT EXISTS idx_memories_elder_ts ON memories(elder_id, created_at);
                CREATE INDEX IF NOT EXISTS idx_questions_elder_ts ON questions(elder_id, created_at);
                CREATE INDEX IF NOT EXISTS idx_moods_elder_ts ON mood_entries(elder_id, created_at);
                CREATE INDEX IF NOT EXISTS idx_alerts_elder ON alerts(elder_id);
                """
            )
            self.conn.commit()

    # -- writes used by ingestion ------------------------------------------------

    def add_memory(self, elder_id: str, record: MemoryRecord) -> None:
        with self._lock:
            self.conn.execute(
                "INSERT INTO memories (elder_id, text, emotional_tone, created_at) VALUES (?, ?, ?, ?)",
                (elder_id, record.text, record.emotional_tone, _to_utc_iso(record.created_at)),
            )
            self.conn.commit()

    def add_question(self, elder_id: str, record: QuestionRecord) -> None:
        with self._lock:
            self.conn.execute(
                "INSERT INTO questions (elder_id, question_text, answer_text, created_at) VALUES (?, ?, ?, ?)",
                (elder_id, record.question_text, record.answer_text, _to_utc_iso(record.created_at)),
            )
            self.conn.commit()

    def add_mood(self, elder_id: str, entry: MoodEntry) -> None:
        with self._lock:
            self.conn.execute(
                "INSERT INTO mood_entries (elder_id, mood, created_at) VALUES (?, ?, ?)",
                (elder_id, entry.mood, _to_utc_iso(entry.created_at)),
            )
            self.conn.commit()

    # -- reads -------------------------------------------------------------------

    def _window_rows(
        self,
        table: str,
        columns: str,
        elder_id: str,
        since: datetime,
        until: Optional[datetime],
        limit: Optional[int],
    ) -> List[sqlite3.Row]:
        where = ["elder_id = ?", "created_at >= ?"]
        params: List = [elder_id, _to_utc_iso(since)]
        if until is not None:
            where.append("created_at <= ?")
            params.append(_to_utc_iso(until))
        query = f"SELECT {columns} FROM {table} WHERE {' AND '.join(where)} ORDER BY created_at DESC, id DESC"
        if limit is not None:
            query += " LIMIT ?"
            params.append(max(1, limit))
        with self._lock:
            return self.conn.execute(query, params).fetchall()

    def fetch_memories(
        self, elder_id: str, since: datetime, until: Optional[datetime] = None, limit: int = 50
    ) -> List[MemoryRecord]:
        rows = self._window_rows("memories", "text, emotional_tone, created_at", elder_id, since, until, limit)
        return [
            MemoryRecord(
                text=row["text"],
                created_at=_parse_ts(row["created_at"]),
                emotional_tone=row["emotional_tone"],
            )
            for row in rows
        ]

    def fetch_questions(
        self, elder_id: str, since: datetime, until: Optional[datetime] = None, limit: int = 50
    ) -> List[QuestionRecord]:
        rows = self._window_rows(
            "questions", "question_text, answer_text, created_at", elder_id, since, until, limit
        )
        return [
            QuestionRecord(
                question_text=row["question_text"],
                answer_text=row["answer_text"],
                created_at=_parse_ts(row["created_at"]),
            )
            for row in rows
        ]

    def fetch_moods(
        self, elder_id: str, since: datetime, until: Optional[datetime] = None
    ) -> List[MoodEntry]:
        rows = self._window_rows("mood_entries", "mood, created_at", elder_id, since, until, None)
        return [MoodEntry(mood=row["mood"], created_at=_parse_ts(row["created_at"])) for row in rows]

    def fetch_score_history(self, elder_id: str, before: date, limit: int = 10) -> List[float]:
        """Overall scores strictly before ``before``, most recent first."""
        with self._lock:
            rows = self.conn.execute(
                """
                SELECT overall_score FROM cognitive_scores
                WHERE elder_id = ? AND assessment_date < ?
                ORDER BY assessment_date DESC
                LIMIT ?
                """,
                (elder_id, before.isoformat(), max(1, limit)),
            ).fetchall()
        return [float(row["overall_score"]) for row in rows if row["overall_score"] is not None]

    def fetch_score_range(self, elder_id: str, start_date: date, end_date: Optional[date] = None) -> List[Dict]:
        """Score rows from ``start_date`` onward, oldest first."""
        where = ["elder_id = ?", "assessment_date >= ?"]
        params: List = [elder_id, start_date.isoformat()]
        if end_date is not None:
            where.append("assessment_date <= ?")
            params.append(end_date.isoformat())
        with self._lock:
            rows = self.conn.execute(
                f"SELECT * FROM cognitive_scores WHERE {' AND '.join(where)} ORDER BY assessment_date ASC",
                params,
            ).fetchall()
        out: List[Dict] = []
        for row in rows:
            item = dict(row)
            item["alert_triggered"] = bool(item["alert_triggered"])
            item["raw_metrics"] = json.loads(item["raw_metrics"])
            out.append(item)
        return out

    def count_scores(self, elder_id: Optional[str] = None) -> int:
        return self._count("cognitive_scores", elder_id)

    def count_alerts(self, elder_id: Optional[str] = None) -> int:
        return self._count("alerts", elder_id)

    def _count(self, table: str, elder_id: Optional[str]) -> int:
        query = f"SELECT COUNT(*) AS n FROM {table}"
        params: List = []
        if elder_id is not None:
            query += " WHERE elder_id = ?"
            params.append(elder_id)
        with self._lock:
            row = self.conn.execute(query, params).fetchone()
        return int(row["n"]) if row else 0

    def fetch_alerts(self, elder_id: str) -> List[Dict]:
        with self._lock:
            rows = self.conn.execute(
                "SELECT * FROM alerts WHERE elder_id = ? ORDER BY id ASC", (elder_id,)
            ).fetchall()
        out = []
        for row in rows:
            item = dict(row)
            item["metadata"] = json.loads(item["metadata"])
            out.append(item)
        return out

    # -- writes used by the pipeline ---------------------------------------------

    def upsert_score(self, record: CognitiveScoreRecord) -> None:
        query = """
        INSERT INTO cognitive_scores (
            elder_id, assessment_date, vocabulary_richness, sentence_complexity,
            topic_coherence, response_time_avg, emotional_stability,
            memory_recall_accuracy, overall_score, trend_direction,
            alert_triggered, raw_metrics, updated_at
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, datetime('now'))
        ON CONFLICT(elder_id, assessment_date) DO UPDATE SET
            vocabulary_richness=excluded.vocabulary_richness,
            sentence_complexity=excluded.sentence_complexity,
            topic_coherence=excluded.topic_coherence,
            response_time_avg=excluded.response_time_avg,
            emotional_stability=excluded.emotional_stability,
            memory_recall_accuracy=excluded.memory_recall_accuracy,
            overall_score=excluded.overall_score,
            trend_direction=excluded.trend_direction,
            alert_triggered=excluded.alert_triggered,
            raw_metrics=excluded.raw_metrics,
            updated_at=excluded.updated_at
        """
        payload = (
            record.elder_id,
            record.assessment_date.isoformat(),
            float(record.vocabulary_richness),
            float(record.sentence_complexity),
            float(record.topic_coherence),
            float(record.response_time_avg),
            float(record.emotional_stability),
            float(record.memory_recall_accuracy),
            float(record.overall_score),
            record.trend_direction,
            int(record.alert_triggered),
            json.dumps(record.raw_metrics, sort_keys=True),
        )
        with self._lock:
            self.conn.execute(query, payload)
            self.conn.commit()

    def insert_alert(self, alert: Alert) -> None:
        with self._lock:
            self.conn.execute(
                "INSERT INTO alerts (elder_id, type, severity, message, metadata) VALUES (?, ?, ?, ?, ?)",
                (alert.elder_id, alert.type, alert.severity, alert.message, json.dumps(alert.metadata, sort_keys=True)),
            )
            self.conn.commit()

    def close(self) -> None:
        with self._lock:
            self.conn.close()
