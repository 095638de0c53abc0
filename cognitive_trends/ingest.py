"""Loads JSON exports of elder activity into the care record store."""

from __future__ import annotations

import json
import logging
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from dateutil import parser as dt_parser

from .schemas import MOOD_SCORES, MemoryRecord, MoodEntry, QuestionRecord
from .storage import SQLiteCareStore


logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = {".json"}


def _normalize_text(text: str) -> str:
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


def _parse_optional_timestamp(value: object) -> Optional[datetime]:
    if value is None or isinstance(value, bool):
        return None
    try:
        if isinstance(value, (int, float)):
            return datetime.fromtimestamp(float(value), tz=timezone.utc)
        if isinstance(value, str) and value.strip():
            return dt_parser.parse(value)
    except (ValueError, OverflowError, OSError):
        return None
    return None


def _entry_timestamp(item: object) -> Tuple[bool, Optional[datetime]]:
    """Return ``(valid, created_at)``; a missing or blank value is valid and None."""
    if not isinstance(item, dict):
        return True, None
    raw = item.get("created_at")
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return True, None
    parsed = _parse_optional_timestamp(raw)
    return parsed is not None, parsed


def _first_str(item: dict, *keys: str) -> Optional[str]:
    for key in keys:
        value = item.get(key)
        if isinstance(value, str) and value.strip():
            return _normalize_text(value)
    return None


class RecordIngestor:
    """Reads ``{"elder_id", "memories", "questions", "moods"}`` exports."""

    def __init__(self, store: SQLiteCareStore):
        self.store = store

    def ingest_paths(self, inputs: Iterable[str], default_elder_id: Optional[str] = None) -> Dict[str, int]:
        stats = {"files": 0, "memories": 0, "questions": 0, "moods": 0, "skipped": 0}
        for raw in inputs:
            path = Path(raw)
            if path.is_dir():
                files: List[Path] = sorted(
                    child for child in path.rglob("*")
                    if child.is_file() and child.suffix.lower() in SUPPORTED_EXTENSIONS
                )
            elif path.is_file():
                files = [path]
            else:
                logger.warning("Input path does not exist: %s", path)
                continue
            for file_path in files:
                self._load_file(file_path, stats, default_elder_id)
        return stats

    def _load_file(self, path: Path, stats: Dict[str, int], default_elder_id: Optional[str]) -> None:
        raw = path.read_text(encoding="utf-8", errors="ignore")
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Skipping %s: not valid JSON", path)
            stats["skipped"] += 1
            return

        stats["files"] += 1
        exports = data if isinstance(data, list) else [data]
        for export in exports:
            if not isinstance(export, dict):
                stats["skipped"] += 1
                continue
            elder_id = export.get("elder_id") or default_elder_id
            if not elder_id:
                logger.warning("Skipping export in %s: no elder_id", path)
                stats["skipped"] += 1
                continue
            self.ingest_export(str(elder_id), export, stats)

    def ingest_export(self, elder_id: str, export: dict, stats: Optional[Dict[str, int]] = None) -> Dict[str, int]:
        """Write one export's memories, questions and moods for ``elder_id``.

        Entries whose ``created_at`` is present but unreadable are skipped
        rather than stamped with the current time.
        """
        if stats is None:
            stats = {"files": 0, "memories": 0, "questions": 0, "moods": 0, "skipped": 0}

        for item in export.get("memories") or []:
            text = _first_str(item, "text", "raw_text") if isinstance(item, dict) else None
            valid, created_at = _entry_timestamp(item)
            if not text or not valid:
                stats["skipped"] += 1
                continue
            self.store.add_memory(
                elder_id,
                MemoryRecord(
                    text=text,
                    created_at=created_at,
                    emotional_tone=_first_str(item, "emotional_tone"),
                ),
            )
            stats["memories"] += 1

        for item in export.get("questions") or []:
            question = _first_str(item, "question_text", "question") if isinstance(item, dict) else None
            valid, created_at = _entry_timestamp(item)
            if not question or not valid:
                stats["skipped"] += 1
                continue
            self.store.add_question(
                elder_id,
                QuestionRecord(
                    question_text=question,
                    answer_text=_first_str(item, "answer_text", "answer"),
                    created_at=created_at,
                ),
            )
            stats["questions"] += 1

        for item in export.get("moods") or []:
            mood = _first_str(item, "mood") if isinstance(item, dict) else None
            valid, created_at = _entry_timestamp(item)
            if not mood or mood.lower() not in MOOD_SCORES or not valid:
                stats["skipped"] += 1
                continue
            self.store.add_mood(elder_id, MoodEntry(mood=mood.lower(), created_at=created_at))
            stats["moods"] += 1

        return stats
