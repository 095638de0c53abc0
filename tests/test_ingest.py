"""Tests for loading JSON activity exports into the store."""

import json
from datetime import datetime, timedelta, timezone

from cognitive_trends.ingest import RecordIngestor
from cognitive_trends.pipeline import CognitiveTrendPipeline

from conftest import ELDER


def _window(as_of):
    return as_of - timedelta(days=30), as_of


class TestRecordIngestor:
    def test_loads_memories_questions_moods(self, store, tmp_path, as_of):
        export = {
            "elder_id": ELDER,
            "memories": [
                {"raw_text": "We baked bread.", "created_at": "2026-03-14T10:00:00Z", "emotional_tone": "happy"},
                {"text": "Garden was lovely.", "created_at": "2026-03-13T10:00:00+00:00"},
            ],
            "questions": [
                {"question_text": "When is lunch?", "answer_text": "At noon.", "created_at": "2026-03-14T11:00:00Z"},
            ],
            "moods": [
                {"mood": "Good", "created_at": "2026-03-14T09:00:00Z"},
                {"mood": "ecstatic", "created_at": "2026-03-14T09:00:00Z"},
            ],
        }
        path = tmp_path / "export.json"
        path.write_text(json.dumps(export), encoding="utf-8")

        stats = RecordIngestor(store).ingest_paths([str(path)])

        assert stats == {"files": 1, "memories": 2, "questions": 1, "moods": 1, "skipped": 1}
        memories = store.fetch_memories(ELDER, *_window(as_of))
        assert [m.text for m in memories] == ["We baked bread.", "Garden was lovely."]
        assert memories[0].emotional_tone == "happy"
        assert store.fetch_questions(ELDER, *_window(as_of))[0].answer_text == "At noon."
        assert [m.mood for m in store.fetch_moods(ELDER, *_window(as_of))] == ["good"]

    def test_epoch_timestamps(self, store, as_of):
        ts = datetime(2026, 3, 10, tzinfo=timezone.utc).timestamp()
        RecordIngestor(store).ingest_export(ELDER, {"memories": [{"text": "Epoch day.", "created_at": ts}]})
        memories = store.fetch_memories(ELDER, *_window(as_of))
        assert memories[0].created_at == datetime(2026, 3, 10, tzinfo=timezone.utc)

    def test_default_elder_for_exports_without_one(self, store, tmp_path, as_of):
        path = tmp_path / "a.json"
        path.write_text(json.dumps({"memories": [{"text": "Hello.", "created_at": "2026-03-14"}]}), encoding="utf-8")
        RecordIngestor(store).ingest_paths([str(path)], default_elder_id="elder-9")
        assert len(store.fetch_memories("elder-9", *_window(as_of))) == 1

    def test_export_without_elder_skipped(self, store, tmp_path):
        path = tmp_path / "a.json"
        path.write_text(json.dumps({"memories": [{"text": "Hello."}]}), encoding="utf-8")
        stats = RecordIngestor(store).ingest_paths([str(path)])
        assert stats["skipped"] == 1
        assert stats["memories"] == 0

    def test_directory_and_bad_files(self, store, tmp_path):
        (tmp_path / "good.json").write_text(
            json.dumps([{"elder_id": ELDER, "moods": [{"mood": "okay"}]}]), encoding="utf-8"
        )
        (tmp_path / "broken.json").write_text("{not json", encoding="utf-8")
        (tmp_path / "notes.txt").write_text("ignored", encoding="utf-8")

        stats = RecordIngestor(store).ingest_paths([str(tmp_path), str(tmp_path / "missing.json")])
        assert stats["files"] == 1
        assert stats["moods"] == 1
        assert stats["skipped"] == 1

    def test_blank_memory_text_skipped(self, store):
        stats = RecordIngestor(store).ingest_export(ELDER, {"memories": [{"text": "   "}, "not a dict"]})
        assert stats["memories"] == 0
        assert stats["skipped"] == 2


class TestMalformedFields:
    def test_non_string_tone_dropped_not_fatal(self, store, as_of):
        export = {
            "memories": [
                {"text": "ok.", "emotional_tone": {"x": 1}, "created_at": "2026-03-14T10:00:00Z"},
                {"text": "fine.", "created_at": "2026-03-14T09:00:00Z"},
            ]
        }
        stats = RecordIngestor(store).ingest_export(ELDER, export)

        assert stats["memories"] == 2
        assert stats["skipped"] == 0
        memories = store.fetch_memories(ELDER, *_window(as_of))
        assert [m.emotional_tone for m in memories] == [None, None]

    def test_unparseable_timestamp_skipped(self, store, as_of):
        export = {
            "memories": [{"text": "ok.", "created_at": "not-a-date"} for _ in range(3)],
            "questions": [{"question_text": "When?", "answer_text": "Soon.", "created_at": "yesterday-ish"}],
            "moods": [{"mood": "good", "created_at": "??"}],
        }
        stats = RecordIngestor(store).ingest_export(ELDER, export)

        assert stats["memories"] == 0
        assert stats["questions"] == 0
        assert stats["moods"] == 0
        assert stats["skipped"] == 5
        assert store.fetch_memories(ELDER, *_window(as_of)) == []

    def test_unparseable_timestamps_do_not_reach_scoring(self, config, store, as_of):
        RecordIngestor(store).ingest_export(
            ELDER, {"memories": [{"text": "ok.", "created_at": "not-a-date"} for _ in range(3)]}
        )
        assert CognitiveTrendPipeline(config, store=store).assess(ELDER, as_of) is None

    def test_boolean_timestamp_skipped(self, store):
        stats = RecordIngestor(store).ingest_export(ELDER, {"memories": [{"text": "ok.", "created_at": True}]})
        assert stats["memories"] == 0
        assert stats["skipped"] == 1

    def test_blank_timestamp_treated_as_missing(self, store):
        stats = RecordIngestor(store).ingest_export(ELDER, {"moods": [{"mood": "okay", "created_at": "  "}]})
        assert stats["moods"] == 1
