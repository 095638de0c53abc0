"""Short caregiver-facing notes describing an assessment."""

from __future__ import annotations

import logging
import os
from typing import Optional

from google import genai
from google.genai import types as genai_types

from .config import NotesConfig
from .schemas import (
    TREND_DECLINING,
    TREND_IMPROVING,
    TREND_RAPID_DECLINE,
    CognitiveMetrics,
)


logger = logging.getLogger(__name__)

SUB_METRIC_LABELS = {
    "vocabulary_richness": "vocabulary richness",
    "sentence_complexity": "sentence complexity",
    "topic_coherence": "topic coherence",
    "emotional_stability": "emotional stability",
    "memory_recall_accuracy": "engagement",
}

DISCLAIMER = "This is not a medical diagnosis."


def _weakest_metric(metrics: CognitiveMetrics) -> str:
    values = {key: getattr(metrics, key) for key in SUB_METRIC_LABELS}
    return min(values, key=lambda key: (values[key], key))


class CaregiverNoteWriter:
    """Turns metrics into a two or three sentence note for a caregiver."""

    def __init__(self, config: Optional[NotesConfig] = None, google_api_key: Optional[str] = None):
        self.config = config or NotesConfig()
        self.api_key = google_api_key or os.getenv("GEMINI_API_KEY")
        if self.api_key:
            self.client = genai.Client(api_key=self.api_key)
        else:
            self.client = None

    def write_note(self, metrics: CognitiveMetrics) -> str:
        if not self.client:
            return self.heuristic_note(metrics)

        prompt = (
            "You write brief, calm notes for family caregivers of an elderly person.\n"
            "Use only the numbers given. Do not diagnose. Do not invent events.\n"
            "Write 2-3 sentences and end with a suggestion for the caregiver.\n\n"
            f"Overall score: {metrics.overall_score * 100:.1f}%\n"
            f"Trend: {metrics.trend_direction}\n"
            + "\n".join(
                f"{label}: {getattr(metrics, key) * 100:.0f}%"
                for key, label in SUB_METRIC_LABELS.items()
            )
        )
        try:
            resp = self.client.models.generate_content(
                model=self.config.model,
                contents=prompt,
                config=genai_types.GenerateContentConfig(temperature=self.config.temperature),
            )
            text = (resp.text or "").strip()
        except Exception:
            logger.warning("Caregiver note generation failed, using heuristic note", exc_info=True)
            return self.heuristic_note(metrics)
        return text or self.heuristic_note(metrics)

    def heuristic_note(self, metrics: CognitiveMetrics) -> str:
        score = f"{metrics.overall_score * 100:.1f}%"
        weakest = SUB_METRIC_LABELS[_weakest_metric(metrics)]

        if metrics.trend_direction == TREND_RAPID_DECLINE:
            lead = f"The overall score dropped sharply to {score}."
            advice = "Consider scheduling a consultation with a healthcare provider soon."
        elif metrics.trend_direction == TREND_DECLINING:
            lead = f"The overall score is {score} and has been drifting down."
            advice = "We've noticed some changes; a check-in call this week may help."
        elif metrics.trend_direction == TREND_IMPROVING:
            lead = f"The overall score is {score} and improving."
            advice = "Keep encouraging daily memories and questions."
        else:
            lead = f"The overall score is steady at {score}."
            advice = "Keep encouraging daily memories and questions."

        return f"{lead} The lowest area right now is {weakest}. {advice} {DISCLAIMER}"
