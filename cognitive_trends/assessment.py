"""Pure assessment core: fetched inputs in, cognitive metrics out."""

from __future__ import annotations

import logging
from typing import Optional

from .config import ScoreWeights, TrendThresholds
from .linguistics import analyze_text
from .metrics import (
    emotional_stability,
    memory_recall_accuracy,
    sentence_complexity,
    topic_coherence,
    vocabulary_richness,
)
from .schemas import AssessmentInputs, CognitiveMetrics
from .scoring import SubScores, classify_trend, composite_score


logger = logging.getLogger(__name__)

# Not measured yet. Kept as an explicit stub until response latency is
# instrumented upstream.
RESPONSE_TIME_PLACEHOLDER_MS = 5000.0

DEFAULT_MIN_TEXT_SAMPLES = 3


def compute_metrics(
    inputs: AssessmentInputs,
    weights: Optional[ScoreWeights] = None,
    thresholds: Optional[TrendThresholds] = None,
    min_text_samples: int = DEFAULT_MIN_TEXT_SAMPLES,
) -> Optional[CognitiveMetrics]:
    """Score one elder's recent activity.

    Returns None when fewer than ``min_text_samples`` texts are available.
    That is a normal outcome, distinct from a low score.
    """
    texts = [t for t in inputs.texts if t and t.strip()]
    if len(texts) < min_text_samples:
        logger.info("Insufficient text samples: %d < %d", len(texts), min_text_samples)
        return None

    analyses = [analyze_text(text) for text in texts]
    sub = SubScores(
        vocabulary_richness=vocabulary_richness(analyses),
        sentence_complexity=sentence_complexity(analyses),
        topic_coherence=topic_coherence(analyses),
        emotional_stability=emotional_stability(inputs.moods),
        memory_recall_accuracy=memory_recall_accuracy(inputs.memory_count, inputs.question_count),
    )
    overall = composite_score(sub, weights)
    trend = classify_trend(overall, inputs.history, thresholds)

    return CognitiveMetrics(
        vocabulary_richness=sub.vocabulary_richness,
        sentence_complexity=sub.sentence_complexity,
        topic_coherence=sub.topic_coherence,
        response_time_avg=RESPONSE_TIME_PLACEHOLDER_MS,
        emotional_stability=sub.emotional_stability,
        memory_recall_accuracy=sub.memory_recall_accuracy,
        overall_score=overall,
        trend_direction=trend,
        sample_count=len(texts),
    )


def alert_message(metrics: CognitiveMetrics) -> str:
    return (
        "Rapid cognitive decline detected. "
        f"Overall score: {metrics.overall_score * 100:.1f}%. "
        "Immediate attention recommended."
    )
