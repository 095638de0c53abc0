"""Composite scoring and trend classification against score history."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from .config import ScoreWeights, TrendThresholds
from .schemas import (
    TREND_DECLINING,
    TREND_IMPROVING,
    TREND_RAPID_DECLINE,
    TREND_STABLE,
)


@dataclass
class SubScores:
    """The five normalized inputs to the composite score."""

    vocabulary_richness: float
    sentence_complexity: float
    topic_coherence: float
    emotional_stability: float
    memory_recall_accuracy: float


def composite_score(sub: SubScores, weights: Optional[ScoreWeights] = None) -> float:
    weights = weights or ScoreWeights()
    return (
        weights.vocabulary_richness * sub.vocabulary_richness
        + weights.sentence_complexity * sub.sentence_complexity
        + weights.topic_coherence * sub.topic_coherence
        + weights.emotional_stability * sub.emotional_stability
        + weights.memory_recall_accuracy * sub.memory_recall_accuracy
    )


def _window_mean(values: Sequence[float]) -> float:
    # An empty window contributes 0.
    return sum(values) / max(len(values), 1)


def classify_trend(
    current_score: float,
    history: Sequence[float],
    thresholds: Optional[TrendThresholds] = None,
) -> str:
    """Label the trajectory of ``current_score`` against prior scores.

    ``history`` is ordered most recent first and excludes the current score.
    The recent window (indices 0..2 by default) and the older window
    (indices 3..6) never overlap. Rules are evaluated in order and the first
    match wins.
    """
    t = thresholds or TrendThresholds()
    if len(history) < t.min_history:
        return TREND_STABLE

    recent = list(history[: t.recent_window])
    older = list(history[t.recent_window : t.recent_window + t.older_window])
    recent_avg = _window_mean(recent)
    older_avg = _window_mean(older)

    diff = current_score - older_avg
    recent_diff = current_score - recent_avg

    if diff > t.improving_diff and recent_diff > 0:
        return TREND_IMPROVING
    if diff < t.rapid_decline_diff or recent_diff < t.rapid_decline_recent_diff:
        return TREND_RAPID_DECLINE
    if diff < t.declining_diff:
        return TREND_DECLINING
    return TREND_STABLE
