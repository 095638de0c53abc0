"""Sub-metric aggregation over a batch of linguistic analyses.

Every function here returns a finite float in [0, 1] and falls back to a
fixed default when it has nothing to aggregate.
"""

from __future__ import annotations

from typing import Iterable, List, Sequence

import numpy as np

from .schemas import MOOD_SCORES, LinguisticAnalysis


EMPTY_DEFAULT = 0.5
STABLE_MOOD_DEFAULT = 0.7
UNKNOWN_MOOD_SCORE = 3
MIN_MOOD_ENTRIES = 2

UNIQUE_WORD_SCALE = 50.0
UNIQUE_WORD_BONUS_CAP = 0.3
SENTENCE_LENGTH_SCALE = 20.0
COMPLEX_SENTENCE_SCALE = 3.0
COMPONENT_CAP = 0.5
ACTIVITY_SCALE = 20.0
ACTIVITY_WEIGHT = 0.7
ACTIVITY_FLOOR = 0.3


def _safe_float(value: float, default: float = EMPTY_DEFAULT) -> float:
    if np.isnan(value) or np.isinf(value):
        return default
    return float(value)


def _clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


def _mean(values: Iterable[float]) -> float:
    return float(np.mean(np.fromiter(values, dtype=np.float64)))


def vocabulary_richness(analyses: Sequence[LinguisticAnalysis]) -> float:
    if not analyses:
        return EMPTY_DEFAULT
    avg_ttr = _mean(a.type_token_ratio for a in analyses)
    avg_unique = _mean(a.unique_word_count for a in analyses)
    bonus = min(avg_unique / UNIQUE_WORD_SCALE, UNIQUE_WORD_BONUS_CAP)
    return _clamp(_safe_float(avg_ttr + bonus))


def sentence_complexity(analyses: Sequence[LinguisticAnalysis]) -> float:
    if not analyses:
        return EMPTY_DEFAULT
    avg_length = _mean(a.avg_sentence_length for a in analyses)
    avg_complex = _mean(a.complex_sentence_count for a in analyses)
    length_score = min(avg_length / SENTENCE_LENGTH_SCALE, COMPONENT_CAP)
    complexity_score = min(avg_complex / COMPLEX_SENTENCE_SCALE, COMPONENT_CAP)
    return _clamp(_safe_float(length_score + complexity_score))


def topic_coherence(analyses: Sequence[LinguisticAnalysis]) -> float:
    if not analyses:
        return EMPTY_DEFAULT
    return _clamp(_safe_float(_mean(a.coherence_score for a in analyses)))


def mood_to_score(mood: str) -> int:
    return MOOD_SCORES.get((mood or "").strip().lower(), UNKNOWN_MOOD_SCORE)


def emotional_stability(moods: Sequence[str]) -> float:
    """1 - stddev/2 over mapped mood scores; assumes stable with < 2 entries."""
    if len(moods) < MIN_MOOD_ENTRIES:
        return STABLE_MOOD_DEFAULT
    scores: List[int] = [mood_to_score(m) for m in moods]
    variance = float(np.var(np.array(scores, dtype=np.float64)))
    stability = 1.0 - float(np.sqrt(variance)) / 2.0
    return _clamp(_safe_float(stability, default=STABLE_MOOD_DEFAULT))


def memory_recall_accuracy(memory_count: int, question_count: int) -> float:
    """Engagement-volume proxy with a 0.3 floor."""
    activity = max(memory_count, 0) + max(question_count, 0)
    return min(activity / ACTIVITY_SCALE, 1.0) * ACTIVITY_WEIGHT + ACTIVITY_FLOOR
