"""Core data structures shared across modules."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Optional


TREND_IMPROVING = "improving"
TREND_STABLE = "stable"
TREND_DECLINING = "declining"
TREND_RAPID_DECLINE = "rapid_decline"

TREND_DIRECTIONS = [TREND_IMPROVING, TREND_STABLE, TREND_DECLINING, TREND_RAPID_DECLINE]

MOOD_SCORES = {"great": 5, "good": 4, "okay": 3, "low": 2, "sad": 1}

ALERT_TYPE_COGNITIVE_DECLINE = "cognitive_decline"
SEVERITY_HIGH = "high"


@dataclass(frozen=True)
class LinguisticAnalysis:
    """Feature vector for one text sample. Never persisted."""

    word_count: int
    unique_word_count: int
    avg_sentence_length: float
    complex_sentence_count: int
    emotion_word_count: int
    coherence_score: float
    type_token_ratio: float


@dataclass
class MemoryRecord:
    """Elder-authored memory as read from the memory store."""

    text: str
    created_at: Optional[datetime] = None
    emotional_tone: Optional[str] = None


@dataclass
class QuestionRecord:
    """Question asked by the elder, with its answer when there is one."""

    question_text: str
    answer_text: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass
class MoodEntry:
    mood: str
    created_at: Optional[datetime] = None


@dataclass
class CognitiveMetrics:
    """Sub-scores, composite score and trend for one assessment."""

    vocabulary_richness: float
    sentence_complexity: float
    topic_coherence: float
    response_time_avg: float
    emotional_stability: float
    memory_recall_accuracy: float
    overall_score: float
    trend_direction: str
    sample_count: int = 0

    @property
    def alert_triggered(self) -> bool:
        return self.trend_direction == TREND_RAPID_DECLINE

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class CognitiveScoreRecord:
    """Persisted daily score, unique per (elder_id, assessment_date)."""

    elder_id: str
    assessment_date: date
    vocabulary_richness: float
    sentence_complexity: float
    topic_coherence: float
    response_time_avg: float
    emotional_stability: float
    memory_recall_accuracy: float
    overall_score: float
    trend_direction: str
    alert_triggered: bool = False
    raw_metrics: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_metrics(cls, elder_id: str, assessment_date: date, metrics: CognitiveMetrics) -> "CognitiveScoreRecord":
        return cls(
            elder_id=elder_id,
            assessment_date=assessment_date,
            vocabulary_richness=metrics.vocabulary_richness,
            sentence_complexity=metrics.sentence_complexity,
            topic_coherence=metrics.topic_coherence,
            response_time_avg=metrics.response_time_avg,
            emotional_stability=metrics.emotional_stability,
            memory_recall_accuracy=metrics.memory_recall_accuracy,
            overall_score=metrics.overall_score,
            trend_direction=metrics.trend_direction,
            alert_triggered=metrics.alert_triggered,
            raw_metrics=metrics.to_dict(),
        )


@dataclass
class Alert:
    """Alert handed to the external alert sink."""

    elder_id: str
    message: str
    severity: str = SEVERITY_HIGH
    type: str = ALERT_TYPE_COGNITIVE_DECLINE
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class AssessmentInputs:
    """Everything the pure scoring core needs, already fetched."""

    texts: List[str] = field(default_factory=list)
    moods: List[str] = field(default_factory=list)
    memory_count: int = 0
    question_count: int = 0
    history: List[float] = field(default_factory=list)


@dataclass
class AssessmentResult:
    """Outcome of one end-to-end pipeline run."""

    elder_id: str
    assessment_date: date
    metrics: CognitiveMetrics
    saved: bool = False
    alert_emitted: bool = False
    caregiver_note: Optional[str] = None
