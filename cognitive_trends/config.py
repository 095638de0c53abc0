"""Configuration loading for the cognitive trend pipeline."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml


def _resolve_path(raw_path: str, base_dir: Path) -> str:
    if raw_path == ":memory:":
        return raw_path
    path = Path(raw_path).expanduser()
    if not path.is_absolute():
        path = (base_dir / path).resolve()
    return str(path)


@dataclass
class PathsConfig:
    """Filesystem locations used by the pipeline."""

    sqlite_path: str = "data/care.db"


@dataclass
class LookbackConfig:
    """How much history is pulled for one assessment."""

    days: int = 30
    memory_limit: int = 50
    question_limit: int = 50
    history_limit: int = 10
    min_text_samples: int = 3

    def validate(self) -> None:
        for name in ("days", "memory_limit", "question_limit", "history_limit"):
            if getattr(self, name) < 1:
                raise ValueError(f"lookback.{name} must be >= 1")
        if self.min_text_samples < 1:
            raise ValueError("lookback.min_text_samples must be >= 1")


@dataclass
class ScoreWeights:
    """Composite score weights. Must sum to 1.0."""

    vocabulary_richness: float = 0.20
    sentence_complexity: float = 0.20
    topic_coherence: float = 0.25
    emotional_stability: float = 0.15
    memory_recall_accuracy: float = 0.20

    def total(self) -> float:
        return (
            self.vocabulary_richness
            + self.sentence_complexity
            + self.topic_coherence
            + self.emotional_stability
            + self.memory_recall_accuracy
        )

    def validate(self) -> None:
        if not math.isclose(self.total(), 1.0, abs_tol=1e-9):
            raise ValueError(f"scoring weights must sum to 1.0, got {self.total():.6f}")
        if any(w < 0 for w in vars(self).values()):
            raise ValueError("scoring weights must be non-negative")


@dataclass
class TrendThresholds:
    """Trend classification thresholds and history windows."""

    improving_diff: float = 0.1
    rapid_decline_diff: float = -0.2
    rapid_decline_recent_diff: float = -0.15
    declining_diff: float = -0.05
    min_history: int = 3
    recent_window: int = 3
    older_window: int = 4

    def validate(self) -> None:
        if self.recent_window < 1 or self.older_window < 1:
            raise ValueError("trend windows must be >= 1")
        if self.min_history < 1:
            raise ValueError("trend.min_history must be >= 1")


@dataclass
class PipelineConfig:
    """Orchestration switches."""

    concurrent_fetch: bool = True


@dataclass
class NotesConfig:
    """Caregiver note generation settings."""

    enabled: bool = False
    model: str = "gemini-2.5-flash"
    temperature: float = 0.2


@dataclass
class LoggingConfig:
    level: str = "INFO"


@dataclass
class AppConfig:
    """Top-level app configuration."""

    paths: PathsConfig = field(default_factory=PathsConfig)
    lookback: LookbackConfig = field(default_factory=LookbackConfig)
    weights: ScoreWeights = field(default_factory=ScoreWeights)
    trend: TrendThresholds = field(default_factory=TrendThresholds)
    pipeline: PipelineConfig = field(default_factory=PipelineConfig)
    notes: NotesConfig = field(default_factory=NotesConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    google_api_key: Optional[str] = None

    def validate(self) -> "AppConfig":
        self.lookback.validate()
        self.weights.validate()
        self.trend.validate()
        return self

    @classmethod
    def from_dict(cls, data: Dict[str, Any], base_dir: Optional[Path] = None) -> "AppConfig":
        """Build config from a dictionary."""
        base = Path.cwd() if base_dir is None else base_dir

        paths_data = data.get("paths") or {}
        paths = PathsConfig(
            sqlite_path=_resolve_path(paths_data.get("sqlite_path", "data/care.db"), base),
        )

        scoring_data = data.get("scoring") or {}
        config = cls(
            paths=paths,
            lookback=LookbackConfig(**(data.get("lookback") or {})),
            weights=ScoreWeights(**(scoring_data.get("weights") or {})),
            trend=TrendThresholds(**(scoring_data.get("trend") or {})),
            pipeline=PipelineConfig(**(data.get("pipeline") or {})),
            notes=NotesConfig(**(data.get("notes") or {})),
            logging=LoggingConfig(**(data.get("logging") or {})),
            google_api_key=data.get("google_api_key"),
        )
        return config.validate()

    @classmethod
    def from_yaml(cls, path: str) -> "AppConfig":
        """Load config from YAML."""
        config_path = Path(path).resolve()
        with config_path.open("r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}
        return cls.from_dict(data, base_dir=config_path.parent)
