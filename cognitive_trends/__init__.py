"""Cognitive and emotional trend analysis for elder activity logs."""

from .config import AppConfig
from .pipeline import CognitiveTrendPipeline

__all__ = ["AppConfig", "CognitiveTrendPipeline"]
