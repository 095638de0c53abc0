"""Tests for the composite scorer and trend classifier (pure functions)."""

import pytest

from cognitive_trends.config import ScoreWeights, TrendThresholds
from cognitive_trends.scoring import SubScores, classify_trend, composite_score


def _uniform(value):
    return SubScores(value, value, value, value, value)


# ═══════════════════════════════════════════════════════════════════════════
# Composite scorer
# ═══════════════════════════════════════════════════════════════════════════


class TestCompositeScore:
    def test_default_weights_sum_to_one(self):
        assert ScoreWeights().total() == pytest.approx(1.0)

    def test_uniform_subscores_pass_through(self):
        assert composite_score(_uniform(1.0)) == pytest.approx(1.0)
        assert composite_score(_uniform(0.5)) == pytest.approx(0.5)

    def test_topic_coherence_weighted_heaviest(self):
        sub = SubScores(0.0, 0.0, 1.0, 0.0, 0.0)
        assert composite_score(sub) == pytest.approx(0.25)

    def test_weighted_sum(self):
        sub = SubScores(1.0, 0.05, 0.5, 0.7, 0.405)
        assert composite_score(sub) == pytest.approx(0.521)

    def test_custom_weights(self):
        weights = ScoreWeights(
            vocabulary_richness=1.0,
            sentence_complexity=0.0,
            topic_coherence=0.0,
            emotional_stability=0.0,
            memory_recall_accuracy=0.0,
        )
        sub = SubScores(0.42, 0.9, 0.9, 0.9, 0.9)
        assert composite_score(sub, weights) == pytest.approx(0.42)


# ═══════════════════════════════════════════════════════════════════════════
# Trend classifier
# ═══════════════════════════════════════════════════════════════════════════


class TestClassifyTrend:
    @pytest.mark.parametrize("history", [[], [0.1], [0.1, 0.1]])
    def test_short_history_is_stable(self, history):
        """Fewer than 3 prior scores → stable whatever the score."""
        assert classify_trend(0.99, history) == "stable"
        assert classify_trend(0.0, history) == "stable"

    def test_recent_dip_below_older_window_is_stable(self):
        """diff=0.55 but recentDiff=-0.05: improving needs recentDiff > 0."""
        history = [0.9, 0.9, 0.9, 0.3, 0.3, 0.3, 0.3]
        assert classify_trend(0.85, history) == "stable"

    def test_large_drop_is_rapid_decline(self):
        """diff = -0.25 → rapid_decline."""
        assert classify_trend(0.55, [0.8] * 7) == "rapid_decline"

    def test_recent_drop_alone_is_rapid_decline(self):
        history = [0.8, 0.8, 0.8, 0.5, 0.5, 0.5, 0.5]
        assert classify_trend(0.6, history) == "rapid_decline"

    def test_improving(self):
        assert classify_trend(0.7, [0.5] * 7) == "improving"

    def test_declining(self):
        assert classify_trend(0.53, [0.6] * 7) == "declining"

    def test_flat_is_stable(self):
        assert classify_trend(0.6, [0.6] * 7) == "stable"

    def test_missing_older_window_counts_as_zero(self):
        """With exactly 3 prior scores olderAvg is 0."""
        assert classify_trend(0.6, [0.5, 0.5, 0.5]) == "improving"
        assert classify_trend(0.45, [0.5, 0.5, 0.5]) == "stable"

    def test_entries_beyond_older_window_ignored(self):
        base = [0.6, 0.6, 0.6, 0.6, 0.6, 0.6, 0.6]
        assert classify_trend(0.6, base + [0.0, 0.0, 0.0]) == classify_trend(0.6, base)

    def test_improving_checked_before_rapid_decline(self):
        """diff > 0.1 with recentDiff > 0 wins even under custom loose thresholds."""
        t = TrendThresholds(rapid_decline_diff=1.0)
        assert classify_trend(0.7, [0.5] * 7, t) == "improving"

    def test_pure_and_deterministic(self):
        history = [0.71, 0.72, 0.70, 0.74, 0.73, 0.73]
        first = classify_trend(0.69, history)
        assert all(classify_trend(0.69, list(history)) == first for _ in range(5))
        assert history == [0.71, 0.72, 0.70, 0.74, 0.73, 0.73]
