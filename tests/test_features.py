"""
podcastgen Feature Aggregator Tests

Coverage:
- Block partitioning and trailing frames
- Mean, variance (default and legacy), normalized variance
- MLER including the half-step at the threshold
- Silent block policy (no NaN/Inf)
- InsufficientDataError
"""

import logging

import numpy as np
import pytest

from podcastgen.config import SegmenterConfig
from podcastgen.stages.base import InsufficientDataError
from podcastgen.stages.features import SILENT_MLER, compute_features


@pytest.fixture
def config() -> SegmenterConfig:
    """Five RMS frames per long frame."""
    return SegmenterConfig(aggregation_window_ms=100)


class TestPartitioning:
    """Long frames own contiguous, equal-size RMS blocks."""

    def test_trailing_frames_ignored(self, config):
        rms = np.arange(1, 13, dtype=np.float64)
        features = compute_features(rms, config)
        assert len(features) == 2
        np.testing.assert_allclose(features.mean, [3.0, 8.0])

    def test_insufficient_data(self, config):
        with pytest.raises(InsufficientDataError) as exc_info:
            compute_features(np.ones(4), config)
        assert exc_info.value.stage == "features"
        assert exc_info.value.code == "INPUT_TOO_SHORT"

    def test_empty_input(self, config):
        with pytest.raises(InsufficientDataError):
            compute_features(np.array([]), config)


class TestStatistics:
    """Per-block statistics."""

    def test_mean_and_mler(self, config):
        """One of five frames below 0.2 * mean gives MLER 0.2."""
        features = compute_features(np.array([1.0, 1.0, 1.0, 1.0, 0.0]), config)
        assert features.mean[0] == pytest.approx(0.8)
        assert features.mler[0] == pytest.approx(0.2)

    def test_variance_from_mean(self, config):
        features = compute_features(np.array([1.0, 1.0, 1.0, 1.0, 0.0]), config)
        assert features.variance[0] == pytest.approx(0.16)
        assert features.normalized_variance[0] == pytest.approx(0.2)

    def test_legacy_variance_from_sum(self):
        """Deviation from the block sum (4.0), counted twice: 2 * 52 / 5."""
        config = SegmenterConfig(aggregation_window_ms=100, legacy_variance=True)
        features = compute_features(np.array([1.0, 1.0, 1.0, 1.0, 0.0]), config)
        assert features.variance[0] == pytest.approx(20.8)
        assert features.normalized_variance[0] == pytest.approx(26.0)

    def test_steady_block_has_zero_mler(self, config):
        features = compute_features(np.full(5, 2.0), config)
        assert features.mler[0] == 0.0
        assert features.variance[0] == 0.0

    def test_equal_to_threshold_counts_half(self):
        """With coefficient 1.0 a constant block sits exactly on the threshold."""
        config = SegmenterConfig(aggregation_window_ms=100, low_energy_coefficient=1.0)
        features = compute_features(np.full(5, 2.0), config)
        assert features.mler[0] == pytest.approx(0.5)

    def test_mler_in_unit_interval(self, config):
        rng = np.random.default_rng(7)
        features = compute_features(rng.random(500), config)
        assert np.all(features.mler >= 0.0)
        assert np.all(features.mler <= 1.0)


class TestSilentBlocks:
    """Zero-mean blocks resolve to the silent sentinel."""

    def test_silent_block_sentinel(self, config):
        rms = np.concatenate([np.zeros(5), np.ones(5)])
        features = compute_features(rms, config)
        assert features.silent.tolist() == [True, False]
        assert features.mler[0] == SILENT_MLER
        assert features.normalized_variance[0] == 0.0
        assert np.all(np.isfinite(features.normalized_variance))
        assert np.all(np.isfinite(features.mler))

    def test_silent_block_logged(self, config, caplog):
        with caplog.at_level(logging.WARNING, logger="podcastgen.stages.features"):
            compute_features(np.zeros(10), config)
        assert "2 silent long frame(s)" in caplog.text
