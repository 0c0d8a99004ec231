"""
podcastgen Pipeline Orchestrator

PIPELINE STAGES (FIXED ORDER):

    1. RMS Extractor        → podcastgen.stages.rms
    2. Feature Aggregator   → podcastgen.stages.features
    3. Classifier           → podcastgen.stages.classify
    4. Smoother             → podcastgen.stages.smoothing
    5. Segment Merger       → podcastgen.stages.merge

INVARIANTS:
    - Stages execute in order 1 → 5, each consuming the full output of
      the previous one
    - Stages never call each other (only the orchestrator sequences)
    - Pipeline stops on the first failure; no partial result is returned
    - Same input + same configuration = identical output
"""

import logging
from dataclasses import dataclass
from pathlib import Path

import numpy as np

from podcastgen.audio import SampleSource, SoundFileSource
from podcastgen.config import SegmenterConfig
from podcastgen.stages import classify, features, merge, rms, smoothing
from podcastgen.stages.base import InsufficientDataError, SegmenterError
from podcastgen.stages.features import LongFrameFeatures
from podcastgen.stages.merge import Segment

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SegmentationResult:
    """
    Output of a pipeline run.

    Attributes:
        segments: Final segments after boundary growth
        merged: Merged segments before growth (tile [0, N_long))
        runs: Phase 1 runs of the smoothed labels
        labels: Smoothed labels
        raw_labels: Classifier labels before smoothing
        features: Long-frame statistics
        rms: RMS frame sequence
        sample_rate: Sample rate of the source
    """

    segments: list[Segment]
    merged: list[Segment]
    runs: list[Segment]
    labels: np.ndarray
    raw_labels: np.ndarray
    features: LongFrameFeatures
    rms: np.ndarray
    sample_rate: int

    @property
    def long_frame_count(self) -> int:
        return len(self.labels)

    def to_dict(self) -> dict:
        """Plain mapping of the final segments."""
        return {
            "long_frame_count": self.long_frame_count,
            "segments": [seg.to_dict() for seg in self.segments],
        }


def _check_length(source: SampleSource, config: SegmenterConfig) -> None:
    """Fail before reading when the source cannot fill one long frame."""
    window = rms.rms_window_frames(source.samplerate, config)
    if source.frames // window < config.rms_frames_per_long_frame:
        raise InsufficientDataError(
            "Input is shorter than one aggregation window",
            stage=rms.STAGE_NAME,
            detail={
                "frames": source.frames,
                "sample_rate": source.samplerate,
                "aggregation_window_ms": config.aggregation_window_ms,
            },
        )


def run_pipeline(
    source: SampleSource,
    config: SegmenterConfig | None = None,
) -> SegmentationResult:
    """
    Execute all stages 1 → 5 in order.

    Args:
        source: Decoded mono sample stream
        config: Pipeline configuration (defaults if omitted)

    Returns:
        SegmentationResult with final segments and all intermediates.

    Raises:
        ConfigurationError: If the config does not fit the source
        InsufficientDataError: If the source is shorter than one long frame
    """
    config = SegmenterConfig() if config is None else config
    logger.info(
        "Segmenting %d frames at %d Hz", source.frames, source.samplerate
    )

    try:
        _check_length(source, config)
        rms_values = rms.compute_rms(source, config)
        long_features = features.compute_features(rms_values, config)
        raw_labels = classify.classify(long_features.mler, config)
        labels = smoothing.smooth_labels(raw_labels, config)
        runs = merge.detect_runs(labels)
        merged = merge.merge_runs(runs, config)
        segments = merge.grow_boundaries(merged, len(labels), config)
    except SegmenterError as e:
        logger.error("Pipeline failed in stage '%s': %s", e.stage, e)
        raise

    logger.info(
        "Found %d segment(s) in %d long frame(s)", len(segments), len(labels)
    )
    return SegmentationResult(
        segments=segments,
        merged=merged,
        runs=runs,
        labels=labels,
        raw_labels=raw_labels,
        features=long_features,
        rms=rms_values,
        sample_rate=source.samplerate,
    )


def segment_file(
    path: str | Path,
    config: SegmenterConfig | None = None,
) -> SegmentationResult:
    """Run the pipeline over an audio file readable by soundfile."""
    with SoundFileSource(path) as source:
        return run_pipeline(source, config)
