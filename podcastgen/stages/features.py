"""
Stage 2: Feature Aggregator

Responsibilities:
    - Partition the RMS sequence into one-second blocks
    - Compute per block: mean, variance, normalized variance, MLER

MLER (Modified Low Energy Ratio):
    low_threshold = low_energy_coefficient * mean
    mler = sum(sign(low_threshold - v) + 1) / (2 * block_size)

    Sub-frames exactly at the threshold count as half a step.

Variance:
    Default: squared deviation from the block mean.
    legacy_variance: squared deviation from the block's raw energy sum,
    accumulated twice per value, divided by block size.

Silent blocks (mean == 0):
    Flagged in `silent`, MLER set to SILENT_MLER (speech-like) and
    normalized variance set to 0.0. No NaN or Inf is produced.
"""

import logging
from dataclasses import dataclass

import numpy as np

from podcastgen.config import SegmenterConfig
from podcastgen.stages.base import InsufficientDataError

logger = logging.getLogger(__name__)

STAGE_NAME = "features"

SILENT_MLER = 1.0


@dataclass(frozen=True)
class LongFrameFeatures:
    """Per-long-frame statistics, all arrays of length N_long."""

    mean: np.ndarray
    variance: np.ndarray
    normalized_variance: np.ndarray
    mler: np.ndarray
    silent: np.ndarray

    def __len__(self) -> int:
        return len(self.mean)


def compute_features(rms: np.ndarray, config: SegmenterConfig) -> LongFrameFeatures:
    """
    Aggregate RMS frames into long-frame features.

    Args:
        rms: RMS frame sequence
        config: Pipeline configuration

    Returns:
        LongFrameFeatures with N_long = len(rms) // rms_frames_per_long_frame

    Raises:
        InsufficientDataError: If not a single long frame can be filled
    """
    block = config.rms_frames_per_long_frame
    n_long = len(rms) // block
    if n_long == 0:
        raise InsufficientDataError(
            "Input is shorter than one aggregation window",
            stage=STAGE_NAME,
            detail={"rms_frames": len(rms), "rms_frames_per_long_frame": block},
        )

    blocks = np.asarray(rms[: n_long * block], dtype=np.float64).reshape(n_long, block)
    sums = blocks.sum(axis=1)
    mean = sums / block
    silent = mean == 0

    if config.legacy_variance:
        variance = 2.0 * np.sum((blocks - sums[:, None]) ** 2, axis=1) / block
    else:
        variance = np.var(blocks, axis=1)

    low_threshold = config.low_energy_coefficient * mean
    mler = np.sum(np.sign(low_threshold[:, None] - blocks) + 1, axis=1) / (2 * block)

    normalized_variance = np.zeros(n_long, dtype=np.float64)
    np.divide(variance, mean, out=normalized_variance, where=~silent)
    mler[silent] = SILENT_MLER

    if silent.any():
        logger.warning(
            "%d silent long frame(s) assigned MLER %.1f", int(silent.sum()), SILENT_MLER
        )
    for i in range(n_long):
        logger.debug(
            "Seconds: %d mean=%f variance=%f normalized_variance=%f mler=%f",
            i, mean[i], variance[i], normalized_variance[i], mler[i],
        )

    return LongFrameFeatures(
        mean=mean,
        variance=variance,
        normalized_variance=normalized_variance,
        mler=mler,
        silent=silent,
    )
