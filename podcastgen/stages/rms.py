"""
Stage 1: RMS Extractor

Responsibilities:
    - Read the sample stream in fixed windows of `rms_window_ms`
    - Emit one energy value per window

Energy formula (legacy scaling, kept for downstream compatibility):
    energy = sqrt(sum(sample ** 2) / rms_window_ms)

    The divisor is the window duration in milliseconds, not the sample
    count, so the value is proportional to, but not equal to, a true RMS.

Invariants:
    - Exactly N_rms = frames // frames_per_rms_window values
    - A short final read uses the samples actually read
    - An empty read yields energy 0
    - Linear in amplitude
"""

import logging

import numpy as np

from podcastgen.audio import SampleSource, frames_per_window
from podcastgen.config import SegmenterConfig
from podcastgen.stages.base import ConfigurationError

logger = logging.getLogger(__name__)

STAGE_NAME = "rms"


def rms_window_frames(sample_rate: int, config: SegmenterConfig) -> int:
    """
    Samples per RMS window for `sample_rate`.

    Raises:
        ConfigurationError: If the window holds no samples at this rate
    """
    window = frames_per_window(sample_rate, config.rms_window_ms)
    if window < 1:
        raise ConfigurationError(
            "Sample rate too low for the RMS window",
            detail={"sample_rate": sample_rate, "rms_window_ms": config.rms_window_ms},
        )
    return window


def compute_rms(source: SampleSource, config: SegmenterConfig) -> np.ndarray:
    """
    Compute one energy value per RMS window.

    Args:
        source: Sample stream positioned at its start
        config: Pipeline configuration

    Returns:
        float64 array of length N_rms
    """
    window = rms_window_frames(source.samplerate, config)
    n_rms = source.frames // window
    rms = np.zeros(n_rms, dtype=np.float64)

    for i in range(n_rms):
        frame = np.asarray(source.read(window), dtype=np.float64)
        if frame.size == 0:
            # Stream ended early; remaining energies stay 0
            logger.debug("Source exhausted at RMS frame %d of %d", i, n_rms)
            break
        rms[i] = np.sqrt(np.sum(frame ** 2) / config.rms_window_ms)

    logger.debug("Computed %d RMS frames (%d samples each)", n_rms, window)
    return rms
