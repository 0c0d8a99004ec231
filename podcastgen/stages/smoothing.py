"""
Stage 4: Smoother

Majority filter of width 2r + 1 over the label sequence (r =
smoothing_radius, default 3 → 7 windows):

    smoothed[i] = round_half_up(mean(label[i - r .. i + r]))

Edges:
    - The first r windows are set to lead_in_label (default music)
    - The last r windows are set to lead_out_label (default speech)
    - None keeps the computed label
    - When the sequence has no interior, lead-out overrides lead-in

Note:
    The filter is not idempotent. A second pass can remove short runs the
    first pass produced.
"""

import numpy as np

from podcastgen.config import SegmenterConfig

STAGE_NAME = "smoothing"


def smooth_labels(labels: np.ndarray, config: SegmenterConfig) -> np.ndarray:
    """
    Apply one pass of the majority filter.

    Args:
        labels: Boolean label sequence (not modified)
        config: Pipeline configuration

    Returns:
        New boolean array of the same length
    """
    labels = np.asarray(labels, dtype=bool)
    n = len(labels)
    r = config.smoothing_radius
    width = 2 * r + 1
    smoothed = labels.copy()

    if n >= width:
        # Integer window counts keep the half-up tie-break exact
        counts = np.convolve(labels.astype(np.int64), np.ones(width, dtype=np.int64), mode="valid")
        smoothed[r:n - r] = 2 * counts >= width

    if r > 0:
        if config.lead_in_label is not None:
            smoothed[:r] = config.lead_in_label
        if config.lead_out_label is not None:
            smoothed[max(n - r, 0):] = config.lead_out_label

    return smoothed
