"""
Stage 3: Classifier

label[i] = mler[i] <= music_threshold   (True = music)

With the default threshold 0.0 only long frames where no sub-frame dipped
below the scaled mean are music.
"""

import numpy as np

from podcastgen.config import SegmenterConfig

STAGE_NAME = "classify"


def classify(mler: np.ndarray, config: SegmenterConfig) -> np.ndarray:
    """Label each long frame as music (True) or speech (False)."""
    return np.asarray(mler) <= config.music_threshold
