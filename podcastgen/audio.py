"""
podcastgen Audio Sources

Input boundary of the pipeline: handles that yield successive batches of
decoded mono float samples plus the metadata needed to size the windows.

Library Stack:
    - soundfile: decoded reads from audio files (libsndfile-backed)
    - numpy: Array operations

INVARIANTS:
    - Sources never modify the caller's samples
    - read() returns at most the requested number of frames
    - An exhausted source returns an empty array
    - Multi-channel input is downmixed by arithmetic mean
"""

from pathlib import Path
from typing import Protocol

import numpy as np
import soundfile as sf


# =============================================================================
# Source Protocol
# =============================================================================


class SampleSource(Protocol):
    """
    Pull-model handle over a decoded mono sample stream.

    Attributes:
        samplerate: Frames per second
        frames: Total number of frames in the stream
    """

    samplerate: int
    frames: int

    def read(self, frames: int) -> np.ndarray:
        """Return up to `frames` float32 samples, advancing the position."""
        ...


def downmix(samples: np.ndarray) -> np.ndarray:
    """
    Downmix to mono float32.

    Note:
        - Stereo → mono by arithmetic mean
        - No amplitude normalization / AGC
    """
    if samples.ndim > 1:
        samples = np.mean(samples, axis=1)
    return samples.astype(np.float32, copy=False)


def frames_per_window(sample_rate: int, window_ms: int) -> int:
    """Number of sample frames covered by a window of `window_ms`."""
    return int(sample_rate * window_ms / 1000)


# =============================================================================
# Adapters
# =============================================================================


class ArraySource:
    """
    SampleSource over an in-memory array.

    Args:
        samples: Decoded samples (1D, or 2D frames x channels)
        samplerate: Sample rate of `samples`
    """

    def __init__(self, samples: np.ndarray, samplerate: int):
        self._samples = downmix(np.asarray(samples))
        self._position = 0
        self.samplerate = int(samplerate)
        self.frames = len(self._samples)

    def read(self, frames: int) -> np.ndarray:
        start = self._position
        end = min(start + frames, self.frames)
        self._position = end
        return self._samples[start:end]


class SoundFileSource:
    """
    SampleSource reading blocks from an audio file through soundfile.

    Usable as a context manager; the underlying file is closed on exit.

    Example:
        with SoundFileSource("episode.wav") as source:
            result = run_pipeline(source)
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._file = sf.SoundFile(str(self.path), mode="r")
        self.samplerate = self._file.samplerate
        self.frames = self._file.frames
        self.channels = self._file.channels

    def read(self, frames: int) -> np.ndarray:
        block = self._file.read(frames, dtype="float32", always_2d=False)
        return downmix(block)

    def close(self) -> None:
        self._file.close()

    def __enter__(self) -> "SoundFileSource":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
