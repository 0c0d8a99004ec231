"""
podcastgen Test Configuration

Provides deterministic synthetic signals and WAV fixtures.

Signals:
    - music: steady sine tone, every RMS frame near the block mean
    - speech: tone gated on/off every 200 ms, half the RMS frames silent
"""

from pathlib import Path

import numpy as np
import pytest
import soundfile as sf

from podcastgen.audio import ArraySource


SAMPLE_RATE = 8000
GATE_SEC = 0.2


def music_signal(duration_sec: float, amplitude: float = 0.5) -> np.ndarray:
    """Steady 440 Hz tone."""
    t = np.arange(int(SAMPLE_RATE * duration_sec)) / SAMPLE_RATE
    return (amplitude * np.sin(2 * np.pi * 440 * t)).astype(np.float32)


def speech_signal(duration_sec: float, amplitude: float = 0.5) -> np.ndarray:
    """300 Hz tone switched on and off every GATE_SEC."""
    n = int(SAMPLE_RATE * duration_sec)
    t = np.arange(n) / SAMPLE_RATE
    gate = (np.arange(n) // int(SAMPLE_RATE * GATE_SEC)) % 2 == 0
    return (amplitude * np.sin(2 * np.pi * 300 * t) * gate).astype(np.float32)


def labels_from(pattern: str) -> np.ndarray:
    """Build a label array from a string of 'T'/'F' characters."""
    return np.array([c == "T" for c in pattern], dtype=bool)


@pytest.fixture
def music_then_speech() -> np.ndarray:
    """40 s of music followed by 40 s of speech."""
    return np.concatenate([music_signal(40.0), speech_signal(40.0)])


@pytest.fixture
def music_then_speech_source(music_then_speech) -> ArraySource:
    return ArraySource(music_then_speech, SAMPLE_RATE)


@pytest.fixture
def music_then_speech_wav(tmp_path, music_then_speech) -> Path:
    """Write the music/speech signal as a 16-bit WAV and return its path."""
    path = tmp_path / "episode.wav"
    sf.write(str(path), music_then_speech, SAMPLE_RATE, subtype="PCM_16")
    return path
