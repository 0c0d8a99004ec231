"""
podcastgen — Music/Speech Segmentation Pipeline

Splits a mono recording into alternating music and speech segments whose
boundaries leave room for crossfades.

Pipeline Stages (fixed order):
    1. RMS Extractor       — short-window energies
    2. Feature Aggregator  — one-second statistics and MLER
    3. Classifier          — MLER threshold → music/speech label
    4. Smoother            — majority filter over labels
    5. Segment Merger      — runs, merging, boundary growth

Invariants:
    - Segment indices are long-frame (one-second) units
    - Same input + same configuration = identical output
    - No partial results on failure
"""

from podcastgen.config import SegmenterConfig
from podcastgen.pipeline import SegmentationResult, run_pipeline, segment_file
from podcastgen.stages.merge import Segment

__version__ = "1.0.0"

__all__ = [
    "Segment",
    "SegmentationResult",
    "SegmenterConfig",
    "run_pipeline",
    "segment_file",
]
