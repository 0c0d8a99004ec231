"""
Stage 5: Segment Merger

Responsibilities:
    - Phase 1: detect runs of equal labels
    - Phase 2: absorb short runs and same-label runs into merged segments
    - Grow speech / shrink music boundaries for crossfade room

Merge precedence (per run after the first, in order):
    1. Shorter than min_segment_long_frames → extends the previous segment
    2. Same label as the previous segment → extends it
    3. Otherwise → opens a new segment

Invariants:
    - Indices are inclusive long-frame indices, start <= end
    - Pre-growth merged segments tile [0, N_long) with no gaps or overlaps
    - Every merged segment except the first is at least
      min_segment_long_frames long; the first is opened unconditionally
      and may be shorter
    - Grown boundaries are clamped to [0, N_long - 1]
"""

import logging
from dataclasses import dataclass, replace

import numpy as np

from podcastgen.config import SegmenterConfig

logger = logging.getLogger(__name__)

STAGE_NAME = "merge"


@dataclass(frozen=True)
class Segment:
    """A contiguous run of long frames sharing one label."""

    start_index: int
    end_index: int
    is_music: bool

    @property
    def length(self) -> int:
        return self.end_index - self.start_index + 1

    def to_dict(self) -> dict:
        return {
            "start_index": self.start_index,
            "end_index": self.end_index,
            "is_music": self.is_music,
        }


def detect_runs(labels: np.ndarray) -> list[Segment]:
    """
    Phase 1: split the label sequence into runs.

    The first run always starts as music at index 0, whatever the label
    there; later indices extend it while their label is music.
    """
    runs: list[Segment] = []
    for i, label in enumerate(np.asarray(labels, dtype=bool)):
        if i == 0:
            runs.append(Segment(0, 0, True))
        elif bool(label) == runs[-1].is_music:
            runs[-1] = replace(runs[-1], end_index=i)
        else:
            runs.append(Segment(i, i, bool(label)))
    return runs


def merge_runs(runs: list[Segment], config: SegmenterConfig) -> list[Segment]:
    """Phase 2: merge short and same-label runs into their predecessor."""
    merged: list[Segment] = []
    for run in runs:
        if not merged:
            is_music = False if config.has_intro else run.is_music
            merged.append(replace(run, is_music=is_music))
        elif run.length < config.min_segment_long_frames:
            merged[-1] = replace(merged[-1], end_index=run.end_index)
        elif run.is_music == merged[-1].is_music:
            merged[-1] = replace(merged[-1], end_index=run.end_index)
        else:
            merged.append(run)
    return merged


def grow_boundaries(
    segments: list[Segment],
    n_long: int,
    config: SegmenterConfig,
) -> list[Segment]:
    """
    Expand speech and contract music segments by the growth margins.

    The first segment keeps its start; only its end moves, outward when
    the recording has an intro and inward otherwise.
    """
    before = config.grow_before_long_frames
    after = config.grow_after_long_frames
    last = n_long - 1

    grown: list[Segment] = []
    for i, seg in enumerate(segments):
        if i == 0:
            start = seg.start_index
            end = seg.end_index + after if config.has_intro else seg.end_index - after
        elif seg.is_music:
            start = seg.start_index + before
            end = seg.end_index - after
        else:
            start = seg.start_index - before
            end = seg.end_index + after
        start = min(max(start, 0), last)
        end = min(max(end, start), last)
        grown.append(replace(seg, start_index=start, end_index=end))
    return grown


def merge_segments(labels: np.ndarray, config: SegmenterConfig) -> list[Segment]:
    """
    Run both phases and boundary growth.

    Returns:
        Final segment list; its length is the merged segment count.
    """
    runs = detect_runs(labels)
    merged = merge_runs(runs, config)
    logger.debug("Merged %d run(s) into %d segment(s)", len(runs), len(merged))
    return grow_boundaries(merged, len(labels), config)
