"""
podcastgen SegmenterConfig - Pipeline configuration.

Responsibilities:
- Hold every tunable parameter of a pipeline run
- Validate parameters before the pipeline runs
- Serialization and environment loading

Invariants:
- Immutable (frozen dataclass)
- A constructed config is always valid
"""

import logging
import numbers
import os
from dataclasses import asdict, dataclass, fields
from typing import Any, Mapping

from podcastgen.stages.base import ConfigurationError

logger = logging.getLogger(__name__)


ENV_PREFIX = "PODCASTGEN_"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}
_OPTIONAL_LABELS = {"lead_in_label", "lead_out_label"}
_INTEGER_FIELDS = (
    "rms_window_ms",
    "aggregation_window_ms",
    "min_segment_long_frames",
    "grow_before_long_frames",
    "grow_after_long_frames",
    "smoothing_radius",
)


@dataclass(frozen=True)
class SegmenterConfig:
    """
    Parameters of a segmentation run.

    Attributes:
        rms_window_ms: Duration of one RMS frame
        aggregation_window_ms: Duration of one long frame
        low_energy_coefficient: Scales the block mean into the MLER threshold
        music_threshold: Long frames with MLER <= this are music
        min_segment_long_frames: Runs shorter than this are absorbed
        grow_before_long_frames: Margin applied to segment starts
        grow_after_long_frames: Margin applied to segment ends
        has_intro: Recording opens with a non-speech lead-in
        smoothing_radius: Half-width of the majority filter
        lead_in_label: Forced label of the first `smoothing_radius` windows
            (None keeps the computed label)
        lead_out_label: Forced label of the last `smoothing_radius` windows
            (None keeps the computed label)
        legacy_variance: Reproduce the sum-based variance formula
    """

    rms_window_ms: int = 20
    aggregation_window_ms: int = 1000
    low_energy_coefficient: float = 0.20
    music_threshold: float = 0.0
    min_segment_long_frames: int = 10
    grow_before_long_frames: int = 3
    grow_after_long_frames: int = 3
    has_intro: bool = False
    smoothing_radius: int = 3
    lead_in_label: bool | None = True
    lead_out_label: bool | None = False
    legacy_variance: bool = False

    def __post_init__(self) -> None:
        self.validate()

    @property
    def rms_frames_per_long_frame(self) -> int:
        """Number of RMS frames aggregated into one long frame."""
        return self.aggregation_window_ms // self.rms_window_ms

    def validate(self) -> None:
        """
        Check parameter ranges.

        Raises:
            ConfigurationError: On the first rejected parameter
        """
        for name in _INTEGER_FIELDS:
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, numbers.Integral):
                raise ConfigurationError(
                    f"{name} must be an integer",
                    detail={name: value},
                )
        if self.rms_window_ms <= 0:
            raise ConfigurationError(
                "rms_window_ms must be positive",
                detail={"rms_window_ms": self.rms_window_ms},
            )
        if self.aggregation_window_ms <= 0:
            raise ConfigurationError(
                "aggregation_window_ms must be positive",
                detail={"aggregation_window_ms": self.aggregation_window_ms},
            )
        if self.aggregation_window_ms < self.rms_window_ms:
            raise ConfigurationError(
                "aggregation_window_ms must be at least rms_window_ms",
                detail={
                    "rms_window_ms": self.rms_window_ms,
                    "aggregation_window_ms": self.aggregation_window_ms,
                },
            )
        if self.low_energy_coefficient < 0:
            raise ConfigurationError(
                "low_energy_coefficient must not be negative",
                detail={"low_energy_coefficient": self.low_energy_coefficient},
            )
        if self.min_segment_long_frames < 1:
            raise ConfigurationError(
                "min_segment_long_frames must be at least 1",
                detail={"min_segment_long_frames": self.min_segment_long_frames},
            )
        if self.grow_before_long_frames <= 0 or self.grow_after_long_frames <= 0:
            raise ConfigurationError(
                "growth margins must be positive",
                detail={
                    "grow_before_long_frames": self.grow_before_long_frames,
                    "grow_after_long_frames": self.grow_after_long_frames,
                },
            )
        # A contracted music segment must keep at least one long frame
        if self.grow_before_long_frames + self.grow_after_long_frames >= self.min_segment_long_frames:
            raise ConfigurationError(
                "growth margins must be shorter than min_segment_long_frames",
                detail={
                    "grow_before_long_frames": self.grow_before_long_frames,
                    "grow_after_long_frames": self.grow_after_long_frames,
                    "min_segment_long_frames": self.min_segment_long_frames,
                },
            )
        if self.smoothing_radius < 0:
            raise ConfigurationError(
                "smoothing_radius must not be negative",
                detail={"smoothing_radius": self.smoothing_radius},
            )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SegmenterConfig":
        """
        Deserialize from dictionary.

        Raises:
            ConfigurationError: If `data` holds keys that are not fields
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(
                f"Unknown configuration keys: {unknown}",
                detail={"unknown": unknown},
            )
        return cls(**dict(data))

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        prefix: str = ENV_PREFIX,
    ) -> "SegmenterConfig":
        """
        Build a config from environment variables.

        Each field is read from `<prefix><FIELD_NAME>` (upper case); missing
        variables keep their defaults.

        Example:
            PODCASTGEN_HAS_INTRO=1 PODCASTGEN_MUSIC_THRESHOLD=0.05
        """
        environ = os.environ if environ is None else environ
        values: dict[str, Any] = {}
        for f in fields(cls):
            key = prefix + f.name.upper()
            if key not in environ:
                continue
            values[f.name] = _parse_field(f.name, f.default, environ[key])
            logger.debug("Config %s=%r from %s", f.name, values[f.name], key)
        return cls(**values)


def _parse_field(name: str, default: Any, raw: str) -> Any:
    """Parse an environment string into the type of the field default."""
    text = raw.strip()
    lowered = text.lower()
    if name in _OPTIONAL_LABELS and lowered == "none":
        return None
    if isinstance(default, bool) or name in _OPTIONAL_LABELS:
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
        raise ConfigurationError(
            f"Invalid boolean for {name}: {raw!r}",
            detail={name: raw},
        )
    try:
        if isinstance(default, int):
            return int(text)
        return float(text)
    except ValueError as e:
        raise ConfigurationError(
            f"Invalid number for {name}: {raw!r}",
            detail={name: raw},
        ) from e
