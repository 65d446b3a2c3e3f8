"""Public façade for the opus_api.playback package.

Pure aggregation of a style's classification data into a playback profile,
and the validation applied to assignment and weight batches before they are
written.
"""

from .profile import (
    POOL_NAMES,
    UNCATEGORIZED,
    PlaybackMode,
    PlaybackProfile,
    Pool,
    build_playback_profile,
    format_timestamp,
    load_playback_profile,
    parse_timestamp,
)
from .validation import validate_assignment_batch, validate_weight_batch

__all__ = [
    "POOL_NAMES",
    "UNCATEGORIZED",
    "PlaybackMode",
    "PlaybackProfile",
    "Pool",
    "build_playback_profile",
    "format_timestamp",
    "load_playback_profile",
    "parse_timestamp",
    "validate_assignment_batch",
    "validate_weight_batch",
]
