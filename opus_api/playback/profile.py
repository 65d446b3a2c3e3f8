import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from opus_api.config import PROFILE_TRACK_LIMIT
from opus_api.core import (
    CLASS_REST,
    WEIGHTED_CLASSES,
    log_step,
    log_warning,
    normalize_class_code,
    store_errors,
)
from opus_api.data import Row, StyleStore

UNCATEGORIZED = "UNCATEGORIZED"
POOL_NAMES = ("A", "B", "C", UNCATEGORIZED, CLASS_REST)


class PlaybackMode(str, Enum):
    CLASS_WEIGHTED = "CLASS_WEIGHTED"
    LEGACY = "LEGACY"


@dataclass
class Pool:
    count: int = 0
    track_ids: Optional[List[str]] = None

    def add(self, track_id: str) -> None:
        self.count += 1
        if self.track_ids is not None:
            self.track_ids.append(track_id)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"count": self.count}
        if self.track_ids is not None:
            data["track_ids"] = list(self.track_ids)
        return data


@dataclass
class PlaybackProfile:
    """
    Classification snapshot of a style for the playback engine.

    `membership_truncated` is not part of the payload; it tells the HTTP
    layer that the membership fetch hit its row cap.
    """

    style_id: str
    mode: PlaybackMode
    updated_at: Optional[datetime]
    weights: Dict[str, Any]
    pools: Dict[str, Pool]
    membership_truncated: bool = field(default=False, compare=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "style_id": self.style_id,
            "mode": self.mode.value,
            "updated_at": format_timestamp(self.updated_at),
            "weights": dict(self.weights),
            "pools": {name: self.pools[name].to_dict() for name in POOL_NAMES},
        }


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    """UTC ISO 8601 with milliseconds and a Z suffix, e.g. 2025-01-01T12:00:00.000Z."""
    if value is None:
        return None
    value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse a moved_at value into an aware datetime, or None when unparseable.

    Accepts datetimes, ISO 8601 strings and epoch milliseconds. Falsy values
    (None, "", 0) mean "never moved". Naive values are taken as UTC.
    """
    if not value or isinstance(value, bool):
        return None

    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, (int, float)):
        if not math.isfinite(value):
            return None
        try:
            dt = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(value, str):
        try:
            dt = datetime.fromisoformat(value.strip())
        except ValueError:
            return None
    else:
        return None

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def coerce_weight(value: Any) -> int | float:
    """Numeric weight_pct or 0 for anything missing or non-numeric."""
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        num = value
    elif isinstance(value, str):
        try:
            num = float(value.strip())
        except ValueError:
            return 0
    else:
        return 0

    if not math.isfinite(num):
        return 0
    if float(num).is_integer():
        return int(num)
    return num


def build_weights(weight_rows: Iterable[Row]) -> Dict[str, int | float]:
    weights: Dict[str, int | float] = {code: 0 for code in WEIGHTED_CLASSES}
    for row in weight_rows or []:
        code = normalize_class_code(row.get("class_code"))
        if code in WEIGHTED_CLASSES:
            weights[code] = coerce_weight(row.get("weight_pct"))
    return weights


def build_class_map(
    assignment_rows: Iterable[Row],
) -> tuple[Dict[str, str], Optional[datetime]]:
    """
    Map track id -> class code, plus the latest moved_at.

    Rows are applied in order and a later row for the same track replaces the
    earlier one, the same outcome as the store's upsert. Rows without a track
    id or with an invalid code are skipped and do not count towards updated_at.
    """
    class_by_track: Dict[str, str] = {}
    updated_at: Optional[datetime] = None

    for row in assignment_rows or []:
        track_id = row.get("library_song_id")
        if not track_id:
            continue
        code = normalize_class_code(row.get("class_code"))
        if code is None:
            continue

        class_by_track[track_id] = code

        moved_at = parse_timestamp(row.get("moved_at"))
        if moved_at is not None and (updated_at is None or moved_at > updated_at):
            updated_at = moved_at

    return class_by_track, updated_at


def decide_mode(pools: Dict[str, Pool], weights: Dict[str, int | float]) -> PlaybackMode:
    abc_assigned = sum(pools[code].count for code in WEIGHTED_CLASSES)
    abc_weight_sum = sum(weights.get(code) or 0 for code in WEIGHTED_CLASSES)
    if abc_assigned > 0 and abc_weight_sum > 0:
        return PlaybackMode.CLASS_WEIGHTED
    return PlaybackMode.LEGACY


def build_playback_profile(
    style_id: str,
    weight_rows: Iterable[Row],
    track_rows: Iterable[Row],
    assignment_rows: Iterable[Row],
    include_track_ids: bool = False,
) -> PlaybackProfile:
    """
    Combine a style's weights, membership and assignments into pools and a
    playback mode.

    Every member track lands in exactly one pool: A, B, C or REST by its
    assignment, UNCATEGORIZED when it has no valid assignment. The mode is
    CLASS_WEIGHTED only when some track is in A/B/C and the A/B/C weights
    sum to more than zero; otherwise the engine should stay in LEGACY.
    """
    weights = build_weights(weight_rows)
    class_by_track, updated_at = build_class_map(assignment_rows)

    pools = {
        name: Pool(track_ids=[] if include_track_ids else None) for name in POOL_NAMES
    }
    for row in track_rows or []:
        track_id = row.get("library_song_id")
        if not track_id:
            continue
        code = class_by_track.get(track_id)
        pools[code if code in pools else UNCATEGORIZED].add(track_id)

    return PlaybackProfile(
        style_id=style_id,
        mode=decide_mode(pools, weights),
        updated_at=updated_at,
        weights=weights,
        pools=pools,
    )


def load_playback_profile(
    store: StyleStore,
    style_id: str,
    include_track_ids: bool = False,
    track_limit: int = PROFILE_TRACK_LIMIT,
) -> PlaybackProfile:
    """
    Fetch weights, membership and assignments for a style and aggregate them.

    Membership is capped at `track_limit` rows. One extra row is requested so
    a capped result is detected; the profile is then flagged as truncated and
    a warning is logged.
    """
    log_step(f"Building playback profile for style {style_id!r}")

    with store_errors("Failed to fetch weights"):
        weight_rows = store.list_weights(style_id)

    with store_errors("Failed to fetch style tracks"):
        track_rows = store.list_style_track_ids(style_id, track_limit + 1)

    truncated = len(track_rows) > track_limit
    if truncated:
        track_rows = track_rows[:track_limit]
        log_warning(
            f"Style {style_id!r} has more than {track_limit} tracks; "
            "playback profile only covers the first ones."
        )

    with store_errors("Failed to fetch assignments"):
        assignment_rows = store.list_assignments(style_id)

    profile = build_playback_profile(
        style_id,
        weight_rows,
        track_rows,
        assignment_rows,
        include_track_ids=include_track_ids,
    )
    profile.membership_truncated = truncated
    return profile
