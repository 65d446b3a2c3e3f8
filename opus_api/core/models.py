from dataclasses import dataclass
from typing import Any, Dict, Optional

from pydantic import BaseModel


@dataclass
class Style:
    id: str
    name: str


@dataclass
class StyleTrack:
    """
    Membership of a library song in a style's pool.

    - song : embedded library song metadata (id, artist, title, album,
             peak_year, run_time_seconds, styles), None when missing
    """

    library_song_id: str
    sim_duration_seconds: Optional[float] = None
    song: Optional[Dict[str, Any]] = None


class ClassAssignment(BaseModel):
    """One row of sim_style_song_classes, keyed by (style_id, library_song_id)."""

    style_id: str
    library_song_id: str
    class_code: str
    moved_at: Optional[str] = None


class ClassWeight(BaseModel):
    """One row of sim_style_class_weights, keyed by (style_id, class_code)."""

    style_id: str
    class_code: str
    weight_pct: int
