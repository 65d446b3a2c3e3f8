import threading
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from opus_api.core import (
    ClassAssignment,
    ClassWeight,
    Style,
    StyleTrack,
    StoreError,
    log_warning,
    read_json,
)

from .gateway import Row, StyleStore


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryStyleStore(StyleStore):
    """
    Process-local StyleStore with the same semantics as the database:

    - assignments are unique on (style_id, library_song_id), weights on
      (style_id, class_code); upserts overwrite
    - moved_at is stamped when an assignment is created or its class changes,
      so re-submitting an identical batch leaves the state untouched

    Used by the test suite and by `opus-api serve --memory`.
    """

    def __init__(self, clock: Callable[[], datetime] = _utc_now):
        self._clock = clock
        self._lock = threading.Lock()
        self._styles: Dict[str, Style] = {}
        self._tracks: Dict[str, List[StyleTrack]] = {}
        self._assignments: Dict[Tuple[str, str], ClassAssignment] = {}
        self._weights: Dict[Tuple[str, str], ClassWeight] = {}

    # ---------- Seeding ----------

    def add_style(self, style_id: str, name: str) -> None:
        with self._lock:
            self._styles[style_id] = Style(id=style_id, name=name)

    def add_track(
        self,
        style_id: str,
        library_song_id: str,
        sim_duration_seconds: Optional[float] = None,
        song: Optional[Dict[str, Any]] = None,
    ) -> None:
        with self._lock:
            self._tracks.setdefault(style_id, []).append(
                StyleTrack(
                    library_song_id=library_song_id,
                    sim_duration_seconds=sim_duration_seconds,
                    song=song,
                )
            )

    @classmethod
    def from_json(cls, path: str | Path) -> "InMemoryStyleStore":
        """
        Build a store from a JSON fixture:

          {
            "styles": [{"id": "s1", "name": "Chill"}],
            "tracks": [{"style_id": "s1", "library_song_id": "t1", ...}],
            "assignments": [{"style_id": "s1", "library_song_id": "t1", "class_code": "A"}],
            "weights": [{"style_id": "s1", "class_code": "A", "weight_pct": 100}]
          }

        A missing file yields an empty store; a corrupted one raises StoreError.
        """

        def _on_error(e: Exception) -> None:
            raise StoreError(f"Seed file {path} is not valid JSON: {e}") from e

        data = read_json(path, default=None, on_error=_on_error)
        store = cls()
        if data is None:
            log_warning(f"Seed file {path} not found; starting with an empty store.")
            return store
        if not isinstance(data, dict):
            raise StoreError(f"Seed file {path} must contain a JSON object.")

        for s in data.get("styles") or []:
            store.add_style(str(s["id"]), str(s.get("name") or ""))
        for t in data.get("tracks") or []:
            store.add_track(
                str(t["style_id"]),
                str(t["library_song_id"]),
                t.get("sim_duration_seconds"),
                t.get("song"),
            )
        store.upsert_assignments(
            [ClassAssignment(**a) for a in data.get("assignments") or []]
        )
        store.upsert_weights([ClassWeight(**w) for w in data.get("weights") or []])
        return store

    # ---------- StyleStore ----------

    def list_styles(self) -> List[Row]:
        with self._lock:
            styles = sorted(self._styles.values(), key=lambda s: s.name)
            return [asdict(s) for s in styles]

    def list_style_tracks(self, style_id: str, limit: int) -> List[Row]:
        with self._lock:
            return [asdict(t) for t in self._tracks.get(style_id, [])[:limit]]

    def list_style_track_ids(self, style_id: str, limit: int) -> List[Row]:
        with self._lock:
            return [
                {"library_song_id": t.library_song_id}
                for t in self._tracks.get(style_id, [])[:limit]
            ]

    def list_assignments(self, style_id: str) -> List[Row]:
        with self._lock:
            return [
                a.model_dump(include={"library_song_id", "class_code", "moved_at"})
                for (sid, _), a in self._assignments.items()
                if sid == style_id
            ]

    def upsert_assignments(self, rows: Sequence[ClassAssignment]) -> None:
        now = self._clock().isoformat()
        with self._lock:
            for row in rows:
                key = (row.style_id, row.library_song_id)
                existing = self._assignments.get(key)
                if existing is not None and existing.class_code == row.class_code:
                    continue
                self._assignments[key] = row.model_copy(
                    update={"moved_at": row.moved_at or now}
                )

    def delete_assignments(self, style_id: str, song_ids: Sequence[str]) -> List[str]:
        deleted: List[str] = []
        with self._lock:
            for song_id in dict.fromkeys(song_ids):
                if self._assignments.pop((style_id, song_id), None) is not None:
                    deleted.append(song_id)
        return deleted

    def list_weights(self, style_id: str) -> List[Row]:
        with self._lock:
            rows = [w for (sid, _), w in self._weights.items() if sid == style_id]
            rows.sort(key=lambda w: w.class_code)
            return [w.model_dump(include={"class_code", "weight_pct"}) for w in rows]

    def upsert_weights(self, rows: Sequence[ClassWeight]) -> None:
        with self._lock:
            for row in rows:
                self._weights[(row.style_id, row.class_code)] = row
