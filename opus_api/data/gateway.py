from abc import ABC, abstractmethod
from typing import Any, Dict, List, Sequence

from opus_api.core import ClassAssignment, ClassWeight

Row = Dict[str, Any]


class StyleStore(ABC):
    """
    Query interface over the style tables.

    Reads return plain JSON-like rows exactly as the store produced them;
    callers normalize. Every failure is raised as StoreError.
    """

    @abstractmethod
    def list_styles(self) -> List[Row]:
        """All styles as {id, name}, ordered by name."""

    @abstractmethod
    def list_style_tracks(self, style_id: str, limit: int) -> List[Row]:
        """
        Membership rows {library_song_id, sim_duration_seconds, song} for a
        style, at most `limit` rows. `song` is the embedded library song or None.
        """

    @abstractmethod
    def list_style_track_ids(self, style_id: str, limit: int) -> List[Row]:
        """Membership rows {library_song_id}, at most `limit`, in store order."""

    @abstractmethod
    def list_assignments(self, style_id: str) -> List[Row]:
        """Assignment rows {library_song_id, class_code, moved_at}."""

    @abstractmethod
    def upsert_assignments(self, rows: Sequence[ClassAssignment]) -> None:
        """Insert or overwrite on (style_id, library_song_id); stamps moved_at."""

    @abstractmethod
    def delete_assignments(self, style_id: str, song_ids: Sequence[str]) -> List[str]:
        """Delete assignments for the given songs; return the deleted ids."""

    @abstractmethod
    def list_weights(self, style_id: str) -> List[Row]:
        """Weight rows {class_code, weight_pct}, ordered by class_code."""

    @abstractmethod
    def upsert_weights(self, rows: Sequence[ClassWeight]) -> None:
        """Insert or overwrite on (style_id, class_code)."""
