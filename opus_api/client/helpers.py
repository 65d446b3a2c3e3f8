import logging
from typing import Any, Callable, Dict, List, Optional, TypeVar

from opus_api.core import CLASS_REST, normalize_class_code

from .api_client import OpusAPIClient

logger = logging.getLogger("opus_api.client")

T = TypeVar("T")


def fetch_style_song_rows(client: OpusAPIClient, style_id: str) -> List[Dict[str, Any]]:
    """
    Tracks of a style in the flat shape UI code works with:

      {"song_id", "sim_duration_seconds",
       "song": {"id", "artist", "title", "album", "year", "run_time_seconds", "styles"} | None}
    """
    rows: List[Dict[str, Any]] = []
    for r in client.get_style_tracks(style_id) or []:
        if not r or not r.get("library_song_id"):
            continue
        song = r.get("song")
        rows.append(
            {
                "song_id": r["library_song_id"],
                "sim_duration_seconds": r.get("sim_duration_seconds"),
                "song": (
                    {
                        "id": song.get("id"),
                        "artist": song.get("artist") or "",
                        "title": song.get("title") or "",
                        "album": song.get("album") or "",
                        "year": song.get("peak_year") or "",
                        "run_time_seconds": song.get("run_time_seconds") or 0,
                        "styles": song.get("styles") or "",
                    }
                    if song
                    else None
                ),
            }
        )
    return rows


def fetch_assignments(client: OpusAPIClient, style_id: str) -> Dict[str, Dict[str, Any]]:
    """Assignments keyed by song id: {song_id: {class_code, moved_at}}."""
    result: Dict[str, Dict[str, Any]] = {}
    for r in client.get_style_assignments(style_id) or []:
        if not r.get("library_song_id"):
            continue
        result[r["library_song_id"]] = {
            "class_code": r.get("class_code"),
            "moved_at": r.get("moved_at"),
        }
    return result


def upsert_assignments(client: OpusAPIClient, rows: List[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Bulk assign tracks from rows of {song_id, style_id, class_code}.

    Rows missing song_id or style_id are dropped. Rows of several styles are
    sent as one request per style and the upserted counts are added up.
    """
    by_style: Dict[str, List[Dict[str, str]]] = {}
    for r in rows or []:
        if not r or not r.get("song_id") or not r.get("style_id"):
            continue
        by_style.setdefault(r["style_id"], []).append(
            {"library_song_id": r["song_id"], "class_code": r.get("class_code")}
        )

    upserted = 0
    for style_id, payload in by_style.items():
        result = client.update_style_assignments(style_id, payload)
        upserted += int(result.get("upserted") or 0)
    return {"ok": True, "upserted": upserted}


def delete_assignments(
    client: OpusAPIClient, style_id: str, song_ids: List[str]
) -> Dict[str, Any]:
    """Unassign songs; they show up as UNCATEGORIZED afterwards."""
    ids = [s for s in song_ids or [] if s]
    if not ids:
        return {"ok": True, "deleted": 0}
    return client.delete_style_assignments(style_id, ids)


def class_display_name(code: Any, labels: Optional[Dict[str, str]] = None) -> str:
    """
    Label for a class code: "Uncategorized", "Rest", "A", or "A — Warm-up"
    when `labels` has an entry for the code.
    """
    normalized = normalize_class_code(code)
    if normalized is None:
        return "Uncategorized"
    base = "Rest" if normalized == CLASS_REST else normalized
    label = (labels or {}).get(normalized)
    return f"{base} — {label}" if label else base


def safe_execute(fn: Callable[[], T], error_message: str) -> Optional[T]:
    """
    Best-effort call for UI-style code paths: log the failure and return None
    instead of raising.
    """
    try:
        return fn()
    except Exception as e:  # noqa: BLE001
        logger.error("❌ %s: %s", error_message, e)
        return None
