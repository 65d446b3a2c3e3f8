from fastapi import APIRouter, Depends

from opus_api.config import STYLE_TRACKS_LIMIT
from opus_api.core import normalize_style_id, store_errors
from opus_api.data import StyleStore

from ..deps import get_store
from .schemas import DataResponse

router = APIRouter()


@router.get("/styles/{style_id}/tracks", response_model=DataResponse)
def list_style_tracks(style_id: str, store: StyleStore = Depends(get_store)) -> DataResponse:
    """
    Tracks of a style with their library metadata.

    Each row is {library_song_id, sim_duration_seconds, song}; `song` is null
    when the library entry is missing. At most STYLE_TRACKS_LIMIT rows.
    """
    style_id = normalize_style_id(style_id)

    with store_errors("Failed to fetch style tracks"):
        rows = store.list_style_tracks(style_id, STYLE_TRACKS_LIMIT)

    data = [
        {
            "library_song_id": r.get("library_song_id"),
            "sim_duration_seconds": r.get("sim_duration_seconds"),
            "song": r.get("song") or None,
        }
        for r in rows or []
    ]
    return DataResponse(data=data)
