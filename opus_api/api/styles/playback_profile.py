from typing import Any, Dict

from fastapi import APIRouter, Depends, Query, Response

from opus_api.core import normalize_style_id, parse_bool_param
from opus_api.data import StyleStore
from opus_api.playback import load_playback_profile

from ..deps import get_store

router = APIRouter()

TRUNCATED_HEADER = "X-Membership-Truncated"


@router.get("/styles/{style_id}/playback-profile")
def get_playback_profile(
    style_id: str,
    response: Response,
    include_track_ids: str | None = Query(default=None),
    store: StyleStore = Depends(get_store),
) -> Dict[str, Any]:
    """
    Playback profile of a style:

      {
        "data": {
          "style_id": "...",
          "mode": "CLASS_WEIGHTED" | "LEGACY",
          "updated_at": "2025-01-01T12:00:00.000Z" | null,
          "weights": {"A": 50, "B": 30, "C": 20},
          "pools": {"A": {"count": 3, "track_ids": [...]}, ..., "REST": {...}}
        }
      }

    `track_ids` is only present with include_track_ids=true (or 1/yes/y).
    """
    style_id = normalize_style_id(style_id)
    profile = load_playback_profile(
        store,
        style_id,
        include_track_ids=parse_bool_param(include_track_ids),
    )
    if profile.membership_truncated:
        response.headers[TRUNCATED_HEADER] = "true"
    return {"data": profile.to_dict()}
