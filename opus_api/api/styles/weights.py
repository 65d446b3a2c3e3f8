from fastapi import APIRouter, Depends

from opus_api.core import log_success, normalize_style_id, store_errors
from opus_api.data import StyleStore
from opus_api.playback import validate_weight_batch

from ..deps import get_store
from .schemas import DataResponse, PutWeightsRequest, UpsertResponse

router = APIRouter()


@router.get("/styles/{style_id}/weights", response_model=DataResponse)
def list_weights(style_id: str, store: StyleStore = Depends(get_store)) -> DataResponse:
    style_id = normalize_style_id(style_id)
    with store_errors("Failed to fetch weights"):
        rows = store.list_weights(style_id)
    return DataResponse(data=rows or [])


@router.put("/styles/{style_id}/weights", response_model=UpsertResponse)
def put_weights(
    style_id: str,
    body: PutWeightsRequest,
    store: StyleStore = Depends(get_store),
) -> UpsertResponse:
    """
    Upsert the class weight distribution (A/B/C).

    The submitted weights must sum to exactly 100; otherwise nothing is written.
    """
    style_id = normalize_style_id(style_id)
    rows = validate_weight_batch(style_id, body.weights)

    with store_errors("Failed to upsert weights"):
        store.upsert_weights(rows)

    log_success(f"Upserted {len(rows)} class weights for style {style_id!r}.")
    return UpsertResponse(upserted=len(rows))
