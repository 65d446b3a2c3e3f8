from fastapi import APIRouter, Depends

from opus_api.core import log_success, normalize_style_id, store_errors
from opus_api.data import StyleStore
from opus_api.playback import validate_assignment_batch

from ..deps import get_store
from .schemas import (
    DataResponse,
    DeleteAssignmentsRequest,
    DeleteResponse,
    PutAssignmentsRequest,
    UpsertResponse,
)

router = APIRouter()


@router.get("/styles/{style_id}/assignments", response_model=DataResponse)
def list_assignments(style_id: str, store: StyleStore = Depends(get_store)) -> DataResponse:
    style_id = normalize_style_id(style_id)
    with store_errors("Failed to fetch assignments"):
        rows = store.list_assignments(style_id)
    return DataResponse(data=rows or [])


@router.put("/styles/{style_id}/assignments", response_model=UpsertResponse)
def put_assignments(
    style_id: str,
    body: PutAssignmentsRequest,
    store: StyleStore = Depends(get_store),
) -> UpsertResponse:
    """
    Bulk upsert of class assignments.

    Every class_code is validated before anything is written; one invalid
    code rejects the whole batch with a 400.
    """
    style_id = normalize_style_id(style_id)
    rows = validate_assignment_batch(style_id, body.assignments)

    with store_errors("Failed to upsert assignments"):
        store.upsert_assignments(rows)

    log_success(f"Upserted {len(rows)} assignments for style {style_id!r}.")
    return UpsertResponse(upserted=len(rows))


@router.delete("/styles/{style_id}/assignments", response_model=DeleteResponse)
def delete_assignments(
    style_id: str,
    body: DeleteAssignmentsRequest,
    store: StyleStore = Depends(get_store),
) -> DeleteResponse:
    """Remove assignments; the tracks fall back to UNCATEGORIZED."""
    style_id = normalize_style_id(style_id)

    with store_errors("Failed to delete assignments"):
        deleted = store.delete_assignments(style_id, body.song_ids)

    log_success(f"Deleted {len(deleted)} assignments for style {style_id!r}.")
    return DeleteResponse(deleted=len(deleted))
