from fastapi import APIRouter, Depends

from opus_api.core import store_errors
from opus_api.data import StyleStore

from ..deps import get_store
from .schemas import DataResponse

router = APIRouter()


@router.get("/styles", response_model=DataResponse)
def list_styles(store: StyleStore = Depends(get_store)) -> DataResponse:
    """All styles as {id, name}, ordered by name."""
    with store_errors("Failed to fetch styles"):
        rows = store.list_styles()
    return DataResponse(data=rows or [])
