from typing import Annotated, Any, Dict, List

from pydantic import BaseModel, Field, StrictInt, StrictStr

NonEmptyStr = Annotated[StrictStr, Field(min_length=1)]


class AssignmentItem(BaseModel):
    library_song_id: NonEmptyStr
    class_code: NonEmptyStr


class PutAssignmentsRequest(BaseModel):
    assignments: List[AssignmentItem] = Field(min_length=1)


class DeleteAssignmentsRequest(BaseModel):
    song_ids: List[NonEmptyStr] = Field(alias="songIds", min_length=1)


class WeightItem(BaseModel):
    class_code: NonEmptyStr
    weight_pct: StrictInt = Field(ge=0, le=100)


class PutWeightsRequest(BaseModel):
    weights: List[WeightItem] = Field(min_length=1)


class DataResponse(BaseModel):
    data: List[Dict[str, Any]]


class UpsertResponse(BaseModel):
    ok: bool = True
    upserted: int


class DeleteResponse(BaseModel):
    ok: bool = True
    deleted: int
