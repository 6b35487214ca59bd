"""Path and query parameter types shared by resource routers."""

from __future__ import annotations

from typing import Annotated

from fastapi import Path
from fastapi import Query
from pydantic import Field

from storefront.schemas.ids import MAX_RECORD_ID

RecordId = Annotated[int, Path(ge=1, le=MAX_RECORD_ID)]
OptionalRecordIdQuery = Annotated[int | None, Query(ge=1, le=MAX_RECORD_ID)]
RecordIdItem = Annotated[int, Field(ge=1, le=MAX_RECORD_ID)]
