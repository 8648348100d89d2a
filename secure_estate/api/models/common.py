"""Shared API model types."""

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, PlainSerializer

# ISO 8601 with Z suffix (Pydantic v2)
DateTimeWithZ = Annotated[
    datetime,
    PlainSerializer(
        lambda v: v.isoformat().replace("+00:00", "Z") if v else None, return_type=str
    ),
]


class ProblemDetail(BaseModel):
    """RFC 7807 problem details body."""

    type: str
    title: str
    status: int
    detail: str
    instance: str
