import math
from datetime import datetime, timezone
from typing import Annotated, Any, Optional

from bson import ObjectId
from pydantic import BaseModel, BeforeValidator, Field, ConfigDict, field_validator


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    """Id for documents embedded inside another record."""
    return str(ObjectId())


def _zero_if_missing(value: Any) -> float:
    if value is None or value == "":
        return 0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    return number if math.isfinite(number) else 0


# Numeric field stored by the forms; absent, blank or unreadable values read as 0
Number = Annotated[float, BeforeValidator(_zero_if_missing)]


class FarmDocument(BaseModel):
    """Top-level record owned by an optional farm scope."""
    id: Optional[str] = Field(default=None, validation_alias="_id")
    farm_id: Optional[str] = None
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    model_config = ConfigDict(
        populate_by_name=True,
        from_attributes=True
    )

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_object_id(cls, value: Any) -> Any:
        if isinstance(value, ObjectId):
            return str(value)
        return value

    def to_document(self) -> dict:
        """Mongo document for this record, without the id."""
        return self.model_dump(exclude={"id"})
