from datetime import datetime
from typing import Annotated
from pydantic import AfterValidator, BaseModel, ConfigDict, field_validator
from studyflow.utils.dates import as_utc, to_utc


class ORMModel(BaseModel):
    """Output schema read straight from ORM rows, datetimes always in UTC."""

    model_config = ConfigDict(from_attributes=True)

    @field_validator("*")
    @classmethod
    def _utc_datetimes(cls, v):
        if isinstance(v, datetime):
            return as_utc(v)
        return v


# Incoming datetimes are normalised to UTC before they reach the database
UTCDateTime = Annotated[datetime, AfterValidator(to_utc)]
