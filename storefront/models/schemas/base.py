# models/schemas/base.py
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from datetime import datetime


class CamelModel(BaseModel):
    """Wire models use camelCase keys and accept either spelling on input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class TimestampModel(CamelModel):
    created_at: datetime
    updated_at: datetime
