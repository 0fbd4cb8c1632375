# boxoffice/models/hall.py
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Literal, Optional


class HallBase(BaseModel):
    name: str
    capacity: int = Field(gt=0)
    type: Literal["vip", "standard"]

    @field_validator("name")
    def validate_name(cls, v):
        if not v.strip():
            raise ValueError("name must not be blank")
        return v.strip()


class HallCreate(HallBase):
    # Optional readable key ("hallA"); standard seat IDs are derived from it.
    hall_id: Optional[str] = Field(default=None, pattern=r"^[A-Za-z0-9_]+$", max_length=32)


class HallUpdate(HallBase):
    pass


class Hall(HallBase):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")
