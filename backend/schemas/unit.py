from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

class UnitBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=50)

class UnitCreate(UnitBase):
    pass

class UnitUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=50)

class Unit(UnitBase):
    id: int
    disabled: bool
    created_at: datetime

    class Config:
        from_attributes = True
