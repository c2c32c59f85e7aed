from pydantic import BaseModel, Field, field_validator
from uuid import UUID
from datetime import datetime

class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)

    @field_validator('name')
    @classmethod
    def strip_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('El nombre de la categoría es obligatorio')
        return v

class CategoryUpdate(CategoryCreate):
    pass

class CategoryOut(BaseModel):
    id: UUID
    name: str
    created_at: datetime

    class Config:
        from_attributes = True
