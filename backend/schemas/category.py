from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


# Schema for creating a category
class CategoryCreate(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None


# Schema for updating a category; omitted fields keep their value
class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None


# Schema for displaying category details
class CategoryOut(BaseModel):
    id: int
    name: str
    description: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
