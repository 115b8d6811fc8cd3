# backend/schemas/product.py
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List, Literal

ProductCategory = Literal["clothing", "accessory"]


# Base configuration for ORM compatibility
class ORMBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# Fields every product write must carry
class ProductBase(ORMBase):
    name: str = Field(min_length=1)
    price: float = Field(ge=0)
    size: str = Field(min_length=1)
    color: str = Field(min_length=1)
    category: ProductCategory


# Schema for creating a new product.
# `id` is accepted as a hint only; the server assigns the next free id.
class ProductCreate(ProductBase):
    id: int


# Full update (PUT); `available` keeps its value when omitted
class ProductUpdate(ProductBase):
    available: Optional[bool] = None


class ProductOut(ProductBase):
    id: int
    available: bool
    stock: int = 0


class ProductListPage(ORMBase):
    count: int
    data: List[ProductOut]
