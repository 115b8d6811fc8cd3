# backend/schemas/stock.py
from pydantic import BaseModel, Field, ConfigDict
from datetime import datetime
from typing import Optional


# Schema for recording a stock movement
class StockMovementCreate(BaseModel):
    product_id: int
    quantity_change: int
    action: str = Field(min_length=1)


# Partial update of a movement; the product stock is re-balanced by the difference
class StockMovementUpdate(BaseModel):
    quantity_change: Optional[int] = None
    action: Optional[str] = Field(default=None, min_length=1)


class StockMovementResponse(BaseModel):
    id: int
    product_id: int
    quantity_change: int
    action: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# Movement joined with its product name for listings
class StockMovementListItem(StockMovementResponse):
    product_name: Optional[str] = None
