from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime


# Input schema for creating a new order
class OrderCreate(BaseModel):
    customer_id: int
    status: Optional[str] = None

# Partial order update; omitted fields keep their value
class OrderUpdate(BaseModel):
    customer_id: Optional[int] = None
    status: Optional[str] = None

# Output schema representing an order row
class OrderResponse(BaseModel):
    id: int
    customer_id: int
    status: str
    order_date: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
