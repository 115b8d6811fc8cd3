from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class TransactionCreate(BaseModel):
    order_id: int
    total_amount: float = Field(gt=0)
    payment_method: Optional[str] = None
    status: Optional[str] = None


class TransactionUpdate(BaseModel):
    payment_method: Optional[str] = None
    total_amount: Optional[float] = Field(default=None, gt=0)
    status: Optional[str] = None


class TransactionResponse(BaseModel):
    id: int
    order_id: int
    payment_method: Optional[str] = None
    total_amount: float
    status: str

    model_config = ConfigDict(from_attributes=True)
