from sqlalchemy import Column, Integer, String, Float, ForeignKey
from sqlalchemy.orm import relationship
from database import Base


# Payment recorded against an order
class Transaction(Base):
    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    payment_method = Column(String, nullable=True)
    total_amount = Column(Float, nullable=False)
    status = Column(String, nullable=False, default="pending")

    order = relationship("Order", back_populates="transactions")
