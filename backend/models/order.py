from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, func
from sqlalchemy.orm import relationship
from database import Base

class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True)
    status = Column(String, nullable=False, default="pending")
    order_date = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    customer = relationship("User")
    # Payments go with their order
    transactions = relationship("Transaction", back_populates="order", cascade="all, delete-orphan")
