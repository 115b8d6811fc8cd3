# backend/models/product.py
from sqlalchemy import Column, Integer, String, Float, Boolean, CheckConstraint
from database import Base

# Product categories accepted by the shop
PRODUCT_CATEGORIES = ("clothing", "accessory")


# Represents a single product in the shop catalogue.
# The id is assigned by the server (see routes/products.py), not autoincremented.
class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True, autoincrement=False)
    name = Column(String, nullable=False, index=True)
    price = Column(Float, CheckConstraint("price >= 0"), nullable=False)
    size = Column(String, nullable=False)
    color = Column(String, nullable=False)
    category = Column(String, nullable=False)
    available = Column(Boolean, nullable=False, default=True)

    # Changed only through stock movements
    stock = Column(Integer, nullable=False, default=0)
