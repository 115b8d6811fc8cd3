import os
import sys

# Add 'backend' folder to Python path
sys.path.append(os.path.abspath(os.path.dirname(__file__)))

from dotenv import load_dotenv

load_dotenv()

from database import SessionLocal, init_db
from models.users import User, Role
from models.category import Category
from models.product import Product
from models.stock import StockMovement
from routes.products import create_product
from schemas.product import ProductCreate
from utils.hashing import get_password_hash

# Configuration
ADMIN_EMAIL = os.getenv("SEED_ADMIN_EMAIL", "admin@shop.local")
ADMIN_PASSWORD = os.getenv("SEED_ADMIN_PASSWORD", "admin123")

CATEGORIES = [
    ("Clothing", "Shirts, trousers, jackets"),
    ("Accessory", "Bags, belts, hats"),
]

PRODUCTS = [
    # name, price, size, color, category, opening stock
    ("Basic T-Shirt", 79000, "M", "white", "clothing", 40),
    ("Denim Jacket", 349000, "L", "blue", "clothing", 12),
    ("Leather Belt", 129000, "One size", "brown", "accessory", 25),
    ("Canvas Tote", 99000, "One size", "black", "accessory", 30),
]
# End Configuration


def seed():
    init_db()
    session = SessionLocal()
    try:
        # Ensure an admin user exists
        admin = session.query(User).filter(User.email == ADMIN_EMAIL).first()
        if not admin:
            admin = User(
                fullname="Shop Admin",
                username="admin",
                email=ADMIN_EMAIL,
                password=get_password_hash(ADMIN_PASSWORD),
                role=Role.ADMIN.value,
            )
            session.add(admin)
            session.commit()
            print(f"Created admin account {ADMIN_EMAIL}")

        if session.query(Category).count() == 0:
            session.add_all([Category(name=n, description=d) for n, d in CATEGORIES])
            session.commit()
            print(f"Inserted {len(CATEGORIES)} categories")

        if session.query(Product).count() > 0:
            print("Products already present, skipping product seed.")
            return

        for name, price, size, color, category, opening in PRODUCTS:
            product = create_product(
                session,
                ProductCreate(id=0, name=name, price=price, size=size, color=color, category=category),
            )
            session.add(StockMovement(product_id=product.id, quantity_change=opening, action="opening stock"))
            product.stock = opening
            session.commit()
        print(f"Inserted {len(PRODUCTS)} products")
    finally:
        session.close()


if __name__ == "__main__":
    seed()
