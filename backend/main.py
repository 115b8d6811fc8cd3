# backend/main.py
import logging

from dotenv import load_dotenv

load_dotenv()

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import settings
from database import init_db
from models.users import Role
from utils.errors import register_exception_handlers
from utils.tokenJWT import require_roles

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Router imports
from routes.auth import router as auth_router
from routes.categories import router as categories_router
from routes.products import router as products_router
from routes.users import router as users_router
from routes.orders import router as orders_router
from routes.transactions import router as transactions_router
from routes.stock import router as stock_router

# Initialisation
init_db()

app = FastAPI(title="Shop API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

admin_only = [Depends(require_roles(Role.ADMIN))]
cashier_or_admin = [Depends(require_roles(Role.ADMIN, Role.CASHIER))]

# Auth is open (logout and /me verify the token themselves)
app.include_router(auth_router)

# Admin only
app.include_router(categories_router, dependencies=admin_only)
app.include_router(products_router, dependencies=admin_only)
app.include_router(users_router, dependencies=admin_only)

# Cashier and admin
app.include_router(transactions_router, dependencies=cashier_or_admin)
app.include_router(orders_router, dependencies=cashier_or_admin)
app.include_router(stock_router, dependencies=cashier_or_admin)

@app.get("/")
def read_root():
    return {"message": "Shop API ready"}


if __name__ == "__main__":
    import uvicorn

    logger.info("Starting server on port %s", settings.APP_PORT)
    uvicorn.run("main:app", host="0.0.0.0", port=settings.APP_PORT)
