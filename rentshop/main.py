import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, status

from rentshop.api.v1.customers import router as customers_router
from rentshop.api.v1.inventory import router as inventory_router
from rentshop.api.v1.notes import router as notes_router
from rentshop.api.v1.payments import router as payments_router
from rentshop.api.v1.rentals import router as rentals_router
from rentshop.api.v1.reports import router as reports_router
from rentshop.api.v1.sales import router as sales_router
from rentshop.core.config import DB_URL, LOG_FORMAT, LOG_LEVEL, PROJECT_NAME, VERSION
from rentshop.core.db import close_db, init_db
from rentshop.core.exception_handlers import setup_exception_handlers

logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)
log = logging.getLogger("uvicorn")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handles startup and shutdown events."""
    log.info(f"Starting {PROJECT_NAME} v{VERSION}...")
    await init_db(DB_URL)  # Connect to DB and create tables
    yield
    await close_db()
    log.info(f"{PROJECT_NAME} stopped.")


app = FastAPI(
    title=PROJECT_NAME,
    version=VERSION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc"
)

# Include routers for modular API structure
app.include_router(customers_router, prefix="/api/v1/customers", tags=["Customers"])
app.include_router(inventory_router, prefix="/api/v1/inventory", tags=["Inventory"])
app.include_router(rentals_router, prefix="/api/v1/rentals", tags=["Rentals"])
app.include_router(sales_router, prefix="/api/v1/sales", tags=["Sales"])
app.include_router(payments_router, prefix="/api/v1/payments", tags=["Payments"])
app.include_router(notes_router, prefix="/api/v1/notes", tags=["Notes"])
app.include_router(reports_router, prefix="/api/v1/reports", tags=["Reports"])


setup_exception_handlers(app)


@app.get("/health", status_code=status.HTTP_200_OK)
async def health_check():
    """Simple health check endpoint."""
    return {"status": "ok", "app_name": PROJECT_NAME}
