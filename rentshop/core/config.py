import os

# Database Configuration
# SQLite file next to the working directory unless overridden
DB_URL = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./rentshop.db")
DB_ECHO = os.getenv("DB_ECHO", "false").lower() in ("1", "true", "yes")

# Application Metadata
PROJECT_NAME = os.getenv("PROJECT_NAME", "RentShop Rental & Sales Management")
VERSION = "1.0.0"

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Point-of-sale defaults
WALK_IN_CUSTOMER_NAME = os.getenv("WALK_IN_CUSTOMER_NAME", "Walk-in Customer")
SALE_PAYMENT_NOTE = os.getenv("SALE_PAYMENT_NOTE", "Sale Payment")
