# rentshop/scripts/seed_data.py
import asyncio
import logging

from sqlalchemy import func, select

from rentshop.core.config import DB_URL, LOG_FORMAT
from rentshop.core.db import close_db, in_transaction, init_db
from rentshop.models import Customer
from rentshop.services.customer_service import create_customer
from rentshop.services.inventory_service import create_item

log = logging.getLogger(__name__)

CUSTOMERS = [
    {"name": "John Doe", "phone": "01700000000", "address": "Dhaka, Bangladesh"},
    {"name": "Event Pro Ltd", "phone": "01800000000", "address": "Chittagong"},
]

ITEMS = [
    {"name": "LED Par Light", "daily_rent_price": "500", "selling_price": "2500", "total_quantity": 20, "category": "Lights"},
    {"name": "Wireless Mic", "daily_rent_price": "1000", "selling_price": "15000", "total_quantity": 5, "category": "Audio"},
    {"name": "Projector 4K", "daily_rent_price": "5000", "selling_price": "80000", "total_quantity": 2, "category": "Visual"},
]


async def seed() -> bool:
    """Seeds demo customers and equipment into an empty store. Returns False if data already exists."""
    async with in_transaction() as session:
        existing = (await session.execute(select(func.count(Customer.id)))).scalar_one()
        if existing:
            log.info("Store already has customers, skipping seed.")
            return False

        for data in CUSTOMERS:
            customer = await create_customer(conn=session, **data)
            log.info(f"Customer: {customer.name} {customer.id}")
        for data in ITEMS:
            item = await create_item(conn=session, **data)
            log.info(f"Item: {item.name} {item.id} x{item.total_quantity}")

    log.info("Demo data seeded.")
    return True


async def main():
    await init_db(DB_URL)
    try:
        await seed()
    finally:
        await close_db()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
    asyncio.run(main())
