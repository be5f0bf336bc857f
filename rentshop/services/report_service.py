import calendar
import logging
from datetime import date, timedelta
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from rentshop.core.db import in_transaction
from rentshop.models import Customer, InventoryItem, Payment, Rental, RentalStatus, Sale
from rentshop.services.common import today as _today
from rentshop.services.rental_service import list_rentals

log = logging.getLogger(__name__)

ZERO = Decimal("0")


class ReportWindow(str, Enum):
    TODAY = "today"
    WEEK = "week"    # trailing 7 days, today included
    MONTH = "month"  # current calendar month


def window_bounds(window: ReportWindow, on_date: date) -> Tuple[date, date]:
    """Inclusive date range covered by a report window."""
    if window == ReportWindow.TODAY:
        return on_date, on_date
    if window == ReportWindow.WEEK:
        return on_date - timedelta(days=6), on_date
    if window == ReportWindow.MONTH:
        last_day = calendar.monthrange(on_date.year, on_date.month)[1]
        return on_date.replace(day=1), on_date.replace(day=last_day)
    raise ValueError(f"Unknown report window: {window}")


def _total(values) -> Decimal:
    return sum((Decimal(v) for v in values if v is not None), ZERO)


async def get_report(window: ReportWindow, on_date: Optional[date] = None, conn: Optional[AsyncSession] = None) -> Dict[str, Decimal]:
    """
    Financial figures for one window:
      rent_generated     - totals of rentals whose rent date falls in the window
      sales_revenue      - totals of sales dated in the window
      payments_received  - payments dated in the window (cash collected)
      due_from_rent      - unpaid remainder of the in-window rentals, counting all their payments
    """
    window = ReportWindow(window)
    start, end = window_bounds(window, on_date or _today())

    async with in_transaction(conn) as session:
        rentals = (await session.execute(
            select(Rental.id, Rental.total_amount).where(Rental.rent_date.between(start, end))
        )).all()
        sale_totals = (await session.execute(
            select(Sale.total_amount).where(Sale.date.between(start, end))
        )).scalars().all()
        payment_amounts = (await session.execute(
            select(Payment.amount).where(Payment.date.between(start, end))
        )).scalars().all()

        paid_by_rental: Dict = {}
        if rentals:
            rows = (await session.execute(
                select(Payment.rental_id, Payment.amount).where(Payment.rental_id.in_([r.id for r in rentals]))
            )).all()
            for rental_id, amount in rows:
                paid_by_rental[rental_id] = paid_by_rental.get(rental_id, ZERO) + Decimal(amount)

    due = ZERO
    for rental_id, total in rentals:
        due += max(ZERO, Decimal(total) - paid_by_rental.get(rental_id, ZERO))

    return {
        "rent_generated": _total(total for _, total in rentals),
        "sales_revenue": _total(sale_totals),
        "payments_received": _total(payment_amounts),
        "due_from_rent": due,
    }


async def get_all_reports(on_date: Optional[date] = None, conn: Optional[AsyncSession] = None) -> Dict[str, Dict[str, Decimal]]:
    on_date = on_date or _today()
    async with in_transaction(conn) as session:
        return {
            window.value: await get_report(window, on_date=on_date, conn=session)
            for window in ReportWindow
        }


async def recent_transactions(conn: Optional[AsyncSession] = None) -> List[Dict]:
    """Every payment with where it came from and who paid, latest date first."""
    async with in_transaction(conn) as session:
        payments = (await session.execute(
            select(Payment).order_by(Payment.date.desc(), Payment.created_at.desc())
        )).scalars().all()
        rental_names = dict((await session.execute(select(Rental.id, Rental.customer_name))).all())
        sale_names = dict((await session.execute(select(Sale.id, Sale.customer_name))).all())

    transactions = []
    for p in payments:
        source_type, source_ref, customer_name = "Other", "-", "Unknown"
        if p.rental_id:
            source_type = "Rental"
            if p.rental_id in rental_names:
                source_ref = f"#{str(p.rental_id)[:6]}"
                customer_name = rental_names[p.rental_id]
            else:
                source_ref = "Unknown"
        elif p.sale_id:
            source_type = "Sale"
            if p.sale_id in sale_names:
                source_ref = f"#{str(p.sale_id)[:6]}"
                customer_name = sale_names[p.sale_id]
            else:
                source_ref = "Unknown"
        transactions.append({
            "id": p.id,
            "date": p.date,
            "amount": Decimal(p.amount),
            "note": p.note,
            "rental_id": p.rental_id,
            "sale_id": p.sale_id,
            "source_type": source_type,
            "source_ref": source_ref,
            "customer_name": customer_name,
        })
    return transactions


async def dashboard_summary(on_date: Optional[date] = None, conn: Optional[AsyncSession] = None) -> Dict:
    on_date = on_date or _today()
    async with in_transaction(conn) as session:
        total_customers = (await session.execute(select(func.count(Customer.id)))).scalar_one()
        total_items = (await session.execute(select(func.count(InventoryItem.id)))).scalar_one()
        rentals = await list_rentals(on_date=on_date, conn=session)
        todays_payments = (await session.execute(
            select(Payment.amount).where(Payment.date == on_date)
        )).scalars().all()

    open_rentals = [r for r in rentals if r.status != RentalStatus.RETURNED]
    return {
        "total_customers": total_customers,
        "total_items": total_items,
        "items_rented": sum(line.quantity for r in open_rentals for line in r.items if not line.returned),
        "active_rentals": len(open_rentals),
        "overdue_count": sum(1 for r in rentals if r.status == RentalStatus.OVERDUE),
        "todays_income": _total(todays_payments),
    }
