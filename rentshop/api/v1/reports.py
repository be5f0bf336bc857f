import logging

from fastapi import APIRouter

from rentshop.schemas.report import DashboardSummary, ReportResponse, TransactionResponse
from rentshop.schemas.response import SuccessResponse
from rentshop.services.report_service import (
    ReportWindow,
    dashboard_summary,
    get_all_reports,
    get_report,
    recent_transactions,
)

router = APIRouter()
log = logging.getLogger("uvicorn")


@router.get("/", response_model=SuccessResponse)
async def all_reports_endpoint():
    """Today, trailing week and current month side by side."""
    reports = await get_all_reports()
    data = {window: ReportResponse(**figures).model_dump() for window, figures in reports.items()}
    return SuccessResponse(data=data)


@router.get("/transactions", response_model=SuccessResponse)
async def transactions_endpoint():
    """Every payment with its source and customer, latest first."""
    transactions = await recent_transactions()
    return SuccessResponse(data=[TransactionResponse(**t).model_dump() for t in transactions])


@router.get("/dashboard", response_model=SuccessResponse)
async def dashboard_endpoint():
    summary = await dashboard_summary()
    return SuccessResponse(data=DashboardSummary(**summary).model_dump())


@router.get("/{window}", response_model=SuccessResponse)
async def report_endpoint(window: ReportWindow):
    """Financial figures for one window: today, week or month."""
    figures = await get_report(window)
    return SuccessResponse(data=ReportResponse(**figures).model_dump())
