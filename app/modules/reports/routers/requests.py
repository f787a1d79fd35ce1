"""
Request Reports Router

FastAPI router for request-related report endpoints.
Includes the paginated fulfillment report and overdue alerts.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from ..dependencies import get_data_source, get_pagination, get_time_range
from ..schemas import (
    OverdueRequestItem,
    PaginationParams,
    RequestsFulfillmentResponse,
    TimeRange
)
from ..services.base import ReportDataSource
from ..services.requests import RequestReportService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reports/requests", tags=["Reports"])


@router.get("/fulfillment", response_model=RequestsFulfillmentResponse)
async def get_requests_fulfillment(
    time_range: TimeRange = Depends(get_time_range),
    pagination: PaginationParams = Depends(get_pagination),
    source: ReportDataSource = Depends(get_data_source)
):
    """
    Generate requests fulfillment report.

    Returns delivered vs. needed volume and status per request,
    ordered by due date and paginated.
    """
    try:
        service = RequestReportService(source)
        report_data = service.requests_fulfillment(time_range, pagination)
        return RequestsFulfillmentResponse(**report_data)

    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Requests fulfillment report failed")
        raise HTTPException(500, f"Error generating report: {str(e)}")


@router.get("/overdue", response_model=List[OverdueRequestItem])
async def get_overdue_requests(
    source: ReportDataSource = Depends(get_data_source)
):
    """Generate overdue requests alert report as of now."""
    try:
        service = RequestReportService(source)
        report_data = service.overdue_requests()
        return [OverdueRequestItem(**row) for row in report_data]

    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Overdue requests report failed")
        raise HTTPException(500, f"Error generating report: {str(e)}")
