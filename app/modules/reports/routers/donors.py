"""
Donor Reports Router

FastAPI router for donor activity report endpoints.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from ..dependencies import get_data_source, get_time_range
from ..schemas import DonorActivityItem, TimeRange
from ..services.base import ReportDataSource
from ..services.donors import DonorReportService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reports/donors", tags=["Reports"])


@router.get("/activity", response_model=List[DonorActivityItem])
async def get_donors_activity(
    time_range: TimeRange = Depends(get_time_range),
    source: ReportDataSource = Depends(get_data_source)
):
    """Generate donors activity ranking for the given window."""
    try:
        service = DonorReportService(source)
        report_data = service.donors_activity(time_range)
        return [DonorActivityItem(**row) for row in report_data]

    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Donors activity report failed")
        raise HTTPException(500, f"Error generating report: {str(e)}")
