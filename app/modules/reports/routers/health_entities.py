"""
Health Entity Reports Router

FastAPI router for the per health entity fulfillment summary.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from ..dependencies import get_data_source, get_time_range
from ..schemas import HealthEntitySummaryItem, TimeRange
from ..services.base import ReportDataSource
from ..services.health_entities import HealthEntityReportService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reports/health-entities", tags=["Reports"])


@router.get("/summary", response_model=List[HealthEntitySummaryItem])
async def get_health_entities_summary(
    time_range: TimeRange = Depends(get_time_range),
    source: ReportDataSource = Depends(get_data_source)
):
    """
    Generate health entities summary report.

    Returns requested vs. received volume per entity, least served first.
    """
    try:
        service = HealthEntityReportService(source)
        report_data = service.health_entities_summary(time_range)
        return [HealthEntitySummaryItem(**row) for row in report_data]

    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Health entities summary failed")
        raise HTTPException(500, f"Error generating report: {str(e)}")
