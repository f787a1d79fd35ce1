"""
Inventory Reports Router

FastAPI router for blood inventory report endpoints.
Includes inventory by blood group and the donations histogram.
"""

import logging
from typing import List, Union

from fastapi import APIRouter, Depends, HTTPException

from ..dependencies import get_blood_filter, get_data_source, get_group_by, get_time_range
from ..schemas import (
    BloodFilter,
    DonationsByBloodItem,
    DonationsByPeriod,
    GroupBy,
    InventoryByBloodItem,
    TimeRange
)
from ..services.base import ReportDataSource
from ..services.inventory import InventoryReportService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reports", tags=["Reports"])


@router.get("/inventory", response_model=List[InventoryByBloodItem])
async def get_inventory_by_blood(
    time_range: TimeRange = Depends(get_time_range),
    blood_filter: BloodFilter = Depends(get_blood_filter),
    source: ReportDataSource = Depends(get_data_source)
):
    """
    Generate inventory report by blood type and Rh.

    Sums bag quantities per (type, rh) for bags donated in the window.
    Supports filtering by blood type and Rh factor.
    """
    try:
        service = InventoryReportService(source)
        report_data = service.inventory_by_blood(time_range, blood_filter)
        return [InventoryByBloodItem(**row) for row in report_data]

    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Inventory report failed")
        raise HTTPException(500, f"Error generating report: {str(e)}")


@router.get(
    "/donations/by-blood",
    response_model=Union[List[DonationsByPeriod], List[DonationsByBloodItem]]
)
async def get_donations_by_blood(
    time_range: TimeRange = Depends(get_time_range),
    group_by: GroupBy = Depends(get_group_by),
    source: ReportDataSource = Depends(get_data_source)
):
    """
    Generate donations histogram by blood type and Rh.

    With groupBy=day or groupBy=month returns one bucket per period;
    without grouping returns a flat list of rows.
    """
    try:
        service = InventoryReportService(source)
        report_data = service.donations_by_blood(time_range, group_by)

        if group_by == GroupBy.NONE:
            return [DonationsByBloodItem(**row) for row in report_data]

        return [
            DonationsByPeriod(
                period=bucket["period"],
                items=[DonationsByBloodItem(**row) for row in bucket["items"]]
            )
            for bucket in report_data
        ]

    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Donations histogram failed")
        raise HTTPException(500, f"Error generating report: {str(e)}")
