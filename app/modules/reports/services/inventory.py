"""
Inventory Reports Service

Handles blood-bag inventory reports: usable volume per blood group and
the donations histogram bucketed by day or month.
"""

import logging
from typing import Dict, List

from .base import BaseReportService, BloodKey, in_range
from app.modules.reports.utils import period_key
from app.modules.reports.schemas import BloodFilter, GroupBy, TimeRange

logger = logging.getLogger(__name__)

_ALL_PERIODS = "all"


def _by_type(row: Dict) -> str:
    return row["type"].value


class InventoryReportService(BaseReportService):
    """Service for generating blood inventory reports"""

    def inventory_by_blood(self, time_range: TimeRange, blood_filter: BloodFilter) -> List[Dict]:
        """
        Generate inventory report grouped by blood type and Rh.

        Sums usable bag quantities per (type, rh) for bags donated inside
        the window and matching the optional blood filter.
        """
        bags = [
            bag for bag in self._get_blood_bags()
            if in_range(bag.donation_date, time_range.from_, time_range.to)
            and blood_filter.matches(bag.blood)
        ]

        groups: Dict[BloodKey, Dict] = {}
        for bag in bags:
            key = self._blood_key(bag.blood)
            row = groups.get(key)
            if row is None:
                row = groups[key] = {"type": key.type, "rh": key.rh, "units": 0, "bags": 0}
            row["units"] += bag.quantity
            row["bags"] += 1

        logger.debug(f"Inventory report: {len(bags)} bags in {len(groups)} groups")
        return sorted(groups.values(), key=_by_type)

    def donations_by_blood(self, time_range: TimeRange, group_by: GroupBy = GroupBy.NONE) -> List[Dict]:
        """
        Generate the donations histogram.

        Bags are bucketed by calendar day (YYYY-MM-DD), calendar month
        (YYYY-MM) or not at all, then grouped by (type, rh) inside each
        bucket. Without grouping the rows are returned flat; otherwise as
        ``{"period", "items"}`` buckets in chronological order.
        """
        buckets: Dict[str, Dict[BloodKey, Dict]] = {}
        for bag in self._get_blood_bags():
            if not in_range(bag.donation_date, time_range.from_, time_range.to):
                continue
            period = self._period_key(bag.donation_date, group_by)
            key = self._blood_key(bag.blood)
            rows = buckets.setdefault(period, {})
            row = rows.get(key)
            if row is None:
                row = rows[key] = {"type": key.type, "rh": key.rh, "donations": 0, "units": 0}
            row["donations"] += 1
            row["units"] += bag.quantity

        if group_by == GroupBy.NONE:
            return sorted(buckets.get(_ALL_PERIODS, {}).values(), key=_by_type)

        return [
            {"period": period, "items": sorted(rows.values(), key=_by_type)}
            for period, rows in sorted(buckets.items())
        ]

    @staticmethod
    def _period_key(donation_date, group_by: GroupBy) -> str:
        if group_by == GroupBy.NONE:
            return _ALL_PERIODS
        return period_key(donation_date, group_by.value)
