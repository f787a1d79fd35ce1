"""
Donor Reports Service

Ranks donors by the volume they donated inside a time window.
"""

import logging
from typing import Dict, List

from .base import BaseReportService, in_range
from app.modules.reports.schemas import TimeRange

logger = logging.getLogger(__name__)


class DonorReportService(BaseReportService):
    """Service for generating donor activity reports"""

    def donors_activity(self, time_range: TimeRange) -> List[Dict]:
        """
        Generate donors activity report.

        Every registered donor appears exactly once, including those with no
        donations in the window. Sorted by donated units, highest first.
        """
        by_donor: Dict[int, Dict] = {}
        for donor in self._get_donors():
            by_donor[donor.id] = {
                "donor_id": donor.id,
                "name": donor.name,
                "document": donor.document,
                "donations": 0,
                "units": 0
            }

        for bag in self._get_blood_bags():
            if not in_range(bag.donation_date, time_range.from_, time_range.to):
                continue
            row = by_donor.get(bag.donor.id) if bag.donor is not None else None
            if row is not None:
                row["donations"] += 1
                row["units"] += bag.quantity

        logger.debug(f"Donor activity report: {len(by_donor)} donors")
        return sorted(by_donor.values(), key=lambda row: row["units"], reverse=True)
