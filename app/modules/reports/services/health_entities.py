"""
Health Entity Reports Service

Summarizes requested vs. received volume per health entity.
"""

import logging
from typing import Dict, List

from .base import BaseReportService, in_range, percentage
from app.modules.reports.schemas import TimeRange

logger = logging.getLogger(__name__)


class HealthEntityReportService(BaseReportService):
    """Service for generating health entity summaries"""

    def health_entities_summary(self, time_range: TimeRange) -> List[Dict]:
        """
        Generate health entities summary report.

        Only entities with at least one request created inside the window are
        summarized. Bags donated inside the window count as received for the
        entity behind their request. Entities furthest from being served come
        first.
        """
        by_entity: Dict[int, Dict] = {}
        for request in self._get_requests():
            if not in_range(request.date_created, time_range.from_, time_range.to):
                continue
            entity = request.health_entity
            row = by_entity.get(entity.id)
            if row is None:
                row = by_entity[entity.id] = {
                    "health_entity_id": entity.id,
                    "name": entity.name,
                    "requests": 0,
                    "units_requested": 0,
                    "bags_received": 0,
                    "units_received": 0,
                    "fulfillment_pct": 0
                }
            row["requests"] += 1
            row["units_requested"] += request.quantity_needed

        for bag in self._get_blood_bags():
            if bag.request is None:
                continue
            if not in_range(bag.donation_date, time_range.from_, time_range.to):
                continue
            # Out-of-window requests never open a new entry
            row = by_entity.get(bag.request.health_entity.id)
            if row is not None:
                row["bags_received"] += 1
                row["units_received"] += bag.quantity

        for row in by_entity.values():
            if row["units_requested"] > 0:
                row["fulfillment_pct"] = percentage(row["units_received"], row["units_requested"])
            else:
                row["fulfillment_pct"] = 0

        logger.debug(f"Health entities summary: {len(by_entity)} entities")
        return sorted(by_entity.values(), key=lambda row: row["fulfillment_pct"])
