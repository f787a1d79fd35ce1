"""
Request Reports Service

Handles request-side reports: delivery status per request (paginated)
and alerts for requests past their due date that are still short.
"""

import logging
from collections import defaultdict
from datetime import datetime, timezone
from typing import Dict, List, Optional

from .base import BaseReportService, in_range, percentage
from app.modules.reports.utils import as_naive_utc
from app.modules.reports.schemas import (
    FulfillmentStatus,
    OverdueStatus,
    PaginationParams,
    TimeRange
)

logger = logging.getLogger(__name__)


class RequestReportService(BaseReportService):
    """Service for generating request fulfillment reports"""

    def requests_fulfillment(self, time_range: TimeRange, pagination: PaginationParams) -> Dict:
        """
        Generate requests fulfillment report.

        Requests are filtered by creation date. When a window is given, only
        bags donated inside it count as delivered. Rows are ordered by due
        date, then by ascending fulfillment, and paginated.
        """
        requests = [
            r for r in self._get_requests()
            if in_range(r.date_created, time_range.from_, time_range.to)
        ]

        delivered_by_request: Dict[int, int] = defaultdict(int)
        for bag in self._get_blood_bags():
            if bag.request is None:
                continue
            if time_range.is_bounded and not in_range(bag.donation_date, time_range.from_, time_range.to):
                continue
            delivered_by_request[bag.request.id] += bag.quantity

        rows = []
        for request in requests:
            delivered = delivered_by_request.get(request.id, 0)
            needed = request.quantity_needed
            rows.append({
                "request_id": request.id,
                "blood": request.blood.label,
                "health_entity_id": request.health_entity.id,
                "created_at": request.date_created,
                "due_date": request.due_date,
                "needed": needed,
                "delivered": delivered,
                "fulfillment": percentage(delivered, needed) if needed > 0 else 100,
                "status": self._fulfillment_status(delivered, needed),
            })

        rows.sort(key=lambda row: (as_naive_utc(row["due_date"]), row["fulfillment"]))

        total = len(rows)
        start = pagination.offset
        end = start + pagination.limit
        logger.debug(f"Fulfillment report: {total} requests, page {start}:{end}")

        return {
            "total": total,
            "limit": pagination.limit,
            "offset": pagination.offset,
            "items": rows[start:end]
        }

    def overdue_requests(self, now: Optional[datetime] = None) -> List[Dict]:
        """
        Generate overdue requests alert report.

        A request is overdue when its due date is before ``now`` and its
        lifetime delivered volume is still below what was needed. Requests
        that were completed late are left out. Earliest due date first.
        """
        if now is None:
            now = datetime.now(timezone.utc)
        now = as_naive_utc(now)

        delivered_by_request: Dict[int, int] = defaultdict(int)
        for bag in self._get_blood_bags():
            if bag.request is not None:
                delivered_by_request[bag.request.id] += bag.quantity

        items = []
        for request in self._get_requests():
            if not as_naive_utc(request.due_date) < now:
                continue
            delivered = delivered_by_request.get(request.id, 0)
            needed = request.quantity_needed
            status = OverdueStatus.FULFILLED_LATE if delivered >= needed else OverdueStatus.OVERDUE
            if status != OverdueStatus.OVERDUE:
                continue
            items.append({
                "request_id": request.id,
                "health_entity": request.health_entity.name,
                "blood": request.blood.label,
                "due_date": request.due_date,
                "needed": needed,
                "delivered": delivered,
                "shortage": max(0, needed - delivered),
                "status": status,
            })

        items.sort(key=lambda item: as_naive_utc(item["due_date"]))
        logger.debug(f"Overdue report: {len(items)} requests overdue as of {now.isoformat()}")
        return items

    @staticmethod
    def _fulfillment_status(delivered: int, needed: int) -> FulfillmentStatus:
        if delivered >= needed:
            return FulfillmentStatus.FULFILLED
        if delivered > 0:
            return FulfillmentStatus.PARTIAL
        return FulfillmentStatus.PENDING
