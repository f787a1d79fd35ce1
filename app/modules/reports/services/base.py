"""
Base service class for Reports module

Provides the pieces every report service shares: the time-range filter,
the (type, rh) grouping key, percentage rounding, and access to the
read-only data source the snapshot is fetched from.
"""

import math
from datetime import datetime
from typing import List, NamedTuple, Optional, Protocol

from app.modules.donations.models import BloodBag, BloodType, Donor, Request, Rh
from app.modules.reports.utils import as_naive_utc


class ReportDataSource(Protocol):
    """Read interface the report services consume"""

    def list_blood_bags(self) -> List[BloodBag]: ...

    def list_requests(self) -> List[Request]: ...

    def list_donors(self) -> List[Donor]: ...


class BloodKey(NamedTuple):
    """Grouping key for per-blood aggregates"""
    type: BloodType
    rh: Rh


def in_range(
    timestamp,
    from_: Optional[datetime] = None,
    to: Optional[datetime] = None
) -> bool:
    """Check whether a timestamp falls inside an inclusive, optionally open window"""
    t = as_naive_utc(timestamp)
    if from_ is not None and t < as_naive_utc(from_):
        return False
    if to is not None and t > as_naive_utc(to):
        return False
    return True


def percentage(part: int, whole: int) -> int:
    """Integer percentage of part over whole, half rounded up and capped at 100"""
    return min(100, math.floor(part / whole * 100 + 0.5))


class BaseReportService:
    """Base service class for all report services"""

    def __init__(self, source: ReportDataSource):
        self.source = source

    def _get_blood_bags(self) -> List[BloodBag]:
        return list(self.source.list_blood_bags() or [])

    def _get_requests(self) -> List[Request]:
        return list(self.source.list_requests() or [])

    def _get_donors(self) -> List[Donor]:
        return list(self.source.list_donors() or [])

    @staticmethod
    def _blood_key(blood) -> BloodKey:
        return BloodKey(blood.type, blood.rh)
