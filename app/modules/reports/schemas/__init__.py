"""
Pydantic schemas for Reports module

Defines the query filters and response models for all report endpoints.
Filters reject malformed input before any report is generated.
"""

import enum
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from app.core.config import settings
from app.modules.donations.models import BloodType, Rh
from app.modules.reports.utils import parse_report_date


# Base filters for common report parameters
class TimeRange(BaseModel):
    """Optional inclusive [from, to] window"""
    model_config = ConfigDict(populate_by_name=True)

    from_: Optional[datetime] = Field(None, alias="from", description="Start of the report window (inclusive)")
    to: Optional[datetime] = Field(None, description="End of the report window (inclusive)")

    @field_validator("from_", "to", mode="before")
    @classmethod
    def parse_bound(cls, v):
        return parse_report_date(v)

    @model_validator(mode="after")
    def validate_bounds(self):
        if self.from_ is not None and self.to is not None and self.to < self.from_:
            raise ValueError("'to' must be greater than or equal to 'from'")
        return self

    @property
    def is_bounded(self) -> bool:
        return self.from_ is not None or self.to is not None


class BloodFilter(BaseModel):
    """Optional blood type / Rh filter"""
    type: Optional[BloodType] = Field(None, description="Blood type: A, B, AB, O")
    rh: Optional[Rh] = Field(None, description="Rh factor: + or -")

    @field_validator("rh", mode="before")
    @classmethod
    def parse_rh(cls, v):
        # An unencoded '+' in a query string arrives as a space
        if isinstance(v, str) and v and not v.strip():
            return Rh.POSITIVE
        return v

    def matches(self, blood) -> bool:
        if self.type is not None and blood.type != self.type:
            return False
        if self.rh is not None and blood.rh != self.rh:
            return False
        return True


class PaginationParams(BaseModel):
    """Pagination parameters for paginated reports"""
    limit: int = Field(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE, description="Number of records per page")
    offset: int = Field(0, ge=0, description="Number of records to skip")


class GroupBy(str, enum.Enum):
    NONE = "none"
    DAY = "day"
    MONTH = "month"


class FulfillmentStatus(str, enum.Enum):
    FULFILLED = "FULFILLED"
    PARTIAL = "PARTIAL"
    PENDING = "PENDING"


class OverdueStatus(str, enum.Enum):
    OVERDUE = "OVERDUE"
    FULFILLED_LATE = "FULFILLED_LATE"


# Inventory Report Schemas
class InventoryByBloodItem(BaseModel):
    """Usable volume for one (type, rh) group"""
    type: BloodType
    rh: Rh
    units: int = Field(description="Summed bag quantity")
    bags: int = Field(description="Number of bags")


# Request Report Schemas
class RequestFulfillmentItem(BaseModel):
    """Delivery status of a single request"""
    request_id: int
    blood: str = Field(description="Blood label, e.g. O+")
    health_entity_id: int
    created_at: datetime
    due_date: datetime
    needed: int
    delivered: int
    fulfillment: int = Field(ge=0, le=100, description="Delivered volume as a percentage of needed")
    status: FulfillmentStatus


class RequestsFulfillmentResponse(BaseModel):
    """Paginated requests fulfillment report"""
    total: int
    limit: int
    offset: int
    items: List[RequestFulfillmentItem]


class OverdueRequestItem(BaseModel):
    """Request past its due date and still under-delivered"""
    request_id: int
    health_entity: str
    blood: str
    due_date: datetime
    needed: int
    delivered: int
    shortage: int
    status: OverdueStatus


# Donor Report Schemas
class DonorActivityItem(BaseModel):
    donor_id: int
    name: str
    document: str
    donations: int
    units: int


# Health Entity Report Schemas
class HealthEntitySummaryItem(BaseModel):
    """Requested vs. received volume for one health entity"""
    health_entity_id: int
    name: str
    requests: int
    units_requested: int
    bags_received: int
    units_received: int
    fulfillment_pct: int = Field(ge=0, le=100)


# Donations histogram Schemas
class DonationsByBloodItem(BaseModel):
    type: BloodType
    rh: Rh
    donations: int
    units: int


class DonationsByPeriod(BaseModel):
    """One time bucket of the donations histogram"""
    period: str = Field(description="YYYY-MM-DD or YYYY-MM")
    items: List[DonationsByBloodItem]
