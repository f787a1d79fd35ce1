"""
Services package for Reports module

Exports all report service classes for easy importing.
"""

from .inventory import InventoryReportService
from .requests import RequestReportService
from .donors import DonorReportService
from .health_entities import HealthEntityReportService

__all__ = [
    "InventoryReportService",
    "RequestReportService",
    "DonorReportService",
    "HealthEntityReportService"
]
