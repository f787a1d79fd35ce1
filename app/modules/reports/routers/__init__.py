"""
Routers package for Reports module

Exports all report router instances for easy importing.
"""

from .inventory import router as inventory_router
from .requests import router as requests_router
from .donors import router as donors_router
from .health_entities import router as health_entities_router

__all__ = [
    "inventory_router",
    "requests_router",
    "donors_router",
    "health_entities_router"
]
