"""
Routers package - API endpoint definitions.
"""

from app.routers import (
    equipment,
    maintenance_schedules,
    maintenance_logs,
    work_orders,
    dashboard
)

__all__ = [
    "equipment",
    "maintenance_schedules",
    "maintenance_logs",
    "work_orders",
    "dashboard"
]
