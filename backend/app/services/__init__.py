"""
Services package - Business logic layer.
"""

from app.services.due_date_service import DueDateService
from app.services.record_service import (
    EquipmentService,
    ScheduleService,
    LogService,
    WorkOrderService
)


__all__ = [
    "DueDateService",
    "EquipmentService",
    "ScheduleService",
    "LogService",
    "WorkOrderService"
]
