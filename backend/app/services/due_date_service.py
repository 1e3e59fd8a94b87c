"""
Due-Date Service - Business logic for maintenance due dates.
Provides the overdue and upcoming schedule views and the dashboard aggregate.

Every method takes `now` (epoch milliseconds) explicitly; nothing here reads the clock,
so all figures of one response refer to the same instant.
"""

from sqlalchemy.orm import Session
from sqlalchemy import func, and_
from typing import Optional, Dict, List
import logging

from app.config import settings
from app.models import (
    Equipment, MaintenanceSchedule, MaintenanceLog, WorkOrder,
    EquipmentStatus, Priority, ACTIVE_WORK_ORDER_STATUSES
)
from app.services.query_builder import paginate

logger = logging.getLogger(__name__)


class DueDateService:
    """Service class for due-date classification of maintenance schedules"""

    @staticmethod
    def window_ms() -> int:
        """Lookahead window, 30 days by default (2,592,000,000 ms)"""
        return settings.due_window_ms

    @staticmethod
    def overdue_condition(now: int):
        """Active schedules whose next_due lies strictly before now"""
        return and_(
            MaintenanceSchedule.is_active.is_(True),
            MaintenanceSchedule.next_due.isnot(None),
            MaintenanceSchedule.next_due < now,
        )

    @staticmethod
    def upcoming_condition(now: int):
        """Active schedules due within [now, now + window]"""
        return and_(
            MaintenanceSchedule.is_active.is_(True),
            MaintenanceSchedule.next_due.isnot(None),
            MaintenanceSchedule.next_due >= now,
            MaintenanceSchedule.next_due <= now + DueDateService.window_ms(),
        )

    @staticmethod
    def get_overdue_schedules(
        db: Session,
        now: int,
        priority: Optional[Priority] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None
    ) -> List[MaintenanceSchedule]:
        """
        Overdue schedules, most overdue first.

        Args:
            db: Database session
            now: Reference instant in epoch milliseconds
            priority: Only return schedules of this priority
            limit: Page size (default 20, capped at 100)
            offset: Rows to skip
        """
        query = db.query(MaintenanceSchedule).filter(DueDateService.overdue_condition(now))

        if priority:
            query = query.filter(MaintenanceSchedule.priority == priority)

        query = query.order_by(MaintenanceSchedule.next_due.asc(), MaintenanceSchedule.id.asc())
        return paginate(query, limit, offset, settings.DUE_VIEW_PAGE_SIZE).all()

    @staticmethod
    def get_upcoming_schedules(
        db: Session,
        now: int,
        limit: Optional[int] = None,
        offset: Optional[int] = None
    ) -> List[MaintenanceSchedule]:
        """Schedules falling due within the lookahead window, soonest first"""
        query = (
            db.query(MaintenanceSchedule)
            .filter(DueDateService.upcoming_condition(now))
            .order_by(MaintenanceSchedule.next_due.asc(), MaintenanceSchedule.id.asc())
        )
        return paginate(query, limit, offset, settings.DUE_VIEW_PAGE_SIZE).all()

    @staticmethod
    def get_equipment_status_counts(db: Session) -> Dict[str, int]:
        """Equipment count per status; every status is present"""
        counts = {status.value: 0 for status in EquipmentStatus}

        rows = (
            db.query(Equipment.status, func.count(Equipment.id))
            .group_by(Equipment.status)
            .all()
        )
        for status, count in rows:
            key = status.value if isinstance(status, EquipmentStatus) else status
            if key in counts:
                counts[key] = count

        return counts

    @staticmethod
    def get_dashboard_stats(db: Session, now: int) -> Dict:
        """
        Point-in-time dashboard aggregate.

        Overdue and upcoming counts use the same conditions as the list views,
        so the dashboard never disagrees with them. Nothing is cached.

        Note for API consumers: inactive schedules are left out of both counts
        even when their due date has passed, and a schedule due exactly at `now`
        counts as upcoming, never as overdue.
        """
        window = DueDateService.window_ms()

        equipment_by_status = DueDateService.get_equipment_status_counts(db)
        total_equipment = db.query(func.count(Equipment.id)).scalar() or 0

        upcoming = db.query(func.count(MaintenanceSchedule.id)).filter(
            DueDateService.upcoming_condition(now)
        ).scalar() or 0

        overdue = db.query(func.count(MaintenanceSchedule.id)).filter(
            DueDateService.overdue_condition(now)
        ).scalar() or 0

        recent_logs = db.query(func.count(MaintenanceLog.id)).filter(
            MaintenanceLog.created_at >= now - window
        ).scalar() or 0

        active_work_orders = db.query(func.count(WorkOrder.id)).filter(
            WorkOrder.status.in_(ACTIVE_WORK_ORDER_STATUSES)
        ).scalar() or 0

        return {
            "equipment_by_status": equipment_by_status,
            "total_equipment": total_equipment,
            "upcoming_maintenance": upcoming,
            "overdue_maintenance": overdue,
            "recent_logs": recent_logs,
            "active_work_orders": active_work_orders,
        }
