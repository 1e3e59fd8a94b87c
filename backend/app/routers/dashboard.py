"""
Dashboard router - Point-in-time maintenance figures.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.clock import get_now
from app.database import get_db
from app.services.due_date_service import DueDateService
from app.schemas import DashboardStats

router = APIRouter()


@router.get("/stats", response_model=DashboardStats)
def get_dashboard_stats(
    db: Session = Depends(get_db),
    now: int = Depends(get_now)
):
    """
    Get the maintenance dashboard in a single request.

    **Includes:**
    - Equipment count per status and in total
    - Upcoming (next 30 days) and overdue schedule counts
    - Logs recorded in the last 30 days
    - Pending and in-progress work orders
    """
    return DueDateService.get_dashboard_stats(db, now)
