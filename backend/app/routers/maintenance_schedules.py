"""
Maintenance schedule router - Recurring maintenance obligations.
Provides CRUD operations plus the overdue and upcoming views.
"""

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session
from typing import List, Optional, Union

from app.clock import get_now
from app.database import get_db
from app.models import Priority
from app.schemas import (
    ScheduleCreate,
    ScheduleUpdate,
    ScheduleResponse,
    DeletedRecord
)
from app.services.due_date_service import DueDateService
from app.services.query_builder import ListParams
from app.services.record_service import ScheduleService
from app.validation import parse_identifier, DB_INT_MIN, DB_INT_MAX

router = APIRouter()


# Fixed paths are registered before /{schedule_id}

@router.get("/overdue", response_model=List[ScheduleResponse])
def list_overdue_schedules(
    priority: Optional[Priority] = Query(None, description="Only this priority"),
    limit: Optional[int] = Query(None, description="Page size (default 20, max 100)"),
    offset: Optional[int] = Query(None, description="Rows to skip"),
    db: Session = Depends(get_db),
    now: int = Depends(get_now)
):
    """Active schedules past their due date, most overdue first."""
    return DueDateService.get_overdue_schedules(db, now, priority, limit, offset)


@router.get("/upcoming", response_model=List[ScheduleResponse])
def list_upcoming_schedules(
    limit: Optional[int] = Query(None, description="Page size (default 20, max 100)"),
    offset: Optional[int] = Query(None, description="Rows to skip"),
    db: Session = Depends(get_db),
    now: int = Depends(get_now)
):
    """Active schedules falling due within the next 30 days, soonest first."""
    return DueDateService.get_upcoming_schedules(db, now, limit, offset)


@router.get("", response_model=Union[List[ScheduleResponse], ScheduleResponse])
def list_schedules(
    id: Optional[str] = Query(None, description="Fetch a single record by id"),
    equipment_id: Optional[int] = Query(None, alias="equipmentId", ge=DB_INT_MIN, le=DB_INT_MAX),
    priority: Optional[Priority] = None,
    is_active: Optional[bool] = Query(None, alias="isActive"),
    assigned_to: Optional[str] = Query(None, alias="assignedTo"),
    search: Optional[str] = Query(None, description="Search in title and description"),
    limit: Optional[int] = Query(None),
    offset: Optional[int] = Query(None),
    sort: Optional[str] = None,
    order: Optional[str] = None,
    db: Session = Depends(get_db)
):
    """List maintenance schedules with optional filtering, sorting and pagination."""
    if id is not None:
        return ScheduleService.get(db, parse_identifier(id))

    params = ListParams(
        filters={
            "equipmentId": equipment_id,
            "priority": priority,
            "isActive": is_active,
            "assignedTo": assigned_to,
        },
        search=search,
        limit=limit,
        offset=offset,
        sort=sort,
        order=order,
    )
    return ScheduleService.list(db, params)


@router.get("/{schedule_id}", response_model=ScheduleResponse)
def get_schedule(
    schedule_id: int = Path(..., ge=1, le=DB_INT_MAX),
    db: Session = Depends(get_db)
):
    return ScheduleService.get(db, schedule_id)


@router.post("", response_model=ScheduleResponse, status_code=201)
def create_schedule(
    schedule: ScheduleCreate,
    db: Session = Depends(get_db),
    now: int = Depends(get_now)
):
    """
    Create a maintenance schedule.
    The referenced equipment must exist.
    """
    return ScheduleService.create(db, schedule.model_dump(), now)


@router.put("/{schedule_id}", response_model=ScheduleResponse)
def update_schedule(
    schedule_update: ScheduleUpdate,
    schedule_id: int = Path(..., ge=1, le=DB_INT_MAX),
    db: Session = Depends(get_db),
    now: int = Depends(get_now)
):
    """Update a schedule; only provided fields change."""
    update_data = schedule_update.model_dump(exclude_unset=True)
    return ScheduleService.update(db, schedule_id, update_data, now)


@router.delete("/{schedule_id}", response_model=DeletedRecord[ScheduleResponse])
def delete_schedule(
    schedule_id: int = Path(..., ge=1, le=DB_INT_MAX),
    db: Session = Depends(get_db)
):
    """
    Delete a schedule.
    Logs recorded against it are kept and lose their schedule link.
    """
    deleted = ScheduleService.delete(db, schedule_id)
    return {"message": "Maintenance schedule deleted successfully", "data": deleted}
