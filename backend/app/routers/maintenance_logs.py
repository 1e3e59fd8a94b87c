"""
Maintenance log router - Records of maintenance work actually performed.
"""

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session
from typing import List, Optional, Union

from app.clock import get_now
from app.database import get_db
from app.schemas import LogCreate, LogUpdate, LogResponse, DeletedRecord
from app.services.query_builder import ListParams
from app.services.record_service import LogService
from app.validation import parse_identifier, DB_INT_MIN, DB_INT_MAX

router = APIRouter()


@router.get("", response_model=Union[List[LogResponse], LogResponse])
def list_logs(
    id: Optional[str] = Query(None, description="Fetch a single record by id"),
    equipment_id: Optional[int] = Query(None, alias="equipmentId", ge=DB_INT_MIN, le=DB_INT_MAX),
    schedule_id: Optional[int] = Query(None, alias="scheduleId", ge=DB_INT_MIN, le=DB_INT_MAX),
    type: Optional[str] = None,
    status: Optional[str] = None,
    performed_by: Optional[str] = Query(None, alias="performedBy"),
    search: Optional[str] = Query(None, description="Search in title and description"),
    limit: Optional[int] = Query(None),
    offset: Optional[int] = Query(None),
    sort: Optional[str] = None,
    order: Optional[str] = None,
    db: Session = Depends(get_db)
):
    """
    List maintenance logs, most recently performed first by default.

    **Filters:** equipmentId, scheduleId, type, status, performedBy
    """
    if id is not None:
        return LogService.get(db, parse_identifier(id))

    params = ListParams(
        filters={
            "equipmentId": equipment_id,
            "scheduleId": schedule_id,
            "type": type,
            "status": status,
            "performedBy": performed_by,
        },
        search=search,
        limit=limit,
        offset=offset,
        sort=sort,
        order=order,
    )
    return LogService.list(db, params)


@router.get("/{log_id}", response_model=LogResponse)
def get_log(
    log_id: int = Path(..., ge=1, le=DB_INT_MAX),
    db: Session = Depends(get_db)
):
    return LogService.get(db, log_id)


@router.post("", response_model=LogResponse, status_code=201)
def create_log(
    log: LogCreate,
    db: Session = Depends(get_db),
    now: int = Depends(get_now)
):
    """
    Record performed maintenance.

    **Validations:**
    - equipmentId, title, type, performedBy and performedAt are required
    - equipmentId (and scheduleId if given) must reference existing records
    """
    return LogService.create(db, log.model_dump(), now)


@router.put("/{log_id}", response_model=LogResponse)
def update_log(
    log_update: LogUpdate,
    log_id: int = Path(..., ge=1, le=DB_INT_MAX),
    db: Session = Depends(get_db),
    now: int = Depends(get_now)
):
    update_data = log_update.model_dump(exclude_unset=True)
    return LogService.update(db, log_id, update_data, now)


@router.delete("/{log_id}", response_model=DeletedRecord[LogResponse])
def delete_log(
    log_id: int = Path(..., ge=1, le=DB_INT_MAX),
    db: Session = Depends(get_db)
):
    deleted = LogService.delete(db, log_id)
    return {"message": "Maintenance log deleted successfully", "data": deleted}
