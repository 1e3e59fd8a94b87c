"""
Work order router - Service requests raised against equipment.
"""

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session
from typing import List, Optional, Union

from app.clock import get_now
from app.database import get_db
from app.models import Priority, WorkOrderStatus
from app.schemas import (
    WorkOrderCreate,
    WorkOrderUpdate,
    WorkOrderResponse,
    DeletedRecord
)
from app.services.query_builder import ListParams
from app.services.record_service import WorkOrderService
from app.validation import parse_identifier, DB_INT_MIN, DB_INT_MAX

router = APIRouter()


@router.get("", response_model=Union[List[WorkOrderResponse], WorkOrderResponse])
def list_work_orders(
    id: Optional[str] = Query(None, description="Fetch a single record by id"),
    equipment_id: Optional[int] = Query(None, alias="equipmentId", ge=DB_INT_MIN, le=DB_INT_MAX),
    status: Optional[WorkOrderStatus] = None,
    priority: Optional[Priority] = None,
    type: Optional[str] = None,
    assigned_to: Optional[str] = Query(None, alias="assignedTo"),
    search: Optional[str] = Query(None, description="Search in title and description"),
    limit: Optional[int] = Query(None),
    offset: Optional[int] = Query(None),
    sort: Optional[str] = None,
    order: Optional[str] = None,
    db: Session = Depends(get_db)
):
    """
    List work orders with optional filtering and pagination.

    **Filters:** equipmentId, status, priority, type, assignedTo
    """
    if id is not None:
        return WorkOrderService.get(db, parse_identifier(id))

    params = ListParams(
        filters={
            "equipmentId": equipment_id,
            "status": status,
            "priority": priority,
            "type": type,
            "assignedTo": assigned_to,
        },
        search=search,
        limit=limit,
        offset=offset,
        sort=sort,
        order=order,
    )
    return WorkOrderService.list(db, params)


@router.get("/{work_order_id}", response_model=WorkOrderResponse)
def get_work_order(
    work_order_id: int = Path(..., ge=1, le=DB_INT_MAX),
    db: Session = Depends(get_db)
):
    return WorkOrderService.get(db, work_order_id)


@router.post("", response_model=WorkOrderResponse, status_code=201)
def create_work_order(
    work_order: WorkOrderCreate,
    db: Session = Depends(get_db),
    now: int = Depends(get_now)
):
    """Open a work order against existing equipment."""
    return WorkOrderService.create(db, work_order.model_dump(), now)


@router.put("/{work_order_id}", response_model=WorkOrderResponse)
def update_work_order(
    work_order_update: WorkOrderUpdate,
    work_order_id: int = Path(..., ge=1, le=DB_INT_MAX),
    db: Session = Depends(get_db),
    now: int = Depends(get_now)
):
    """
    Update a work order.

    Only provided fields will be updated, e.g. `{"status": "completed"}`.
    """
    update_data = work_order_update.model_dump(exclude_unset=True)
    return WorkOrderService.update(db, work_order_id, update_data, now)


@router.delete("/{work_order_id}", response_model=DeletedRecord[WorkOrderResponse])
def delete_work_order(
    work_order_id: int = Path(..., ge=1, le=DB_INT_MAX),
    db: Session = Depends(get_db)
):
    deleted = WorkOrderService.delete(db, work_order_id)
    return {"message": "Work order deleted successfully", "data": deleted}
