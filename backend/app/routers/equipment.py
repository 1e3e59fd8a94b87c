"""
Equipment router - Handles all equipment/device related endpoints.
Provides CRUD operations and the maintenance history of one device.
"""

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session
from typing import List, Optional, Union

from app.clock import get_now
from app.database import get_db
from app.models import EquipmentStatus
from app.schemas import (
    EquipmentCreate,
    EquipmentUpdate,
    EquipmentResponse,
    LogResponse,
    DeletedRecord
)
from app.services.query_builder import ListParams
from app.services.record_service import EquipmentService
from app.validation import parse_identifier, DB_INT_MAX

router = APIRouter()


@router.get("", response_model=Union[List[EquipmentResponse], EquipmentResponse])
def list_equipment(
    id: Optional[str] = Query(None, description="Fetch a single record by id"),
    status: Optional[EquipmentStatus] = None,
    category: Optional[str] = None,
    location: Optional[str] = None,
    search: Optional[str] = Query(None, description="Search in name, model, manufacturer, serial number"),
    limit: Optional[int] = Query(None, description="Page size (default 10, max 100)"),
    offset: Optional[int] = Query(None, description="Rows to skip"),
    sort: Optional[str] = None,
    order: Optional[str] = None,
    db: Session = Depends(get_db)
):
    """
    List equipment with optional filtering, search, sorting and pagination.

    **Filters:**
    - status, category, location: exact match
    - search: substring of name, model, manufacturer or serial number

    With `id` the single matching record is returned as an object.
    """
    if id is not None:
        return EquipmentService.get(db, parse_identifier(id))

    params = ListParams(
        filters={"status": status, "category": category, "location": location},
        search=search,
        limit=limit,
        offset=offset,
        sort=sort,
        order=order,
    )
    return EquipmentService.list(db, params)


@router.get("/{equipment_id}", response_model=EquipmentResponse)
def get_equipment(
    equipment_id: int = Path(..., ge=1, le=DB_INT_MAX),
    db: Session = Depends(get_db)
):
    """Get equipment by ID."""
    return EquipmentService.get(db, equipment_id)


@router.get("/{equipment_id}/maintenance-history", response_model=List[LogResponse])
def get_maintenance_history(
    equipment_id: int = Path(..., ge=1, le=DB_INT_MAX),
    db: Session = Depends(get_db)
):
    """All maintenance logs of one device, most recent first."""
    return EquipmentService.maintenance_history(db, equipment_id)


@router.post("", response_model=EquipmentResponse, status_code=201)
def create_equipment(
    equipment: EquipmentCreate,
    db: Session = Depends(get_db),
    now: int = Depends(get_now)
):
    """
    Create new equipment.

    **Validations:**
    - Name is required
    - Serial number must be unique (if provided)
    """
    return EquipmentService.create(db, equipment.model_dump(), now)


@router.put("/{equipment_id}", response_model=EquipmentResponse)
def update_equipment(
    equipment_update: EquipmentUpdate,
    equipment_id: int = Path(..., ge=1, le=DB_INT_MAX),
    db: Session = Depends(get_db),
    now: int = Depends(get_now)
):
    """
    Update equipment by ID.

    Only provided fields will be updated.
    """
    update_data = equipment_update.model_dump(exclude_unset=True)
    return EquipmentService.update(db, equipment_id, update_data, now)


@router.delete("/{equipment_id}", response_model=DeletedRecord[EquipmentResponse])
def delete_equipment(
    equipment_id: int = Path(..., ge=1, le=DB_INT_MAX),
    db: Session = Depends(get_db)
):
    """
    Delete equipment by ID.

    Refused while maintenance schedules, logs or work orders reference it.
    """
    deleted = EquipmentService.delete(db, equipment_id)
    return {"message": "Equipment deleted successfully", "data": deleted}
