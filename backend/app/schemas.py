"""
Pydantic schemas for request/response validation and serialization.
Provides data validation, type checking, and API documentation.

The API speaks camelCase JSON; attributes stay snake_case so
`model_dump(exclude_unset=True)` maps straight onto the ORM columns.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Optional, List, Dict, Any, Generic, TypeVar, Annotated

from app.models import EquipmentStatus, Priority, WorkOrderStatus
from app.validation import (
    RequiredText, RequiredInt, NonBlankText, NonBlankInt,
    OptionalText, OptionalInt, OptionalFloat, Timestamp,
    default_if_blank, not_blank
)


class CamelModel(BaseModel):
    """Base schema exchanging camelCase keys"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        allow_inf_nan=False,
    )


class RecordResponse(CamelModel):
    """Fields every stored record carries"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    id: int
    created_at: int
    updated_at: int


# ==================== EQUIPMENT SCHEMAS ====================

class EquipmentCreate(CamelModel):
    name: RequiredText
    model: OptionalText = None
    serial_number: OptionalText = None
    manufacturer: OptionalText = None
    category: OptionalText = None
    location: OptionalText = None
    status: Annotated[EquipmentStatus, default_if_blank(EquipmentStatus.OPERATIONAL)] = EquipmentStatus.OPERATIONAL
    purchase_date: Timestamp = None
    warranty_expiry: Timestamp = None
    last_maintenance: Timestamp = None
    next_maintenance: Timestamp = None
    notes: OptionalText = None


class EquipmentUpdate(CamelModel):
    """Partial update: only supplied fields are applied"""
    name: NonBlankText = None
    model: OptionalText = None
    serial_number: OptionalText = None
    manufacturer: OptionalText = None
    category: OptionalText = None
    location: OptionalText = None
    status: Annotated[EquipmentStatus, not_blank()] = None
    purchase_date: Timestamp = None
    warranty_expiry: Timestamp = None
    last_maintenance: Timestamp = None
    next_maintenance: Timestamp = None
    notes: OptionalText = None


class EquipmentResponse(RecordResponse):
    name: str
    model: Optional[str] = None
    serial_number: Optional[str] = None
    manufacturer: Optional[str] = None
    category: Optional[str] = None
    location: Optional[str] = None
    status: EquipmentStatus
    purchase_date: Optional[int] = None
    warranty_expiry: Optional[int] = None
    last_maintenance: Optional[int] = None
    next_maintenance: Optional[int] = None
    notes: Optional[str] = None


# ==================== MAINTENANCE SCHEDULE SCHEMAS ====================

class ScheduleCreate(CamelModel):
    equipment_id: RequiredInt
    title: RequiredText
    description: OptionalText = None
    frequency: OptionalText = None
    frequency_days: OptionalInt = None
    last_performed: Timestamp = None
    next_due: Timestamp = None
    priority: Annotated[Priority, default_if_blank(Priority.MEDIUM)] = Priority.MEDIUM
    estimated_duration: OptionalInt = None
    assigned_to: OptionalText = None
    is_active: Annotated[bool, default_if_blank(True)] = True


class ScheduleUpdate(CamelModel):
    """Partial update: only supplied fields are applied"""
    equipment_id: NonBlankInt = None
    title: NonBlankText = None
    description: OptionalText = None
    frequency: OptionalText = None
    frequency_days: OptionalInt = None
    last_performed: Timestamp = None
    next_due: Timestamp = None
    priority: Annotated[Priority, not_blank()] = None
    estimated_duration: OptionalInt = None
    assigned_to: OptionalText = None
    is_active: Annotated[bool, not_blank()] = None


class ScheduleResponse(RecordResponse):
    equipment_id: int
    title: str
    description: Optional[str] = None
    frequency: Optional[str] = None
    frequency_days: Optional[int] = None
    last_performed: Optional[int] = None
    next_due: Optional[int] = None
    priority: Priority
    estimated_duration: Optional[int] = None
    assigned_to: Optional[str] = None
    is_active: bool


# ==================== MAINTENANCE LOG SCHEMAS ====================

class LogCreate(CamelModel):
    equipment_id: RequiredInt
    schedule_id: OptionalInt = None
    title: RequiredText
    description: OptionalText = None
    type: RequiredText
    performed_by: RequiredText
    performed_at: RequiredInt
    duration: OptionalInt = None
    status: Annotated[str, default_if_blank("completed")] = "completed"
    parts_replaced: Optional[List[Dict[str, Any]]] = None
    cost: OptionalFloat = None
    notes: OptionalText = None


class LogUpdate(CamelModel):
    """Partial update: only supplied fields are applied"""
    equipment_id: NonBlankInt = None
    schedule_id: OptionalInt = None
    title: NonBlankText = None
    description: OptionalText = None
    type: NonBlankText = None
    performed_by: NonBlankText = None
    performed_at: NonBlankInt = None
    duration: OptionalInt = None
    status: NonBlankText = None
    parts_replaced: Optional[List[Dict[str, Any]]] = None
    cost: OptionalFloat = None
    notes: OptionalText = None


class LogResponse(RecordResponse):
    equipment_id: int
    schedule_id: Optional[int] = None
    title: str
    description: Optional[str] = None
    type: str
    performed_by: str
    performed_at: int
    duration: Optional[int] = None
    status: str
    parts_replaced: Optional[List[Dict[str, Any]]] = None
    cost: Optional[float] = None
    notes: Optional[str] = None


# ==================== WORK ORDER SCHEMAS ====================

class WorkOrderCreate(CamelModel):
    equipment_id: RequiredInt
    title: RequiredText
    description: OptionalText = None
    priority: Annotated[Priority, default_if_blank(Priority.MEDIUM)] = Priority.MEDIUM
    status: Annotated[WorkOrderStatus, default_if_blank(WorkOrderStatus.PENDING)] = WorkOrderStatus.PENDING
    type: RequiredText
    reported_by: OptionalText = None
    assigned_to: OptionalText = None
    scheduled_date: Timestamp = None
    completed_date: Timestamp = None
    estimated_cost: OptionalFloat = None
    actual_cost: OptionalFloat = None
    notes: OptionalText = None


class WorkOrderUpdate(CamelModel):
    """Partial update: only supplied fields are applied"""
    equipment_id: NonBlankInt = None
    title: NonBlankText = None
    description: OptionalText = None
    priority: Annotated[Priority, not_blank()] = None
    status: Annotated[WorkOrderStatus, not_blank()] = None
    type: NonBlankText = None
    reported_by: OptionalText = None
    assigned_to: OptionalText = None
    scheduled_date: Timestamp = None
    completed_date: Timestamp = None
    estimated_cost: OptionalFloat = None
    actual_cost: OptionalFloat = None
    notes: OptionalText = None


class WorkOrderResponse(RecordResponse):
    equipment_id: int
    title: str
    description: Optional[str] = None
    priority: Priority
    status: WorkOrderStatus
    type: str
    reported_by: Optional[str] = None
    assigned_to: Optional[str] = None
    scheduled_date: Optional[int] = None
    completed_date: Optional[int] = None
    estimated_cost: Optional[float] = None
    actual_cost: Optional[float] = None
    notes: Optional[str] = None


# ==================== DELETE SCHEMAS ====================

RecordT = TypeVar("RecordT")


class DeletedRecord(CamelModel, Generic[RecordT]):
    """Deleted record echoed back to the caller"""
    message: str
    data: RecordT


# ==================== DASHBOARD SCHEMAS ====================

class DashboardStats(CamelModel):
    """Point-in-time maintenance dashboard figures"""
    equipment_by_status: Dict[str, int]
    total_equipment: int = 0
    upcoming_maintenance: int = 0
    overdue_maintenance: int = 0
    recent_logs: int = 0
    active_work_orders: int = 0
