"""
Query Builder - Turns list parameters into filtered, sorted, paginated queries.

Each entity declares a QuerySpec: which columns may be filtered, which are searched,
and which wire field names may be sorted on. Caller-supplied names are only ever
used as dictionary keys, never as SQL.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Sequence
import logging

from sqlalchemy import or_, asc, desc
from sqlalchemy.orm import Query, Session

from app.config import settings
from app.errors import InvalidFieldType
from app.validation import DB_INT_MAX
from app.models import Equipment, MaintenanceSchedule, MaintenanceLog, WorkOrder

logger = logging.getLogger(__name__)

ASCENDING = "asc"
DESCENDING = "desc"


@dataclass(frozen=True)
class QuerySpec:
    """Per-entity query configuration"""
    model: Any
    filters: Dict[str, Any]          # wire name -> column
    search_columns: Sequence[Any]
    sortable: Dict[str, Any]         # wire name -> column
    default_sort: str
    default_order: str = DESCENDING


@dataclass
class ListParams:
    """List request parameters as received from the caller"""
    filters: Dict[str, Any] = field(default_factory=dict)
    search: Optional[str] = None
    limit: Optional[int] = None
    offset: Optional[int] = None
    sort: Optional[str] = None
    order: Optional[str] = None


def clamp_limit(limit: Optional[int], default: Optional[int] = None) -> int:
    """Clamp a page size into [1, MAX_PAGE_SIZE]"""
    if limit is None:
        limit = default if default is not None else settings.DEFAULT_PAGE_SIZE
    return max(1, min(limit, settings.MAX_PAGE_SIZE))


def check_offset(offset: Optional[int]) -> int:
    if offset is None:
        return 0
    if not 0 <= offset <= DB_INT_MAX:
        raise InvalidFieldType("offset", "offset must be zero or a positive integer")
    return offset


def resolve_sort(spec: QuerySpec, sort: Optional[str], order: Optional[str]):
    """
    Resolve the sort column and direction.
    Unknown fields fall back to the entity default; unknown directions to its default order.
    """
    column = spec.sortable.get(sort) if sort else None
    if column is None:
        if sort:
            logger.debug(f"Ignoring unsupported sort field '{sort}' for {spec.model.__tablename__}")
        column = spec.sortable[spec.default_sort]

    direction = (order or "").strip().lower()
    if direction not in (ASCENDING, DESCENDING):
        direction = spec.default_order

    return column, direction


def apply_filters(query: Query, spec: QuerySpec, params: ListParams) -> Query:
    """Equality filters (AND) followed by the free-text search (OR)"""
    for name, value in params.filters.items():
        if value is None or value == "":
            continue
        column = spec.filters.get(name)
        if column is None:
            continue
        query = query.filter(column == value)

    if params.search:
        query = query.filter(
            or_(*[
                column.contains(params.search, autoescape=True)
                for column in spec.search_columns
            ])
        )

    return query


def paginate(query: Query, limit: Optional[int], offset: Optional[int], default_limit: Optional[int] = None) -> Query:
    return query.offset(check_offset(offset)).limit(clamp_limit(limit, default_limit))


def build_list_query(db: Session, spec: QuerySpec, params: ListParams) -> Query:
    """Build the complete list query for one entity"""
    query = apply_filters(db.query(spec.model), spec, params)

    column, direction = resolve_sort(spec, params.sort, params.order)
    order_fn = asc if direction == ASCENDING else desc
    # id breaks ties so pages never overlap
    query = query.order_by(order_fn(column), order_fn(spec.model.id))

    return paginate(query, params.limit, params.offset)


# ==================== ENTITY SPECS ====================

EQUIPMENT_QUERY = QuerySpec(
    model=Equipment,
    filters={
        "status": Equipment.status,
        "category": Equipment.category,
        "location": Equipment.location,
    },
    search_columns=(
        Equipment.name,
        Equipment.model,
        Equipment.manufacturer,
        Equipment.serial_number,
    ),
    sortable={
        "id": Equipment.id,
        "name": Equipment.name,
        "model": Equipment.model,
        "manufacturer": Equipment.manufacturer,
        "category": Equipment.category,
        "location": Equipment.location,
        "status": Equipment.status,
        "purchaseDate": Equipment.purchase_date,
        "nextMaintenance": Equipment.next_maintenance,
        "createdAt": Equipment.created_at,
        "updatedAt": Equipment.updated_at,
    },
    default_sort="createdAt",
)

SCHEDULE_QUERY = QuerySpec(
    model=MaintenanceSchedule,
    filters={
        "equipmentId": MaintenanceSchedule.equipment_id,
        "priority": MaintenanceSchedule.priority,
        "isActive": MaintenanceSchedule.is_active,
        "assignedTo": MaintenanceSchedule.assigned_to,
    },
    search_columns=(
        MaintenanceSchedule.title,
        MaintenanceSchedule.description,
    ),
    sortable={
        "id": MaintenanceSchedule.id,
        "equipmentId": MaintenanceSchedule.equipment_id,
        "title": MaintenanceSchedule.title,
        "priority": MaintenanceSchedule.priority,
        "nextDue": MaintenanceSchedule.next_due,
        "lastPerformed": MaintenanceSchedule.last_performed,
        "frequencyDays": MaintenanceSchedule.frequency_days,
        "createdAt": MaintenanceSchedule.created_at,
        "updatedAt": MaintenanceSchedule.updated_at,
    },
    default_sort="createdAt",
)

LOG_QUERY = QuerySpec(
    model=MaintenanceLog,
    filters={
        "equipmentId": MaintenanceLog.equipment_id,
        "scheduleId": MaintenanceLog.schedule_id,
        "type": MaintenanceLog.type,
        "status": MaintenanceLog.status,
        "performedBy": MaintenanceLog.performed_by,
    },
    search_columns=(
        MaintenanceLog.title,
        MaintenanceLog.description,
    ),
    sortable={
        "id": MaintenanceLog.id,
        "equipmentId": MaintenanceLog.equipment_id,
        "title": MaintenanceLog.title,
        "type": MaintenanceLog.type,
        "performedBy": MaintenanceLog.performed_by,
        "performedAt": MaintenanceLog.performed_at,
        "status": MaintenanceLog.status,
        "cost": MaintenanceLog.cost,
        "createdAt": MaintenanceLog.created_at,
        "updatedAt": MaintenanceLog.updated_at,
    },
    default_sort="performedAt",
)

WORK_ORDER_QUERY = QuerySpec(
    model=WorkOrder,
    filters={
        "equipmentId": WorkOrder.equipment_id,
        "status": WorkOrder.status,
        "priority": WorkOrder.priority,
        "type": WorkOrder.type,
        "assignedTo": WorkOrder.assigned_to,
    },
    search_columns=(
        WorkOrder.title,
        WorkOrder.description,
    ),
    sortable={
        "id": WorkOrder.id,
        "equipmentId": WorkOrder.equipment_id,
        "title": WorkOrder.title,
        "priority": WorkOrder.priority,
        "status": WorkOrder.status,
        "type": WorkOrder.type,
        "scheduledDate": WorkOrder.scheduled_date,
        "completedDate": WorkOrder.completed_date,
        "createdAt": WorkOrder.created_at,
        "updatedAt": WorkOrder.updated_at,
    },
    default_sort="createdAt",
)
