"""
Record services - list/get/create/update/delete for every tracked entity.

Routers stay thin: they parse the request, call one of these methods and
serialize the result. Every failure is raised as a typed TrackerError.
"""

from sqlalchemy.orm import Session
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from pydantic.alias_generators import to_camel
from typing import Any, Dict, List, Optional, Tuple
import logging

from app.errors import (
    NotFound, DuplicateValue, ReferentialIntegrityViolation, Internal
)
from app.models import Equipment, MaintenanceSchedule, MaintenanceLog, WorkOrder
from app.services.query_builder import (
    QuerySpec, ListParams, build_list_query,
    EQUIPMENT_QUERY, SCHEDULE_QUERY, LOG_QUERY, WORK_ORDER_QUERY
)

logger = logging.getLogger(__name__)

# Foreign key column -> (referenced model, error code, message)
EQUIPMENT_REFERENCE = (Equipment, "EQUIPMENT_NOT_FOUND", "Equipment not found")
SCHEDULE_REFERENCE = (MaintenanceSchedule, "SCHEDULE_NOT_FOUND", "Maintenance schedule not found")


class RecordService:
    """Base service class for one entity"""

    model: Any = None
    query_spec: QuerySpec = None
    label: str = "Record"
    references: Dict[str, Tuple[Any, str, str]] = {}

    # ==================== READ ====================

    @classmethod
    def list(cls, db: Session, params: ListParams) -> List[Any]:
        return build_list_query(db, cls.query_spec, params).all()

    @classmethod
    def get(cls, db: Session, record_id: int):
        record = db.get(cls.model, record_id)
        if record is None:
            raise NotFound(f"{cls.label} not found")
        return record

    # ==================== WRITE ====================

    @classmethod
    def create(cls, db: Session, data: Dict[str, Any], now: int):
        """Insert a validated record; server sets created_at/updated_at"""
        cls.check_references(db, data)
        cls.before_create(db, data)

        record = cls.model(**data, created_at=now, updated_at=now)
        db.add(record)
        cls._commit(db, data)
        db.refresh(record)

        logger.info(f"Created {cls.label} id={record.id}")
        return record

    @classmethod
    def update(cls, db: Session, record_id: int, data: Dict[str, Any], now: int):
        """
        Partial update: only keys present in `data` change.
        updated_at is refreshed even when `data` is empty.
        """
        record = cls.get(db, record_id)
        cls.check_references(db, data)
        cls.before_update(db, record, data)

        for field, value in data.items():
            setattr(record, field, value)
        record.updated_at = now

        cls._commit(db, data)
        db.refresh(record)

        logger.info(f"Updated {cls.label} id={record.id} fields={sorted(data)}")
        return record

    @classmethod
    def delete(cls, db: Session, record_id: int) -> Dict[str, Any]:
        """Delete a record and return its last state"""
        record = cls.get(db, record_id)
        cls.before_delete(db, record)

        snapshot = cls.snapshot(record)
        db.delete(record)
        cls._commit(db)

        logger.info(f"Deleted {cls.label} id={record_id}")
        return snapshot

    # ==================== HOOKS ====================

    @classmethod
    def before_create(cls, db: Session, data: Dict[str, Any]) -> None:
        pass

    @classmethod
    def before_update(cls, db: Session, record, data: Dict[str, Any]) -> None:
        pass

    @classmethod
    def before_delete(cls, db: Session, record) -> None:
        pass

    @classmethod
    def integrity_error(cls, db: Session, exc: IntegrityError, data: Dict[str, Any]):
        """
        Map a constraint failure raised at commit time.
        Foreign keys are checked before writing; reaching this means the
        referenced row vanished in between, so checking again names it.
        """
        try:
            cls.check_references(db, data)
        except NotFound as missing:
            return missing
        return Internal("Internal server error")

    # ==================== HELPERS ====================

    @classmethod
    def check_references(cls, db: Session, data: Dict[str, Any]) -> None:
        """Every supplied foreign key must point at an existing row"""
        for key, (model, code, message) in cls.references.items():
            value = data.get(key)
            if value is None:
                continue
            if db.get(model, value) is None:
                logger.warning(f"Rejected {cls.label} write: {key}={value} does not exist")
                raise NotFound(message, code=code, field=to_camel(key))

    @classmethod
    def snapshot(cls, record) -> Dict[str, Any]:
        return {
            column.key: getattr(record, column.key)
            for column in cls.model.__mapper__.column_attrs
        }

    @classmethod
    def _commit(cls, db: Session, data: Optional[Dict[str, Any]] = None) -> None:
        try:
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            logger.warning(f"{cls.label} write rejected by the database: {exc.orig}")
            raise cls.integrity_error(db, exc, data or {}) from exc
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error(f"{cls.label} write failed: {exc}", exc_info=True)
            raise Internal("Internal server error") from exc


# ==================== ENTITY SERVICES ====================

class EquipmentService(RecordService):
    model = Equipment
    query_spec = EQUIPMENT_QUERY
    label = "Equipment"

    @staticmethod
    def _serial_taken(db: Session, serial_number: Optional[str], exclude_id: Optional[int] = None) -> bool:
        if serial_number is None:
            return False
        query = db.query(Equipment.id).filter(Equipment.serial_number == serial_number)
        if exclude_id is not None:
            query = query.filter(Equipment.id != exclude_id)
        return query.first() is not None

    @classmethod
    def _duplicate_serial(cls, serial_number: Optional[str] = None) -> DuplicateValue:
        message = "Serial number already exists"
        if serial_number:
            message = f"Equipment with serial number '{serial_number}' already exists"
        return DuplicateValue(message, code="DUPLICATE_SERIAL_NUMBER", field="serialNumber")

    @classmethod
    def before_create(cls, db: Session, data: Dict[str, Any]) -> None:
        if cls._serial_taken(db, data.get("serial_number")):
            raise cls._duplicate_serial(data["serial_number"])

    @classmethod
    def before_update(cls, db: Session, record, data: Dict[str, Any]) -> None:
        if "serial_number" in data and cls._serial_taken(db, data["serial_number"], exclude_id=record.id):
            raise cls._duplicate_serial(data["serial_number"])

    @classmethod
    def before_delete(cls, db: Session, record) -> None:
        """Equipment cannot be deleted while schedules, logs or work orders reference it"""
        dependents = {
            "maintenance schedules": db.query(func.count(MaintenanceSchedule.id)).filter(
                MaintenanceSchedule.equipment_id == record.id).scalar(),
            "maintenance logs": db.query(func.count(MaintenanceLog.id)).filter(
                MaintenanceLog.equipment_id == record.id).scalar(),
            "work orders": db.query(func.count(WorkOrder.id)).filter(
                WorkOrder.equipment_id == record.id).scalar(),
        }
        blocking = {name: count for name, count in dependents.items() if count}

        if blocking:
            detail = ", ".join(f"{count} {name}" for name, count in blocking.items())
            logger.warning(f"Refused to delete Equipment id={record.id}: {detail}")
            raise ReferentialIntegrityViolation(
                f"Cannot delete equipment with associated maintenance records or work orders ({detail})"
            )

    @classmethod
    def integrity_error(cls, db: Session, exc: IntegrityError, data: Dict[str, Any]):
        text = str(exc.orig).lower()
        if "unique" in text or "duplicate" in text:
            return cls._duplicate_serial()
        if "foreign key" in text:
            return ReferentialIntegrityViolation(
                "Cannot delete equipment with associated maintenance records or work orders"
            )
        return Internal("Internal server error")

    @classmethod
    def maintenance_history(cls, db: Session, equipment_id: int) -> List[MaintenanceLog]:
        """All logs of one equipment item, most recent work first"""
        cls.get(db, equipment_id)
        return (
            db.query(MaintenanceLog)
            .filter(MaintenanceLog.equipment_id == equipment_id)
            .order_by(MaintenanceLog.performed_at.desc(), MaintenanceLog.id.desc())
            .all()
        )


class ScheduleService(RecordService):
    model = MaintenanceSchedule
    query_spec = SCHEDULE_QUERY
    label = "Maintenance schedule"
    references = {"equipment_id": EQUIPMENT_REFERENCE}

    @classmethod
    def before_delete(cls, db: Session, record) -> None:
        # Logs are history: they outlive the schedule that prompted them
        detached = (
            db.query(MaintenanceLog)
            .filter(MaintenanceLog.schedule_id == record.id)
            .update({MaintenanceLog.schedule_id: None}, synchronize_session="fetch")
        )
        if detached:
            logger.info(f"Detached {detached} maintenance logs from schedule id={record.id}")


class LogService(RecordService):
    model = MaintenanceLog
    query_spec = LOG_QUERY
    label = "Maintenance log"
    references = {
        "equipment_id": EQUIPMENT_REFERENCE,
        "schedule_id": SCHEDULE_REFERENCE,
    }


class WorkOrderService(RecordService):
    model = WorkOrder
    query_spec = WORK_ORDER_QUERY
    label = "Work order"
    references = {"equipment_id": EQUIPMENT_REFERENCE}
