"""
SQLAlchemy ORM models for the biomedical equipment maintenance tracker.
Defines database schema with relationships and constraints.

All timestamps are stored as integer epoch milliseconds, the same unit the API exchanges.
"""

from sqlalchemy import (
    Column, Integer, BigInteger, String, Float, Text,
    ForeignKey, Enum as SQLEnum, Index, Boolean, JSON
)
from sqlalchemy.orm import relationship
import enum
from app.database import Base


# ==================== STATUS ENUMS ====================

class EquipmentStatus(str, enum.Enum):
    """Equipment operational status"""
    OPERATIONAL = "operational"
    MAINTENANCE = "maintenance"
    OUT_OF_SERVICE = "out_of_service"
    RETIRED = "retired"


class Priority(str, enum.Enum):
    """Priority shared by maintenance schedules and work orders"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class WorkOrderStatus(str, enum.Enum):
    """Work order workflow status"""
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    ON_HOLD = "on_hold"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# Work orders still needing attention
ACTIVE_WORK_ORDER_STATUSES = (WorkOrderStatus.PENDING, WorkOrderStatus.IN_PROGRESS)


def _enum_column(enum_cls):
    # Persist the lowercase values, not the member names
    return SQLEnum(
        enum_cls,
        values_callable=lambda members: [m.value for m in members],
        native_enum=False,
        length=32,
    )


# ==================== CORE MODELS ====================

class Equipment(Base):
    """
    Biomedical device tracked by the maintenance program.
    Central entity referenced by schedules, logs and work orders.
    """
    __tablename__ = "equipment"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False, index=True)
    model = Column(String(100))
    serial_number = Column(String(100), unique=True)  # NULLs never collide
    manufacturer = Column(String(100))
    category = Column(String(100), index=True)
    location = Column(String(200), index=True)
    status = Column(
        _enum_column(EquipmentStatus),
        default=EquipmentStatus.OPERATIONAL,
        nullable=False,
        index=True
    )

    purchase_date = Column(BigInteger)
    warranty_expiry = Column(BigInteger)
    last_maintenance = Column(BigInteger)
    next_maintenance = Column(BigInteger)
    notes = Column(Text)

    # Timestamps
    created_at = Column(BigInteger, nullable=False, index=True)
    updated_at = Column(BigInteger, nullable=False)

    # Relationships (no cascade: dependents block deletion)
    schedules = relationship("MaintenanceSchedule", back_populates="equipment", passive_deletes="all")
    logs = relationship("MaintenanceLog", back_populates="equipment", passive_deletes="all")
    work_orders = relationship("WorkOrder", back_populates="equipment", passive_deletes="all")

    def __repr__(self):
        return f"<Equipment(id={self.id}, name='{self.name}', status='{self.status}')>"


class MaintenanceSchedule(Base):
    """
    Recurring maintenance obligation of one equipment item.
    next_due drives the overdue and upcoming views.
    """
    __tablename__ = "maintenance_schedules"

    id = Column(Integer, primary_key=True, index=True)
    equipment_id = Column(Integer, ForeignKey("equipment.id"), nullable=False, index=True)

    title = Column(String(200), nullable=False)
    description = Column(Text)
    frequency = Column(String(50))  # Label: monthly, quarterly, ...
    frequency_days = Column(Integer)
    last_performed = Column(BigInteger)
    next_due = Column(BigInteger, index=True)
    priority = Column(
        _enum_column(Priority),
        default=Priority.MEDIUM,
        nullable=False,
        index=True
    )
    estimated_duration = Column(Integer)  # Minutes
    assigned_to = Column(String(200))
    is_active = Column(Boolean, default=True, nullable=False)

    # Timestamps
    created_at = Column(BigInteger, nullable=False, index=True)
    updated_at = Column(BigInteger, nullable=False)

    # Relationships
    equipment = relationship("Equipment", back_populates="schedules")
    logs = relationship("MaintenanceLog", back_populates="schedule")

    # Indexes for the due-date views
    __table_args__ = (
        Index('idx_schedule_active_next_due', 'is_active', 'next_due'),
    )

    def __repr__(self):
        return f"<MaintenanceSchedule(id={self.id}, equipment_id={self.equipment_id}, next_due={self.next_due})>"


class MaintenanceLog(Base):
    """
    Record of maintenance work actually performed.
    Optionally linked to the schedule that prompted it.
    """
    __tablename__ = "maintenance_logs"

    id = Column(Integer, primary_key=True, index=True)
    equipment_id = Column(Integer, ForeignKey("equipment.id"), nullable=False, index=True)
    schedule_id = Column(Integer, ForeignKey("maintenance_schedules.id", ondelete="SET NULL"), index=True)

    title = Column(String(200), nullable=False)
    description = Column(Text)
    type = Column(String(100), nullable=False, index=True)  # preventive, corrective, calibration, ...
    performed_by = Column(String(200), nullable=False)
    performed_at = Column(BigInteger, nullable=False, index=True)
    duration = Column(Integer)  # Minutes
    status = Column(String(50), default="completed", nullable=False)
    parts_replaced = Column(JSON)  # List of part objects
    cost = Column(Float)
    notes = Column(Text)

    # Timestamps
    created_at = Column(BigInteger, nullable=False, index=True)
    updated_at = Column(BigInteger, nullable=False)

    # Relationships
    equipment = relationship("Equipment", back_populates="logs")
    schedule = relationship("MaintenanceSchedule", back_populates="logs")

    __table_args__ = (
        Index('idx_log_equipment_performed', 'equipment_id', 'performed_at'),
    )

    def __repr__(self):
        return f"<MaintenanceLog(id={self.id}, equipment_id={self.equipment_id}, type='{self.type}')>"


class WorkOrder(Base):
    """
    Tracked service request for one equipment item.
    Independent from the recurring schedule mechanism.
    """
    __tablename__ = "work_orders"

    id = Column(Integer, primary_key=True, index=True)
    equipment_id = Column(Integer, ForeignKey("equipment.id"), nullable=False, index=True)

    title = Column(String(200), nullable=False)
    description = Column(Text)
    priority = Column(
        _enum_column(Priority),
        default=Priority.MEDIUM,
        nullable=False,
        index=True
    )
    status = Column(
        _enum_column(WorkOrderStatus),
        default=WorkOrderStatus.PENDING,
        nullable=False,
        index=True
    )
    type = Column(String(100), nullable=False)  # repair, inspection, installation, ...
    reported_by = Column(String(200))
    assigned_to = Column(String(200))

    scheduled_date = Column(BigInteger)
    completed_date = Column(BigInteger)

    # Costs
    estimated_cost = Column(Float)
    actual_cost = Column(Float)
    notes = Column(Text)

    # Timestamps
    created_at = Column(BigInteger, nullable=False, index=True)
    updated_at = Column(BigInteger, nullable=False)

    # Relationships
    equipment = relationship("Equipment", back_populates="work_orders")

    def __repr__(self):
        return f"<WorkOrder(id={self.id}, equipment_id={self.equipment_id}, status='{self.status}')>"
