import uuid
from datetime import datetime

from sqlalchemy import Column, Date, DateTime, Enum, ForeignKey, Index, String, Text, event
from sqlalchemy.orm import relationship

from workflowpro.database import Base
from workflowpro.errors import AllocationInvariantError

WORKER_STATUSES = ("active", "inactive", "on_leave")
PROJECT_STATUSES = ("planning", "in_progress", "completed", "on_hold")
ASSET_STATUSES = ("available", "in_use", "maintenance")


def _status_enum(values, name):
    return Enum(*values, name=name, native_enum=False, create_constraint=True, length=20)


def _new_id() -> str:
    return str(uuid.uuid4())


class Worker(Base):
    __tablename__ = "workers"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(Text, nullable=False)
    role = Column(Text, nullable=False)
    email = Column(Text, unique=True, nullable=True)
    phone = Column(Text, nullable=True)
    status = Column(_status_enum(WORKER_STATUSES, "worker_status"), nullable=False, default="active")
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    allocations = relationship("ResourceAllocation", back_populates="worker", passive_deletes=True)

    def __repr__(self):
        return f"<Worker {self.name} ({self.role})>"


class Project(Base):
    __tablename__ = "projects"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    location = Column(Text, nullable=True)
    status = Column(_status_enum(PROJECT_STATUSES, "project_status"), nullable=False, default="planning")
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    allocations = relationship(
        "ResourceAllocation",
        back_populates="project",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self):
        return f"<Project {self.name} ({self.status})>"


class Vehicle(Base):
    __tablename__ = "vehicles"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(Text, nullable=False)
    type = Column(Text, nullable=True)
    license_plate = Column(Text, unique=True, nullable=True)
    status = Column(_status_enum(ASSET_STATUSES, "asset_status"), nullable=False, default="available")
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    allocations = relationship("ResourceAllocation", back_populates="vehicle", passive_deletes=True)

    def __repr__(self):
        return f"<Vehicle {self.name} {self.license_plate or ''}>"


class Equipment(Base):
    __tablename__ = "equipment"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(Text, nullable=False)
    type = Column(Text, nullable=True)
    serial_number = Column(Text, unique=True, nullable=True)
    status = Column(_status_enum(ASSET_STATUSES, "asset_status"), nullable=False, default="available")
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    allocations = relationship("ResourceAllocation", back_populates="equipment", passive_deletes=True)

    def __repr__(self):
        return f"<Equipment {self.name} {self.serial_number or ''}>"


class ResourceAllocation(Base):
    __tablename__ = "resource_allocations"
    __table_args__ = (
        Index("ix_allocations_project", "project_id"),
    )

    id = Column(String(36), primary_key=True, default=_new_id)
    project_id = Column(String(36), ForeignKey("projects.id", ondelete="CASCADE"), nullable=False)
    worker_id = Column(String(36), ForeignKey("workers.id", ondelete="SET NULL"), nullable=True)
    vehicle_id = Column(String(36), ForeignKey("vehicles.id", ondelete="SET NULL"), nullable=True)
    equipment_id = Column(String(36), ForeignKey("equipment.id", ondelete="SET NULL"), nullable=True)
    assigned_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    project = relationship("Project", back_populates="allocations")
    worker = relationship("Worker", back_populates="allocations")
    vehicle = relationship("Vehicle", back_populates="allocations")
    equipment = relationship("Equipment", back_populates="allocations")

    def __repr__(self):
        return (
            f"<Allocation {self.project_id}: worker={self.worker_id} "
            f"vehicle={self.vehicle_id} equipment={self.equipment_id}>"
        )


# Enforced on insert only: deleting an asset later may leave every reference
# null and the row must survive that.
@event.listens_for(ResourceAllocation, "before_insert")
def _require_an_asset(mapper, connection, target):
    if target.worker_id is None and target.vehicle_id is None and target.equipment_id is None:
        raise AllocationInvariantError(
            "Allocation must reference at least one of worker_id, vehicle_id or equipment_id"
        )


TRACKED_MODELS = (Worker, Project, Vehicle, Equipment, ResourceAllocation)
