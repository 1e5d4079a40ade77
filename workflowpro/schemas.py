from datetime import date, datetime
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

WorkerStatus = Literal["active", "inactive", "on_leave"]
ProjectStatus = Literal["planning", "in_progress", "completed", "on_hold"]
AssetStatus = Literal["available", "in_use", "maintenance"]

RequiredText = Annotated[str, Field(min_length=1)]


# --- Worker ---
class WorkerCreate(BaseModel):
    name: RequiredText
    role: RequiredText
    email: Optional[str] = None
    phone: Optional[str] = None
    status: WorkerStatus = "active"


class WorkerOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    name: str
    role: str
    email: Optional[str] = None
    phone: Optional[str] = None
    status: WorkerStatus
    created_at: datetime
    updated_at: datetime


class WorkerStatusUpdate(BaseModel):
    status: WorkerStatus


# --- Project ---
class ProjectCreate(BaseModel):
    name: RequiredText
    description: Optional[str] = None
    location: Optional[str] = None
    status: ProjectStatus = "planning"
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @model_validator(mode="after")
    def end_after_start(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class ProjectOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    name: str
    description: Optional[str] = None
    location: Optional[str] = None
    status: ProjectStatus
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    created_at: datetime
    updated_at: datetime


class ProjectStatusUpdate(BaseModel):
    status: ProjectStatus


# --- Vehicle ---
class VehicleCreate(BaseModel):
    name: RequiredText
    type: Optional[str] = None
    license_plate: Optional[str] = None
    status: AssetStatus = "available"


class VehicleOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    name: str
    type: Optional[str] = None
    license_plate: Optional[str] = None
    status: AssetStatus
    created_at: datetime
    updated_at: datetime


# --- Equipment ---
class EquipmentCreate(BaseModel):
    name: RequiredText
    type: Optional[str] = None
    serial_number: Optional[str] = None
    status: AssetStatus = "available"


class EquipmentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    name: str
    type: Optional[str] = None
    serial_number: Optional[str] = None
    status: AssetStatus
    created_at: datetime
    updated_at: datetime


class AssetStatusUpdate(BaseModel):
    status: AssetStatus


# --- Allocation ---
class WorkerRef(BaseModel):
    kind: Literal["worker"] = "worker"
    id: RequiredText


class VehicleRef(BaseModel):
    kind: Literal["vehicle"] = "vehicle"
    id: RequiredText


class EquipmentRef(BaseModel):
    kind: Literal["equipment"] = "equipment"
    id: RequiredText


AssetRef = Annotated[Union[WorkerRef, VehicleRef, EquipmentRef], Field(discriminator="kind")]


class AllocationCreate(BaseModel):
    project_id: RequiredText
    asset: AssetRef


class AllocationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    project_id: str
    worker_id: Optional[str] = None
    vehicle_id: Optional[str] = None
    equipment_id: Optional[str] = None
    assigned_at: datetime


# --- Dashboard ---
class DashboardStats(BaseModel):
    active_projects: int
    total_workers: int
    vehicles_in_use: int
    vehicles_total: int
    equipment_available_pct: int


class DashboardSnapshot(BaseModel):
    workers: list[WorkerOut]
    projects: list[ProjectOut]
    vehicles: list[VehicleOut]
    equipment: list[EquipmentOut]
    allocations: list[AllocationOut]
    stats: DashboardStats


# --- Import ---
class ImportResult(BaseModel):
    filename: str
    import_type: str
    records_total: int
    records_imported: int
    records_skipped: int
    records_errors: int
    errors: list[str]
