import math

from sqlalchemy.orm import Session

from workflowpro.models import Equipment, Project, Vehicle, Worker
from workflowpro.schemas import (
    AllocationOut, DashboardSnapshot, DashboardStats, EquipmentOut, ProjectOut, VehicleOut, WorkerOut,
)
from workflowpro.services.allocation_service import list_allocations
from workflowpro.services.registry_service import list_records


def compute_stats(workers, projects, vehicles, equipment) -> DashboardStats:
    available = sum(1 for e in equipment if e.status == "available")
    # Half-up rounding: 2.5% shows as 3%, not banker's 2%
    pct = math.floor(available * 100 / len(equipment) + 0.5) if equipment else 0
    return DashboardStats(
        active_projects=sum(1 for p in projects if p.status == "in_progress"),
        total_workers=len(workers),
        vehicles_in_use=sum(1 for v in vehicles if v.status == "in_use"),
        vehicles_total=len(vehicles),
        equipment_available_pct=pct,
    )


def load_snapshot(db: Session) -> DashboardSnapshot:
    """Read all five collections in one pass for a wholesale client reload."""
    workers = list_records(db, Worker)
    projects = list_records(db, Project)
    vehicles = list_records(db, Vehicle)
    equipment = list_records(db, Equipment)
    return DashboardSnapshot(
        workers=[WorkerOut.model_validate(w) for w in workers],
        projects=[ProjectOut.model_validate(p) for p in projects],
        vehicles=[VehicleOut.model_validate(v) for v in vehicles],
        equipment=[EquipmentOut.model_validate(e) for e in equipment],
        allocations=[AllocationOut.model_validate(a) for a in list_allocations(db)],
        stats=compute_stats(workers, projects, vehicles, equipment),
    )
