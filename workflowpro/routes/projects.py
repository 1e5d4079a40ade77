from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from workflowpro.database import get_db
from workflowpro.models import Project
from workflowpro.schemas import AllocationOut, ProjectCreate, ProjectOut, ProjectStatusUpdate
from workflowpro.services import registry_service
from workflowpro.services.allocation_service import list_allocations

router = APIRouter(prefix="/api/projects", tags=["projects"])


@router.get("", response_model=list[ProjectOut])
def list_projects(db: Session = Depends(get_db)):
    return registry_service.list_records(db, Project)


@router.post("", response_model=ProjectOut, status_code=201)
def create_project(data: ProjectCreate, db: Session = Depends(get_db)):
    return registry_service.create_record(db, Project, data)


@router.delete("/{project_id}", status_code=204)
def delete_project(project_id: str, db: Session = Depends(get_db)):
    """Delete a project; its allocations go with it."""
    registry_service.delete_record(db, Project, project_id)
    return Response(status_code=204)


@router.post("/{project_id}/status", response_model=ProjectOut)
def update_project_status(project_id: str, data: ProjectStatusUpdate, db: Session = Depends(get_db)):
    return registry_service.update_status(db, Project, project_id, data.status)


@router.get("/{project_id}/allocations", response_model=list[AllocationOut])
def list_project_allocations(project_id: str, db: Session = Depends(get_db)):
    return list_allocations(db, project_id)
