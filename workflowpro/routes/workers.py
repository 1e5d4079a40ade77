from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from workflowpro.database import get_db
from workflowpro.models import Worker
from workflowpro.schemas import WorkerCreate, WorkerOut, WorkerStatusUpdate
from workflowpro.services import registry_service

router = APIRouter(prefix="/api/workers", tags=["workers"])


@router.get("", response_model=list[WorkerOut])
def list_workers(db: Session = Depends(get_db)):
    return registry_service.list_records(db, Worker)


@router.post("", response_model=WorkerOut, status_code=201)
def create_worker(data: WorkerCreate, db: Session = Depends(get_db)):
    return registry_service.create_record(db, Worker, data)


@router.delete("/{worker_id}", status_code=204)
def delete_worker(worker_id: str, db: Session = Depends(get_db)):
    registry_service.delete_record(db, Worker, worker_id)
    return Response(status_code=204)


@router.post("/{worker_id}/status", response_model=WorkerOut)
def update_worker_status(worker_id: str, data: WorkerStatusUpdate, db: Session = Depends(get_db)):
    return registry_service.update_status(db, Worker, worker_id, data.status)
