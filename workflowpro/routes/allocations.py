from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from workflowpro.database import get_db
from workflowpro.schemas import AllocationCreate, AllocationOut
from workflowpro.services import allocation_service

router = APIRouter(prefix="/api/allocations", tags=["allocations"])


@router.get("", response_model=list[AllocationOut])
def list_allocations(
    project_id: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    return allocation_service.list_allocations(db, project_id)


@router.post("", response_model=AllocationOut, status_code=201)
def create_allocation(data: AllocationCreate, db: Session = Depends(get_db)):
    return allocation_service.assign(db, data.project_id, data.asset)


@router.delete("/{allocation_id}", status_code=204)
def release_allocation(allocation_id: str, db: Session = Depends(get_db)):
    allocation_service.release(db, allocation_id)
    return Response(status_code=204)
