from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from workflowpro.database import get_db
from workflowpro.models import Equipment
from workflowpro.schemas import AssetStatusUpdate, EquipmentCreate, EquipmentOut
from workflowpro.services import registry_service

router = APIRouter(prefix="/api/equipment", tags=["equipment"])


@router.get("", response_model=list[EquipmentOut])
def list_equipment(db: Session = Depends(get_db)):
    return registry_service.list_records(db, Equipment)


@router.post("", response_model=EquipmentOut, status_code=201)
def create_equipment(data: EquipmentCreate, db: Session = Depends(get_db)):
    return registry_service.create_record(db, Equipment, data)


@router.delete("/{equipment_id}", status_code=204)
def delete_equipment(equipment_id: str, db: Session = Depends(get_db)):
    registry_service.delete_record(db, Equipment, equipment_id)
    return Response(status_code=204)


@router.post("/{equipment_id}/status", response_model=EquipmentOut)
def update_equipment_status(equipment_id: str, data: AssetStatusUpdate, db: Session = Depends(get_db)):
    return registry_service.update_status(db, Equipment, equipment_id, data.status)
