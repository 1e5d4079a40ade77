from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from workflowpro.database import get_db
from workflowpro.models import Vehicle
from workflowpro.schemas import AssetStatusUpdate, VehicleCreate, VehicleOut
from workflowpro.services import registry_service

router = APIRouter(prefix="/api/vehicles", tags=["vehicles"])


@router.get("", response_model=list[VehicleOut])
def list_vehicles(db: Session = Depends(get_db)):
    return registry_service.list_records(db, Vehicle)


@router.post("", response_model=VehicleOut, status_code=201)
def create_vehicle(data: VehicleCreate, db: Session = Depends(get_db)):
    return registry_service.create_record(db, Vehicle, data)


@router.delete("/{vehicle_id}", status_code=204)
def delete_vehicle(vehicle_id: str, db: Session = Depends(get_db)):
    registry_service.delete_record(db, Vehicle, vehicle_id)
    return Response(status_code=204)


@router.post("/{vehicle_id}/status", response_model=VehicleOut)
def update_vehicle_status(vehicle_id: str, data: AssetStatusUpdate, db: Session = Depends(get_db)):
    return registry_service.update_status(db, Vehicle, vehicle_id, data.status)
