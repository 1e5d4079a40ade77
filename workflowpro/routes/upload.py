from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from sqlalchemy.orm import Session

from workflowpro.database import get_db
from workflowpro.services.import_service import import_records

router = APIRouter(prefix="/api/upload", tags=["upload"])

ALLOWED_EXTENSIONS = (".csv", ".xlsx")


async def _import_upload(import_type: str, file: UploadFile, db: Session) -> dict:
    if not file.filename:
        raise HTTPException(status_code=400, detail="No file provided")

    if not file.filename.lower().endswith(ALLOWED_EXTENSIONS):
        raise HTTPException(status_code=400, detail=f"File must be one of: {', '.join(ALLOWED_EXTENSIONS)}")

    content = await file.read()
    try:
        result = import_records(db, import_type, content, file.filename)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return result.model_dump()


@router.post("/workers")
async def upload_workers(file: UploadFile = File(...), db: Session = Depends(get_db)):
    return await _import_upload("worker", file, db)


@router.post("/vehicles")
async def upload_vehicles(file: UploadFile = File(...), db: Session = Depends(get_db)):
    return await _import_upload("vehicle", file, db)


@router.post("/equipment")
async def upload_equipment(file: UploadFile = File(...), db: Session = Depends(get_db)):
    return await _import_upload("equipment", file, db)
