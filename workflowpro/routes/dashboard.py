from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from workflowpro.database import get_db
from workflowpro.schemas import DashboardSnapshot
from workflowpro.services.dashboard_service import load_snapshot

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("", response_model=DashboardSnapshot)
def get_dashboard(db: Session = Depends(get_db)):
    return load_snapshot(db)
