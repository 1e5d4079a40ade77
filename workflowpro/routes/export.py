from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session

from workflowpro.database import get_db
from workflowpro.services.export_service import export_allocations_xlsx

router = APIRouter(prefix="/api/export", tags=["export"])


@router.get("/allocations")
def download_allocations(
    project_id: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    data = export_allocations_xlsx(db, project_id)
    filename = f"allocations_{project_id}.xlsx" if project_id else "allocations.xlsx"
    return Response(
        content=data,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
