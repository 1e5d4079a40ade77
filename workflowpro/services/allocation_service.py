from typing import Optional

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from workflowpro.errors import ConstraintViolation
from workflowpro.models import Equipment, ResourceAllocation, Vehicle
from workflowpro.schemas import AssetRef

logger = structlog.get_logger(__name__)

# kind -> (allocation column, model whose status follows the allocation)
ASSET_KINDS = {
    "worker": ("worker_id", None),
    "vehicle": ("vehicle_id", Vehicle),
    "equipment": ("equipment_id", Equipment),
}


def assign(db: Session, project_id: str, asset: AssetRef) -> ResourceAllocation:
    """Allocate one worker, vehicle or equipment item to a project.

    The allocation insert and the ``in_use`` status change for vehicles and
    equipment commit together or not at all. Referenced rows are not looked up
    beforehand; the foreign keys reject unknown ids at flush time.
    """
    column, asset_model = ASSET_KINDS[asset.kind]
    allocation = ResourceAllocation(project_id=project_id, **{column: asset.id})
    db.add(allocation)
    try:
        db.flush()
        if asset_model is not None:
            target = db.get(asset_model, asset.id)
            if target is not None:
                target.status = "in_use"
                db.flush()
    except IntegrityError as exc:
        db.rollback()
        violation = ConstraintViolation.from_integrity_error(exc)
        logger.info(
            "allocation_rejected", project_id=project_id, kind=asset.kind,
            asset_id=asset.id, violation=violation.violation,
        )
        raise violation
    db.commit()
    db.refresh(allocation)
    logger.info(
        "allocation_created", allocation_id=allocation.id, project_id=project_id,
        kind=asset.kind, asset_id=asset.id,
    )
    return allocation


def list_allocations(db: Session, project_id: Optional[str] = None) -> list[ResourceAllocation]:
    q = db.query(ResourceAllocation)
    if project_id is not None:
        q = q.filter(ResourceAllocation.project_id == project_id)
    return q.order_by(ResourceAllocation.assigned_at).all()


def release(db: Session, allocation_id: str) -> bool:
    """Delete an allocation and return freed assets to ``available``.

    A vehicle or equipment item goes back to ``available`` only when no other
    allocation still references it and it is currently ``in_use``; assets in
    maintenance keep their status.
    """
    allocation = db.query(ResourceAllocation).filter(ResourceAllocation.id == allocation_id).first()
    if not allocation:
        return False

    freed = []
    for kind in ("vehicle", "equipment"):
        column, asset_model = ASSET_KINDS[kind]
        asset_id = getattr(allocation, column)
        if asset_id is None:
            continue
        others = (
            db.query(ResourceAllocation)
            .filter(
                getattr(ResourceAllocation, column) == asset_id,
                ResourceAllocation.id != allocation_id,
            )
            .count()
        )
        if others == 0:
            freed.append((asset_model, asset_id))

    db.delete(allocation)
    for asset_model, asset_id in freed:
        asset = db.query(asset_model).filter(asset_model.id == asset_id).first()
        if asset is not None and asset.status == "in_use":
            asset.status = "available"
    db.commit()
    logger.info("allocation_released", allocation_id=allocation_id, freed=len(freed))
    return True
