import structlog
from fastapi import HTTPException
from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from workflowpro.errors import ConstraintViolation

logger = structlog.get_logger(__name__)


def list_records(db: Session, model) -> list:
    """All rows of a registry table, newest first."""
    return db.query(model).order_by(model.created_at.desc()).all()


def create_record(db: Session, model, data: BaseModel):
    record = model(**data.model_dump())
    db.add(record)
    try:
        db.flush()
    except IntegrityError as exc:
        db.rollback()
        violation = ConstraintViolation.from_integrity_error(exc)
        logger.info("record_rejected", table=model.__tablename__, violation=violation.violation)
        raise violation
    db.commit()
    db.refresh(record)
    logger.info("record_created", table=model.__tablename__, record_id=record.id)
    return record


def delete_record(db: Session, model, record_id: str) -> bool:
    """Delete by id. Returns whether a row existed; callers do not treat absence as an error."""
    record = db.query(model).filter(model.id == record_id).first()
    if not record:
        return False
    db.delete(record)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConstraintViolation.from_integrity_error(exc)
    logger.info("record_deleted", table=model.__tablename__, record_id=record_id)
    return True


def update_status(db: Session, model, record_id: str, status: str):
    record = db.query(model).filter(model.id == record_id).first()
    if not record:
        raise HTTPException(status_code=404, detail=f"{model.__name__} not found")
    old_status = record.status
    record.status = status
    db.commit()
    db.refresh(record)
    logger.info(
        "status_changed", table=model.__tablename__, record_id=record_id,
        old_status=old_status, new_status=status,
    )
    return record
