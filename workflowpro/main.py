import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError

from workflowpro.config import APP_ENV, AUTO_CREATE_DB
from workflowpro.database import Base, engine
from workflowpro.errors import AllocationInvariantError, ConstraintViolation
from workflowpro.logging import RequestIdMiddleware, setup_logging
from workflowpro.routes import (
    allocations, changes, dashboard, equipment, export, projects, upload, vehicles, workers,
)

setup_logging()
logger = structlog.get_logger(__name__)

app = FastAPI(title="WorkFlow Pro", version="1.0.0")

app.add_middleware(RequestIdMiddleware)

app.include_router(workers.router)
app.include_router(projects.router)
app.include_router(vehicles.router)
app.include_router(equipment.router)
app.include_router(allocations.router)
app.include_router(dashboard.router)
app.include_router(upload.router)
app.include_router(export.router)
app.include_router(changes.router)


@app.exception_handler(ConstraintViolation)
async def constraint_violation_handler(request: Request, exc: ConstraintViolation):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "violation": exc.violation},
    )


@app.exception_handler(AllocationInvariantError)
async def allocation_invariant_handler(request: Request, exc: AllocationInvariantError):
    return JSONResponse(status_code=422, content={"detail": str(exc), "violation": "check"})


@app.exception_handler(OperationalError)
async def store_unreachable_handler(request: Request, exc: OperationalError):
    logger.error("store_unreachable", path=request.url.path, error=str(exc.orig))
    return JSONResponse(status_code=503, content={"detail": "Cannot connect to the database"})


@app.on_event("startup")
def create_tables():
    """Create tables on startup (Alembic handles migrations in production)."""
    logger.info("startup", app_env=APP_ENV, auto_create_db=AUTO_CREATE_DB)
    if AUTO_CREATE_DB:
        Base.metadata.create_all(bind=engine)
