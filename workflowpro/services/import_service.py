import io
import zipfile

import pandas as pd
import structlog
from openpyxl.utils.exceptions import InvalidFileException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from workflowpro.errors import ConstraintViolation
from workflowpro.models import Equipment, Vehicle, Worker
from workflowpro.schemas import ImportResult

logger = structlog.get_logger(__name__)


# import_type -> (model, required columns, optional columns, unique key column)
IMPORT_TARGETS = {
    "worker": (Worker, ("name", "role"), ("email", "phone"), "email"),
    "vehicle": (Vehicle, ("name",), ("type", "license_plate"), "license_plate"),
    "equipment": (Equipment, ("name",), ("type", "serial_number"), "serial_number"),
}


def _read_file(content: bytes, filename: str) -> pd.DataFrame:
    """Read CSV or XLSX file into a DataFrame."""
    lowered = filename.lower()
    try:
        if lowered.endswith(".csv"):
            return pd.read_csv(io.BytesIO(content), dtype=str)
        elif lowered.endswith(".xlsx"):
            return pd.read_excel(io.BytesIO(content), dtype=str, engine="openpyxl")
    except (zipfile.BadZipFile, InvalidFileException, KeyError, ValueError) as exc:
        raise ValueError(f"Could not read {filename}: {exc}") from exc
    raise ValueError(f"Unsupported file format: {filename}. Use .csv or .xlsx")


def _safe_str(val) -> str | None:
    """Extract a clean string from a pandas cell, return None if empty/nan."""
    if pd.isna(val):
        return None
    s = str(val).strip()
    if not s or s.lower() == "nan":
        return None
    return s


def import_records(db: Session, import_type: str, content: bytes, filename: str) -> ImportResult:
    """Import workers, vehicles or equipment from CSV/XLSX.

    Rows whose unique key (email, license plate, serial number) matches an
    existing record update that record and count as skipped. Rows with a
    missing required value are reported and the rest of the file still loads.
    """
    model, required, optional, unique_col = IMPORT_TARGETS[import_type]

    df = _read_file(content, filename)
    df.columns = [str(c).strip().lower() for c in df.columns]
    missing = [c for c in required if c not in df.columns]
    if missing:
        raise ValueError(f"File must have {', '.join(repr(c) for c in missing)} column(s)")

    errors = []
    imported = 0
    skipped = 0
    total = len(df)
    seen_keys = set()

    for idx, row in df.iterrows():
        row_num = idx + 2  # Excel row (1-indexed + header)

        values = {c: _safe_str(row.get(c)) for c in required + optional if c in df.columns}
        empty = [c for c in required if not values.get(c)]
        if empty:
            errors.append(f"Row {row_num}: empty {empty[0]}")
            continue

        key = values.get(unique_col)
        if key:
            if key in seen_keys:
                errors.append(f"Row {row_num}: duplicate {unique_col} '{key}' in file")
                continue
            seen_keys.add(key)

            existing = db.query(model).filter(getattr(model, unique_col) == key).first()
            if existing:
                for col, val in values.items():
                    if val is not None and getattr(existing, col) != val:
                        setattr(existing, col, val)
                skipped += 1
                continue

        db.add(model(**values))
        imported += 1

    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        violation = ConstraintViolation.from_integrity_error(exc)
        logger.info("import_rejected", import_type=import_type, filename=filename, violation=violation.violation)
        raise violation
    logger.info(
        "records_imported", import_type=import_type, filename=filename,
        imported=imported, skipped=skipped, errors=len(errors),
    )

    return ImportResult(
        filename=filename,
        import_type=import_type,
        records_total=total,
        records_imported=imported,
        records_skipped=skipped,
        records_errors=len(errors),
        errors=errors,
    )
