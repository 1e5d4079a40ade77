import io
from typing import Optional

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from sqlalchemy.orm import Session, joinedload

from workflowpro.models import ResourceAllocation

HEADER_FONT = Font(bold=True, color="FFFFFF", size=11)
HEADER_FILL = PatternFill(start_color="4F46E5", end_color="4F46E5", fill_type="solid")
HEADER_ALIGNMENT = Alignment(horizontal="center", vertical="center")
THIN_BORDER = Border(
    left=Side(style="thin"),
    right=Side(style="thin"),
    top=Side(style="thin"),
    bottom=Side(style="thin"),
)

HEADERS = [
    "Project", "Location", "Project Status", "Resource Type",
    "Resource Name", "Identifier", "Resource Status", "Assigned At",
]


def _style_header(ws, row=1):
    for cell in ws[row]:
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
        cell.alignment = HEADER_ALIGNMENT
        cell.border = THIN_BORDER


def _auto_width(ws):
    for col in ws.columns:
        max_len = 0
        col_letter = col[0].column_letter
        for cell in col:
            if cell.value:
                max_len = max(max_len, len(str(cell.value)))
        ws.column_dimensions[col_letter].width = min(max_len + 3, 40)


def _resource_columns(a: ResourceAllocation) -> list:
    if a.worker is not None:
        return ["Worker", a.worker.name, a.worker.email or "", a.worker.status]
    if a.vehicle is not None:
        return ["Vehicle", a.vehicle.name, a.vehicle.license_plate or "", a.vehicle.status]
    if a.equipment is not None:
        return ["Equipment", a.equipment.name, a.equipment.serial_number or "", a.equipment.status]
    # Every referenced asset has since been deleted
    return ["Unassigned", "", "", ""]


def _allocation_row(a: ResourceAllocation) -> list:
    return [
        a.project.name,
        a.project.location or "",
        a.project.status,
        *_resource_columns(a),
        a.assigned_at.strftime("%Y-%m-%d %H:%M:%S"),
    ]


def export_allocations_xlsx(db: Session, project_id: Optional[str] = None) -> bytes:
    """Export the allocation ledger, optionally for one project, to XLSX."""
    q = (
        db.query(ResourceAllocation)
        .options(
            joinedload(ResourceAllocation.project),
            joinedload(ResourceAllocation.worker),
            joinedload(ResourceAllocation.vehicle),
            joinedload(ResourceAllocation.equipment),
        )
    )
    if project_id is not None:
        q = q.filter(ResourceAllocation.project_id == project_id)
    allocations = q.order_by(ResourceAllocation.assigned_at).all()

    wb = Workbook()
    ws = wb.active
    ws.title = "Allocations"

    ws.append(HEADERS)
    _style_header(ws)

    for a in allocations:
        ws.append(_allocation_row(a))

    _auto_width(ws)

    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()
