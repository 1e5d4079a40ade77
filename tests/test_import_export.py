import io

import pytest
from openpyxl import Workbook, load_workbook

from workflowpro.errors import ConstraintViolation
from workflowpro.models import Equipment, Project, Vehicle, Worker
from workflowpro.services.import_service import import_records


class TestUploadWorkers:
    def test_upload_csv(self, client, db_session):
        csv_content = "name,role,email\nAda Lovelace,Engineer,ada@example.com\nGrace Hopper,Admiral,\n"
        files = {"file": ("workers.csv", io.BytesIO(csv_content.encode()), "text/csv")}
        resp = client.post("/api/upload/workers", files=files)
        assert resp.status_code == 200
        data = resp.json()
        assert data["import_type"] == "worker"
        assert data["records_imported"] == 2
        assert data["records_errors"] == 0

        db_session.expire_all()
        workers = db_session.query(Worker).all()
        assert len(workers) == 2
        assert all(w.status == "active" for w in workers)

    def test_existing_email_updates_and_skips(self, client, db_session):
        csv = "name,role,email\nAda,Engineer,ada@example.com\n"
        files1 = {"file": ("w.csv", io.BytesIO(csv.encode()), "text/csv")}
        assert client.post("/api/upload/workers", files=files1).json()["records_imported"] == 1

        csv2 = "name,role,email\nAda Lovelace,Lead Engineer,ada@example.com\n"
        files2 = {"file": ("w.csv", io.BytesIO(csv2.encode()), "text/csv")}
        resp2 = client.post("/api/upload/workers", files=files2).json()
        assert resp2["records_imported"] == 0
        assert resp2["records_skipped"] == 1

        db_session.expire_all()
        workers = db_session.query(Worker).all()
        assert len(workers) == 1
        assert workers[0].role == "Lead Engineer"

    def test_empty_role_error(self, client, db_session):
        csv = "name,role\nNo Role,\nAda,Engineer\n"
        files = {"file": ("w.csv", io.BytesIO(csv.encode()), "text/csv")}
        data = client.post("/api/upload/workers", files=files).json()
        assert data["records_imported"] == 1
        assert data["records_errors"] == 1
        assert "empty role" in data["errors"][0]

    def test_missing_column(self, client):
        csv = "name\nAda\n"
        files = {"file": ("w.csv", io.BytesIO(csv.encode()), "text/csv")}
        resp = client.post("/api/upload/workers", files=files)
        assert resp.status_code == 400
        assert "role" in resp.json()["detail"]

    def test_wrong_format(self, client):
        files = {"file": ("w.txt", io.BytesIO(b"hello"), "text/plain")}
        resp = client.post("/api/upload/workers", files=files)
        assert resp.status_code == 400


class TestUploadAssets:
    def test_upload_vehicles_xlsx(self, client, db_session):
        wb = Workbook()
        ws = wb.active
        ws.append(["Name", "Type", "License_Plate"])
        ws.append(["Flatbed", "truck", "ABC-123"])
        ws.append(["Pickup", "truck", "XYZ-789"])
        buf = io.BytesIO()
        wb.save(buf)
        buf.seek(0)

        files = {"file": ("vehicles.xlsx", buf, "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet")}
        resp = client.post("/api/upload/vehicles", files=files)
        assert resp.status_code == 200
        assert resp.json()["records_imported"] == 2

        db_session.expire_all()
        plates = sorted(v.license_plate for v in db_session.query(Vehicle).all())
        assert plates == ["ABC-123", "XYZ-789"]

    def test_duplicate_serial_within_file(self, client, db_session):
        csv = "name,serial_number\nDrill,SN-1\nOther Drill,SN-1\n"
        files = {"file": ("e.csv", io.BytesIO(csv.encode()), "text/csv")}
        data = client.post("/api/upload/equipment", files=files).json()
        assert data["records_imported"] == 1
        assert data["records_errors"] == 1
        assert "duplicate serial_number" in data["errors"][0]
        db_session.expire_all()
        assert db_session.query(Equipment).count() == 1

    def test_corrupt_xlsx_is_bad_request(self, client):
        files = {"file": ("v.xlsx", io.BytesIO(b"not a zip"), "application/octet-stream")}
        resp = client.post("/api/upload/vehicles", files=files)
        assert resp.status_code == 400
        assert "v.xlsx" in resp.json()["detail"]

    def test_legacy_xls_rejected(self, client):
        files = {"file": ("v.xls", io.BytesIO(b"\xd0\xcf\x11\xe0"), "application/vnd.ms-excel")}
        resp = client.post("/api/upload/vehicles", files=files)
        assert resp.status_code == 400

    def test_plate_committed_concurrently_is_conflict(self, db_session, monkeypatch):
        db_session.add(Vehicle(name="Flatbed", license_plate="ABC-123"))
        db_session.commit()

        class _NoMatch:
            def filter(self, *criteria):
                return self

            def first(self):
                return None

        # The existing-row lookup misses, as if the other insert landed after it
        monkeypatch.setattr(db_session, "query", lambda model: _NoMatch())
        csv = "name,license_plate\nPickup,ABC-123\n"
        with pytest.raises(ConstraintViolation) as exc:
            import_records(db_session, "vehicle", csv.encode(), "v.csv")
        assert exc.value.status_code == 409
        assert exc.value.violation == "unique"

        monkeypatch.undo()
        assert db_session.query(Vehicle).count() == 1


class TestExport:
    def _seed_and_assign(self, client, db):
        p = Project(name="Bridge Retrofit", location="Riverside")
        other = Project(name="Depot Roof")
        w = Worker(name="Ada Lovelace", role="Engineer", email="ada@example.com")
        v = Vehicle(name="Flatbed", license_plate="ABC-123")
        db.add_all([p, other, w, v])
        db.commit()

        client.post("/api/allocations", json={"project_id": p.id, "asset": {"kind": "worker", "id": w.id}})
        client.post("/api/allocations", json={"project_id": other.id, "asset": {"kind": "vehicle", "id": v.id}})
        return p, other, w, v

    def test_export_allocations_xlsx(self, client, db_session):
        self._seed_and_assign(client, db_session)

        resp = client.get("/api/export/allocations")
        assert resp.status_code == 200
        assert "spreadsheetml" in resp.headers["content-type"]

        wb = load_workbook(io.BytesIO(resp.content))
        ws = wb.active
        rows = list(ws.iter_rows(min_row=2, values_only=True))
        assert len(rows) == 2
        by_type = {r[3]: r for r in rows}
        assert by_type["Worker"][0] == "Bridge Retrofit"
        assert by_type["Worker"][1] == "Riverside"
        assert by_type["Worker"][4] == "Ada Lovelace"
        assert by_type["Worker"][5] == "ada@example.com"
        assert by_type["Vehicle"][5] == "ABC-123"
        assert by_type["Vehicle"][6] == "in_use"

    def test_export_single_project(self, client, db_session):
        p, other, w, v = self._seed_and_assign(client, db_session)
        resp = client.get(f"/api/export/allocations?project_id={other.id}")
        wb = load_workbook(io.BytesIO(resp.content))
        rows = list(wb.active.iter_rows(min_row=2, values_only=True))
        assert len(rows) == 1
        assert rows[0][0] == "Depot Roof"

    def test_export_has_headers(self, client):
        resp = client.get("/api/export/allocations")
        wb = load_workbook(io.BytesIO(resp.content))
        headers = [cell.value for cell in wb.active[1]]
        assert headers[:4] == ["Project", "Location", "Project Status", "Resource Type"]
        assert "Identifier" in headers
        assert list(wb.active.iter_rows(min_row=2, values_only=True)) == []
