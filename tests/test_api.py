"""
Tests for the REST API endpoints.
"""
import pytest
from datetime import date
from decimal import Decimal

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from roster_app.main import app
from roster_app.models import Base, Project, Staff, ShiftType, Roster, RosterEntry, get_db


# Test database setup
engine = create_engine(
    "sqlite:///:memory:",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

TODAY = date.today()


def override_get_db():
    """Override database dependency for testing."""
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="module")
def client():
    """Create test client with test database."""
    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def seed():
    """Fresh tables per test: two projects, a January 2024 roster, an open current roster."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)

    db = TestingSessionLocal()
    try:
        db.add_all([
            ShiftType(code="1", name="Morning", is_work_shift=True),
            ShiftType(code="OFF", name="Day off", is_work_shift=False),
            ShiftType(code="ขาด", name="Absent", is_work_shift=False),
        ])
        alpha = Project(name="Alpha Site")
        beta = Project(name="Beta Site")
        db.add_all([alpha, beta])
        db.flush()

        somchai = Staff(name="Somchai", wage_per_day=Decimal("100.00"), project_id=alpha.id)
        niran = Staff(name="Niran", wage_per_day=Decimal("50.00"), project_id=beta.id)
        db.add_all([somchai, niran])
        db.flush()

        closed = Roster(project_id=alpha.id, year=2024, month=1)
        current = Roster(project_id=alpha.id, year=TODAY.year, month=TODAY.month)
        db.add_all([closed, current])
        db.flush()

        db.add_all([
            RosterEntry(roster_id=closed.id, staff_id=somchai.id, day=day, shift_code="1")
            for day in range(1, 11)
        ] + [RosterEntry(roster_id=closed.id, staff_id=somchai.id, day=11, shift_code="ขาด")])

        beta_roster = Roster(project_id=beta.id, year=2024, month=1)
        db.add(beta_roster)
        db.flush()
        db.add_all([
            RosterEntry(roster_id=beta_roster.id, staff_id=niran.id, day=day, shift_code="1")
            for day in range(1, 11)
        ])
        db.commit()
    finally:
        db.close()
    yield


def set_sharing(client, project_id, shares):
    return client.put(f"/api/v1/projects/{project_id}/cost-sharing", json={"shares": shares})


class TestCostReports:
    """Tests for /api/v1/reports/cost-sharing."""

    def test_all_projects(self, client):
        response = client.get("/api/v1/reports/cost-sharing", params={"year": 2024, "month": 1})
        assert response.status_code == 200
        data = response.json()
        assert [row["project_name"] for row in data] == ["Alpha Site", "Beta Site"]
        assert data[0]["original_cost"] == 1000.0
        assert data[1]["net_cost"] == 500.0

    def test_sharing_applied(self, client):
        assert set_sharing(client, 1, [{"destination_project_id": 2, "percentage": 100}]).status_code == 200

        response = client.get("/api/v1/reports/cost-sharing/2", params={"year": 2024, "month": 1})

        assert response.status_code == 200
        data = response.json()
        assert data["shared_in"] == 1000.0
        assert data["net_cost"] == 1500.0

    def test_sort_by_name(self, client):
        client.put("/api/v1/projects/1/cost-sharing", json={"shares": []})
        response = client.get(
            "/api/v1/reports/cost-sharing",
            params={"year": 2024, "month": 1, "sort_by_name": "true"}
        )
        assert [row["project_id"] for row in response.json()] == [1, 2]

    def test_unknown_project(self, client):
        response = client.get("/api/v1/reports/cost-sharing/999", params={"year": 2024, "month": 1})
        assert response.status_code == 404

    def test_invalid_month(self, client):
        response = client.get("/api/v1/reports/cost-sharing", params={"year": 2024, "month": 13})
        assert response.status_code == 422

    def test_overview(self, client):
        response = client.get("/api/v1/reports/overview", params={"year": 2024, "month": 1})
        assert response.status_code == 200
        data = response.json()
        assert data["project_count"] == 2
        assert data["grand_total_original"] == 1500.0
        assert data["grand_total_net"] == 1500.0

    def test_attendance(self, client):
        response = client.get("/api/v1/reports/attendance/1", params={"year": 2024, "month": 1})
        assert response.status_code == 200
        data = response.json()
        assert data["staff"][0]["total_work_days"] == 10
        assert data["staff"][0]["total_absent"] == 1
        assert data["total_expected_salary"] == 1000.0

    def test_attendance_without_roster(self, client):
        response = client.get("/api/v1/reports/attendance/2", params={"year": 2023, "month": 1})
        assert response.status_code == 404


class TestCostSharingEndpoints:
    """Tests for /api/v1/projects/{id}/cost-sharing."""

    def test_replace_and_read(self, client):
        response = set_sharing(client, 1, [{"destination_project_id": 2, "percentage": "25.5"}])
        assert response.status_code == 200
        assert response.json()["outgoing"] == [
            {"source_project_id": 1, "destination_project_id": 2, "percentage": 25.5}
        ]

        incoming = client.get("/api/v1/projects/2/cost-sharing").json()["incoming"]
        assert incoming[0]["source_project_id"] == 1

    def test_reciprocal_rejected(self, client):
        set_sharing(client, 1, [{"destination_project_id": 2, "percentage": 50}])

        response = set_sharing(client, 2, [{"destination_project_id": 1, "percentage": 50}])

        assert response.status_code == 409
        assert client.get("/api/v1/projects/2/cost-sharing").json()["outgoing"] == []

    def test_invalid_percentage(self, client):
        response = set_sharing(client, 1, [{"destination_project_id": 2, "percentage": 150}])
        assert response.status_code == 422

    def test_sub_cent_percentage_rejected(self, client):
        response = set_sharing(client, 1, [{"destination_project_id": 2, "percentage": "0.001"}])

        assert response.status_code == 422
        assert client.get("/api/v1/projects/1/cost-sharing").json()["outgoing"] == []

    def test_percentage_rounded_to_cents(self, client):
        response = set_sharing(client, 1, [{"destination_project_id": 2, "percentage": "33.335"}])

        assert response.json()["outgoing"][0]["percentage"] == 33.34

    def test_self_edge(self, client):
        response = set_sharing(client, 1, [{"destination_project_id": 1, "percentage": 10}])
        assert response.status_code == 400

    def test_unknown_project(self, client):
        response = set_sharing(client, 42, [])
        assert response.status_code == 404

    def test_validate_edge(self, client):
        set_sharing(client, 1, [{"destination_project_id": 2, "percentage": 50}])

        ok = client.post(
            "/api/v1/projects/cost-sharing/validate",
            json={"source_project_id": 1, "destination_project_id": 2}
        )
        cycle = client.post(
            "/api/v1/projects/cost-sharing/validate",
            json={"source_project_id": 2, "destination_project_id": 1}
        )

        assert ok.json()["valid"] is True
        assert cycle.status_code == 409

    def test_deactivate_project(self, client):
        assert client.delete("/api/v1/projects/2").status_code == 200

        data = client.get("/api/v1/reports/cost-sharing", params={"year": 2024, "month": 1}).json()
        assert [row["project_id"] for row in data] == [1]

    def test_deactivate_unknown(self, client):
        assert client.delete("/api/v1/projects/77").status_code == 404

    def test_deactivate_store_unavailable(self, client):
        empty = sessionmaker(bind=create_engine("sqlite:///:memory:"))

        def broken_get_db():
            db = empty()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = broken_get_db
        try:
            response = client.delete("/api/v1/projects/1")
        finally:
            app.dependency_overrides[get_db] = override_get_db

        assert response.status_code == 503


class TestRosterEndpoints:
    """Tests for /api/v1/rosters."""

    def test_upsert_entry(self, client):
        response = client.put(
            "/api/v1/rosters/2/entries",
            json={"staff_id": 1, "day": 1, "shift_code": "1", "notes": "cover"}
        )
        assert response.status_code == 200
        assert response.json()["staff_name"] == "Somchai"

    def test_upsert_closed_roster(self, client):
        response = client.put(
            "/api/v1/rosters/1/entries",
            json={"staff_id": 1, "day": 12, "shift_code": "1"}
        )
        assert response.status_code == 403

    def test_upsert_unknown_roster(self, client):
        response = client.put(
            "/api/v1/rosters/999/entries",
            json={"staff_id": 1, "day": 1, "shift_code": "1"}
        )
        assert response.status_code == 404

    def test_upsert_unknown_shift(self, client):
        response = client.put(
            "/api/v1/rosters/2/entries",
            json={"staff_id": 1, "day": 1, "shift_code": "Q"}
        )
        assert response.status_code == 400

    def test_delete_entry(self, client):
        client.put("/api/v1/rosters/2/entries", json={"staff_id": 1, "day": 1, "shift_code": "1"})

        response = client.delete("/api/v1/rosters/2/entries", params={"staff_id": 1, "day": 1})

        assert response.status_code == 200
        assert response.json()["deleted"] is True

    def test_import(self, client):
        response = client.post("/api/v1/rosters/import", json={
            "project_id": 2,
            "year": TODAY.year,
            "month": TODAY.month,
            "entries": [
                {"staff_id": 2, "day": 1, "shift_code": "1"},
                {"staff_id": 2, "day": 2, "shift_code": "OFF"},
            ],
        })
        assert response.status_code == 200
        assert response.json()["count"] == 2

        report = client.get(
            "/api/v1/reports/cost-sharing/2",
            params={"year": TODAY.year, "month": TODAY.month}
        ).json()
        assert report["original_cost"] == 50.0

    def test_import_duplicate_rejected(self, client):
        response = client.post("/api/v1/rosters/import", json={
            "project_id": 2,
            "year": TODAY.year,
            "month": TODAY.month,
            "entries": [
                {"staff_id": 2, "day": 1, "shift_code": "1"},
                {"staff_id": 2, "day": 1, "shift_code": "OFF"},
            ],
        })
        assert response.status_code == 400


class TestHealth:

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}
