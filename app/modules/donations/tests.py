"""
Tests para el módulo de Donaciones

Tests que cubren:
- Lectura de tablas vacías
- Carga de relaciones desde la base de datos
- Reportes de punta a punta sobre datos persistidos
"""

from datetime import datetime, timedelta

import pytest

from app.modules.donations.models import (
    Blood,
    BloodBag,
    BloodType,
    Donor,
    HealthEntity,
    InstitutionType,
    Request,
    Rh,
)
from app.modules.donations.repository import DonationsRepository


@pytest.fixture
def seeded(db_session):
    """Dos solicitudes: una atendida y otra parcialmente atendida y vencida"""
    o_pos = Blood(type=BloodType.O, rh=Rh.POSITIVE)
    a_neg = Blood(type=BloodType.A, rh=Rh.NEGATIVE)
    hospital = HealthEntity(
        nit="900100200",
        name="Hospital Central",
        city="Bogotá",
        institution_type=InstitutionType.HOSPITAL
    )
    clinic = HealthEntity(
        nit="900300400",
        name="Clínica del Norte",
        city="Medellín",
        institution_type=InstitutionType.CLINIC
    )
    john = Donor(document="123456789", name="John", lastname="Doe", blood=o_pos)
    jane = Donor(document="987654321", name="Jane", lastname="Smith", blood=a_neg)

    served = Request(
        date_created=datetime(2025, 1, 15),
        quantity_needed=100,
        due_date=datetime(2025, 12, 31),
        blood=o_pos,
        health_entity=hospital
    )
    short = Request(
        date_created=datetime(2025, 10, 10),
        quantity_needed=50,
        due_date=datetime(2025, 10, 20),
        blood=a_neg,
        health_entity=clinic
    )
    bags = [
        BloodBag(
            quantity=100,
            donation_date=datetime(2025, 1, 15),
            expiration_date=datetime(2025, 1, 15) + timedelta(days=42),
            blood=o_pos,
            donor=john,
            request=served
        ),
        BloodBag(
            quantity=30,
            donation_date=datetime(2025, 10, 10),
            expiration_date=datetime(2025, 10, 10) + timedelta(days=42),
            blood=a_neg,
            donor=jane,
            request=short
        ),
    ]

    db_session.add_all([o_pos, a_neg, hospital, clinic, john, jane, served, short, *bags])
    db_session.commit()
    return db_session


class TestDonationsRepository:
    """Tests para la lectura de datos de donaciones"""

    def test_empty_tables_return_empty_lists(self, db_session):
        repository = DonationsRepository(db_session)

        assert repository.list_blood_bags() == []
        assert repository.list_requests() == []
        assert repository.list_donors() == []

    def test_blood_bags_load_relationships(self, seeded):
        bags = DonationsRepository(seeded).list_blood_bags()

        assert len(bags) == 2
        assert bags[0].blood.label == "O+"
        assert bags[0].donor.name == "John"
        assert bags[0].request.health_entity.name == "Hospital Central"

    def test_requests_load_blood_and_entity(self, seeded):
        requests = DonationsRepository(seeded).list_requests()

        assert [r.quantity_needed for r in requests] == [100, 50]
        assert requests[1].blood.label == "A-"
        assert requests[1].health_entity.institution_type == InstitutionType.CLINIC

    def test_donors(self, seeded):
        donors = DonationsRepository(seeded).list_donors()

        assert [d.document for d in donors] == ["123456789", "987654321"]
        assert donors[0].blood.label == "O+"


class TestReportsOverDatabase:
    """Tests de punta a punta: reportes sobre datos persistidos"""

    def test_inventory(self, client, seeded):
        response = client.get("/api/v1/reports/inventory")

        assert response.status_code == 200
        assert response.json() == [
            {"type": "A", "rh": "-", "units": 30, "bags": 1},
            {"type": "O", "rh": "+", "units": 100, "bags": 1},
        ]

    def test_fulfillment(self, client, seeded):
        response = client.get("/api/v1/reports/requests/fulfillment")

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert [item["status"] for item in data["items"]] == ["PARTIAL", "FULFILLED"]
        assert data["items"][0]["fulfillment"] == 60
        assert data["items"][0]["blood"] == "A-"

    def test_overdue(self, client, seeded):
        response = client.get("/api/v1/reports/requests/overdue")

        assert response.status_code == 200
        data = response.json()
        assert len(data) == 1
        assert data[0]["health_entity"] == "Clínica del Norte"
        assert data[0]["shortage"] == 20

    def test_health_entities_summary_with_window(self, client, seeded):
        response = client.get(
            "/api/v1/reports/health-entities/summary",
            params={"from": "2025-10-01", "to": "2025-10-31"}
        )

        assert response.status_code == 200
        data = response.json()
        assert len(data) == 1
        assert data[0]["name"] == "Clínica del Norte"
        assert data[0]["fulfillment_pct"] == 60

    def test_donations_by_blood_per_day(self, client, seeded):
        response = client.get("/api/v1/reports/donations/by-blood", params={"groupBy": "day"})

        assert response.status_code == 200
        assert [bucket["period"] for bucket in response.json()] == ["2025-01-15", "2025-10-10"]

    def test_empty_database(self, client):
        response = client.get("/api/v1/reports/donors/activity")

        assert response.status_code == 200
        assert response.json() == []
