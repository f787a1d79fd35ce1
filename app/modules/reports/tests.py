"""
Tests para el módulo de Reportes

Tests que cubren:
- Filtro de rango de tiempo y parseo de fechas
- Inventario por grupo sanguíneo
- Cumplimiento de solicitudes (estado, porcentaje, orden y paginación)
- Solicitudes vencidas
- Actividad de donantes
- Resumen por entidad de salud
- Histograma de donaciones por día / mes
- Endpoints HTTP y validación de query params

Los servicios se prueban con instancias ORM transitorias servidas desde una
fuente de datos en memoria; ningún reporte modifica los datos.
"""

from datetime import datetime, timedelta, timezone, date

import pytest
from pydantic import ValidationError

from app.main import app
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
from app.modules.reports.dependencies import get_data_source
from app.modules.reports.schemas import (
    BloodFilter,
    FulfillmentStatus,
    GroupBy,
    OverdueStatus,
    PaginationParams,
    TimeRange,
)
from app.modules.reports.services import (
    DonorReportService,
    HealthEntityReportService,
    InventoryReportService,
    RequestReportService,
)
from app.modules.reports.services.base import in_range, percentage


class InMemorySource:
    """Fuente de datos de solo lectura sobre listas en memoria"""

    def __init__(self, bags=None, requests=None, donors=None):
        self.bags = bags or []
        self.requests = requests or []
        self.donors = donors or []

    def list_blood_bags(self):
        return list(self.bags)

    def list_requests(self):
        return list(self.requests)

    def list_donors(self):
        return list(self.donors)


def make_request(id, blood, entity, needed, created, due):
    return Request(
        id=id,
        blood=blood,
        health_entity=entity,
        quantity_needed=needed,
        date_created=created,
        due_date=due,
    )


def make_bag(id, quantity, donated, blood, donor, request):
    return BloodBag(
        id=id,
        quantity=quantity,
        donation_date=donated,
        expiration_date=donated + timedelta(days=42),
        blood=blood,
        donor=donor,
        request=request,
    )


# ===== FIXTURES =====

@pytest.fixture
def blood_o_pos():
    return Blood(id=1, type=BloodType.O, rh=Rh.POSITIVE)


@pytest.fixture
def blood_a_neg():
    return Blood(id=2, type=BloodType.A, rh=Rh.NEGATIVE)


@pytest.fixture
def donors():
    return [
        Donor(id=1, document="123456789", name="John", lastname="Doe", birth_date=datetime(1990, 1, 1)),
        Donor(id=2, document="987654321", name="Jane", lastname="Smith", birth_date=datetime(1992, 5, 15)),
    ]


@pytest.fixture
def health_entities():
    return [
        HealthEntity(id=1, nit="123456789", name="Hospital Central", institution_type=InstitutionType.HOSPITAL),
        HealthEntity(id=2, nit="987654321", name="Clinic North", institution_type=InstitutionType.CLINIC),
    ]


@pytest.fixture
def requests_data(blood_o_pos, blood_a_neg, health_entities):
    """Solicitud 1 (O+, 100, vence 2025-12-31) y solicitud 2 (A-, 50, vence 2025-10-20)"""
    hospital, clinic = health_entities
    return [
        make_request(1, blood_o_pos, hospital, 100, datetime(2025, 1, 15), datetime(2025, 12, 31)),
        make_request(2, blood_a_neg, clinic, 50, datetime(2025, 10, 10), datetime(2025, 10, 20)),
    ]


@pytest.fixture
def bags_data(blood_o_pos, blood_a_neg, donors, requests_data):
    """Bolsa 1 entrega 100 a la solicitud 1; bolsa 2 entrega 30 a la solicitud 2"""
    return [
        make_bag(1, 100, datetime(2025, 1, 15), blood_o_pos, donors[0], requests_data[0]),
        make_bag(2, 30, datetime(2025, 10, 10), blood_a_neg, donors[1], requests_data[1]),
    ]


@pytest.fixture
def source(bags_data, requests_data, donors):
    return InMemorySource(bags=bags_data, requests=requests_data, donors=donors)


@pytest.fixture
def no_range():
    return TimeRange()


# ===== TESTS DEL FILTRO DE TIEMPO =====

class TestTimeRangeFilter:
    """Tests para el filtro de rango de tiempo"""

    def test_without_bounds_everything_passes(self):
        assert in_range(datetime(1900, 1, 1)) is True
        assert in_range(datetime(2999, 1, 1), None, None) is True

    def test_bounds_are_inclusive(self):
        start = datetime(2025, 1, 1)
        end = datetime(2025, 1, 31)
        assert in_range(start, start, end) is True
        assert in_range(end, start, end) is True

    def test_outside_bounds(self):
        start = datetime(2025, 1, 1)
        end = datetime(2025, 1, 31)
        assert in_range(datetime(2024, 12, 31, 23, 59), start, end) is False
        assert in_range(datetime(2025, 1, 31, 0, 0, 1), start, end) is False

    def test_only_one_bound(self):
        assert in_range(datetime(2025, 6, 1), from_=datetime(2025, 1, 1)) is True
        assert in_range(datetime(2024, 6, 1), from_=datetime(2025, 1, 1)) is False
        assert in_range(datetime(2024, 6, 1), to=datetime(2025, 1, 1)) is True
        assert in_range(datetime(2025, 6, 1), to=datetime(2025, 1, 1)) is False

    def test_aware_and_naive_timestamps_compare_in_utc(self):
        aware = datetime(2025, 1, 1, 10, 0, tzinfo=timezone(timedelta(hours=2)))  # 08:00 UTC
        assert in_range(aware, from_=datetime(2025, 1, 1, 8, 0)) is True
        assert in_range(aware, from_=datetime(2025, 1, 1, 8, 1)) is False

    def test_plain_dates_are_midnight(self):
        assert in_range(date(2025, 1, 1), from_=datetime(2025, 1, 1)) is True
        assert in_range(date(2025, 1, 1), from_=datetime(2025, 1, 1, 0, 1)) is False


class TestTimeRangeSchema:
    """Tests para el parseo y validación del rango de tiempo"""

    def test_parse_date_only(self):
        time_range = TimeRange(**{"from": "2025-01-01", "to": "2025-01-31"})
        assert time_range.from_ == datetime(2025, 1, 1)
        assert time_range.to == datetime(2025, 1, 31)
        assert time_range.is_bounded is True

    def test_parse_timestamp_with_offset_to_utc(self):
        time_range = TimeRange(**{"from": "2025-01-01T10:00:00+02:00"})
        assert time_range.from_ == datetime(2025, 1, 1, 8, 0)

    def test_parse_zulu_timestamp(self):
        time_range = TimeRange(to="2025-01-01T10:00:00Z")
        assert time_range.to == datetime(2025, 1, 1, 10, 0)

    def test_empty_bounds(self):
        time_range = TimeRange(**{"from": "", "to": None})
        assert time_range.from_ is None
        assert time_range.to is None
        assert time_range.is_bounded is False

    def test_invalid_date_is_rejected(self):
        with pytest.raises(ValidationError):
            TimeRange(**{"from": "invalid-date"})

    def test_to_before_from_is_rejected(self):
        with pytest.raises(ValidationError):
            TimeRange(**{"from": "2025-02-01", "to": "2025-01-01"})


class TestPercentage:
    """Tests para el redondeo de porcentajes"""

    def test_rounds_half_up(self):
        assert percentage(5, 8) == 63  # 62.5
        assert percentage(450, 1000) == 45

    def test_caps_at_100(self):
        assert percentage(150, 100) == 100


# ===== TESTS DE INVENTARIO =====

class TestInventoryByBlood:
    """Tests para el inventario por grupo sanguíneo"""

    def test_groups_by_type_and_rh(self, source, no_range):
        result = InventoryReportService(source).inventory_by_blood(no_range, BloodFilter())

        assert result == [
            {"type": BloodType.A, "rh": Rh.NEGATIVE, "units": 30, "bags": 1},
            {"type": BloodType.O, "rh": Rh.POSITIVE, "units": 100, "bags": 1},
        ]

    def test_totals_match_all_bags(self, blood_o_pos, blood_a_neg, donors, requests_data, no_range):
        bags = [
            make_bag(i, 100 + i, datetime(2025, 3, i), blood, donors[0], requests_data[0])
            for i, blood in enumerate([blood_o_pos, blood_a_neg, blood_o_pos, blood_o_pos], start=1)
        ]
        result = InventoryReportService(InMemorySource(bags=bags)).inventory_by_blood(no_range, BloodFilter())

        assert sum(row["units"] for row in result) == sum(bag.quantity for bag in bags)
        assert sum(row["bags"] for row in result) == len(bags)
        o_pos = next(row for row in result if row["type"] == BloodType.O)
        assert o_pos["bags"] == 3

    def test_sorted_by_type_symbol(self, donors, requests_data, no_range):
        bloods = [
            Blood(id=10, type=BloodType.O, rh=Rh.POSITIVE),
            Blood(id=11, type=BloodType.B, rh=Rh.NEGATIVE),
            Blood(id=12, type=BloodType.AB, rh=Rh.POSITIVE),
            Blood(id=13, type=BloodType.A, rh=Rh.POSITIVE),
        ]
        bags = [
            make_bag(i, 10, datetime(2025, 3, 1), blood, donors[0], requests_data[0])
            for i, blood in enumerate(bloods, start=1)
        ]
        result = InventoryReportService(InMemorySource(bags=bags)).inventory_by_blood(no_range, BloodFilter())

        assert [row["type"].value for row in result] == ["A", "AB", "B", "O"]

    def test_filter_by_type(self, source, no_range):
        result = InventoryReportService(source).inventory_by_blood(no_range, BloodFilter(type="O"))

        assert len(result) == 1
        assert result[0]["type"] == BloodType.O
        assert result[0]["units"] == 100

    def test_filter_by_rh(self, source, no_range):
        result = InventoryReportService(source).inventory_by_blood(no_range, BloodFilter(rh="-"))

        assert len(result) == 1
        assert result[0]["rh"] == Rh.NEGATIVE

    def test_filter_by_time_range(self, source):
        time_range = TimeRange(**{"from": "2025-10-01", "to": "2025-10-31"})
        result = InventoryReportService(source).inventory_by_blood(time_range, BloodFilter())

        assert len(result) == 1
        assert result[0]["type"] == BloodType.A
        assert result[0]["units"] == 30

    def test_empty_data_returns_empty_list(self, no_range):
        result = InventoryReportService(InMemorySource()).inventory_by_blood(no_range, BloodFilter())
        assert result == []


# ===== TESTS DE CUMPLIMIENTO DE SOLICITUDES =====

class TestRequestsFulfillment:
    """Tests para el reporte de cumplimiento de solicitudes"""

    def test_status_and_percentage(self, source, no_range):
        result = RequestReportService(source).requests_fulfillment(no_range, PaginationParams(limit=10, offset=0))

        assert result["total"] == 2
        by_id = {item["request_id"]: item for item in result["items"]}
        assert by_id[1]["status"] == FulfillmentStatus.FULFILLED
        assert by_id[1]["fulfillment"] == 100
        assert by_id[2]["status"] == FulfillmentStatus.PARTIAL
        assert by_id[2]["delivered"] == 30
        assert by_id[2]["fulfillment"] == 60

    def test_item_fields(self, source, no_range):
        result = RequestReportService(source).requests_fulfillment(no_range, PaginationParams(limit=10, offset=0))
        item = next(i for i in result["items"] if i["request_id"] == 1)

        assert item["blood"] == "O+"
        assert item["health_entity_id"] == 1
        assert item["created_at"] == datetime(2025, 1, 15)
        assert item["due_date"] == datetime(2025, 12, 31)
        assert item["needed"] == 100

    def test_sorted_by_due_date(self, source, no_range):
        result = RequestReportService(source).requests_fulfillment(no_range, PaginationParams(limit=10, offset=0))
        assert [item["request_id"] for item in result["items"]] == [2, 1]

    def test_same_due_date_sorted_by_fulfillment(self, blood_o_pos, health_entities, donors, no_range):
        due = datetime(2025, 11, 1)
        high = make_request(1, blood_o_pos, health_entities[0], 100, datetime(2025, 10, 1), due)
        low = make_request(2, blood_o_pos, health_entities[0], 100, datetime(2025, 10, 1), due)
        bags = [
            make_bag(1, 80, datetime(2025, 10, 2), blood_o_pos, donors[0], high),
            make_bag(2, 20, datetime(2025, 10, 2), blood_o_pos, donors[0], low),
        ]
        source = InMemorySource(bags=bags, requests=[high, low])
        result = RequestReportService(source).requests_fulfillment(no_range, PaginationParams(limit=10, offset=0))

        assert [item["fulfillment"] for item in result["items"]] == [20, 80]

    def test_partial_example(self, blood_o_pos, health_entities, donors, no_range):
        request = make_request(1, blood_o_pos, health_entities[0], 1000, datetime(2025, 1, 1), datetime(2025, 2, 1))
        bag = make_bag(1, 450, datetime(2025, 1, 5), blood_o_pos, donors[0], request)
        source = InMemorySource(bags=[bag], requests=[request])
        item = RequestReportService(source).requests_fulfillment(no_range, PaginationParams())["items"][0]

        assert item["status"] == FulfillmentStatus.PARTIAL
        assert item["fulfillment"] == 45

    def test_request_without_bags_is_pending(self, requests_data, no_range):
        source = InMemorySource(requests=requests_data)
        result = RequestReportService(source).requests_fulfillment(no_range, PaginationParams())

        for item in result["items"]:
            assert item["status"] == FulfillmentStatus.PENDING
            assert item["delivered"] == 0
            assert item["fulfillment"] == 0

    def test_fulfillment_never_exceeds_100(self, blood_o_pos, health_entities, donors, no_range):
        request = make_request(1, blood_o_pos, health_entities[0], 100, datetime(2025, 1, 1), datetime(2025, 2, 1))
        bags = [
            make_bag(1, 100, datetime(2025, 1, 2), blood_o_pos, donors[0], request),
            make_bag(2, 50, datetime(2025, 1, 3), blood_o_pos, donors[1], request),
        ]
        item = RequestReportService(InMemorySource(bags=bags, requests=[request])).requests_fulfillment(
            no_range, PaginationParams()
        )["items"][0]

        assert item["delivered"] == 150
        assert item["fulfillment"] == 100
        assert item["status"] == FulfillmentStatus.FULFILLED

    def test_zero_needed_counts_as_fulfilled(self, blood_o_pos, health_entities, no_range):
        request = make_request(1, blood_o_pos, health_entities[0], 0, datetime(2025, 1, 1), datetime(2025, 2, 1))
        item = RequestReportService(InMemorySource(requests=[request])).requests_fulfillment(
            no_range, PaginationParams()
        )["items"][0]

        assert item["fulfillment"] == 100
        assert item["status"] == FulfillmentStatus.FULFILLED

    def test_pagination(self, source, no_range):
        result = RequestReportService(source).requests_fulfillment(no_range, PaginationParams(limit=1, offset=1))

        assert result["total"] == 2
        assert result["limit"] == 1
        assert result["offset"] == 1
        assert [item["request_id"] for item in result["items"]] == [1]

    def test_page_beyond_total(self, source, no_range):
        result = RequestReportService(source).requests_fulfillment(no_range, PaginationParams(limit=10, offset=50))

        assert result["total"] == 2
        assert result["items"] == []

    def test_time_range_filters_requests(self, source):
        time_range = TimeRange(**{"from": "2025-10-01"})
        result = RequestReportService(source).requests_fulfillment(time_range, PaginationParams())

        assert result["total"] == 1
        assert result["items"][0]["request_id"] == 2
        assert result["items"][0]["delivered"] == 30

    def test_bags_outside_window_do_not_count(self, blood_o_pos, health_entities, donors):
        request = make_request(1, blood_o_pos, health_entities[0], 100, datetime(2025, 10, 5), datetime(2025, 11, 1))
        bags = [
            make_bag(1, 60, datetime(2025, 9, 20), blood_o_pos, donors[0], request),
            make_bag(2, 25, datetime(2025, 10, 6), blood_o_pos, donors[1], request),
        ]
        source = InMemorySource(bags=bags, requests=[request])
        service = RequestReportService(source)

        windowed = service.requests_fulfillment(TimeRange(**{"from": "2025-10-01"}), PaginationParams())
        assert windowed["items"][0]["delivered"] == 25

        unbounded = service.requests_fulfillment(TimeRange(), PaginationParams())
        assert unbounded["items"][0]["delivered"] == 85


# ===== TESTS DE SOLICITUDES VENCIDAS =====

class TestOverdueRequests:
    """Tests para el reporte de solicitudes vencidas"""

    def test_overdue_example(self, blood_o_pos, health_entities):
        request = make_request(7, blood_o_pos, health_entities[0], 100, datetime(2025, 10, 1), datetime(2025, 10, 15))
        result = RequestReportService(InMemorySource(requests=[request])).overdue_requests(now=datetime(2025, 10, 19))

        assert result == [{
            "request_id": 7,
            "health_entity": "Hospital Central",
            "blood": "O+",
            "due_date": datetime(2025, 10, 15),
            "needed": 100,
            "delivered": 0,
            "shortage": 100,
            "status": OverdueStatus.OVERDUE,
        }]

    def test_shortage_from_partial_delivery(self, source):
        result = RequestReportService(source).overdue_requests(now=datetime(2025, 10, 25))

        assert len(result) == 1
        assert result[0]["request_id"] == 2
        assert result[0]["delivered"] == 30
        assert result[0]["shortage"] == 20

    def test_fulfilled_late_is_excluded(self, source, requests_data, blood_a_neg, donors):
        source.bags.append(make_bag(3, 20, datetime(2025, 10, 30), blood_a_neg, donors[0], requests_data[1]))
        result = RequestReportService(source).overdue_requests(now=datetime(2026, 6, 1))

        assert result == []

    def test_not_yet_due_is_excluded(self, source):
        result = RequestReportService(source).overdue_requests(now=datetime(2025, 10, 20))
        assert result == []

    def test_sorted_by_due_date(self, blood_o_pos, health_entities):
        requests = [
            make_request(1, blood_o_pos, health_entities[0], 10, datetime(2025, 1, 1), datetime(2025, 3, 1)),
            make_request(2, blood_o_pos, health_entities[1], 10, datetime(2025, 1, 1), datetime(2025, 1, 15)),
            make_request(3, blood_o_pos, health_entities[0], 10, datetime(2025, 1, 1), datetime(2025, 2, 1)),
        ]
        result = RequestReportService(InMemorySource(requests=requests)).overdue_requests(now=datetime(2025, 6, 1))

        assert [item["request_id"] for item in result] == [2, 3, 1]

    def test_defaults_to_current_time(self, blood_o_pos, health_entities):
        now = datetime.now(timezone.utc).replace(tzinfo=None)
        requests = [
            make_request(1, blood_o_pos, health_entities[0], 10, now - timedelta(days=30), now - timedelta(days=1)),
            make_request(2, blood_o_pos, health_entities[0], 10, now - timedelta(days=30), now + timedelta(days=30)),
        ]
        result = RequestReportService(InMemorySource(requests=requests)).overdue_requests()

        assert [item["request_id"] for item in result] == [1]

    def test_never_reports_due_in_future_or_fully_delivered(self, source):
        now = datetime(2026, 1, 1)
        for item in RequestReportService(source).overdue_requests(now=now):
            assert item["due_date"] < now
            assert item["delivered"] < item["needed"]


# ===== TESTS DE ACTIVIDAD DE DONANTES =====

class TestDonorsActivity:
    """Tests para el reporte de actividad de donantes"""

    def test_activity_sorted_by_units(self, source, no_range):
        result = DonorReportService(source).donors_activity(no_range)

        assert result == [
            {"donor_id": 1, "name": "John", "document": "123456789", "donations": 1, "units": 100},
            {"donor_id": 2, "name": "Jane", "document": "987654321", "donations": 1, "units": 30},
        ]

    def test_includes_donors_without_donations(self, source, donors, no_range):
        donors.append(Donor(id=3, document="555", name="Idle", lastname="Donor"))
        source.donors = donors
        result = DonorReportService(source).donors_activity(no_range)

        assert len(result) == 3
        idle = next(row for row in result if row["donor_id"] == 3)
        assert idle["donations"] == 0
        assert idle["units"] == 0

    def test_time_range_keeps_every_donor(self, source):
        time_range = TimeRange(**{"from": "2025-10-01", "to": "2025-10-31"})
        result = DonorReportService(source).donors_activity(time_range)

        assert len(result) == 2
        assert result[0]["donor_id"] == 2
        assert result[0]["units"] == 30
        assert result[1]["donations"] == 0

    def test_multiple_donations_are_accumulated(self, source, blood_o_pos, donors, requests_data, no_range):
        source.bags.append(make_bag(3, 450, datetime(2025, 2, 1), blood_o_pos, donors[1], requests_data[0]))
        result = DonorReportService(source).donors_activity(no_range)

        assert result[0] == {"donor_id": 2, "name": "Jane", "document": "987654321", "donations": 2, "units": 480}

    def test_unknown_donor_bags_are_ignored(self, bags_data, no_range):
        source = InMemorySource(bags=bags_data, donors=[])
        assert DonorReportService(source).donors_activity(no_range) == []


# ===== TESTS DE RESUMEN POR ENTIDAD DE SALUD =====

class TestHealthEntitiesSummary:
    """Tests para el resumen por entidad de salud"""

    def test_summary_sorted_by_fulfillment(self, source, no_range):
        result = HealthEntityReportService(source).health_entities_summary(no_range)

        assert result == [
            {
                "health_entity_id": 2, "name": "Clinic North", "requests": 1,
                "units_requested": 50, "bags_received": 1, "units_received": 30, "fulfillment_pct": 60
            },
            {
                "health_entity_id": 1, "name": "Hospital Central", "requests": 1,
                "units_requested": 100, "bags_received": 1, "units_received": 100, "fulfillment_pct": 100
            },
        ]

    def test_entity_without_bags(self, requests_data, no_range):
        result = HealthEntityReportService(InMemorySource(requests=requests_data)).health_entities_summary(no_range)

        for row in result:
            assert row["bags_received"] == 0
            assert row["units_received"] == 0
            assert row["fulfillment_pct"] == 0

    def test_bags_do_not_create_entries_for_out_of_window_requests(self, source):
        time_range = TimeRange(**{"from": "2025-10-01"})
        result = HealthEntityReportService(source).health_entities_summary(time_range)

        assert [row["health_entity_id"] for row in result] == [2]

    def test_in_window_bags_of_older_requests_count_for_known_entity(
        self, source, requests_data, blood_a_neg, health_entities, donors
    ):
        older = make_request(3, blood_a_neg, health_entities[1], 40, datetime(2025, 1, 1), datetime(2025, 2, 1))
        source.requests.append(older)
        source.bags.append(make_bag(3, 15, datetime(2025, 10, 12), blood_a_neg, donors[0], older))

        time_range = TimeRange(**{"from": "2025-10-01"})
        row = HealthEntityReportService(source).health_entities_summary(time_range)[0]

        assert row["requests"] == 1
        assert row["units_requested"] == 50
        assert row["bags_received"] == 2
        assert row["units_received"] == 45
        assert row["fulfillment_pct"] == 90

    def test_fulfillment_is_capped(self, source, requests_data, blood_o_pos, donors, no_range):
        source.bags.append(make_bag(3, 250, datetime(2025, 2, 1), blood_o_pos, donors[0], requests_data[0]))
        result = HealthEntityReportService(source).health_entities_summary(no_range)

        hospital = next(row for row in result if row["health_entity_id"] == 1)
        assert hospital["units_received"] == 350
        assert hospital["fulfillment_pct"] == 100

    def test_zero_units_requested_gives_zero_pct(self, blood_o_pos, health_entities, donors, no_range):
        request = make_request(1, blood_o_pos, health_entities[0], 0, datetime(2025, 1, 1), datetime(2025, 2, 1))
        bag = make_bag(1, 10, datetime(2025, 1, 2), blood_o_pos, donors[0], request)
        row = HealthEntityReportService(InMemorySource(bags=[bag], requests=[request])).health_entities_summary(
            no_range
        )[0]

        assert row["units_requested"] == 0
        assert row["fulfillment_pct"] == 0


# ===== TESTS DEL HISTOGRAMA DE DONACIONES =====

class TestDonationsByBlood:
    """Tests para el histograma de donaciones"""

    def test_without_grouping_returns_flat_rows(self, source, no_range):
        result = InventoryReportService(source).donations_by_blood(no_range, GroupBy.NONE)

        assert result == [
            {"type": BloodType.A, "rh": Rh.NEGATIVE, "donations": 1, "units": 30},
            {"type": BloodType.O, "rh": Rh.POSITIVE, "donations": 1, "units": 100},
        ]
        assert all("period" not in row for row in result)

    def test_group_by_month(self, source, no_range):
        result = InventoryReportService(source).donations_by_blood(no_range, GroupBy.MONTH)

        assert [bucket["period"] for bucket in result] == ["2025-01", "2025-10"]
        assert result[0]["items"][0]["type"] == BloodType.O
        assert result[1]["items"][0]["type"] == BloodType.A

    def test_group_by_day(self, source, bags_data, blood_a_neg, donors, requests_data, no_range):
        bags_data.append(make_bag(3, 20, datetime(2025, 1, 15, 18, 30), blood_a_neg, donors[1], requests_data[1]))
        source.bags = bags_data
        result = InventoryReportService(source).donations_by_blood(no_range, GroupBy.DAY)

        assert [bucket["period"] for bucket in result] == ["2025-01-15", "2025-10-10"]
        assert [row["type"] for row in result[0]["items"]] == [BloodType.A, BloodType.O]

    def test_grouped_totals_match_filtered_bags(self, source, blood_o_pos, donors, requests_data):
        for i in range(3, 8):
            source.bags.append(make_bag(i, 10 * i, datetime(2025, 10, i), blood_o_pos, donors[0], requests_data[0]))
        time_range = TimeRange(**{"from": "2025-10-01", "to": "2025-10-31"})
        expected = [bag for bag in source.bags if in_range(bag.donation_date, time_range.from_, time_range.to)]

        for group_by in (GroupBy.DAY, GroupBy.MONTH):
            result = InventoryReportService(source).donations_by_blood(time_range, group_by)
            donations = sum(row["donations"] for bucket in result for row in bucket["items"])
            units = sum(row["units"] for bucket in result for row in bucket["items"])
            assert donations == len(expected)
            assert units == sum(bag.quantity for bag in expected)

    def test_empty_data(self, no_range):
        service = InventoryReportService(InMemorySource())
        assert service.donations_by_blood(no_range, GroupBy.NONE) == []
        assert service.donations_by_blood(no_range, GroupBy.MONTH) == []


# ===== TESTS DE API =====

class TestReportsAPI:
    """Tests para los endpoints de reportes"""

    @pytest.fixture
    def api(self, client, source):
        app.dependency_overrides[get_data_source] = lambda: source
        return client

    def test_inventory_endpoint(self, api):
        response = api.get("/api/v1/reports/inventory")

        assert response.status_code == 200
        data = response.json()
        assert data[0] == {"type": "A", "rh": "-", "units": 30, "bags": 1}
        assert data[1]["type"] == "O"
        assert data[1]["rh"] == "+"

    def test_inventory_filter_by_positive_rh(self, api):
        response = api.get("/api/v1/reports/inventory", params={"rh": "+"})

        assert response.status_code == 200
        assert [row["rh"] for row in response.json()] == ["+"]

    def test_inventory_invalid_date(self, api):
        response = api.get("/api/v1/reports/inventory", params={"from": "invalid-date"})
        assert response.status_code == 400

    def test_inventory_invalid_blood_type(self, api):
        response = api.get("/api/v1/reports/inventory", params={"type": "Z"})
        assert response.status_code == 400

    def test_inventory_invalid_rh(self, api):
        response = api.get("/api/v1/reports/inventory", params={"rh": "invalid"})
        assert response.status_code == 400

    def test_inverted_range_is_rejected(self, api):
        response = api.get(
            "/api/v1/reports/donors/activity",
            params={"from": "2025-12-01", "to": "2025-01-01"}
        )
        assert response.status_code == 400

    def test_fulfillment_endpoint(self, api):
        response = api.get("/api/v1/reports/requests/fulfillment", params={"limit": 1, "offset": 0})

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert data["limit"] == 1
        assert data["offset"] == 0
        assert len(data["items"]) == 1
        assert data["items"][0]["request_id"] == 2
        assert data["items"][0]["status"] == "PARTIAL"

    @pytest.mark.parametrize("params", [{"limit": 500}, {"limit": -1}, {"limit": 0}, {"offset": -1}])
    def test_fulfillment_invalid_pagination(self, api, params):
        response = api.get("/api/v1/reports/requests/fulfillment", params=params)
        assert response.status_code == 400

    def test_overdue_endpoint(self, api):
        response = api.get("/api/v1/reports/requests/overdue")

        assert response.status_code == 200
        data = response.json()
        assert [item["request_id"] for item in data] == [2]
        assert data[0]["status"] == "OVERDUE"
        assert data[0]["shortage"] == 20
        assert data[0]["health_entity"] == "Clinic North"

    def test_donors_activity_endpoint(self, api):
        response = api.get("/api/v1/reports/donors/activity")

        assert response.status_code == 200
        assert [row["donor_id"] for row in response.json()] == [1, 2]

    def test_health_entities_summary_endpoint(self, api):
        response = api.get("/api/v1/reports/health-entities/summary")

        assert response.status_code == 200
        data = response.json()
        assert [row["fulfillment_pct"] for row in data] == [60, 100]

    def test_donations_by_blood_flat(self, api):
        response = api.get("/api/v1/reports/donations/by-blood")

        assert response.status_code == 200
        data = response.json()
        assert len(data) == 2
        assert "period" not in data[0]

    def test_donations_by_blood_grouped_by_month(self, api):
        response = api.get("/api/v1/reports/donations/by-blood", params={"groupBy": "month"})

        assert response.status_code == 200
        data = response.json()
        assert [bucket["period"] for bucket in data] == ["2025-01", "2025-10"]
        assert data[0]["items"] == [{"type": "O", "rh": "+", "donations": 1, "units": 100}]

    def test_donations_by_blood_invalid_group(self, api):
        response = api.get("/api/v1/reports/donations/by-blood", params={"groupBy": "year"})
        assert response.status_code == 400

    def test_empty_data_returns_empty_reports(self, client):
        app.dependency_overrides[get_data_source] = lambda: InMemorySource()

        assert client.get("/api/v1/reports/inventory").json() == []
        assert client.get("/api/v1/reports/requests/overdue").json() == []
        assert client.get("/api/v1/reports/donors/activity").json() == []
        assert client.get("/api/v1/reports/health-entities/summary").json() == []
        assert client.get("/api/v1/reports/donations/by-blood").json() == []
        fulfillment = client.get("/api/v1/reports/requests/fulfillment").json()
        assert fulfillment["total"] == 0
        assert fulfillment["items"] == []

    def test_health_and_security_headers(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"
