"""Tests for MaintenanceService."""

import pytest
from datetime import date
from decimal import Decimal

from chargelog.domain.entities import MaintenanceItem
from chargelog.domain.errors import NotFoundError, ValidationError
from chargelog.domain.maintenance import total_cost


@pytest.fixture
def tyre_items():
    return [
        MaintenanceItem(name="Tyre", quantity=Decimal("4"), unit_price=Decimal("3500")),
        MaintenanceItem(name="Alignment", quantity=Decimal("1"), unit_price=Decimal("800.50")),
    ]


def create(maintenance_service, **overrides):
    values = {
        "date": date(2024, 3, 1),
        "type": "Tyres",
        "location": "Downtown Garage",
        "mileage": Decimal("20000"),
    }
    values.update(overrides)
    return maintenance_service.create_record(**values)


def test_total_cost_from_items(tyre_items):
    """Test the total is the sum of quantity x unit price."""
    assert tyre_items[0].total == Decimal("14000")
    assert total_cost(tyre_items) == Decimal("14800.50")


def test_total_cost_without_items():
    """Test the entered cost is used when there are no items."""
    assert total_cost([], Decimal("1200")) == Decimal("1200.00")
    assert total_cost([]) == Decimal("0.00")


def test_create_with_items(maintenance_service, tyre_items):
    """Test creating a record stores its items in order."""
    record_id = create(maintenance_service, items=tyre_items, cost=Decimal("1"))
    record = maintenance_service.get_record(record_id)

    assert record.total_cost == Decimal("14800.50")
    assert [item.name for item in record.items] == ["Tyre", "Alignment"]
    assert record.items[1].unit_price == Decimal("800.50")


def test_stored_items_match_total(maintenance_service):
    """Test stored items keep their digits and still add up to the total."""
    items = [
        MaintenanceItem(name="Coolant", quantity=Decimal("1.2345"), unit_price=Decimal("10.005")),
        MaintenanceItem(name="Labour", quantity=Decimal("0.75"), unit_price=Decimal("1200.125")),
    ]
    record_id = create(maintenance_service, items=items, mileage=Decimal("20000.5"))
    record = maintenance_service.get_record(record_id)

    assert list(record.items) == items
    assert record.mileage == Decimal("20000.5")
    assert record.total_cost == total_cost(record.items)


def test_create_uses_default_vehicle(maintenance_service, sample_vehicle):
    """Test the default vehicle is used when none is given."""
    record_id = create(maintenance_service, cost=Decimal("500"))

    assert maintenance_service.get_record(record_id).vehicle_id == sample_vehicle.id


@pytest.mark.parametrize("field", ["date", "type", "location", "mileage"])
def test_required_fields(maintenance_service, field):
    """Test date, type, location and mileage are required."""
    with pytest.raises(ValidationError, match=field):
        create(maintenance_service, **{field: None})


def test_negative_values(maintenance_service):
    """Test negative numbers are rejected."""
    with pytest.raises(ValidationError):
        create(maintenance_service, mileage=Decimal("-5"))
    with pytest.raises(ValidationError):
        create(
            maintenance_service,
            items=[MaintenanceItem(name="Oil", quantity=Decimal("1"), unit_price=Decimal("-1"))],
        )


def test_unknown_vehicle(maintenance_service):
    """Test an unknown vehicle is rejected."""
    with pytest.raises(NotFoundError):
        create(maintenance_service, vehicle_id="missing")


def test_update_keeps_unspecified_fields(maintenance_service, tyre_items):
    """Test only given fields change."""
    record_id = create(maintenance_service, items=tyre_items, notes="winter set")

    maintenance_service.update_record(record_id, location="Airport Garage")
    record = maintenance_service.get_record(record_id)

    assert record.location == "Airport Garage"
    assert record.notes == "winter set"
    assert record.total_cost == Decimal("14800.50")
    assert len(record.items) == 2


def test_update_replaces_items(maintenance_service, tyre_items):
    """Test new items replace the old ones and the total follows."""
    record_id = create(maintenance_service, items=tyre_items)

    maintenance_service.update_record(
        record_id,
        items=[MaintenanceItem(name="Wiper", quantity=Decimal("2"), unit_price=Decimal("250"))],
    )
    record = maintenance_service.get_record(record_id)

    assert [item.name for item in record.items] == ["Wiper"]
    assert record.total_cost == Decimal("500.00")


def test_update_missing(maintenance_service):
    """Test updating an unknown record fails."""
    with pytest.raises(NotFoundError):
        maintenance_service.update_record("missing", notes="x")


def test_delete_and_list(maintenance_service):
    """Test listing newest first and deleting."""
    older = create(maintenance_service, date=date(2024, 1, 1), cost=Decimal("100"))
    newer = create(maintenance_service, date=date(2024, 6, 1), cost=Decimal("200"))

    assert [r.id for r in maintenance_service.list_records()] == [newer, older]

    maintenance_service.delete_record(older)
    assert [r.id for r in maintenance_service.list_records()] == [newer]

    with pytest.raises(NotFoundError):
        maintenance_service.delete_record(older)
