"""Tests for the input/output DTOs."""

from datetime import datetime, timedelta, timezone

from pizzeria.application.dto import UNSET, OrderUpdate, to_dto
from tests.application.helpers import customer, margherita, place, setup

ROME_SUMMER = timezone(timedelta(hours=2))


class TestOrderUpdate:

    def test_unset_fields_are_absent(self):
        update = OrderUpdate(phone="3339876543", name=None)
        assert update.present_fields() == {"phone": "3339876543", "name": None}
        assert update.delivery_address is UNSET

    def test_default_is_empty(self):
        assert OrderUpdate().is_empty


class TestToDto:

    def test_fields_are_formatted(self):
        engine, _ = setup()
        dto = to_dto(engine.create_order(customer(), margherita(qty=2)))
        assert dto.status == "PENDING"
        assert dto.total == "€15.00"
        assert dto.items[0].unit_price == "€7.50"
        assert dto.items[0].line_total == "€15.00"
        assert dto.created_at == "2024-05-01 18:00:00 UTC"

    def test_created_at_converted_to_utc(self):
        engine, _ = setup(clock=lambda: datetime(2024, 5, 1, 20, 0, tzinfo=ROME_SUMMER))
        dto = to_dto(place(engine))
        assert dto.created_at == "2024-05-01 18:00:00 UTC"
