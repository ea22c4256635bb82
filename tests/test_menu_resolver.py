"""
Unit tests for menu snapshot resolution and address normalization
"""

from decimal import Decimal

import pytest

from foodorder.schemas.order import AddressIn
from foodorder.services.address import Address, Coordinates, normalize_address
from foodorder.services.menu_resolver import CartLine, MenuSnapshotResolver
from foodorder.utils.error_handler import BadRequest, InvalidQuantity, ItemUnavailable

class TestMenuSnapshotResolver:

    def test_resolves_in_request_order(self, db_session, seed):
        resolver = MenuSnapshotResolver(db_session)
        lines = resolver.resolve(seed.restaurant.id, [
            CartLine(seed.fries.id, 2),
            CartLine(seed.burger.id, 1),
        ])

        assert [l.name for l in lines] == ["Fries", "Classic Burger"]
        assert lines[0].price == Decimal("35.0")
        assert lines[0].subtotal == Decimal("70.0")
        assert lines[1].category == "Mains"
        assert lines[1].images == ("burger-1.jpg", "burger-2.jpg")
        assert lines[1].customizations == ()

    def test_line_items_are_frozen(self, db_session, seed):
        line = MenuSnapshotResolver(db_session).resolve(seed.restaurant.id, [CartLine(seed.burger.id, 1)])[0]
        with pytest.raises(AttributeError):
            line.price = Decimal("1")

    def test_snapshot_is_detached_from_menu(self, db_session, seed):
        resolver = MenuSnapshotResolver(db_session)
        line = resolver.resolve(seed.restaurant.id, [CartLine(seed.burger.id, 1)])[0]

        seed.burger.price = 999
        db_session.commit()

        assert line.price == Decimal("100")
        assert line.to_document()["price"] == 100

    def test_item_of_other_restaurant_is_not_found(self, db_session, seed):
        resolver = MenuSnapshotResolver(db_session)
        with pytest.raises(ItemUnavailable) as exc_info:
            resolver.resolve(seed.restaurant.id, [CartLine(seed.taco.id, 1)])
        assert exc_info.value.context == {"item_id": seed.taco.id}

    def test_first_bad_item_aborts(self, db_session, seed):
        resolver = MenuSnapshotResolver(db_session)
        with pytest.raises(ItemUnavailable) as exc_info:
            resolver.resolve(seed.restaurant.id, [
                CartLine(seed.burger.id, 1),
                CartLine(seed.retired.id, 1),
                CartLine(seed.sold_out.id, 1),
            ])
        assert exc_info.value.context["item_id"] == seed.retired.id

    @pytest.mark.parametrize("quantity", [0, -1, True, 2.0, "3"])
    def test_quantity_must_be_positive_integer(self, db_session, seed, quantity):
        resolver = MenuSnapshotResolver(db_session)
        with pytest.raises(InvalidQuantity):
            resolver.resolve(seed.restaurant.id, [CartLine(seed.burger.id, quantity)])

class TestAddressNormalization:

    def test_string_is_zero_filled(self):
        assert normalize_address("12 Baker St") == Address(
            street="12 Baker St",
            city="",
            state="",
            zip_code="",
            coordinates=Coordinates(0.0, 0.0),
        )

    def test_mapping_accepts_camel_case_zip(self):
        address = normalize_address({"street": "1 Main", "zipCode": "90210", "city": "LA"})
        assert address.zip_code == "90210"
        assert address.city == "LA"
        assert address.state == ""

    def test_request_model(self):
        address = normalize_address(AddressIn(
            street="1 Main", state="CA", coordinates={"latitude": 34.1, "longitude": -118.3}
        ))
        assert address.state == "CA"
        assert address.coordinates == Coordinates(34.1, -118.3)
        assert address.to_document()["coordinates"] == {"latitude": 34.1, "longitude": -118.3}

    @pytest.mark.parametrize("raw", [None, "", "  "])
    def test_missing_address(self, raw):
        with pytest.raises(BadRequest):
            normalize_address(raw)
