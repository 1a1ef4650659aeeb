"""Tests for MenuCatalog refresh and manager-only add-item."""

from decimal import Decimal

import pytest

from food_delivery.catalog import parse_price
from food_delivery.errors import AccessDenied, RemoteRejected, TransportError, ValidationError

pytestmark = pytest.mark.anyio


async def test_refresh_replaces_snapshot(catalog, remote):
    remote.seed_item("Burger", 8.5)

    items = await catalog.refresh()

    assert [item.name for item in items] == ["Burger"]
    assert catalog.items is items
    assert catalog.default_selection() == "Burger"
    assert catalog.find("Burger").price == Decimal("8.5")
    assert catalog.find("Soda") is None


async def test_refresh_failure_keeps_previous_snapshot(catalog, remote):
    remote.seed_item("Burger", 8.5)
    before = await catalog.refresh()

    remote.offline = True
    after = await catalog.refresh()

    assert after == before
    assert catalog.items == before
    assert isinstance(catalog.last_error, TransportError)

    remote.offline = False
    await catalog.refresh()
    assert catalog.last_error is None


async def test_customer_add_item_is_rejected_locally(catalog, session, remote, customer):
    remote.seed_item("Burger", 8.5)
    await catalog.refresh()
    session.current = customer
    calls_before = list(remote.requests)

    with pytest.raises(AccessDenied):
        await catalog.add_item("Soda", "1.50")

    assert [item.name for item in catalog.items] == ["Burger"]
    assert remote.requests == calls_before


async def test_anonymous_add_item_is_rejected(catalog, remote):
    with pytest.raises(AccessDenied):
        await catalog.add_item("Soda", "1.50")
    assert remote.requests == []


async def test_manager_add_item_refreshes_from_remote(catalog, session, remote, manager):
    session.current = manager

    created = await catalog.add_item("  Soda ", "1.50")

    assert created.name == "Soda"
    assert [item.name for item in catalog.items] == ["Soda"]
    assert remote.calls() == [("POST", "/items"), ("GET", "/items")]


@pytest.mark.parametrize("name,price", [("", "1.00"), ("   ", "1.00"), ("Soda", ""), ("Soda", "abc"), ("Soda", "-1"), ("Soda", "NaN")])
async def test_add_item_validation_never_hits_network(catalog, session, remote, manager, name, price):
    session.current = manager

    with pytest.raises(ValidationError):
        await catalog.add_item(name, price)

    assert remote.requests == []


async def test_add_item_remote_failure_is_not_applied(catalog, session, remote, manager):
    session.current = manager
    remote.reject_status = 409

    with pytest.raises(RemoteRejected):
        await catalog.add_item("Soda", "1.50")

    assert catalog.items == ()


async def test_parse_price_accepts_zero_and_decimals():
    assert parse_price("0") == Decimal("0")
    assert parse_price(" 2.25 ") == Decimal("2.25")
    assert parse_price(1.5) == Decimal("1.5")


async def test_rejected_refresh_keeps_previous_snapshot(catalog, remote):
    remote.seed_item("Burger", 8.5)
    before = await catalog.refresh()

    remote.reject_status = 503
    after = await catalog.refresh()

    assert after == before
    assert isinstance(catalog.last_error, RemoteRejected)


async def test_refresh_failure_right_after_add_item_keeps_old_menu(catalog, session, remote, manager):
    remote.seed_item("Burger", 8.5)
    await catalog.refresh()
    session.current = manager
    remote.reject_routes[("GET", "/items")] = 500

    created = await catalog.add_item("Soda", "1.50")

    assert created.name == "Soda"
    assert [item.name for item in catalog.items] == ["Burger"]
    assert isinstance(catalog.last_error, RemoteRejected)
