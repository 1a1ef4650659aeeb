"""Headless tests for the Textual app wiring, driven through App.run_test()."""

import pytest

from food_delivery.delivery_app import FoodDeliveryApp
from food_delivery.form_modal import FormModal
from food_delivery.models import View

pytestmark = pytest.mark.anyio


async def _settle(app, pilot):
    await pilot.pause()
    await app.workers.wait_for_complete()
    await pilot.pause()


async def _login(app, pilot, user_id: str, manager: bool = False):
    await pilot.press("l")
    assert isinstance(app.screen, FormModal)
    if manager:
        await pilot.press("right")
    await pilot.press("down", *user_id, "enter")
    await _settle(app, pilot)


async def test_anonymous_start_shows_landing_and_loads_menu(gateway, remote):
    remote.seed_item("Burger", 8.5)
    app = FoodDeliveryApp(gateway=gateway)

    async with app.run_test() as pilot:
        await _settle(app, pilot)

        assert app.session.current is None
        assert app.effective_view is View.HOME
        assert [item.name for item in app.catalog.items] == ["Burger"]

        await pilot.press("o")
        assert app.effective_view is View.HOME
        assert "not available" in app.system_status


async def test_customer_login_order_and_logout(gateway, remote, customer):
    remote.seed_item("Burger", 8.5)
    app = FoodDeliveryApp(gateway=gateway)

    async with app.run_test() as pilot:
        await _settle(app, pilot)
        await _login(app, pilot, "7")
        assert app.session.current == customer

        await pilot.press("a")
        assert app.effective_view is View.HOME

        await pilot.press("enter")
        assert isinstance(app.screen, FormModal)
        await pilot.press(*"Ann", "enter")
        await _settle(app, pilot)
        assert app.system_status.startswith("Order placed!")
        assert remote.orders[0]["userId"] == 7

        await pilot.press("m")
        await _settle(app, pilot)
        assert app.effective_view is View.MY_ORDERS
        assert len(app.orders.feed_for(7)) == 1

        await pilot.press("x")
        assert app.session.current is None
        assert app.requested_view is View.HOME
        assert app.effective_view is View.HOME


async def test_failed_login_keeps_landing(gateway, remote):
    app = FoodDeliveryApp(gateway=gateway)

    async with app.run_test() as pilot:
        await _settle(app, pilot)
        await _login(app, pilot, "42")

        assert app.session.current is None
        assert "No account" in app.system_status


async def test_manager_marks_order_delivered(gateway, remote, manager):
    remote.seed_order("Ann", "Burger", 2, 7)
    app = FoodDeliveryApp(gateway=gateway)

    async with app.run_test() as pilot:
        await _settle(app, pilot)
        await _login(app, pilot, "1", manager=True)
        assert app.session.current == manager

        await pilot.press("m")
        assert app.effective_view is View.HOME

        await pilot.press("o")
        await _settle(app, pilot)
        assert app.effective_view is View.ORDERS
        assert len(app.orders.global_feed) == 1

        await pilot.press("d")
        await _settle(app, pilot)
        assert remote.orders[0]["delivered"] is True
        assert app.orders.global_feed[0].delivered is True


async def test_manager_adds_item_from_add_item_view(gateway, remote, manager):
    app = FoodDeliveryApp(gateway=gateway)

    async with app.run_test() as pilot:
        await _settle(app, pilot)
        await _login(app, pilot, "1", manager=True)

        await pilot.press("a", "n")
        assert isinstance(app.screen, FormModal)
        await pilot.press(*"Soda", "down", *"1.50", "enter")
        await _settle(app, pilot)

        assert [item.name for item in app.catalog.items] == ["Soda"]
        assert "Added Soda" in app.system_status


async def test_bad_price_reports_validation_without_network(gateway, remote, manager):
    app = FoodDeliveryApp(gateway=gateway)

    async with app.run_test() as pilot:
        await _settle(app, pilot)
        await _login(app, pilot, "1", manager=True)
        remote.requests.clear()

        await pilot.press("a", "n", *"Soda", "down", *"abc", "enter")
        await _settle(app, pilot)

        assert app.system_status.startswith("Fix your input")
        assert remote.requests == []


@pytest.mark.parametrize("key,view", [("o", View.ORDERS), ("a", View.ADD_ITEM)])
async def test_manager_logout_from_manager_view_returns_home(gateway, remote, manager, key, view):
    app = FoodDeliveryApp(gateway=gateway)

    async with app.run_test() as pilot:
        await _settle(app, pilot)
        await _login(app, pilot, "1", manager=True)
        await pilot.press(key)
        await _settle(app, pilot)
        assert app.effective_view is view

        await pilot.press("x")
        await _settle(app, pilot)

        assert app.session.current is None
        assert app.requested_view is View.HOME
        assert app.effective_view is View.HOME
        assert app.system_status == "Logged out."


async def test_rejected_order_feed_is_reported_and_kept(gateway, remote, manager):
    remote.seed_order("Ann", "Burger", 2, 7)
    app = FoodDeliveryApp(gateway=gateway)

    async with app.run_test() as pilot:
        await _settle(app, pilot)
        await _login(app, pilot, "1", manager=True)
        await pilot.press("o")
        await _settle(app, pilot)
        assert len(app.orders.global_feed) == 1

        remote.reject_routes[("GET", "/orders")] = 503
        await pilot.press("ctrl+r")
        await _settle(app, pilot)

        assert len(app.orders.global_feed) == 1
        assert app.system_status.startswith("Server rejected the request (503)")
