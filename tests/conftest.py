"""
Pytest configuration and shared fixtures.

FakeRemote implements the remote JSON API in memory behind httpx.MockTransport
and records every request, so tests can assert that no network call was made.
"""

from __future__ import annotations

import json
import re

import httpx
import pytest

from food_delivery.catalog import MenuCatalog
from food_delivery.gateway import RemoteGateway
from food_delivery.models import Identity, Role
from food_delivery.orders import OrderCoordinator
from food_delivery.session import SessionManager

BASE_URL = "http://remote.test/api"


class FakeRemote:
    """In-memory item catalog, order ledger and user directory."""

    def __init__(self) -> None:
        self.items: list[dict] = []
        self.orders: list[dict] = []
        self.users: list[dict] = []
        self.requests: list[tuple[str, str]] = []
        self.offline = False
        self.reject_status: int | None = None
        self.reject_routes: dict[tuple[str, str], int] = {}
        self._next_id = {"items": 1, "orders": 1, "users": 1}

    def seed_item(self, name: str, price: float) -> dict:
        item = {"id": self._take_id("items"), "name": name, "price": price}
        self.items.append(item)
        return item

    def seed_user(self, name: str, role: str, user_id: int | None = None) -> dict:
        user = {"id": user_id if user_id is not None else self._take_id("users"), "name": name, "role": role}
        self.users.append(user)
        return user

    def seed_order(self, customer_name: str, item_name: str, quantity: int, user_id: int, delivered: bool = False) -> dict:
        order = {
            "id": self._take_id("orders"),
            "customerName": customer_name,
            "itemName": item_name,
            "quantity": quantity,
            "userId": user_id,
            "delivered": delivered,
        }
        self.orders.append(order)
        return order

    def calls(self, method: str | None = None, path: str | None = None) -> list[tuple[str, str]]:
        return [
            (m, p)
            for m, p in self.requests
            if (method is None or m == method) and (path is None or p == path)
        ]

    def _take_id(self, kind: str) -> int:
        value = self._next_id[kind]
        self._next_id[kind] += 1
        return value

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path.removeprefix("/api")
        self.requests.append((request.method, path))

        if self.offline:
            raise httpx.ConnectError("remote offline", request=request)
        if self.reject_status is not None:
            return httpx.Response(self.reject_status, text="rejected")
        if (request.method, path) in self.reject_routes:
            return httpx.Response(self.reject_routes[(request.method, path)], text="rejected")

        body = json.loads(request.content) if request.content else {}

        if path == "/items":
            if request.method == "GET":
                return httpx.Response(200, json=self.items)
            item = self.seed_item(body["name"], body["price"])
            return httpx.Response(201, json=item)

        if path == "/orders":
            if request.method == "GET":
                return httpx.Response(200, json=self.orders)
            order = self.seed_order(body["customerName"], body["itemName"], body["quantity"], body["userId"])
            return httpx.Response(201, json=order)

        match = re.fullmatch(r"/orders/(\d+)/delivered", path)
        if match and request.method == "PATCH":
            for order in self.orders:
                if order["id"] == int(match.group(1)):
                    order["delivered"] = bool(body["delivered"])
                    return httpx.Response(200, json=order)
            return httpx.Response(404, text="order not found")

        match = re.fullmatch(r"/users/(\d+)/orders", path)
        if match:
            user_id = int(match.group(1))
            return httpx.Response(200, json=[o for o in self.orders if o["userId"] == user_id])

        if path == "/users/login":
            for user in self.users:
                if user["id"] == body["id"] and user["role"] == body["role"]:
                    return httpx.Response(200, json=user)
            return httpx.Response(401, text="unknown account")

        if path == "/users":
            user = self.seed_user(body["name"], body["role"])
            return httpx.Response(201, json=user)

        return httpx.Response(404, text="no route")


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def remote() -> FakeRemote:
    return FakeRemote()


@pytest.fixture
def gateway(remote: FakeRemote) -> RemoteGateway:
    client = httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(remote.handler))
    return RemoteGateway(client=client)


@pytest.fixture
def session(gateway: RemoteGateway) -> SessionManager:
    return SessionManager(gateway)


@pytest.fixture
def catalog(gateway: RemoteGateway, session: SessionManager) -> MenuCatalog:
    return MenuCatalog(gateway, session)


@pytest.fixture
def coordinator(gateway: RemoteGateway, session: SessionManager, catalog: MenuCatalog) -> OrderCoordinator:
    return OrderCoordinator(gateway, session, catalog)


@pytest.fixture
def customer(remote: FakeRemote) -> Identity:
    user = remote.seed_user("Ann", "CUSTOMER", user_id=7)
    return Identity(id=user["id"], name=user["name"], role=Role.CUSTOMER)


@pytest.fixture
def manager(remote: FakeRemote) -> Identity:
    user = remote.seed_user("Maya", "MANAGER", user_id=1)
    return Identity(id=user["id"], name=user["name"], role=Role.MANAGER)
