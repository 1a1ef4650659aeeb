"""Async HTTP gateway for the remote item, order and user endpoints."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from food_delivery.config import API_BASE, HTTP_TIMEOUT_SECONDS
from food_delivery.errors import RemoteRejected, TransportError
from food_delivery.models import FoodItem, Identity, Order, Role

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class RemoteGateway:
    """Thin operation set over the remote JSON API. Holds no domain state."""

    def __init__(self, client: httpx.AsyncClient | None = None, base_url: str = API_BASE) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=HTTP_TIMEOUT_SECONDS)

    async def __aenter__(self) -> "RemoteGateway":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    # ---------- items ----------

    async def list_items(self) -> list[FoodItem]:
        data = await self._request("GET", "/items")
        return self._decode_list(data, FoodItem)

    async def create_item(self, name: str, price: Decimal) -> FoodItem:
        data = await self._request("POST", "/items", json={"name": name, "price": float(price)})
        return self._decode(data, FoodItem)

    # ---------- orders ----------

    async def list_orders(self) -> list[Order]:
        data = await self._request("GET", "/orders")
        return self._decode_list(data, Order)

    async def list_orders_for_user(self, user_id: int) -> list[Order]:
        data = await self._request("GET", f"/users/{user_id}/orders")
        return self._decode_list(data, Order)

    async def place_order(self, customer_name: str, item_name: str, quantity: int, user_id: int) -> Order:
        payload = {
            "customerName": customer_name,
            "itemName": item_name,
            "quantity": quantity,
            "userId": user_id,
        }
        data = await self._request("POST", "/orders", json=payload)
        return self._decode(data, Order)

    async def set_delivered(self, order_id: int, delivered: bool) -> Order:
        data = await self._request("PATCH", f"/orders/{order_id}/delivered", json={"delivered": delivered})
        return self._decode(data, Order)

    # ---------- users ----------

    async def login(self, user_id: int, role: Role) -> Identity:
        data = await self._request("POST", "/users/login", json={"id": user_id, "role": role.value})
        return self._decode(data, Identity)

    async def register(self, name: str, role: Role) -> Identity:
        data = await self._request("POST", "/users", json={"name": name, "role": role.value})
        return self._decode(data, Identity)

    # ---------- internal ----------

    async def _request(self, method: str, path: str, json: dict[str, Any] | None = None) -> Any:
        try:
            response = await self._client.request(method, path, json=json)
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %r", method, path, exc)
            raise TransportError(f"{method} {path} failed: {exc.__class__.__name__}") from exc

        logger.debug("%s %s -> %s", method, path, response.status_code)
        if not response.is_success:
            detail = response.text[:200]
            logger.warning("%s %s rejected status=%s body=%r", method, path, response.status_code, detail)
            raise RemoteRejected(response.status_code, detail or response.reason_phrase, {"path": path})

        try:
            return response.json()
        except ValueError as exc:
            logger.warning("%s %s returned undecodable body", method, path)
            raise TransportError(f"{method} {path} returned invalid JSON") from exc

    @staticmethod
    def _decode(data: Any, model: type[M]) -> M:
        try:
            return model.model_validate(data)
        except ValidationError as exc:
            logger.warning("unexpected %s payload: %s", model.__name__, exc.errors(include_url=False))
            raise TransportError(f"unexpected {model.__name__} payload", {"errors": exc.error_count()}) from exc

    @classmethod
    def _decode_list(cls, data: Any, model: type[M]) -> list[M]:
        if not isinstance(data, list):
            raise TransportError("expected a JSON array")
        return [cls._decode(row, model) for row in data]
