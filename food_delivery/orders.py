"""Order placement, feeds and the delivered transition.

Every write is confirmed by the remote service before any snapshot changes;
the affected feeds are then reloaded, in sequence, from the remote service.
"""

from __future__ import annotations

import logging

from food_delivery.access import require_role
from food_delivery.catalog import MenuCatalog
from food_delivery.errors import AccessDenied, FoodDeliveryError, RemoteRejected, TransportError, ValidationError
from food_delivery.gateway import RemoteGateway
from food_delivery.models import Identity, Order, Role
from food_delivery.session import SessionManager

logger = logging.getLogger(__name__)


def parse_quantity(raw: object) -> int:
    """Coerce form input to an order quantity of at least 1."""
    if isinstance(raw, bool):
        raise ValidationError("quantity must be a whole number", {"field": "quantity"})
    if isinstance(raw, int):
        value = raw
    else:
        text = str(raw if raw is not None else "").strip()
        try:
            value = int(text)
        except ValueError as exc:
            raise ValidationError(f"quantity must be a whole number, got {text!r}", {"field": "quantity"}) from exc
    if value < 1:
        raise ValidationError("quantity must be at least 1", {"field": "quantity"})
    return value


class OrderCoordinator:
    """Keeps the global feed and per-user feeds in step with the remote ledger."""

    def __init__(self, gateway: RemoteGateway, session: SessionManager, catalog: MenuCatalog) -> None:
        self.gateway = gateway
        self.session = session
        self.catalog = catalog
        self._global_feed: tuple[Order, ...] | None = None
        self._user_feeds: dict[int, tuple[Order, ...]] = {}
        self.global_error: FoodDeliveryError | None = None
        self._user_errors: dict[int, FoodDeliveryError] = {}

    # ---------- snapshot readers ----------

    @property
    def global_feed(self) -> tuple[Order, ...]:
        return self._global_feed or ()

    def feed_for(self, user_id: int) -> tuple[Order, ...]:
        return self._user_feeds.get(user_id, ())

    def user_error(self, user_id: int) -> FoodDeliveryError | None:
        """Failure of the last read of this user's feed, or None if it succeeded."""
        return self._user_errors.get(user_id)

    def _cached_order(self, order_id: int) -> Order | None:
        for order in self.global_feed:
            if order.id == order_id:
                return order
        return None

    # ---------- operations ----------

    async def place_order(self, customer_name: str, item_name: str, quantity: object, identity: Identity | None) -> Order:
        customer = require_role(identity, Role.CUSTOMER, "place orders")
        if customer != self.session.current:
            raise AccessDenied("sign in again to place orders", {"action": "place orders"})

        clean_name = (customer_name or "").strip()
        if not clean_name:
            raise ValidationError("customer name is required", {"field": "customerName"})
        if not item_name or self.catalog.find(item_name) is None:
            raise ValidationError("choose an item from the menu", {"field": "itemName"})
        clean_quantity = parse_quantity(quantity)

        try:
            order = await self.gateway.place_order(clean_name, item_name, clean_quantity, customer.id)
        except FoodDeliveryError as exc:
            logger.warning("place order failed user=%s item=%r: %s", customer.id, item_name, exc)
            raise

        logger.info("order placed id=%s user=%s item=%r qty=%s", order.id, customer.id, item_name, clean_quantity)
        if self._global_feed is not None:
            await self._reload_global()
        await self._reload_user(customer.id)
        return order

    async def list_for_manager(self) -> tuple[Order, ...]:
        require_role(self.session.current, Role.MANAGER, "view all orders")
        await self._reload_global()
        return self.global_feed

    async def list_for_user(self, user_id: int) -> tuple[Order, ...]:
        identity = self.session.current
        if identity is None:
            raise AccessDenied("sign in to view orders", {"action": "view orders"})
        if identity.role is not Role.MANAGER and identity.id != user_id:
            raise AccessDenied("customers can only view their own orders", {"user_id": user_id})
        await self._reload_user(user_id)
        return self.feed_for(user_id)

    async def mark_delivered(self, order_id: int) -> Order:
        require_role(self.session.current, Role.MANAGER, "mark orders delivered")

        cached = self._cached_order(order_id)
        if cached is not None and cached.delivered:
            logger.info("order %s already delivered", order_id)
            return cached

        try:
            order = await self.gateway.set_delivered(order_id, True)
        except FoodDeliveryError as exc:
            logger.warning("mark delivered failed order=%s: %s", order_id, exc)
            raise

        logger.info("order %s delivered", order_id)
        await self._reload_global()
        if order.user_id in self._user_feeds:
            await self._reload_user(order.user_id)
        return order

    # ---------- refresh ----------

    async def _reload_global(self) -> None:
        try:
            fetched = await self.gateway.list_orders()
        except (TransportError, RemoteRejected) as exc:
            self.global_error = exc
            logger.warning("order feed refresh failed, keeping %d cached orders: %s", len(self.global_feed), exc)
            return
        self._global_feed = tuple(fetched)
        self.global_error = None

    async def _reload_user(self, user_id: int) -> None:
        try:
            fetched = await self.gateway.list_orders_for_user(user_id)
        except (TransportError, RemoteRejected) as exc:
            self._user_errors[user_id] = exc
            logger.warning("order feed refresh failed user=%s: %s", user_id, exc)
            return
        self._user_feeds[user_id] = tuple(fetched)
        self._user_errors.pop(user_id, None)
