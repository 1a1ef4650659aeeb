"""Cached menu snapshot with manager-only item creation."""

from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation

from food_delivery.access import require_role
from food_delivery.errors import FoodDeliveryError, RemoteRejected, TransportError, ValidationError
from food_delivery.gateway import RemoteGateway
from food_delivery.models import FoodItem, Role
from food_delivery.session import SessionManager

logger = logging.getLogger(__name__)


def parse_price(raw: object) -> Decimal:
    """Parse user input into a finite, non-negative price."""
    text = str(raw if raw is not None else "").strip()
    if not text:
        raise ValidationError("price is required", {"field": "price"})
    try:
        price = Decimal(text)
    except InvalidOperation as exc:
        raise ValidationError(f"price must be a number, got {text!r}", {"field": "price"}) from exc
    if not price.is_finite() or price < 0:
        raise ValidationError("price must be zero or more", {"field": "price"})
    return price


class MenuCatalog:
    """Process-wide menu snapshot. Only refresh() replaces it."""

    def __init__(self, gateway: RemoteGateway, session: SessionManager) -> None:
        self.gateway = gateway
        self.session = session
        self._items: tuple[FoodItem, ...] = ()
        self.last_error: FoodDeliveryError | None = None

    @property
    def items(self) -> tuple[FoodItem, ...]:
        return self._items

    def find(self, name: str) -> FoodItem | None:
        for item in self._items:
            if item.name == name:
                return item
        return None

    def default_selection(self) -> str | None:
        return self._items[0].name if self._items else None

    async def refresh(self) -> tuple[FoodItem, ...]:
        try:
            fetched = await self.gateway.list_items()
        except (TransportError, RemoteRejected) as exc:
            self.last_error = exc
            logger.warning("menu refresh failed, keeping %d cached items: %s", len(self._items), exc)
            return self._items

        self._items = tuple(fetched)
        self.last_error = None
        logger.debug("menu refreshed items=%d", len(self._items))
        return self._items

    async def add_item(self, name: str, price: object) -> FoodItem:
        require_role(self.session.current, Role.MANAGER, "add menu items")

        clean_name = (name or "").strip()
        if not clean_name:
            raise ValidationError("item name is required", {"field": "name"})
        clean_price = parse_price(price)

        try:
            created = await self.gateway.create_item(clean_name, clean_price)
        except FoodDeliveryError as exc:
            logger.warning("add item failed name=%r: %s", clean_name, exc)
            raise

        logger.info("item created id=%s name=%r", created.id, created.name)
        await self.refresh()
        return created
