"""Domain models for the food delivery client.

Identity, FoodItem and Order double as the wire schemas of the remote JSON
API: the gateway validates every reply with ``model_validate`` so a malformed
row never reaches a cached snapshot.
"""

from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, PositiveInt, field_validator


class Role(str, Enum):
    """Role carried by a signed-in identity."""

    CUSTOMER = "CUSTOMER"
    MANAGER = "MANAGER"

    @classmethod
    def parse(cls, value: str) -> "Role":
        return cls(str(value).strip().upper())


class View(str, Enum):
    """Screens the presentation layer can request."""

    HOME = "home"
    ADD_ITEM = "addItem"
    ORDERS = "orders"
    MY_ORDERS = "myOrders"


class _WireModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


def _require_text(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be blank")
    return value


class Identity(_WireModel):
    """A signed-in principal."""

    id: PositiveInt
    name: str = Field(..., min_length=1)
    role: Role

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _require_text(v)

    @field_validator("role", mode="before")
    @classmethod
    def normalize_role(cls, v: Any) -> Any:
        if isinstance(v, str):
            return Role.parse(v)
        return v


class FoodItem(_WireModel):
    """A menu entry as returned by the remote catalog."""

    id: PositiveInt
    name: str = Field(..., min_length=1)
    price: Decimal = Field(..., ge=0)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _require_text(v)


class Order(_WireModel):
    """An order row. item_name is the dish name captured at order time."""

    id: PositiveInt
    customer_name: str = Field(..., alias="customerName", min_length=1)
    item_name: str = Field(..., alias="itemName", min_length=1)
    quantity: int = Field(..., ge=1)
    user_id: PositiveInt = Field(..., alias="userId")
    delivered: bool = False

    @property
    def is_pending(self) -> bool:
        return not self.delivered
