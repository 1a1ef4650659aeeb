"""Rendering helpers for menu rows, order rows and the navigation bar."""

from __future__ import annotations

from rich.text import Text

from food_delivery.access import allowed_views
from food_delivery.models import FoodItem, Identity, Order, Role, View

NAV_LABELS: dict[View, tuple[str, str]] = {
    View.HOME: ("h", "Home"),
    View.ADD_ITEM: ("a", "Add Food Item"),
    View.ORDERS: ("o", "Orders"),
    View.MY_ORDERS: ("m", "My Orders"),
}


def badge_style(role: Role) -> str:
    """Return a consistent badge style for role tags."""
    if role is Role.MANAGER:
        return "bold #ffffff on #b23a48"
    return "bold #0b1f0f on #5fbf72"


def format_identity(identity: Identity | None) -> Text:
    """Render the signed-in identity with a colored role tag."""
    text = Text()
    if identity is None:
        text.append("Not signed in", style="dim")
        return text
    text.append(f" {identity.role.value} ", style=badge_style(identity.role))
    text.append(f" {identity.name} (#{identity.id})")
    return text


def format_nav(identity: Identity | None, effective: View) -> Text:
    """Render nav tabs; the effective view is highlighted, disallowed tabs dimmed."""
    allowed = allowed_views(identity)
    text = Text()
    for idx, (view, (key, label)) in enumerate(NAV_LABELS.items()):
        if idx > 0:
            text.append("  ")
        if view is effective:
            style = "bold reverse"
        elif view in allowed:
            style = "bold"
        else:
            style = "dim strike"
        text.append(f"[{key}] {label}", style=style)
    return text


def format_price(item: FoodItem) -> str:
    return f"${item.price:.2f}"


def format_menu_row(item: FoodItem, name_width: int = 24) -> Text:
    text = Text()
    text.append(item.name.ljust(name_width), style="bold")
    text.append(format_price(item), style="#5fbf72")
    return text


def delivery_tag(order: Order) -> Text:
    if order.delivered:
        return Text("DELIVERED", style="bold #0b1f0f on #5fbf72")
    return Text("PENDING", style="bold #ffffff on #2f6db5")


def format_order_row(order: Order) -> Text:
    """Render `customer - quantity x item [status]`."""
    text = Text()
    text.append(f"#{order.id} ", style="dim")
    text.append(order.customer_name, style="bold")
    text.append(f"  {order.quantity} × {order.item_name}  ")
    text.append_text(delivery_tag(order))
    return text
