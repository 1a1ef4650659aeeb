"""Role capability table and view resolution."""

from __future__ import annotations

from food_delivery.errors import AccessDenied
from food_delivery.models import Identity, Role, View

CAPABILITIES: dict[Role | None, frozenset[View]] = {
    None: frozenset({View.HOME}),
    Role.CUSTOMER: frozenset({View.HOME, View.MY_ORDERS}),
    Role.MANAGER: frozenset({View.HOME, View.ADD_ITEM, View.ORDERS}),
}


def _role_of(identity: Identity | None) -> Role | None:
    return identity.role if identity is not None else None


def allowed_views(identity: Identity | None) -> frozenset[View]:
    """Views the identity (or an anonymous visitor) may open."""
    return CAPABILITIES[_role_of(identity)]


def resolve(identity: Identity | None, requested: View) -> View:
    """Return the requested view if allowed, otherwise HOME."""
    if requested in allowed_views(identity):
        return requested
    return View.HOME


def shows_auth_landing(identity: Identity | None) -> bool:
    """HOME renders the login/register landing instead of the menu."""
    return identity is None


def can_place_orders(identity: Identity | None) -> bool:
    return _role_of(identity) is Role.CUSTOMER


def can_add_items(identity: Identity | None) -> bool:
    return _role_of(identity) is Role.MANAGER


def can_mark_delivered(identity: Identity | None) -> bool:
    return _role_of(identity) is Role.MANAGER


def require_role(identity: Identity | None, role: Role, action: str) -> Identity:
    """Guard clause for role-restricted operations."""
    if identity is None:
        raise AccessDenied(f"sign in to {action}", {"action": action})
    if identity.role is not role:
        raise AccessDenied(
            f"only a {role.value.lower()} can {action}",
            {"action": action, "role": identity.role.value},
        )
    return identity
