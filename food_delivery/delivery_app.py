"""Main Textual app class."""

from __future__ import annotations

import logging

from rich.text import Text
from textual import work
from textual.app import App, ComposeResult
from textual.containers import Vertical
from textual.css.query import NoMatches
from textual.reactive import reactive
from textual.widgets import Header, Static

from food_delivery import access
from food_delivery.catalog import MenuCatalog
from food_delivery.errors import FoodDeliveryError, describe_failure
from food_delivery.form_modal import FormField, FormModal
from food_delivery.gateway import RemoteGateway
from food_delivery.models import Order, Role, View
from food_delivery.orders import OrderCoordinator
from food_delivery.rendering import format_identity, format_menu_row, format_nav, format_order_row
from food_delivery.session import SessionManager

logger = logging.getLogger(__name__)

ROLE_CHOICES = tuple(role.value for role in Role)

VIEW_TITLES: dict[View, tuple[str, str]] = {
    View.HOME: ("Fresh Picks", "Choose a favorite dish and get it delivered fast."),
    View.ADD_ITEM: ("Add Food Item", "Keep the menu fresh for customers."),
    View.ORDERS: ("Recent Orders", "Live feed of customer requests."),
    View.MY_ORDERS: ("My Orders", "Everything you have ordered so far."),
}


class FoodDeliveryApp(App):
    """A Textual client for browsing the menu, ordering and managing deliveries."""

    TITLE = "Local Food Delivery"
    SUB_TITLE = "Delicious meals, right to your door."

    CSS = """
    Screen {
        layout: vertical;
    }

    #nav {
        height: 1;
        padding: 0 1;
    }

    #identity {
        height: 1;
        padding: 0 1;
    }

    #view-pane {
        height: 1fr;
        border: round $primary;
        padding: 1;
    }

    #view-title {
        text-style: bold;
    }

    #view-hint {
        color: $text-muted;
        margin-bottom: 1;
    }

    #view-list {
        height: 1fr;
        border: tall $surface;
        padding: 0 1;
    }

    #status-bar {
        border: heavy $secondary;
        padding: 0 1;
        height: 3;
    }
    """

    requested_view = reactive(View.HOME)
    selected_index = reactive(0)

    BINDINGS = [
        ("h", "show_view('home')", "Home"),
        ("a", "show_view('addItem')", "Add item"),
        ("o", "show_view('orders')", "Orders"),
        ("m", "show_view('myOrders')", "My orders"),
        ("l", "login", "Log in"),
        ("r", "register", "Register"),
        ("x", "logout", "Log out"),
        ("j", "move_selection(1)", "Next"),
        ("k", "move_selection(-1)", "Previous"),
        ("down", "move_selection(1)", "Next"),
        ("up", "move_selection(-1)", "Previous"),
        ("enter", "activate", "Order / add"),
        ("n", "new_item", "New item"),
        ("d", "mark_delivered", "Mark delivered"),
        ("ctrl+r", "reload", "Reload"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, gateway: RemoteGateway | None = None) -> None:
        super().__init__()
        self.gateway = gateway or RemoteGateway()
        self.session = SessionManager(self.gateway)
        self.catalog = MenuCatalog(self.gateway, self.session)
        self.orders = OrderCoordinator(self.gateway, self.session, self.catalog)
        self.system_status = ""

    # ---------- view state ----------

    @property
    def effective_view(self) -> View:
        return access.resolve(self.session.current, self.requested_view)

    def _modal_open(self) -> bool:
        return isinstance(self.screen, FormModal)

    def _visible_orders(self) -> tuple[Order, ...]:
        view = self.effective_view
        if view is View.ORDERS:
            return self.orders.global_feed
        if view is View.MY_ORDERS and self.session.current is not None:
            return self.orders.feed_for(self.session.current.id)
        return ()

    def _selectable_count(self) -> int:
        view = self.effective_view
        if view is View.HOME and access.can_place_orders(self.session.current):
            return len(self.catalog.items)
        if view is View.ORDERS:
            return len(self.orders.global_feed)
        return 0

    def _set_status(self, message: str) -> None:
        self.system_status = message
        self._refresh_all()

    def _on_identity_changed(self) -> None:
        """Re-arbitrate the view after login or logout."""
        effective = self.effective_view
        if effective is not self.requested_view:
            logger.info("view %s no longer allowed, redirecting to %s", self.requested_view.value, effective.value)
            self.requested_view = effective
        self.selected_index = 0
        self._refresh_all()
        self._load_view_data(self.requested_view)

    # ---------- lifecycle ----------

    def compose(self) -> ComposeResult:
        yield Header()
        yield Static(id="nav")
        yield Static(id="identity")
        with Vertical(id="view-pane"):
            yield Static(id="view-title")
            yield Static(id="view-hint")
            yield Static(id="view-list")
        yield Static(id="status-bar")

    def on_mount(self) -> None:
        logger.info("app mounted")
        self._refresh_all()
        self.load_menu()

    async def on_unmount(self) -> None:
        await self.gateway.aclose()

    # ---------- navigation ----------

    def action_show_view(self, name: str) -> None:
        if self._modal_open():
            return
        requested = View(name)
        effective = access.resolve(self.session.current, requested)
        if effective is not requested:
            self.system_status = f"{requested.name.replace('_', ' ').title()} is not available for this session."
        else:
            self.system_status = ""
        self.requested_view = effective
        self.selected_index = 0
        self._refresh_all()
        self._load_view_data(effective)

    def action_move_selection(self, delta: int) -> None:
        if self._modal_open():
            return
        count = self._selectable_count()
        if not count:
            return
        self.selected_index = (self.selected_index + delta) % count
        self._refresh_view()

    def action_reload(self) -> None:
        if self._modal_open():
            return
        self.load_menu()
        self._load_view_data(self.effective_view)

    def _load_view_data(self, view: View) -> None:
        identity = self.session.current
        if view is View.ORDERS and access.can_mark_delivered(identity):
            self.load_manager_feed()
        elif view is View.MY_ORDERS and identity is not None:
            self.load_user_feed(identity.id)

    # ---------- session ----------

    def action_login(self) -> None:
        if self._modal_open():
            return
        fields = [
            FormField("role", "Role", Role.CUSTOMER.value, choices=ROLE_CHOICES),
            FormField("id", "Account id", max_length=12),
        ]
        self.push_screen(FormModal("Log in", fields), self._on_login_form)

    def _on_login_form(self, values: dict[str, str] | None) -> None:
        if values is not None:
            self.submit_login(values["role"], values["id"])

    @work(group="session")
    async def submit_login(self, role: str, raw_id: str) -> None:
        result = await self.session.login(Role.parse(role), raw_id)
        self.system_status = result.message
        if result.ok:
            self.load_menu()
            self._on_identity_changed()
        else:
            self._refresh_all()

    def action_register(self) -> None:
        if self._modal_open():
            return
        fields = [
            FormField("role", "Role", Role.CUSTOMER.value, choices=ROLE_CHOICES),
            FormField("name", "Name"),
        ]
        self.push_screen(FormModal("Register", fields), self._on_register_form)

    def _on_register_form(self, values: dict[str, str] | None) -> None:
        if values is not None:
            self.submit_register(values["role"], values["name"])

    @work(group="session")
    async def submit_register(self, role: str, raw_name: str) -> None:
        result = await self.session.register(Role.parse(role), raw_name)
        self._set_status(result.message)

    def action_logout(self) -> None:
        if self._modal_open():
            return
        was_signed_in = self.session.current is not None
        self.session.logout()
        self.requested_view = View.HOME
        self.system_status = "Logged out." if was_signed_in else ""
        self._on_identity_changed()

    # ---------- menu ----------

    @work(exclusive=True, group="menu")
    async def load_menu(self) -> None:
        await self.catalog.refresh()
        if self.catalog.last_error is not None:
            self.system_status = describe_failure(self.catalog.last_error)
        self._refresh_all()

    def action_new_item(self) -> None:
        if self._modal_open():
            return
        if self.effective_view is not View.ADD_ITEM or not access.can_add_items(self.session.current):
            return
        fields = [FormField("name", "Name"), FormField("price", "Price", max_length=12)]
        self.push_screen(FormModal("Add Food Item", fields), self._on_add_item_form)

    def _on_add_item_form(self, values: dict[str, str] | None) -> None:
        if values is not None:
            self.submit_add_item(values["name"], values["price"])

    @work(group="writes")
    async def submit_add_item(self, name: str, price: str) -> None:
        try:
            item = await self.catalog.add_item(name, price)
        except FoodDeliveryError as exc:
            self._set_status(describe_failure(exc))
            return
        self._set_status(f"Added {item.name} to the menu.")

    # ---------- orders ----------

    def action_activate(self) -> None:
        if self._modal_open():
            return
        view = self.effective_view
        if view is View.ADD_ITEM:
            self.action_new_item()
            return
        if view is not View.HOME or not access.can_place_orders(self.session.current):
            return

        choices = tuple(item.name for item in self.catalog.items)
        if not choices:
            self._set_status("The menu is empty. Ctrl+R to reload.")
            return
        selected = choices[self.selected_index] if self.selected_index < len(choices) else self.catalog.default_selection()
        fields = [
            FormField("customerName", "Customer Name"),
            FormField("itemName", "Food Item", selected or choices[0], choices=choices),
            FormField("quantity", "Quantity", "1", max_length=4),
        ]
        self.push_screen(FormModal("Place Order", fields), self._on_order_form)

    def _on_order_form(self, values: dict[str, str] | None) -> None:
        if values is not None:
            self.submit_order(values["customerName"], values["itemName"], values["quantity"])

    @work(group="writes")
    async def submit_order(self, customer_name: str, item_name: str, quantity: str) -> None:
        try:
            order = await self.orders.place_order(customer_name, item_name, quantity, self.session.current)
        except FoodDeliveryError as exc:
            self._set_status(describe_failure(exc))
            return
        status = f"Order placed! #{order.id}: {order.quantity} × {order.item_name}"
        error = self.orders.user_error(order.user_id)
        if error is not None:
            status += f" Order list not refreshed. {describe_failure(error)}"
        self._set_status(status)

    def action_mark_delivered(self) -> None:
        if self._modal_open():
            return
        if self.effective_view is not View.ORDERS or not access.can_mark_delivered(self.session.current):
            return
        feed = self.orders.global_feed
        if not (0 <= self.selected_index < len(feed)):
            return
        self.submit_mark_delivered(feed[self.selected_index].id)

    @work(group="writes")
    async def submit_mark_delivered(self, order_id: int) -> None:
        try:
            order = await self.orders.mark_delivered(order_id)
        except FoodDeliveryError as exc:
            self._set_status(describe_failure(exc))
            return
        status = f"Order #{order.id} marked delivered."
        if self.orders.global_error is not None:
            status += f" Order list not refreshed. {describe_failure(self.orders.global_error)}"
        self._set_status(status)

    @work(exclusive=True, group="feed")
    async def load_manager_feed(self) -> None:
        try:
            await self.orders.list_for_manager()
        except FoodDeliveryError as exc:
            self.system_status = describe_failure(exc)
        else:
            if self.orders.global_error is not None:
                self.system_status = describe_failure(self.orders.global_error)
        self._refresh_all()

    @work(exclusive=True, group="feed")
    async def load_user_feed(self, user_id: int) -> None:
        try:
            await self.orders.list_for_user(user_id)
        except FoodDeliveryError as exc:
            self.system_status = describe_failure(exc)
        else:
            error = self.orders.user_error(user_id)
            if error is not None:
                self.system_status = describe_failure(error)
        self._refresh_all()

    # ---------- rendering ----------

    def _visible_rows(self, widget: Static) -> int:
        height = widget.size.height
        if height <= 0:
            return 8
        return max(1, height)

    def _window_bounds(self, total: int, rows: int, selected: int | None) -> tuple[int, int]:
        if total <= 0:
            return (0, 0)

        rows = max(1, rows)
        if total <= rows:
            return (0, total)

        if selected is None:
            start = 0
        else:
            half = rows // 2
            start = selected - half
            start = max(0, start)
            start = min(start, total - rows)

        return (start, start + rows)

    def _refresh_all(self) -> None:
        try:
            self.query_one("#nav", Static).update(format_nav(self.session.current, self.effective_view))
            self.query_one("#identity", Static).update(format_identity(self.session.current))
        except NoMatches:
            return
        self._refresh_view()
        self._refresh_status()

    def _refresh_status(self) -> None:
        bar = self.query_one("#status-bar", Static)
        bar.update(self.system_status or "Ready")

    def _view_hint(self) -> str:
        identity = self.session.current
        view = self.effective_view
        if access.shows_auth_landing(identity):
            return "Press L to log in or R to register."
        if view is View.HOME and access.can_place_orders(identity):
            return "j/k choose a dish. Enter to place an order. M for your orders. X to log out."
        if view is View.HOME:
            return "A to add items. O for the order feed. X to log out."
        if view is View.ADD_ITEM:
            return "Enter or N to add an item. Current menu:"
        if view is View.ORDERS:
            return "j/k choose an order. D to mark it delivered. Ctrl+R to reload."
        return "Ctrl+R to reload."

    def _refresh_view(self) -> None:
        try:
            title_widget = self.query_one("#view-title", Static)
            hint_widget = self.query_one("#view-hint", Static)
            list_widget = self.query_one("#view-list", Static)
        except NoMatches:
            return

        view = self.effective_view
        identity = self.session.current
        if access.shows_auth_landing(identity):
            title_widget.update("Welcome to Local Food Delivery")
            hint_widget.update(self._view_hint())
            list_widget.update("Sign in as a customer to order, or as a manager to run the kitchen.")
            return

        title, subtitle = VIEW_TITLES[view]
        title_widget.update(Text(f"{title}  ", style="bold").append(subtitle, style="dim"))
        hint_widget.update(self._view_hint())

        if view in (View.HOME, View.ADD_ITEM):
            selectable = view is View.HOME and access.can_place_orders(identity)
            rows = [format_menu_row(item) for item in self.catalog.items]
            list_widget.update(self._render_rows(list_widget, rows, selectable, "The menu is empty."))
            return

        rows = [format_order_row(order) for order in self._visible_orders()]
        list_widget.update(self._render_rows(list_widget, rows, view is View.ORDERS, "No orders yet."))

    def _render_rows(self, widget: Static, rows: list[Text], selectable: bool, empty: str) -> Text:
        if not rows:
            return Text(empty, style="dim")

        selected = None
        if selectable:
            if self.selected_index >= len(rows):
                self.selected_index = len(rows) - 1
            selected = self.selected_index

        start, end = self._window_bounds(len(rows), self._visible_rows(widget), selected)
        lines = Text()
        if start > 0:
            lines.append("⋮\n", style="dim")

        for idx in range(start, end):
            if idx > start:
                lines.append("\n")
            pointer = "➤ " if idx == selected else "  "
            lines.append(pointer)
            lines.append_text(rows[idx])

        if end < len(rows):
            lines.append("\n⋮", style="dim")

        return lines
