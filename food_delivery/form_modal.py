"""Keyboard-driven form modal used for login, register, add-item and place-order."""

from __future__ import annotations

from dataclasses import dataclass

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.css.query import NoMatches
from textual.events import Key
from textual.screen import ModalScreen
from textual.widgets import Static


@dataclass
class FormField:
    """One editable line. Fields with choices cycle with left/right instead of typing."""

    key: str
    label: str
    value: str = ""
    choices: tuple[str, ...] = ()
    max_length: int = 40


class FormModal(ModalScreen[dict[str, str] | None]):
    """Collect a few text values; dismisses with {key: value} or None on cancel."""

    CSS = """
    FormModal {
        align: center middle;
        background: $background 60%;
    }

    #form-dialog {
        width: 60;
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #form-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #form-fields {
        color: white;
        margin-bottom: 1;
    }

    #form-help {
        color: #dddddd;
    }
    """

    def __init__(self, title: str, fields: list[FormField]) -> None:
        super().__init__()
        self.title_text = title
        self.fields = fields
        self.cursor_index = 0

    def compose(self) -> ComposeResult:
        with Container(id="form-dialog"):
            yield Static(self.title_text, id="form-title")
            yield Static(id="form-fields")
            yield Static("Tab/↓ next field. ←/→ change choice. Enter confirm. Esc/Ctrl+C cancel.", id="form-help")

    def on_mount(self) -> None:
        self._refresh_content()

    @property
    def current_field(self) -> FormField:
        return self.fields[self.cursor_index]

    def values(self) -> dict[str, str]:
        return {field.key: field.value for field in self.fields}

    def on_key(self, event: Key) -> None:
        if event.key in {"escape", "ctrl+c"}:
            self.dismiss(None)
            event.stop()
            return

        if event.key == "enter":
            self.dismiss(self.values())
            event.stop()
            return

        if event.key in {"tab", "down"}:
            self._move_cursor(1)
            event.stop()
            return

        if event.key in {"shift+tab", "up"}:
            self._move_cursor(-1)
            event.stop()
            return

        field = self.current_field
        if field.choices:
            if event.key in {"left", "right", "space"}:
                self._cycle_choice(field, -1 if event.key == "left" else 1)
            event.stop()
            return

        if event.key == "backspace":
            if field.value:
                field.value = field.value[:-1]
                self._refresh_content()
            event.stop()
            return

        if event.is_printable and event.character:
            if len(field.value) < field.max_length:
                field.value += event.character
                self._refresh_content()
            event.stop()

    def _move_cursor(self, delta: int) -> None:
        self.cursor_index = (self.cursor_index + delta) % len(self.fields)
        self._refresh_content()

    def _cycle_choice(self, field: FormField, delta: int) -> None:
        if field.value in field.choices:
            idx = (field.choices.index(field.value) + delta) % len(field.choices)
        else:
            idx = 0
        field.value = field.choices[idx]
        self._refresh_content()

    def _refresh_content(self) -> None:
        try:
            fields_widget = self.query_one("#form-fields", Static)
        except NoMatches:
            return

        lines = Text()
        for idx, field in enumerate(self.fields):
            if idx > 0:
                lines.append("\n")
            active = idx == self.cursor_index
            lines.append("➤ " if active else "  ")
            lines.append(f"{field.label}: ", style="bold" if active else "")
            if field.choices:
                lines.append(f"◀ {field.value} ▶", style="reverse" if active else "")
            else:
                lines.append(field.value)
                if active:
                    lines.append("▏", style="blink")
        fields_widget.update(lines)
