"""Entry point for the food delivery Textual app."""

from __future__ import annotations

from food_delivery.delivery_app import FoodDeliveryApp
from food_delivery.logs import setup_logging


def main() -> None:
    setup_logging()
    FoodDeliveryApp().run()


if __name__ == "__main__":
    main()
