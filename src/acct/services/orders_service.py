# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Order history listing over static demo data."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

ALL = "All"
ORDER_STATUSES = [ALL, "Delivered", "Processing", "Cancelled"]

STATUS_BADGES = {
    "delivered": "bg-green-100 text-green-800",
    "processing": "bg-yellow-100 text-yellow-800",
    "cancelled": "bg-red-100 text-red-800",
}
DEFAULT_BADGE = "bg-gray-100 text-gray-800"


@dataclass(frozen=True)
class OrderItem:
    name: str
    quantity: int
    price: float


@dataclass(frozen=True)
class Order:
    id: int
    order_number: str
    date: str
    status: str
    total: float
    items: Tuple[OrderItem, ...]

    @property
    def can_track(self) -> bool:
        return self.status != "Cancelled"

    @property
    def item_count(self) -> int:
        return sum(i.quantity for i in self.items)


MOCK_ORDERS: Tuple[Order, ...] = (
    Order(1, "ORD-2024-001", "2024-03-15", "Delivered", 299.99,
          (OrderItem("Product 1", 2, 99.99), OrderItem("Product 2", 1, 100.01))),
    Order(2, "ORD-2024-002", "2024-03-10", "Processing", 149.99,
          (OrderItem("Product 3", 1, 149.99),)),
    Order(3, "ORD-2024-003", "2024-03-08", "Cancelled", 199.99,
          (OrderItem("Product 4", 1, 199.99),)),
    Order(4, "ORD-2024-004", "2024-03-05", "Delivered", 449.98,
          (OrderItem("Product 5", 2, 224.99),)),
    Order(5, "ORD-2024-005", "2024-03-01", "Processing", 79.99,
          (OrderItem("Product 6", 1, 79.99),)),
)


def list_orders(status: str = ALL) -> List[Order]:
    """All orders, or those whose status equals `status` exactly. No sorting."""
    if not status or status == ALL:
        return list(MOCK_ORDERS)
    return [o for o in MOCK_ORDERS if o.status == status]


def status_badge(status: str) -> str:
    return STATUS_BADGES.get((status or "").strip().lower(), DEFAULT_BADGE)
