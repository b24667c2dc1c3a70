"""The customer's in-progress order."""
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from .cart import Cart

PAYMENT_METHODS = ("zelle", "cash")


@dataclass
class OrderDraft:
    name: str = ""
    phone: str = ""
    selected_items: Cart = field(default_factory=Cart)
    payment_method: str = "zelle"
    date: Optional[date] = None
    time: Optional[str] = None
