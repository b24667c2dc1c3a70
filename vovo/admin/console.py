#!/usr/bin/env python3
"""
Admin console: catalog, settings and order maintenance behind the shared
secret gate.

Orders keep the `items` text written at submission. When an order's items are
edited here, the new total follows an explicit `RepricePolicy`.
"""

import os
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from ..app.config import Config
from ..schemas.store_models import OrderLineIn, OrderOut, ProductOut
from ..utils.logger import get_logger
from ..intake.cart import index_catalog
from ..intake.client import StoreClient
from ..intake.errors import LocalValidationError
from ..intake.schedule import parse_capacity
from ..intake.summary import parse_items_summary
from ..intake.ui_text import VALIDATION
from .gate import AdminGate

log = get_logger("admin")


class RepricePolicy(str, Enum):
    # keep unit prices recorded at submission; new products use today's price
    HISTORICAL = "historical"
    # reprice every line from the catalog as it is now
    CURRENT = "current"


class NotAuthenticated(PermissionError):
    pass


class AdminConsole:
    def __init__(self, client: StoreClient, gate: AdminGate = None):
        self.client = client
        self.gate = gate or AdminGate()

    @property
    def authenticated(self) -> bool:
        return self.gate.authenticated

    def login(self, secret: str) -> bool:
        return self.gate.check(secret, self.client.get_settings())

    def logout(self):
        self.gate.logout()

    def _require_auth(self):
        if not self.gate.authenticated:
            raise NotAuthenticated("admin login required")

    # Catalog

    def products(self) -> List[ProductOut]:
        self._require_auth()
        return self.client.list_products()

    def save_product(self, name: str, price: float, description: str = None,
                     image: str = None, product_id: str = None) -> ProductOut:
        self._require_auth()
        payload = {"name": name, "price": price, "description": description, "image": image}
        if product_id:
            payload["id"] = product_id
        product = self.client.save_product(payload)
        log.info("product %s saved (%s)", product.id, "update" if product_id else "create")
        return product

    def delete_product(self, product_id: str) -> bool:
        self._require_auth()
        return self.client.delete_product(product_id)

    def upload_image(self, path: str) -> str:
        self._require_auth()
        with open(path, "rb") as f:
            content = f.read()
        return self.client.upload(os.path.basename(path), content)

    # Settings

    def settings(self) -> Dict[str, str]:
        self._require_auth()
        return self.client.get_settings()

    def save_setting(self, key: str, value: Any) -> Dict[str, str]:
        self._require_auth()
        return self.client.save_setting(key, value)

    def capacity_limit(self) -> Optional[int]:
        return parse_capacity(self.settings().get("capacity_limit"))

    # Orders

    def orders(self) -> List[OrderOut]:
        self._require_auth()
        return self.client.list_orders()

    def update_order(self, order: OrderOut) -> OrderOut:
        self._require_auth()
        payload = order.model_dump(mode="json", exclude={"created_at"})
        return self.client.update_order(payload)

    def delete_order(self, order_id: str) -> bool:
        self._require_auth()
        return self.client.delete_order(order_id)

    @staticmethod
    def order_quantities(order: OrderOut, catalog: Mapping[str, ProductOut]) -> Dict[str, int]:
        """Quantities keyed by product id.

        Uses the stored lines; orders written before lines existed fall back
        to parsing the items text, matching names against the catalog.
        """
        if order.lines:
            quantities: Dict[str, int] = {}
            for line in order.lines:
                key = line.product_id or line.name
                quantities[key] = quantities.get(key, 0) + line.quantity
            return quantities

        by_name = {p.name: p.id for p in catalog.values()}
        return {by_name.get(name, name): qty for name, qty in parse_items_summary(order.items).items()}

    def edit_order_items(self, order: OrderOut, quantities: Mapping[str, int],
                         policy: RepricePolicy = None) -> OrderOut:
        """Replace an order's items and store the repriced record."""
        self._require_auth()
        policy = RepricePolicy(policy or Config.REPRICE_POLICY)
        catalog = index_catalog(self.client.list_products())
        recorded = {(line.product_id or line.name): line for line in order.lines}

        lines = []
        for key, quantity in quantities.items():
            if quantity <= 0:
                continue
            product = catalog.get(key)
            old = recorded.get(key)
            if policy == RepricePolicy.HISTORICAL and old is not None:
                unit_price = old.unit_price
            elif product is not None:
                unit_price = float(product.price)
            else:
                # product gone from the catalog: nothing newer to price it with
                unit_price = old.unit_price if old is not None else 0.0
            name = product.name if product is not None else (old.name if old is not None else key)
            lines.append(OrderLineIn(
                product_id=product.id if product is not None else (old.product_id if old is not None else None),
                name=name,
                quantity=int(quantity),
                unit_price=unit_price,
            ))

        if not lines:
            raise LocalValidationError("items", VALIDATION["cart_empty"])

        total = round(sum(line.quantity * line.unit_price for line in lines), 2)
        if total <= 0:
            raise LocalValidationError("items", VALIDATION["order_total_zero"])
        updated = order.model_copy(update={
            "items": "\n".join(f"{line.quantity}x{line.name}" for line in lines),
            "total": total,
            "lines": lines,
        })
        log.info("order %s items edited, total %.2f -> %.2f (%s prices)", order.id, order.total, total, policy.value)
        return self.update_order(updated)
