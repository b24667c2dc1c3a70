"""Cart selection: product id -> quantity, in the order products were added."""
from typing import Dict, Iterator, Mapping, Tuple

from ..schemas.store_models import ProductOut

Catalog = Mapping[str, ProductOut]


def index_catalog(products) -> Dict[str, ProductOut]:
    return {p.id: p for p in products}


class Cart:
    """A quantity is never stored as zero: the keys are the selected products."""

    def __init__(self, items: Mapping[str, int] = None):
        self._items: Dict[str, int] = {}
        for product_id, quantity in (items or {}).items():
            if quantity > 0:
                self._items[product_id] = int(quantity)

    def increment(self, product_id: str) -> int:
        self._items[product_id] = self._items.get(product_id, 0) + 1
        return self._items[product_id]

    def decrement(self, product_id: str) -> int:
        current = self._items.get(product_id, 0)
        if current <= 1:
            self._items.pop(product_id, None)
            return 0
        self._items[product_id] = current - 1
        return self._items[product_id]

    def quantity(self, product_id: str) -> int:
        return self._items.get(product_id, 0)

    def clear(self):
        self._items.clear()

    def total(self, catalog: Catalog) -> float:
        """Priced with the catalog as it is now; unknown ids count as zero."""
        total = 0.0
        for product_id, quantity in self._items.items():
            product = catalog.get(product_id)
            if product is None:
                continue
            total += quantity * float(product.price)
        return round(total, 2)

    def as_dict(self) -> Dict[str, int]:
        return dict(self._items)

    def items(self) -> Iterator[Tuple[str, int]]:
        return iter(list(self._items.items()))

    def is_empty(self) -> bool:
        return not self._items

    def __len__(self):
        return len(self._items)

    def __contains__(self, product_id):
        return product_id in self._items

    def __repr__(self):
        return f"Cart({self._items!r})"
