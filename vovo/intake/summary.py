#!/usr/bin/env python3
"""
Text built from a draft: the items summary stored with the order, the request
payload and the confirmation message sent over WhatsApp.

Everything here is pure: the same draft and catalog give the same bytes.
"""

import re
from typing import Any, Dict, List, Mapping
from urllib.parse import quote

from .cart import Cart, Catalog
from .draft import OrderDraft
from .phone import phone_digits

_ITEM_LINE = re.compile(r"^\s*(\d+)x(.+?)\s*$")
_WEEKDAYS = ("segunda-feira", "terça-feira", "quarta-feira", "quinta-feira", "sexta-feira", "sábado", "domingo")
_PAYMENT_LABELS = {"zelle": "Zelle", "cash": "Dinheiro"}


def format_money(value: float) -> str:
    return f"${value:.2f}"


def item_name(catalog: Catalog, product_id: str) -> str:
    product = catalog.get(product_id)
    return product.name if product is not None else product_id


def item_lines(cart: Cart, catalog: Catalog) -> List[str]:
    return [f"{quantity}x{item_name(catalog, product_id)}" for product_id, quantity in cart.items()]


def items_summary(cart: Cart, catalog: Catalog) -> str:
    """One `QTYxNAME` line per cart entry, in cart order."""
    return "\n".join(item_lines(cart, catalog))


def order_lines(cart: Cart, catalog: Catalog) -> List[Dict[str, Any]]:
    lines = []
    for product_id, quantity in cart.items():
        product = catalog.get(product_id)
        lines.append({
            "product_id": product_id,
            "name": item_name(catalog, product_id),
            "quantity": quantity,
            "unit_price": float(product.price) if product is not None else 0.0,
        })
    return lines


def build_payload(draft: OrderDraft, catalog: Catalog) -> Dict[str, Any]:
    return {
        "customer_name": draft.name.strip(),
        "customer_phone": draft.phone,
        "order_date": draft.date.isoformat() if draft.date else None,
        "order_time": draft.time,
        "items": items_summary(draft.selected_items, catalog),
        "total": draft.selected_items.total(catalog),
        "payment_method": draft.payment_method,
        "lines": order_lines(draft.selected_items, catalog),
    }


def payment_instructions(method: str, settings: Mapping[str, str]) -> str:
    if method == "zelle":
        target = settings.get("zelle_contact") or settings.get("whatsapp_number") or "o número desta conversa"
        return f"Envie o pagamento via Zelle para {target} e mande o comprovante por aqui."
    return "Pagamento em dinheiro no momento da retirada."


def build_message(draft: OrderDraft, catalog: Catalog, settings: Mapping[str, str] = None) -> str:
    """Human readable order summary for the bakery's WhatsApp."""
    settings = settings or {}
    site_name = settings.get("site_name") or "Vovó's Baked Goods"
    day = draft.date
    day_text = f"{day.isoformat()} ({_WEEKDAYS[day.weekday()]})" if day else "-"
    total = draft.selected_items.total(catalog)

    lines = [
        f"Olá, {site_name}! Novo pedido:",
        f"Cliente: {draft.name.strip()}",
        f"Telefone: {draft.phone}",
        f"Data: {day_text}",
        f"Horário: {draft.time or '-'}",
        "Itens:",
    ]
    lines.extend(item_lines(draft.selected_items, catalog))
    lines.append(f"Total: {format_money(total)}")
    lines.append(f"Pagamento: {_PAYMENT_LABELS.get(draft.payment_method, draft.payment_method)}")
    lines.append(payment_instructions(draft.payment_method, settings))
    return "\n".join(lines)


def whatsapp_link(number: str, message: str) -> str:
    return f"https://wa.me/{phone_digits(number)}?text={quote(message, safe='')}"


def parse_items_summary(text: str) -> Dict[str, int]:
    """Recover `{name: quantity}` from `QTYxNAME` lines.

    Only for orders stored before normalized lines existed; lines that do not
    look like items are skipped.
    """
    quantities: Dict[str, int] = {}
    for raw in (text or "").splitlines():
        match = _ITEM_LINE.match(raw)
        if not match:
            continue
        quantity, name = int(match.group(1)), match.group(2)
        if quantity <= 0:
            continue
        quantities[name] = quantities.get(name, 0) + quantity
    return quantities
