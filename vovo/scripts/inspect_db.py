#!/usr/bin/env python3
"""
Inspect the storefront database: print all rows from the core tables.

Usage:
  python -m vovo.scripts.inspect_db

Notes:
- Uses the existing SQLAlchemy session and models.
- Safe read-only inspection; makes no writes.
"""

from __future__ import annotations

from vovo.data.database import SessionLocal
from vovo.data.models import AvailabilityDay, Order, Product, Setting
from vovo.utils.security import mask_pii


def line(ch: str = "-", width: int = 60) -> str:
    return ch * width


def header(title: str):
    print(line("="))
    print(title)
    print(line("="))


def print_products(session):
    header("Products")
    products = session.query(Product).order_by(Product.name).all()
    print(f"Total products: {len(products)}")
    for p in products:
        print(f"- {p.id} {p.name} | price=${p.price:.2f} | image={p.image or '(none)'}")
    print()


def print_availability(session):
    header("Availability")
    days = session.query(AvailabilityDay).order_by(AvailabilityDay.day).all()
    sold_out = [d for d in days if d.status.value == "sold_out"]
    print(f"Days on record: {len(days)} ({len(sold_out)} sold out)")
    for d in sold_out:
        print(f"- {d.day.isoformat()} sold out")
    print()


def print_settings(session):
    header("Settings")
    for s in session.query(Setting).order_by(Setting.key).all():
        value = "********" if s.key == "admin_password" else s.value
        print(f"- {s.key} = {value}")
    print()


def print_orders(session):
    header("Orders")
    orders = session.query(Order).order_by(Order.order_date, Order.order_time).all()
    print(f"Total orders: {len(orders)}")
    for o in orders:
        print(
            f"- {o.id} {o.order_date.isoformat()} {o.order_time} | {o.customer_name} "
            f"{mask_pii(o.customer_phone)} | ${o.total:.2f} {o.payment_method.value}"
        )
        for item in o.items.splitlines():
            print(f"    {item}")
        if o.lines:
            print(f"    ({len(o.lines)} normalized lines)")
    print()


def main():
    session = SessionLocal()
    try:
        print_products(session)
        print_availability(session)
        print_settings(session)
        print_orders(session)
    finally:
        session.close()


if __name__ == "__main__":
    main()
