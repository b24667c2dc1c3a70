#!/usr/bin/env python3
"""
Command line front for the admin console.

Usage:
  python -m vovo.scripts.admin_cli products
  python -m vovo.scripts.admin_cli add-product "Broa de Milho" 10.00 --image broa.jpg
  python -m vovo.scripts.admin_cli set capacity_limit 25
  python -m vovo.scripts.admin_cli orders
  python -m vovo.scripts.admin_cli edit-order <id> <product_id>=2 ... [--policy current]

The password is read from --password or prompted for.
"""

from __future__ import annotations

import argparse
import getpass
import sys

from vovo.admin.console import AdminConsole, RepricePolicy
from vovo.app.config import Config, ConfigError
from vovo.intake.client import StoreClient
from vovo.intake.errors import IntakeError


def item_quantity(text: str):
    """`product_id=quantity` as a (key, int) pair; argparse reports bad input."""
    key, sep, qty = text.partition("=")
    if not key or not sep:
        raise argparse.ArgumentTypeError(f"expected product_id=quantity, got {text!r}")
    try:
        return key, int(qty)
    except ValueError:
        raise argparse.ArgumentTypeError(f"quantity must be a whole number: {text!r}") from None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Storefront admin")
    parser.add_argument("--api", default=Config.API_URL)
    parser.add_argument("--password")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("products")
    p = sub.add_parser("add-product")
    p.add_argument("name")
    p.add_argument("price", type=float)
    p.add_argument("--description")
    p.add_argument("--image", help="local file to upload")
    p.add_argument("--id", dest="product_id", help="update this product instead of creating one")
    p = sub.add_parser("delete-product")
    p.add_argument("product_id")

    sub.add_parser("settings")
    p = sub.add_parser("set")
    p.add_argument("key")
    p.add_argument("value")

    sub.add_parser("orders")
    p = sub.add_parser("delete-order")
    p.add_argument("order_id")
    p = sub.add_parser("edit-order")
    p.add_argument("order_id")
    p.add_argument("items", nargs="+", type=item_quantity, help="product_id=quantity")
    p.add_argument("--policy", choices=[x.value for x in RepricePolicy])
    return parser


def run(console: AdminConsole, args) -> int:
    if args.command == "products":
        for p in console.products():
            print(f"{p.id}  {p.name}  ${p.price:.2f}")
    elif args.command == "add-product":
        image = console.upload_image(args.image) if args.image else None
        product = console.save_product(args.name, args.price, args.description, image, args.product_id)
        print(f"saved {product.id}")
    elif args.command == "delete-product":
        console.delete_product(args.product_id)
        print("deleted")
    elif args.command == "settings":
        for key, value in console.settings().items():
            print(f"{key} = {'********' if key == 'admin_password' else value}")
    elif args.command == "set":
        console.save_setting(args.key, args.value)
        print("saved")
    elif args.command == "orders":
        for o in console.orders():
            print(f"{o.id}  {o.order_date} {o.order_time}  {o.customer_name}  ${o.total:.2f}  {o.payment_method.value}")
            for item in o.items.splitlines():
                print(f"    {item}")
    elif args.command == "delete-order":
        console.delete_order(args.order_id)
        print("deleted")
    elif args.command == "edit-order":
        order = next((o for o in console.orders() if o.id == args.order_id), None)
        if order is None:
            print("order not found", file=sys.stderr)
            return 1
        updated = console.edit_order_items(order, dict(args.items), args.policy)
        print(f"total ${order.total:.2f} -> ${updated.total:.2f}")
    return 0


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    try:
        Config.validate()
    except ConfigError as e:
        print(e, file=sys.stderr)
        return 2

    console = AdminConsole(StoreClient(args.api))
    try:
        if not console.login(args.password or getpass.getpass("Senha: ")):
            print("Senha incorreta", file=sys.stderr)
            return 1
        return run(console, args)
    except IntakeError as e:
        print(e.message, file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
