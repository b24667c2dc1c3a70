#!/usr/bin/env python3
"""
Seed the store: catalog from menu.csv, default settings and an availability
window.

Usage:
  python -m vovo.data.populate_db [--days 30] [--sold-out 2026-03-07 ...]
"""
import argparse
import csv
import os
from datetime import date, timedelta
from typing import Iterable, List

from .database import SessionLocal, create_tables
from .models import AvailabilityDay, DayStatus, Product, Setting
from ..utils.logger import get_logger

log = get_logger("populate")

MENU_CSV_PATH = os.path.join(os.path.dirname(__file__), "raw", "menu.csv")

DEFAULT_SETTINGS = {
    "site_name": "Vovó's Baked Goods",
    "logo_url": "",
    "capacity_limit": "20",
    "whatsapp_number": "",
}


def populate_products(db, menu_path: str = MENU_CSV_PATH) -> int:
    """Read menu.csv and populate the products table."""
    if db.query(Product).count() > 0:
        log.info("Products table is not empty. Skipping population.")
        return 0

    count = 0
    with open(menu_path, mode="r", encoding="utf-8") as csvfile:
        reader = csv.DictReader(csvfile)
        for row in reader:
            db.add(Product(
                name=row["name"].strip(),
                price=float(row["price"].replace("$", "")),
                description=(row.get("description") or "").strip() or None,
                image=(row.get("image") or "").strip() or None,
            ))
            count += 1
    return count


def populate_settings(db) -> int:
    count = 0
    for key, value in DEFAULT_SETTINGS.items():
        if db.get(Setting, key) is None:
            db.add(Setting(key=key, value=value))
            count += 1
    return count


def populate_availability(db, start: date, days: int, sold_out: Iterable[date] = ()) -> int:
    """Write one row per day; existing rows are overwritten."""
    sold_out = set(sold_out)
    for i in range(days):
        day = start + timedelta(days=i)
        status = DayStatus.sold_out if day in sold_out else DayStatus.available
        row = db.get(AvailabilityDay, day)
        if row is None:
            db.add(AvailabilityDay(day=day, status=status))
        else:
            row.status = status
    return days


def main(argv: List[str] = None):
    parser = argparse.ArgumentParser(description="Seed the storefront database")
    parser.add_argument("--days", type=int, default=30, help="availability window length")
    parser.add_argument("--start", type=date.fromisoformat, default=date.today())
    parser.add_argument("--sold-out", type=date.fromisoformat, nargs="*", default=[])
    parser.add_argument("--menu", default=MENU_CSV_PATH)
    args = parser.parse_args(argv)

    # Ensure tables are created
    create_tables()

    db = SessionLocal()
    try:
        products = populate_products(db, args.menu)
        settings = populate_settings(db)
        days = populate_availability(db, args.start, args.days, args.sold_out)
        db.commit()
        log.info("Seeded %d products, %d settings, %d availability days.", products, settings, days)
    except Exception:
        db.rollback()
        log.exception("Error populating the database")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    main()
