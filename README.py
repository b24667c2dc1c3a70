"""
Vovó's Baked Goods storefront: system documentation
===================================================

Module-style README for the ordering storefront. View it in an editor, or
run `python README.py` to print the outline.

Table of Contents
-----------------
1. System Overview
2. Layout
3. Order Intake Workflow
4. Store API
5. Admin Console
6. Configuration & Environment
7. Data Lifecycle
8. Testing Strategy
9. Security & PII Handling
10. Running

"""

from __future__ import annotations

import textwrap


def section(title: str, body: str) -> str:
    return f"\n{title}\n{'-' * len(title)}\n{body.strip()}\n"


SYSTEM_OVERVIEW = section(
    "1. System Overview",
    """
    A small bakery storefront. Customers pick a pickup day and half-hour slot,
    fill a cart, leave name, phone and payment method, and submit. The order is
    stored and a summary goes out over WhatsApp. An admin console maintains the
    catalog, settings and orders behind a shared password.
    """,
)


LAYOUT = section(
    "2. Layout",
    """
    vovo/
      app/      main.py (FastAPI handlers), config.py (env-driven Config)
      data/     database.py, models.py (SQLAlchemy), populate_db.py, raw/menu.csv
      schemas/  store_models.py (pydantic request/response models)
      intake/   workflow.py (state machine), cart.py, schedule.py, phone.py,
                summary.py, locator.py, client.py (requests), errors.py, ui_text.py
      admin/    gate.py (shared secret), console.py (CRUD + order repricing)
      utils/    logger.py, security.py
      scripts/  inspect_db.py, admin_cli.py
    """,
)


INTAKE = section(
    "3. Order Intake Workflow",
    """
    - States: SCHEDULING -> ORDERING -> CONFIRMING.
    - Sundays are closed; sold-out days come from the availability table.
    - Slots: 08:00 to 16:30 every half hour, the same every day.
    - A link with ?date=...&time=... restores the choice and skips ahead.
    - Cart quantities never sit at zero; totals use today's catalog prices.
    - Phone is reformatted as (XXX) XXX-XXXX while typing.
    - Local validation never reaches the network; server and connection errors
      keep the draft so the customer can just submit again.
    """,
)


STORE_API = section(
    "4. Store API",
    """
    - GET/POST /products, DELETE /products/{id}
    - GET /availability?start&end
    - GET/POST /settings
    - GET/POST /orders, POST /orders/update, DELETE /orders/{id}
    - POST /upload (multipart) -> {url}
    - Errors are always {"error": "..."}; a closed, sold-out or full day answers
      409 "Dia esgotado".
    """,
)


ADMIN = section(
    "5. Admin Console",
    """
    - Password comes from VOVO_ADMIN_PASSWORD (required) unless an
      admin_password setting was saved.
    - Editing an order's items reprices it by policy: historical (default)
      keeps the unit prices stored with the order, current uses today's.
    """,
)


CONFIG_ENV = section(
    "6. Configuration & Environment",
    """
    - `.env` compatible; keys: DATABASE_URL, VOVO_ADMIN_PASSWORD, VOVO_API_URL,
      VOVO_REQUEST_TIMEOUT, VOVO_UPLOAD_DIR, VOVO_PUBLIC_URL,
      VOVO_WHATSAPP_NUMBER, VOVO_BOOKING_WINDOW_DAYS, VOVO_REPRICE_POLICY,
      LOG_LEVEL.
    - Defaults and validation live in `vovo/app/config.py`.
    """,
)


DATA_LIFECYCLE = section(
    "7. Data Lifecycle",
    """
    - Seed with `python -m vovo.data.populate_db --days 30 --sold-out 2026-03-07`.
    - Re-run to extend the availability window; existing days are overwritten.
    - Inspect with `python -m vovo.scripts.inspect_db`.
    """,
)


TESTING = section(
    "8. Testing Strategy",
    """
    - unittest-style cases under `/tests`, run with pytest.
    - Workflow tests mock the store client; API tests use TestClient over an
      in-memory SQLite database.
    - `python tests/run_tests.py --all --coverage`.
    """,
)


SECURITY = section(
    "9. Security & PII Handling",
    """
    - `utils/security.py`: phone numbers are masked before logging.
    - The admin password is a deterrent only; no hashing or sessions.
    """,
)


RUNNING = section(
    "10. Running",
    """
    - API: `uvicorn vovo.app.main:app --reload`.
    - Admin: `python -m vovo.scripts.admin_cli orders`.
    """,
)


def as_text() -> str:
    return "\n".join(
        [
            SYSTEM_OVERVIEW,
            LAYOUT,
            INTAKE,
            STORE_API,
            ADMIN,
            CONFIG_ENV,
            DATA_LIFECYCLE,
            TESTING,
            SECURITY,
            RUNNING,
        ]
    )


def main() -> None:
    print(textwrap.dedent(as_text()))


if __name__ == "__main__":
    main()
