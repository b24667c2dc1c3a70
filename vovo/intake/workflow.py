#!/usr/bin/env python3
"""
Order intake workflow.

Drives one customer from picking a day and slot, through building the cart
and filling in contact details, to a submitted order and the WhatsApp
confirmation. The workflow owns its draft; nothing else mutates it.

States:
    SCHEDULING  -> pick a date and a half-hour slot
    ORDERING    -> cart, name, phone, payment method, submit
    CONFIRMING  -> order stored, confirmation message available
"""

import webbrowser
from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from typing import Callable, Dict, List, Optional

from ..app.config import Config
from ..schemas.store_models import OrderOut
from ..utils.logger import get_logger
from ..utils.security import mask_pii
from . import schedule
from .cart import index_catalog
from .client import StoreClient
from .draft import PAYMENT_METHODS, OrderDraft
from .errors import IntakeError, LocalValidationError
from .locator import build_query, parse_query
from .phone import format_phone, is_valid_phone
from .summary import build_message, build_payload, whatsapp_link
from .ui_text import NOT_READY, PENDING, VALIDATION

log = get_logger("intake")


class IntakeState(str, Enum):
    SCHEDULING = "scheduling"
    ORDERING = "ordering"
    CONFIRMING = "confirming"


@dataclass
class SubmitOutcome:
    ok: bool
    message: Optional[str] = None
    kind: Optional[str] = None  # validation|server|transport|pending
    field: Optional[str] = None
    order: Optional[OrderOut] = None


class IntakeWorkflow:
    """State machine for a single customer's order."""

    def __init__(self, client: StoreClient, today: date = None, window_days: int = None):
        self.client = client
        self.today = today or date.today()
        self.window_days = window_days or Config.BOOKING_WINDOW_DAYS

        self.state = IntakeState.SCHEDULING
        self.draft = OrderDraft()
        self.catalog = {}
        self.availability: Dict[str, str] = {}
        self.settings: Dict[str, str] = {}

        self.errors: Dict[str, str] = {}
        self.notice: Optional[str] = None
        self.pending = False
        self.locator = ""
        self.order: Optional[OrderOut] = None

    @classmethod
    def from_locator(cls, client: StoreClient, query: str, **kwargs) -> "IntakeWorkflow":
        """Load the stores and restore a date/slot carried in a shared link."""
        workflow = cls(client, **kwargs)
        workflow.load()
        workflow.restore(query)
        return workflow

    # Loading

    def load(self) -> bool:
        """Fetch catalog, availability for the booking window and settings."""
        end = self.today + timedelta(days=max(self.window_days - 1, 0))
        try:
            self.catalog = index_catalog(self.client.list_products())
            self.availability = self.client.get_availability(self.today, end)
            self.settings = self.client.get_settings()
        except IntakeError as e:
            self.notice = e.message
            log.warning("initial load failed (%s): %s", e.kind, e.message)
            return False
        self.notice = None
        log.debug("loaded %d products, %d availability entries", len(self.catalog), len(self.availability))
        return True

    def products(self) -> List:
        return list(self.catalog.values())

    def available_dates(self) -> List[date]:
        return schedule.bookable_dates(self.availability, self.today, self.window_days)

    # Scheduling

    def _check_date(self, value) -> date:
        day = schedule.parse_day(value)
        if day is None:
            raise LocalValidationError("date", VALIDATION["date_invalid"])
        if not self.in_window(day):
            raise LocalValidationError("date", VALIDATION["date_out_of_range"])
        status = schedule.day_status(day, self.availability)
        if status == schedule.CLOSED:
            raise LocalValidationError("date", VALIDATION["date_sunday"])
        if status == schedule.SOLD_OUT:
            raise LocalValidationError("date", VALIDATION["date_sold_out"])
        return day

    def in_window(self, day: date) -> bool:
        return schedule.in_window(day, self.today, self.window_days)

    def _reject(self, error: LocalValidationError) -> bool:
        self.errors[error.field] = error.message
        return False

    def select_date(self, value) -> bool:
        """Pick a day. The chosen slot is kept."""
        try:
            day = self._check_date(value)
        except LocalValidationError as e:
            return self._reject(e)
        self.draft.date = day
        self.errors.pop("date", None)
        return True

    def select_slot(self, slot: str) -> bool:
        if not schedule.is_valid_slot(slot):
            return self._reject(LocalValidationError("time", VALIDATION["time_invalid"]))
        self.draft.time = slot
        self.errors.pop("time", None)
        return True

    def advance(self) -> bool:
        """SCHEDULING -> ORDERING once both a date and a slot are chosen."""
        if self.state != IntakeState.SCHEDULING:
            return False
        if self.draft.date is None:
            return self._reject(LocalValidationError("date", VALIDATION["date_required"]))
        if self.draft.time is None:
            return self._reject(LocalValidationError("time", VALIDATION["time_required"]))
        self.errors.pop("date", None)
        self.errors.pop("time", None)
        self.locator = build_query(self.draft.date.isoformat(), self.draft.time)
        self.state = IntakeState.ORDERING
        return True

    def back(self) -> bool:
        """ORDERING -> SCHEDULING. The cart and contact form survive."""
        if self.state != IntakeState.ORDERING:
            return False
        self.state = IntakeState.SCHEDULING
        return True

    def restore(self, query: str) -> bool:
        """Pre-select date and slot from a locator; jump to ORDERING when the
        slot is a known one and the day is an open day inside the window."""
        raw_day, slot = parse_query(query)
        day = schedule.parse_day(raw_day)
        if day is not None and (schedule.is_sunday(day) or not self.in_window(day)):
            day = None
        if day is not None:
            self.draft.date = day
        known_slot = bool(slot) and schedule.is_valid_slot(slot)
        if known_slot:
            self.draft.time = slot
        if day is None or not known_slot:
            return False
        self.state = IntakeState.SCHEDULING
        return self.advance()

    # Cart

    def increment(self, product_id: str) -> int:
        quantity = self.draft.selected_items.increment(product_id)
        self.errors.pop("items", None)
        return quantity

    def decrement(self, product_id: str) -> int:
        return self.draft.selected_items.decrement(product_id)

    def total(self) -> float:
        return self.draft.selected_items.total(self.catalog)

    # Contact

    def set_name(self, name: str):
        self.draft.name = name or ""
        if self.draft.name.strip():
            self.errors.pop("name", None)

    def set_phone(self, raw: str) -> str:
        """Called on every keystroke; returns what the field should show."""
        self.draft.phone = format_phone(raw)
        if is_valid_phone(self.draft.phone):
            self.errors.pop("phone", None)
        return self.draft.phone

    def set_payment_method(self, method: str) -> bool:
        if method not in PAYMENT_METHODS:
            return self._reject(LocalValidationError("payment_method", VALIDATION["payment_invalid"]))
        self.draft.payment_method = method
        self.errors.pop("payment_method", None)
        return True

    # Submission

    def _check_submittable(self):
        draft = self.draft
        if draft.date is None:
            raise LocalValidationError("date", VALIDATION["date_required"])
        if draft.time is None:
            raise LocalValidationError("time", VALIDATION["time_required"])
        if self.total() <= 0:
            raise LocalValidationError("items", VALIDATION["cart_empty"])
        if not draft.name.strip():
            raise LocalValidationError("name", VALIDATION["name_required"])
        if not is_valid_phone(draft.phone):
            raise LocalValidationError("phone", VALIDATION["phone_invalid"])

    def submit(self) -> SubmitOutcome:
        if self.pending:
            return SubmitOutcome(ok=False, message=PENDING, kind="pending")
        if self.state != IntakeState.ORDERING:
            return SubmitOutcome(ok=False, message=NOT_READY, kind="validation")

        try:
            self._check_submittable()
        except LocalValidationError as e:
            self._reject(e)
            return SubmitOutcome(ok=False, message=e.message, kind=e.kind, field=e.field)

        payload = build_payload(self.draft, self.catalog)
        self.pending = True
        self.notice = None
        try:
            order = self.client.create_order(payload)
        except IntakeError as e:
            # draft and state stay as they are so the customer can retry
            self.notice = e.message
            if e.kind == "transport":
                log.warning("order submit failed, no response for %s", mask_pii(payload["customer_phone"]))
            else:
                log.info("order submit rejected by store: %s", e.message)
            return SubmitOutcome(ok=False, message=e.message, kind=e.kind)
        finally:
            self.pending = False

        self.order = order
        self.errors.clear()
        self.state = IntakeState.CONFIRMING
        log.info("order %s stored for %s on %s %s", order.id, mask_pii(order.customer_phone), order.order_date, order.order_time)
        return SubmitOutcome(ok=True, order=order)

    # Confirmation

    def confirmation_message(self) -> str:
        return build_message(self.draft, self.catalog, self.settings)

    def confirmation_link(self) -> str:
        number = self.settings.get("whatsapp_number") or Config.WHATSAPP_NUMBER
        return whatsapp_link(number, self.confirmation_message())

    def send_confirmation(self, opener: Callable[[str], object] = webbrowser.open_new_tab) -> str:
        """Open the WhatsApp link; whatever happens there is not our concern."""
        if self.state != IntakeState.CONFIRMING:
            raise RuntimeError("no confirmed order to send")
        link = self.confirmation_link()
        try:
            opener(link)
        except Exception as e:  # fire-and-forget: the order is already stored
            log.warning("could not open messaging link: %s", e)
        return link

    def reset(self):
        self.state = IntakeState.SCHEDULING
        self.draft = OrderDraft()
        self.errors.clear()
        self.notice = None
        self.locator = ""
        self.order = None
