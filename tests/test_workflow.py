#!/usr/bin/env python3
"""
Order Intake Workflow Test Suite

PURPOSE:
    Drives the intake state machine against a mocked store client: date and
    slot selection, locator restore, cart, contact validation, submission
    outcomes and the WhatsApp confirmation.

TEST COVERAGE:
    - SCHEDULING -> ORDERING -> CONFIRMING transitions
    - Local validation never reaches the store
    - Server and transport failures keep the draft for a retry
    - Pending flag blocks a second submission

USAGE:
    Run from project root: python -m pytest tests/test_workflow.py -v
"""

import unittest
from datetime import date
from unittest.mock import MagicMock

import requests

from vovo.intake.client import StoreClient
from vovo.intake.errors import (
    CONNECTIVITY_MESSAGE,
    GENERIC_SERVER_MESSAGE,
    ServerRejectedError,
    TransportError,
)
from vovo.intake.ui_text import VALIDATION
from vovo.intake.workflow import IntakeState, IntakeWorkflow
from vovo.schemas.store_models import OrderOut, ProductOut

TODAY = date(2026, 3, 1)  # a Sunday
MONDAY = date(2026, 3, 2)
SATURDAY = date(2026, 3, 7)


def make_client(availability=None, settings=None):
    client = MagicMock(spec=StoreClient)
    client.list_products.return_value = [
        ProductOut(id="A", name="A", price=5.00),
        ProductOut(id="B", name="B", price=3.00),
    ]
    client.get_availability.return_value = availability or {}
    client.get_settings.return_value = settings or {}

    def create(payload):
        return OrderOut(id="order-1", **payload)

    client.create_order.side_effect = create
    return client


def response(status, body=None, raises=False):
    resp = MagicMock()
    resp.status_code = status
    if raises:
        resp.json.side_effect = ValueError("not json")
    else:
        resp.json.return_value = body
    return resp


class WorkflowTestCase(unittest.TestCase):

    def setUp(self):
        self.client = make_client(availability={SATURDAY.isoformat(): "sold_out"})
        self.workflow = IntakeWorkflow(self.client, today=TODAY, window_days=14)
        self.assertTrue(self.workflow.load())

    def fill_order(self, workflow=None):
        wf = workflow or self.workflow
        self.assertTrue(wf.select_date(MONDAY))
        self.assertTrue(wf.select_slot("10:00"))
        self.assertTrue(wf.advance())
        wf.increment("A")
        wf.increment("A")
        wf.increment("B")
        wf.set_name("Ana")
        wf.set_phone("7701112222")
        wf.set_payment_method("zelle")
        return wf


class TestLoading(WorkflowTestCase):

    def test_load_fetches_window(self):
        self.client.get_availability.assert_called_once_with(TODAY, date(2026, 3, 14))
        self.assertEqual(set(self.workflow.catalog), {"A", "B"})

    def test_available_dates(self):
        dates = self.workflow.available_dates()
        self.assertNotIn(TODAY, dates)
        self.assertNotIn(SATURDAY, dates)
        self.assertIn(MONDAY, dates)

    def test_load_failure_sets_notice(self):
        client = make_client()
        client.list_products.side_effect = TransportError()
        workflow = IntakeWorkflow(client, today=TODAY)
        self.assertFalse(workflow.load())
        self.assertEqual(workflow.notice, CONNECTIVITY_MESSAGE)
        self.assertEqual(workflow.state, IntakeState.SCHEDULING)

    def test_malformed_store_body_sets_notice(self):
        session = MagicMock()
        session.request.side_effect = [
            response(200, []),
            response(200, None),
        ]
        workflow = IntakeWorkflow(StoreClient("http://store.test", session=session), today=TODAY)
        self.assertFalse(workflow.load())
        self.assertEqual(workflow.notice, GENERIC_SERVER_MESSAGE)
        self.assertEqual(workflow.availability, {})


class TestScheduling(WorkflowTestCase):

    def test_sunday_rejected(self):
        self.assertFalse(self.workflow.select_date(TODAY))
        self.assertIn("date", self.workflow.errors)
        self.assertIsNone(self.workflow.draft.date)

    def test_sold_out_rejected(self):
        self.assertFalse(self.workflow.select_date("2026-03-07"))
        self.assertIsNone(self.workflow.draft.date)

    def test_past_date_rejected(self):
        self.assertFalse(self.workflow.select_date(date(2026, 2, 27)))
        self.assertEqual(self.workflow.errors["date"], VALIDATION["date_out_of_range"])
        self.assertIsNone(self.workflow.draft.date)

    def test_date_beyond_window_rejected(self):
        # window is 14 days from TODAY, so 2026-03-14 is the last one
        self.assertTrue(self.workflow.select_date(date(2026, 3, 14)))
        self.assertFalse(self.workflow.select_date(date(2026, 3, 16)))
        self.assertEqual(self.workflow.draft.date, date(2026, 3, 14))

    def test_garbage_date_rejected(self):
        self.assertFalse(self.workflow.select_date("tomorrow"))

    def test_selecting_date_keeps_slot(self):
        self.workflow.select_slot("09:30")
        self.workflow.select_date(MONDAY)
        self.workflow.select_date(date(2026, 3, 3))
        self.assertEqual(self.workflow.draft.time, "09:30")
        self.assertEqual(self.workflow.draft.date, date(2026, 3, 3))

    def test_unknown_slot_rejected(self):
        self.assertFalse(self.workflow.select_slot("09:15"))
        self.assertIsNone(self.workflow.draft.time)

    def test_advance_requires_slot(self):
        self.workflow.select_date(MONDAY)
        self.assertFalse(self.workflow.advance())
        self.assertIn("time", self.workflow.errors)
        self.assertEqual(self.workflow.state, IntakeState.SCHEDULING)
        self.assertEqual(self.workflow.locator, "")

    def test_advance_requires_date(self):
        self.workflow.select_slot("10:00")
        self.assertFalse(self.workflow.advance())
        self.assertIn("date", self.workflow.errors)

    def test_advance_updates_locator(self):
        self.workflow.select_date(MONDAY)
        self.workflow.select_slot("10:00")
        self.assertTrue(self.workflow.advance())
        self.assertEqual(self.workflow.state, IntakeState.ORDERING)
        self.assertEqual(self.workflow.locator, "date=2026-03-02&time=10%3A00")
        self.assertEqual(self.workflow.errors, {})

    def test_back_keeps_cart(self):
        self.fill_order()
        self.assertTrue(self.workflow.back())
        self.assertEqual(self.workflow.state, IntakeState.SCHEDULING)
        self.assertEqual(self.workflow.draft.selected_items.as_dict(), {"A": 2, "B": 1})
        self.assertTrue(self.workflow.advance())
        self.assertEqual(self.workflow.total(), 13.00)


class TestRestore(unittest.TestCase):

    def test_deep_link_auto_advances(self):
        workflow = IntakeWorkflow.from_locator(make_client(), "?date=2026-03-02&time=10:00", today=TODAY)
        self.assertEqual(workflow.state, IntakeState.ORDERING)
        self.assertEqual(workflow.draft.date, MONDAY)
        self.assertEqual(workflow.draft.time, "10:00")

    def test_unknown_slot_does_not_advance(self):
        workflow = IntakeWorkflow.from_locator(make_client(), "date=2026-03-02&time=10:10", today=TODAY)
        self.assertEqual(workflow.state, IntakeState.SCHEDULING)
        self.assertEqual(workflow.draft.date, MONDAY)
        self.assertIsNone(workflow.draft.time)

    def test_sunday_does_not_advance(self):
        workflow = IntakeWorkflow.from_locator(make_client(), "date=2026-03-01&time=10:00", today=TODAY)
        self.assertEqual(workflow.state, IntakeState.SCHEDULING)
        self.assertIsNone(workflow.draft.date)
        self.assertEqual(workflow.draft.time, "10:00")

    def test_past_date_does_not_advance(self):
        workflow = IntakeWorkflow.from_locator(make_client(), "date=2026-02-23&time=10:00", today=TODAY)
        self.assertEqual(workflow.state, IntakeState.SCHEDULING)
        self.assertIsNone(workflow.draft.date)

    def test_date_beyond_window_does_not_advance(self):
        workflow = IntakeWorkflow.from_locator(
            make_client(), "date=2027-06-07&time=10:00", today=TODAY, window_days=14)
        self.assertEqual(workflow.state, IntakeState.SCHEDULING)
        self.assertIsNone(workflow.draft.date)

    def test_empty_query(self):
        workflow = IntakeWorkflow(make_client(), today=TODAY)
        self.assertFalse(workflow.restore(""))
        self.assertEqual(workflow.state, IntakeState.SCHEDULING)


class TestContact(WorkflowTestCase):

    def test_phone_formatted_per_keystroke(self):
        shown = ""
        for ch in "7701112222":
            shown = self.workflow.set_phone(shown + ch)
        self.assertEqual(shown, "(770) 111-2222")
        self.assertEqual(self.workflow.set_phone("77011"), "(770) 11")

    def test_payment_method_restricted(self):
        self.assertFalse(self.workflow.set_payment_method("card"))
        self.assertEqual(self.workflow.draft.payment_method, "zelle")
        self.assertTrue(self.workflow.set_payment_method("cash"))


class TestSubmit(WorkflowTestCase):

    def test_reference_submission(self):
        self.fill_order()
        outcome = self.workflow.submit()
        self.assertTrue(outcome.ok)
        payload = self.client.create_order.call_args[0][0]
        self.assertEqual(payload["total"], 13.00)
        self.assertEqual(payload["items"], "2xA\n1xB")
        self.assertEqual(self.workflow.state, IntakeState.CONFIRMING)
        self.assertEqual(self.workflow.order.id, "order-1")
        # the draft is kept for the confirmation message
        self.assertEqual(self.workflow.draft.selected_items.as_dict(), {"A": 2, "B": 1})
        self.assertFalse(self.workflow.pending)

    def test_empty_cart_never_reaches_store(self):
        self.fill_order()
        for pid in ("A", "A", "B"):
            self.workflow.decrement(pid)
        outcome = self.workflow.submit()
        self.assertFalse(outcome.ok)
        self.assertEqual(outcome.kind, "validation")
        self.assertEqual(outcome.field, "items")
        self.assertEqual(self.client.create_order.call_count, 0)
        self.assertEqual(self.workflow.state, IntakeState.ORDERING)

    def test_cart_of_unknown_products_counts_as_empty(self):
        self.fill_order()
        self.workflow.draft.selected_items.clear()
        self.workflow.increment("ghost")
        self.assertFalse(self.workflow.submit().ok)
        self.client.create_order.assert_not_called()

    def test_bad_phone_blocked(self):
        self.fill_order()
        self.workflow.set_phone("770111")
        outcome = self.workflow.submit()
        self.assertEqual(outcome.field, "phone")
        self.assertIn("phone", self.workflow.errors)
        self.client.create_order.assert_not_called()

    def test_blank_name_blocked(self):
        self.fill_order()
        self.workflow.set_name("   ")
        self.assertEqual(self.workflow.submit().field, "name")
        self.client.create_order.assert_not_called()

    def test_submit_outside_ordering_step(self):
        outcome = self.workflow.submit()
        self.assertFalse(outcome.ok)
        self.client.create_order.assert_not_called()

    def test_pending_blocks_reentry(self):
        self.fill_order()
        self.workflow.pending = True
        outcome = self.workflow.submit()
        self.assertEqual(outcome.kind, "pending")
        self.client.create_order.assert_not_called()

    def test_pending_set_while_request_in_flight(self):
        self.fill_order()
        seen = []

        def create(payload):
            seen.append(self.workflow.pending)
            # a second click while the first request is outstanding
            seen.append(self.workflow.submit().kind)
            return OrderOut(id="order-2", **payload)

        self.client.create_order.side_effect = create
        self.assertTrue(self.workflow.submit().ok)
        self.assertEqual(seen, [True, "pending"])
        self.assertEqual(self.client.create_order.call_count, 1)

    def test_server_error_keeps_draft(self):
        self.fill_order()
        self.client.create_order.side_effect = ServerRejectedError("Dia esgotado", status_code=409)
        outcome = self.workflow.submit()
        self.assertFalse(outcome.ok)
        self.assertEqual(outcome.kind, "server")
        self.assertEqual(outcome.message, "Dia esgotado")
        self.assertEqual(self.workflow.notice, "Dia esgotado")
        self.assertEqual(self.workflow.state, IntakeState.ORDERING)
        self.assertEqual(self.workflow.draft.name, "Ana")
        self.assertFalse(self.workflow.pending)

        # retry without re-entering anything
        self.client.create_order.side_effect = lambda payload: OrderOut(id="order-3", **payload)
        self.assertTrue(self.workflow.submit().ok)

    def test_transport_error_keeps_draft(self):
        self.fill_order()
        self.client.create_order.side_effect = TransportError()
        outcome = self.workflow.submit()
        self.assertEqual(outcome.kind, "transport")
        self.assertEqual(outcome.message, CONNECTIVITY_MESSAGE)
        self.assertEqual(self.workflow.state, IntakeState.ORDERING)
        self.assertEqual(self.workflow.draft.selected_items.as_dict(), {"A": 2, "B": 1})


class TestSubmitOverHttp(unittest.TestCase):
    """Same flow through a real StoreClient with the HTTP session mocked."""

    def setUp(self):
        self.session = MagicMock()
        self.client = StoreClient("http://store.test", timeout=2, session=self.session)
        self.workflow = IntakeWorkflow(self.client, today=TODAY)
        self.workflow.catalog = {
            "A": ProductOut(id="A", name="A", price=5.00),
            "B": ProductOut(id="B", name="B", price=3.00),
        }
        self.workflow.select_date(MONDAY)
        self.workflow.select_slot("10:00")
        self.workflow.advance()
        self.workflow.increment("A")
        self.workflow.set_name("Ana")
        self.workflow.set_phone("(770) 111-2222")

    def test_server_message_verbatim(self):
        self.session.request.return_value = response(409, {"error": "Dia esgotado"})
        outcome = self.workflow.submit()
        self.assertEqual(outcome.message, "Dia esgotado")

    def test_unparsable_body_falls_back(self):
        self.session.request.return_value = response(500, raises=True)
        outcome = self.workflow.submit()
        self.assertEqual(outcome.message, GENERIC_SERVER_MESSAGE)
        self.assertEqual(outcome.kind, "server")

    def test_timeout_is_transport_failure(self):
        self.session.request.side_effect = requests.Timeout("slow")
        outcome = self.workflow.submit()
        self.assertEqual(outcome.kind, "transport")
        self.assertEqual(outcome.message, CONNECTIVITY_MESSAGE)
        self.assertEqual(self.session.request.call_args.kwargs["timeout"], 2)

    def test_empty_cart_sends_nothing(self):
        self.workflow.decrement("A")
        self.workflow.submit()
        self.session.request.assert_not_called()


class TestConfirmation(WorkflowTestCase):

    def setUp(self):
        self.client = make_client(settings={"whatsapp_number": "(770) 555-0000"})
        self.workflow = IntakeWorkflow(self.client, today=TODAY)
        self.workflow.load()

    def test_send_confirmation_opens_link(self):
        self.fill_order()
        self.workflow.submit()
        opener = MagicMock()
        link = self.workflow.send_confirmation(opener=opener)
        opener.assert_called_once_with(link)
        self.assertTrue(link.startswith("https://wa.me/7705550000?text="))

    def test_opener_failure_is_ignored(self):
        self.fill_order()
        self.workflow.submit()
        opener = MagicMock(side_effect=OSError("no browser"))
        self.workflow.send_confirmation(opener=opener)
        self.assertEqual(self.workflow.state, IntakeState.CONFIRMING)

    def test_requires_confirmed_order(self):
        with self.assertRaises(RuntimeError):
            self.workflow.send_confirmation(opener=MagicMock())

    def test_message_stable(self):
        self.fill_order()
        self.workflow.submit()
        self.assertEqual(self.workflow.confirmation_message(), self.workflow.confirmation_message())

    def test_reset(self):
        self.fill_order()
        self.workflow.submit()
        self.workflow.reset()
        self.assertEqual(self.workflow.state, IntakeState.SCHEDULING)
        self.assertTrue(self.workflow.draft.selected_items.is_empty())
        self.assertIsNone(self.workflow.order)


if __name__ == '__main__':
    unittest.main()
