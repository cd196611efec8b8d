from __future__ import annotations

import itertools
from dataclasses import replace
from datetime import date

import httpx
import pytest

from app.client.quotations import QuotationClient
from app.editor.draft import new_draft
from app.editor.session import SAVE_FAILED_MESSAGE, SAVED_MESSAGE, UNREACHABLE_MESSAGE, QuotationEditor


def _factory(company, seed: int = 0):
    counter = itertools.count(1)

    def make():
        draft = new_draft(company, today=date(2026, 3, 14))
        return replace(draft, quotation_number=f"Quote-{seed}{next(counter)}")

    return make


def _editor(transport: httpx.AsyncBaseTransport, tmp_path, company, seed: int = 0) -> QuotationEditor:
    client = QuotationClient("http://test/api", transport=transport)
    return QuotationEditor(client, export_dir=tmp_path, reset_delay=0, draft_factory=_factory(company, seed))


def _fill(editor: QuotationEditor, client_name: str = "Acme Traders") -> None:
    editor.set_client_field("name", client_name)
    editor.set_item_field(0, "description", "Toner")
    editor.set_item_field(0, "quantity", "3")
    editor.set_item_field(0, "price", "1500")


@pytest.mark.asyncio
async def test_successful_save_stores_and_resets_draft(app, tmp_path, company):
    editor = _editor(httpx.ASGITransport(app=app), tmp_path, company)
    _fill(editor)
    saved_number = editor.draft.quotation_number

    assert await editor.save() is True

    assert editor.notification.kind == "success"
    assert editor.notification.message == SAVED_MESSAGE
    assert editor.draft.client.name == ""
    assert len(editor.draft.items) == 1
    assert editor.draft.quotation_number != saved_number
    assert editor.draft.date == "14/03/2026"

    stored = await editor.client.get_by_number(saved_number)
    assert stored["items"][0]["total"] == 4500
    assert stored["grandTotal"] == 4500
    await editor.client.aclose()


@pytest.mark.asyncio
async def test_duplicate_number_keeps_draft(app, tmp_path, company):
    first = _editor(httpx.ASGITransport(app=app), tmp_path, company, seed=3)
    second = _editor(httpx.ASGITransport(app=app), tmp_path, company, seed=3)
    _fill(first)
    _fill(second, "Beta Hardware")
    assert first.draft.quotation_number == second.draft.quotation_number

    assert await first.save() is True
    draft_before = second.draft
    assert await second.save() is False

    assert second.notification.kind == "error"
    assert "already exists" in second.notification.message
    assert second.draft is draft_before
    await first.client.aclose()
    await second.client.aclose()


@pytest.mark.asyncio
async def test_blank_client_name_never_reaches_the_network(tmp_path, company):
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(201, json={"success": True, "data": {}})

    editor = _editor(httpx.MockTransport(handler), tmp_path, company)
    editor.set_item_field(0, "description", "Toner")

    assert await editor.save() is False

    assert calls == []
    assert editor.notification.kind == "error"
    assert editor.notification.message == "Please enter client name"
    await editor.client.aclose()


@pytest.mark.asyncio
async def test_missing_item_description_never_reaches_the_network(tmp_path, company):
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(201, json={"success": True, "data": {}})

    editor = _editor(httpx.MockTransport(handler), tmp_path, company)
    editor.set_client_field("name", "Acme")

    assert await editor.save() is False
    assert calls == []
    assert editor.notification.message == "Please add at least one item description"
    await editor.client.aclose()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [httpx.ConnectError("connection refused"), httpx.ReadTimeout("timed out")],
)
async def test_unreachable_server_keeps_draft(tmp_path, company, error):
    def handler(request: httpx.Request) -> httpx.Response:
        raise error

    editor = _editor(httpx.MockTransport(handler), tmp_path, company)
    _fill(editor)
    draft_before = editor.draft

    assert await editor.save() is False

    assert editor.notification.message == UNREACHABLE_MESSAGE
    assert editor.draft is draft_before
    await editor.client.aclose()


@pytest.mark.asyncio
async def test_server_error_gets_generic_message(tmp_path, company):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"success": False, "message": "Failed to save quotation"})

    editor = _editor(httpx.MockTransport(handler), tmp_path, company)
    _fill(editor)

    assert await editor.save() is False
    assert editor.notification.kind == "error"
    assert editor.notification.message.startswith("Failed to save to database")
    assert editor.draft.client.name == "Acme Traders"
    await editor.client.aclose()


@pytest.mark.asyncio
async def test_out_of_range_price_is_saved_as_zero(app, tmp_path, company):
    editor = _editor(httpx.ASGITransport(app=app), tmp_path, company, seed=5)
    _fill(editor)
    editor.set_item_field(0, "price", "1e400")
    saved_number = editor.draft.quotation_number

    assert await editor.save() is True

    stored = await editor.client.get_by_number(saved_number)
    assert stored["items"][0]["price"] == 0
    assert stored["grandTotal"] == 0
    await editor.client.aclose()


@pytest.mark.asyncio
async def test_unexpected_client_failure_gets_generic_message(tmp_path, company):
    def handler(request: httpx.Request) -> httpx.Response:
        raise ValueError("body could not be encoded")

    editor = _editor(httpx.MockTransport(handler), tmp_path, company)
    _fill(editor)
    draft_before = editor.draft

    assert await editor.save() is False

    assert editor.notification.kind == "error"
    assert editor.notification.message == SAVE_FAILED_MESSAGE
    assert editor.draft is draft_before
    await editor.client.aclose()


@pytest.mark.asyncio
async def test_client_encodes_number_and_client_name(app, make_payload):
    async with QuotationClient("http://test/api", transport=httpx.ASGITransport(app=app)) as client:
        created = await client.create(make_payload(number="Quote/7", client_name="A/B #1?"))

        assert (await client.get_by_number("Quote/7"))["id"] == created["id"]
        found = await client.search("a/b #1?")
        assert [q["id"] for q in found] == [created["id"]]
