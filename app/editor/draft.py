"""In-memory quotation draft.

A draft is a frozen value. Every edit goes through one of the update
functions below and returns a new draft; nothing is mutated in place.
Item totals and the subtotal are computed on read from quantity and price.
"""

from __future__ import annotations

import random
from dataclasses import asdict, dataclass, field, replace
from datetime import date as _date, datetime, timezone
from typing import Any, Mapping

from app.core.totals import compute_line_total, sum_totals, to_number

DATE_FORMAT = "%d/%m/%Y"
CLIENT_FIELDS = ("name", "address", "phone", "email")
ITEM_FIELDS = ("description", "quantity", "price")


class DraftValidationError(ValueError):
    """Raised when a draft is not ready to be saved; str() is user-facing."""


@dataclass(frozen=True)
class CompanyInfo:
    name: str = ""
    address: str = ""
    phone: str = ""
    email: str = ""
    pvt: str = ""


@dataclass(frozen=True)
class ClientInfo:
    name: str = ""
    address: str = ""
    phone: str = ""
    email: str = ""


@dataclass(frozen=True)
class LineItem:
    description: str = ""
    quantity: float = 1
    price: float = 0

    @property
    def total(self) -> float:
        return compute_line_total(self.quantity, self.price)


@dataclass(frozen=True)
class Draft:
    quotation_number: str
    date: str
    company: CompanyInfo
    client: ClientInfo = field(default_factory=ClientInfo)
    items: tuple[LineItem, ...] = (LineItem(),)


def generate_quotation_number(rng: random.Random | None = None) -> str:
    rng = rng or random
    return f"Quote-{rng.randrange(10000)}"


def format_date(day: _date) -> str:
    return day.strftime(DATE_FORMAT)


def new_draft(
    company: CompanyInfo | None = None,
    *,
    today: _date | None = None,
    rng: random.Random | None = None,
) -> Draft:
    if company is None:
        from app.core.config import get_settings

        company = get_settings().company_info()
    return Draft(
        quotation_number=generate_quotation_number(rng),
        date=format_date(today or _date.today()),
        company=company,
    )


def update_client(draft: Draft, field_name: str, value: str) -> Draft:
    if field_name not in CLIENT_FIELDS:
        raise KeyError(f"unknown client field: {field_name}")
    return replace(draft, client=replace(draft.client, **{field_name: value}))


def update_item(draft: Draft, index: int, field_name: str, value: Any) -> Draft:
    if field_name not in ITEM_FIELDS:
        raise KeyError(f"unknown item field: {field_name}")
    if field_name != "description":
        value = to_number(value)
    items = list(draft.items)
    items[index] = replace(items[index], **{field_name: value})
    return replace(draft, items=tuple(items))


def add_item(draft: Draft) -> Draft:
    return replace(draft, items=draft.items + (LineItem(),))


def remove_item(draft: Draft, index: int) -> Draft:
    if len(draft.items) <= 1:
        return draft
    items = tuple(it for i, it in enumerate(draft.items) if i != index)
    return replace(draft, items=items)


def subtotal(draft: Draft) -> float:
    return sum_totals(it.total for it in draft.items)


def grand_total(draft: Draft) -> float:
    # No tax or discount exists; kept separate for the wire format.
    return subtotal(draft)


def validate_for_save(draft: Draft) -> None:
    if not draft.client.name.strip():
        raise DraftValidationError("Please enter client name")
    if not any(it.description.strip() for it in draft.items):
        raise DraftValidationError("Please add at least one item description")


def to_payload(draft: Draft, *, created_at: datetime | None = None) -> dict[str, Any]:
    """Full draft as the JSON body the quotation API expects."""
    created_at = created_at or datetime.now(timezone.utc)
    return {
        "quotationNumber": draft.quotation_number,
        "date": draft.date,
        "companyInfo": asdict(draft.company),
        "clientInfo": asdict(draft.client),
        "items": [
            {
                "description": it.description,
                "quantity": it.quantity,
                "price": it.price,
                "total": it.total,
            }
            for it in draft.items
        ],
        "subtotal": subtotal(draft),
        "grandTotal": grand_total(draft),
        "createdAt": created_at.isoformat(),
    }


def draft_from_record(record: Mapping[str, Any]) -> Draft:
    """Rebuild a draft from a stored quotation (API `data` payload)."""
    company = record.get("companyInfo") or {}
    client = record.get("clientInfo") or {}
    items = tuple(
        LineItem(
            description=it.get("description") or "",
            quantity=to_number(it.get("quantity")),
            price=to_number(it.get("price")),
        )
        for it in record.get("items") or []
    )
    return Draft(
        quotation_number=record["quotationNumber"],
        date=record.get("date") or "",
        company=CompanyInfo(**{k: company.get(k) or "" for k in ("name", "address", "phone", "email", "pvt")}),
        client=ClientInfo(**{k: client.get(k) or "" for k in CLIENT_FIELDS}),
        items=items or (LineItem(),),
    )
