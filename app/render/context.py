"""View model shared by the HTML preview and the exported document."""

from __future__ import annotations

from typing import Any

from app.editor.draft import Draft, grand_total

CLIENT_PLACEHOLDER = "Client Name"
ITEM_PLACEHOLDER = "Item description"
GREETING = "Dear Sir/Madam,"
INTRO = "Thank you for your valuable inquiry. We are pleased to quote as below:"
CLOSING = "We hope you find our offer to be in line with your requirement."

TERMS = (
    "Payment must be made in full within the agreed-upon period stated on the invoice. "
    "Late payments may incur additional charges.",
    "Prices are exclusive of applicable taxes unless stated otherwise. "
    "The buyer is responsible for any taxes, duties, or additional charges.",
    "Claims for defective or incorrect items must be reported within 48 hours of receipt. "
    "Returns are subject to approval as per our return policy.",
    "By making a purchase, the buyer agrees to these terms. For inquiries, contact {email}.",
)


def format_money(value: float | int | None, currency: str = "Ksh") -> str:
    """1500 -> 'Ksh 1,500.00'."""
    try:
        num = float(value or 0)
    except (TypeError, ValueError):
        num = 0.0
    return f"{currency} {num:,.2f}"


def format_quantity(value: float) -> str:
    return f"{value:g}"


def build_context(draft: Draft, *, currency: str = "Ksh") -> dict[str, Any]:
    company = draft.company
    client = draft.client
    rows = [
        {
            "index": index,
            "description": item.description.strip() or ITEM_PLACEHOLDER,
            "quantity": format_quantity(item.quantity),
            "unit": "pcs",
            "price": format_money(item.price, currency),
            "total": format_money(item.total, currency),
        }
        for index, item in enumerate(draft.items, start=1)
    ]
    client_lines = [v for v in (client.address, client.phone, client.email) if v.strip()]
    return {
        "quotation_number": draft.quotation_number,
        "date": draft.date,
        "company": {
            "name": company.name,
            "address": company.address,
            "phone": company.phone,
            "email": company.email,
            "pvt": company.pvt,
        },
        "client_name": client.name.strip() or CLIENT_PLACEHOLDER,
        "client_lines": client_lines,
        "greeting": GREETING,
        "intro": INTRO,
        "rows": rows,
        "grand_total": format_money(grand_total(draft), currency),
        "closing": CLOSING,
        "terms": [t.format(email=company.email) for t in TERMS],
        "signature": f"For, {company.name.upper()}",
    }
