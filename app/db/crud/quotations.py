"""Quotation CRUD. Derived totals are recomputed here on every write."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from app.core.errors import DuplicateQuotationNumberError
from app.core.totals import compute_line_total, sum_totals
from app.db.models import Quotation, QuotationItem
from app.schemas.dto import ClientInfo, LineItem, QuotationCreate, QuotationUpdate


def _newest_first(stmt):
    return stmt.options(selectinload(Quotation.items)).order_by(
        Quotation.created_at.desc(), Quotation.id.desc()
    )


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _build_items(items: list[LineItem]) -> list[QuotationItem]:
    return [
        QuotationItem(
            position=pos,
            description=it.description,
            quantity=it.quantity,
            price=it.price,
            total=compute_line_total(it.quantity, it.price),
        )
        for pos, it in enumerate(items)
    ]


def _apply_client(quotation: Quotation, client: ClientInfo) -> None:
    quotation.client_name = client.name
    quotation.client_address = client.address or None
    quotation.client_phone = client.phone or None
    quotation.client_email = client.email or None


def _apply_items(quotation: Quotation, items: list[LineItem]) -> None:
    quotation.items = _build_items(items)
    quotation.subtotal = sum_totals(i.total for i in quotation.items)
    quotation.grand_total = quotation.subtotal


def _commit(db: Session, quotation: Quotation) -> None:
    number = quotation.quotation_number
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        # Lost the race against another writer holding the same number
        raise DuplicateQuotationNumberError(number) from exc
    db.refresh(quotation)


def list_quotations(db: Session) -> list[Quotation]:
    return list(db.scalars(_newest_first(select(Quotation))).all())


def get_quotation(db: Session, quotation_id: int) -> Optional[Quotation]:
    stmt = select(Quotation).options(selectinload(Quotation.items)).where(Quotation.id == quotation_id)
    return db.scalars(stmt).one_or_none()


def get_quotation_by_number(db: Session, quotation_number: str) -> Optional[Quotation]:
    stmt = (
        select(Quotation)
        .options(selectinload(Quotation.items))
        .where(Quotation.quotation_number == quotation_number)
    )
    return db.scalars(stmt).one_or_none()


def search_quotations(db: Session, client_name: str) -> list[Quotation]:
    pattern = f"%{_escape_like(client_name.lower())}%"
    stmt = select(Quotation).where(func.lower(Quotation.client_name).like(pattern, escape="\\"))
    return list(db.scalars(_newest_first(stmt)).all())


def create_quotation(db: Session, data: QuotationCreate) -> Quotation:
    if get_quotation_by_number(db, data.quotation_number) is not None:
        raise DuplicateQuotationNumberError(data.quotation_number)

    quotation = Quotation(
        quotation_number=data.quotation_number,
        date=data.date,
        company_info=data.company_info.model_dump(),
    )
    _apply_client(quotation, data.client_info)
    _apply_items(quotation, data.items)
    db.add(quotation)
    _commit(db, quotation)
    return quotation


def update_quotation(db: Session, quotation_id: int, data: QuotationUpdate) -> Optional[Quotation]:
    quotation = get_quotation(db, quotation_id)
    if quotation is None:
        return None

    if data.quotation_number is not None and data.quotation_number != quotation.quotation_number:
        other = get_quotation_by_number(db, data.quotation_number)
        if other is not None:
            raise DuplicateQuotationNumberError(data.quotation_number)
        quotation.quotation_number = data.quotation_number
    if data.date is not None:
        quotation.date = data.date
    if data.company_info is not None:
        quotation.company_info = data.company_info.model_dump()
    if data.client_info is not None:
        _apply_client(quotation, data.client_info)
    if data.items is not None:
        _apply_items(quotation, data.items)

    _commit(db, quotation)
    return quotation


def delete_quotation(db: Session, quotation_id: int) -> bool:
    quotation = get_quotation(db, quotation_id)
    if quotation is None:
        return False
    db.delete(quotation)
    db.commit()
    return True
