import logging
from contextlib import contextmanager
from typing import Iterator

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import QuotationNotFoundError, ServiceError
from app.db.crud import quotations as crud
from app.db.models import Quotation
from app.db.session import get_db
from app.schemas.dto import (
    ApiResponse,
    ClientInfo,
    CompanyInfo,
    LineItem,
    QuotationCreate,
    QuotationOut,
    QuotationUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@contextmanager
def _db_failure(message: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        logger.exception(message)
        raise ServiceError(message, error=str(exc)) from exc


def _to_dto(q: Quotation) -> dict:
    dto = QuotationOut(
        id=int(q.id),
        quotation_number=q.quotation_number,
        date=q.date,
        company_info=CompanyInfo(**(q.company_info or {})),
        client_info=ClientInfo.model_construct(
            name=q.client_name,
            address=q.client_address or "",
            phone=q.client_phone or "",
            email=q.client_email or "",
        ),
        items=[
            LineItem(description=i.description or "", quantity=i.quantity, price=i.price, total=i.total)
            for i in q.items
        ],
        subtotal=q.subtotal,
        grand_total=q.grand_total,
        created_at=q.created_at,
    )
    return dto.model_dump(mode="json", by_alias=True)


@router.post("", status_code=201, response_model=ApiResponse, response_model_exclude_none=True)
def create_quotation(payload: QuotationCreate, db: Session = Depends(get_db)) -> ApiResponse:
    with _db_failure("Failed to save quotation"):
        quotation = crud.create_quotation(db, payload)
    logger.info("Saved quotation %s (id=%s)", quotation.quotation_number, quotation.id)
    return ApiResponse(success=True, message="Quotation saved successfully", data=_to_dto(quotation))


@router.get("", response_model=ApiResponse, response_model_exclude_none=True)
def list_quotations(db: Session = Depends(get_db)) -> ApiResponse:
    with _db_failure("Failed to fetch quotations"):
        quotations = crud.list_quotations(db)
        data = [_to_dto(q) for q in quotations]
    return ApiResponse(success=True, count=len(data), data=data)


@router.get("/number/{quotation_number:path}", response_model=ApiResponse, response_model_exclude_none=True)
def get_quotation_by_number(quotation_number: str, db: Session = Depends(get_db)) -> ApiResponse:
    with _db_failure("Failed to fetch quotation"):
        quotation = crud.get_quotation_by_number(db, quotation_number)
        if quotation is None:
            raise QuotationNotFoundError()
        return ApiResponse(success=True, data=_to_dto(quotation))


@router.get("/search/{client_name:path}", response_model=ApiResponse, response_model_exclude_none=True)
def search_quotations(client_name: str, db: Session = Depends(get_db)) -> ApiResponse:
    with _db_failure("Failed to search quotations"):
        quotations = crud.search_quotations(db, client_name)
        data = [_to_dto(q) for q in quotations]
    return ApiResponse(success=True, count=len(data), data=data)


@router.get("/{quotation_id}", response_model=ApiResponse, response_model_exclude_none=True)
def get_quotation(quotation_id: int, db: Session = Depends(get_db)) -> ApiResponse:
    with _db_failure("Failed to fetch quotation"):
        quotation = crud.get_quotation(db, quotation_id)
        if quotation is None:
            raise QuotationNotFoundError()
        return ApiResponse(success=True, data=_to_dto(quotation))


@router.put("/{quotation_id}", response_model=ApiResponse, response_model_exclude_none=True)
def update_quotation(
    quotation_id: int, payload: QuotationUpdate, db: Session = Depends(get_db)
) -> ApiResponse:
    with _db_failure("Failed to update quotation"):
        quotation = crud.update_quotation(db, quotation_id, payload)
    if quotation is None:
        raise QuotationNotFoundError()
    logger.info("Updated quotation %s (id=%s)", quotation.quotation_number, quotation.id)
    return ApiResponse(success=True, message="Quotation updated successfully", data=_to_dto(quotation))


@router.delete("/{quotation_id}", response_model=ApiResponse, response_model_exclude_none=True)
def delete_quotation(quotation_id: int, db: Session = Depends(get_db)) -> ApiResponse:
    with _db_failure("Failed to delete quotation"):
        deleted = crud.delete_quotation(db, quotation_id)
    if not deleted:
        raise QuotationNotFoundError()
    logger.info("Deleted quotation id=%s", quotation_id)
    return ApiResponse(success=True, message="Quotation deleted successfully")
