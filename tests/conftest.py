from __future__ import annotations

import random
from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.db.base import Base
from app.db import models  # noqa: F401
from app.db.session import get_db
from app.editor.draft import CompanyInfo, new_draft
from app.main import create_app

COMPANY = CompanyInfo(
    name="Wimwa Tech General Supplies Limited",
    address="P.O Box 273 -00206, Kiserian",
    phone="+254 712953780",
    email="wimwatech@gmail.com",
    pvt="PVT-Y2U9QXGP",
)


@pytest.fixture()
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    yield factory
    engine.dispose()


@pytest.fixture()
def app(session_factory):
    application = create_app()

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    application.dependency_overrides[get_db] = override_get_db
    return application


@pytest.fixture()
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def company():
    return COMPANY


@pytest.fixture()
def blank_draft(company):
    return new_draft(company, today=date(2026, 3, 14), rng=random.Random(7))


@pytest.fixture()
def make_payload():
    """Factory for create-quotation request bodies."""

    def _make(number: str = "Quote-1001", client_name: str = "Acme Traders", items=None) -> dict:
        return {
            "quotationNumber": number,
            "date": "14/03/2026",
            "companyInfo": {
                "name": COMPANY.name,
                "address": COMPANY.address,
                "phone": COMPANY.phone,
                "email": COMPANY.email,
                "pvt": COMPANY.pvt,
            },
            "clientInfo": {"name": client_name, "address": "Nairobi", "phone": "", "email": ""},
            "items": items
            if items is not None
            else [{"description": "Printer toner", "quantity": 3, "price": 1500, "total": 0}],
            "subtotal": 0,
            "grandTotal": 0,
        }

    return _make
