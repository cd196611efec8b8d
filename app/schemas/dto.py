from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CompanyInfo(CamelModel):
    name: str = ""
    address: str = ""
    phone: str = ""
    email: str = ""
    pvt: str = ""


class ClientInfo(CamelModel):
    name: str
    address: str = ""
    phone: str = ""
    email: str = ""

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("client name is required")
        return v


class LineItem(CamelModel):
    description: str = ""
    quantity: float = Field(default=1, ge=0)
    price: float = Field(default=0, ge=0)
    # Recomputed server-side from quantity and price
    total: float | None = None


class QuotationCreate(CamelModel):
    quotation_number: str = Field(min_length=1)
    date: str = Field(min_length=1)
    company_info: CompanyInfo = Field(default_factory=CompanyInfo)
    client_info: ClientInfo
    items: list[LineItem] = Field(min_length=1)
    # Accepted for compatibility, always recomputed / assigned by the server
    subtotal: float | None = None
    grand_total: float | None = None
    created_at: datetime | None = None


class QuotationUpdate(CamelModel):
    quotation_number: str | None = Field(default=None, min_length=1)
    date: str | None = None
    company_info: CompanyInfo | None = None
    client_info: ClientInfo | None = None
    items: list[LineItem] | None = Field(default=None, min_length=1)
    subtotal: float | None = None
    grand_total: float | None = None


class QuotationOut(CamelModel):
    id: int
    quotation_number: str
    date: str
    company_info: CompanyInfo
    client_info: ClientInfo
    items: list[LineItem]
    subtotal: float
    grand_total: float
    created_at: datetime | None = None


class ApiResponse(BaseModel):
    success: bool
    message: str | None = None
    data: Any = None
    count: int | None = None
    error: str | None = None


class HealthResponse(BaseModel):
    success: bool
    message: str
    database: str
