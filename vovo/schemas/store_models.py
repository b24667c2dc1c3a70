"""Pydantic models for the store endpoints.

The same models are used by the FastAPI handlers to validate requests and by
the store client to type what comes back over the wire.
"""
from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..data.models import DayStatus, PaymentMethod

PHONE_PATTERN = r"^\([0-9]{3}\) [0-9]{3}-[0-9]{4}$"


class ProductIn(BaseModel):
    # id present => update, absent => create
    id: Optional[str] = None
    name: str = Field(min_length=1)
    price: float = Field(gt=0)
    description: Optional[str] = None
    image: Optional[str] = None

class ProductOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    price: float
    description: Optional[str] = None
    image: Optional[str] = None

class SettingIn(BaseModel):
    key: str = Field(min_length=1)
    value: str = ""

    @field_validator("value", mode="before")
    @classmethod
    def _stringify(cls, v):
        # settings are always stored as strings; consumers parse them
        if v is None:
            return ""
        if isinstance(v, bool):
            return "true" if v else "false"
        return str(v)

class OrderLineIn(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    product_id: Optional[str] = None
    name: str
    quantity: int = Field(ge=1)
    unit_price: float = Field(ge=0)


class OrderCreate(BaseModel):
    customer_name: str = Field(min_length=1)
    customer_phone: str = Field(pattern=PHONE_PATTERN)
    order_date: date
    order_time: str
    items: str = Field(min_length=1)
    total: float = Field(gt=0)
    payment_method: PaymentMethod
    lines: List[OrderLineIn] = Field(default_factory=list)

    @field_validator("customer_name")
    @classmethod
    def _name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("customer_name must not be blank")
        return v

class OrderUpdate(OrderCreate):
    id: str

class OrderOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    customer_name: str
    customer_phone: str
    order_date: date
    order_time: str
    items: str
    total: float
    payment_method: PaymentMethod
    created_at: Optional[datetime] = None
    lines: List[OrderLineIn] = Field(default_factory=list)

class UploadOut(BaseModel):
    url: str

class DeletedOut(BaseModel):
    deleted: bool = True

__all__ = [
    "DayStatus",
    "PaymentMethod",
    "PHONE_PATTERN",
    "ProductIn",
    "ProductOut",
    "SettingIn",
    "OrderLineIn",
    "OrderCreate",
    "OrderUpdate",
    "OrderOut",
    "UploadOut",
    "DeletedOut",
]
