from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional
from datetime import datetime
import re

CNPJ_PATTERN = re.compile(r"^\d{2}\.\d{3}\.\d{3}/\d{4}-\d{2}$")


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


class SupplierFields(BaseModel):
    cnpj: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(default=None, max_length=20)
    address: Optional[str] = Field(default=None, max_length=500)
    city: Optional[str] = Field(default=None, max_length=100)
    state: Optional[str] = Field(default=None, max_length=2)
    category: Optional[str] = Field(default=None, max_length=100)
    contact_name: Optional[str] = Field(default=None, max_length=200)
    notes: Optional[str] = Field(default=None, max_length=2000)

    @field_validator("cnpj", "email", mode="before")
    @classmethod
    def empty_as_null(cls, value):
        return _blank_to_none(value)

    @field_validator("email", mode="before")
    @classmethod
    def check_email_length(cls, value):
        if isinstance(value, str) and len(value) > 255:
            raise ValueError("email must have at most 255 characters")
        return value

    @field_validator("cnpj")
    @classmethod
    def check_cnpj(cls, value):
        if value is not None and not CNPJ_PATTERN.match(value):
            raise ValueError("CNPJ must use the XX.XXX.XXX/XXXX-XX format")
        return value


class SupplierCreate(SupplierFields):
    name: str = Field(min_length=1, max_length=200)
    is_active: bool = True

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value):
        return value.strip() if isinstance(value, str) else value


class SupplierUpdate(SupplierFields):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    is_active: Optional[bool] = None

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value):
        return value.strip() if isinstance(value, str) else value


class SupplierResponse(BaseModel):
    id: str
    name: str
    cnpj: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    category: Optional[str] = None
    contact_name: Optional[str] = None
    notes: Optional[str] = None
    is_active: bool = True
    created_at: datetime
    updated_at: Optional[datetime] = None
    created_by: Optional[str] = None

    class Config:
        from_attributes = True
