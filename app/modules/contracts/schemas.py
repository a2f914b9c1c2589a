from enum import Enum
from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional
from datetime import date, datetime
from uuid import UUID


class ContractStatus(str, Enum):
    ATIVO = "ativo"
    SUSPENSO = "suspenso"
    ENCERRADO = "encerrado"
    EM_RENOVACAO = "em_renovacao"
    RASCUNHO = "rascunho"


class ContractFields(BaseModel):
    description: Optional[str] = Field(default=None, max_length=2000)
    supplier_id: Optional[UUID] = None
    responsible_id: Optional[UUID] = None
    total_value: Optional[float] = Field(default=None, ge=0)
    signature_date: Optional[date] = None
    renewal_date: Optional[date] = None
    payment_terms: Optional[str] = Field(default=None, max_length=500)
    notes: Optional[str] = Field(default=None, max_length=2000)

    @field_validator("supplier_id", "responsible_id", "total_value", "signature_date", "renewal_date", mode="before")
    @classmethod
    def empty_as_null(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @model_validator(mode="after")
    def check_period(self):
        start = getattr(self, "start_date", None)
        end = getattr(self, "end_date", None)
        if start and end and end < start:
            raise ValueError("end_date must not be before start_date")
        return self


class ContractCreate(ContractFields):
    contract_number: str = Field(min_length=1, max_length=50)
    title: str = Field(min_length=1, max_length=200)
    contract_type: str = Field(min_length=1)
    status: ContractStatus = ContractStatus.RASCUNHO
    start_date: date
    end_date: date
    auto_renewal: bool = False

    @field_validator("contract_number", "title", mode="before")
    @classmethod
    def strip_text(cls, value):
        return value.strip() if isinstance(value, str) else value


class ContractUpdate(ContractFields):
    contract_number: Optional[str] = Field(default=None, min_length=1, max_length=50)
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    contract_type: Optional[str] = Field(default=None, min_length=1)
    status: Optional[ContractStatus] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    auto_renewal: Optional[bool] = None

    @field_validator("contract_number", "title", mode="before")
    @classmethod
    def strip_text(cls, value):
        return value.strip() if isinstance(value, str) else value


class ContractResponse(BaseModel):
    id: str
    contract_number: str
    title: str
    description: Optional[str] = None
    contract_type: str
    status: ContractStatus
    supplier_id: Optional[str] = None
    responsible_id: Optional[str] = None
    total_value: Optional[float] = None
    start_date: date
    end_date: date
    signature_date: Optional[date] = None
    renewal_date: Optional[date] = None
    auto_renewal: Optional[bool] = False
    payment_terms: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
    created_by: Optional[str] = None

    class Config:
        from_attributes = True

