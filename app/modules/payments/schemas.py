from enum import Enum
from pydantic import BaseModel, Field
from typing import Optional
from datetime import date, datetime
from uuid import UUID

MAX_AMOUNT = 999999999.99


class PaymentStatus(str, Enum):
    PENDENTE = "pendente"
    PAGO = "pago"
    ATRASADO = "atrasado"
    CANCELADO = "cancelado"


class PaymentCreate(BaseModel):
    contract_id: UUID
    amount: float = Field(gt=0, le=MAX_AMOUNT)
    due_date: date
    payment_date: Optional[date] = None
    status: PaymentStatus = PaymentStatus.PENDENTE
    invoice_number: Optional[str] = Field(default=None, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    notes: Optional[str] = Field(default=None, max_length=2000)


class PaymentUpdate(BaseModel):
    amount: Optional[float] = Field(default=None, gt=0, le=MAX_AMOUNT)
    due_date: Optional[date] = None
    payment_date: Optional[date] = None
    status: Optional[PaymentStatus] = None
    invoice_number: Optional[str] = Field(default=None, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    notes: Optional[str] = Field(default=None, max_length=2000)


class PaymentResponse(BaseModel):
    id: str
    contract_id: str
    description: Optional[str] = None
    amount: float
    due_date: date
    payment_date: Optional[date] = None
    status: PaymentStatus
    invoice_number: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
    created_by: Optional[str] = None

    class Config:
        from_attributes = True
