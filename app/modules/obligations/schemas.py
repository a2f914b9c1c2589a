from enum import Enum
from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import date, datetime
from uuid import UUID


class ObligationStatus(str, Enum):
    PENDENTE = "pendente"
    EM_ANDAMENTO = "em_andamento"
    CONCLUIDO = "concluido"
    ATRASADO = "atrasado"


OPEN_OBLIGATION_STATUSES = (ObligationStatus.PENDENTE, ObligationStatus.EM_ANDAMENTO)


class ObligationCreate(BaseModel):
    contract_id: UUID
    title: str = Field(min_length=1, max_length=200)
    obligation_type: str = Field(min_length=1)
    due_date: date
    description: Optional[str] = Field(default=None, max_length=2000)
    status: ObligationStatus = ObligationStatus.PENDENTE
    responsible_id: Optional[UUID] = None
    notes: Optional[str] = Field(default=None, max_length=2000)

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, value):
        return value.strip() if isinstance(value, str) else value


class ObligationUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    obligation_type: Optional[str] = Field(default=None, min_length=1)
    due_date: Optional[date] = None
    description: Optional[str] = Field(default=None, max_length=2000)
    status: Optional[ObligationStatus] = None
    responsible_id: Optional[UUID] = None
    completed_at: Optional[datetime] = None
    notes: Optional[str] = Field(default=None, max_length=2000)

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, value):
        return value.strip() if isinstance(value, str) else value


class ObligationResponse(BaseModel):
    id: str
    contract_id: str
    title: str
    description: Optional[str] = None
    obligation_type: str
    due_date: date
    status: ObligationStatus
    responsible_id: Optional[str] = None
    completed_at: Optional[datetime] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
    created_by: Optional[str] = None

    class Config:
        from_attributes = True
