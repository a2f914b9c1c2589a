from pydantic import BaseModel
from typing import List
from datetime import date


class ExpiringContract(BaseModel):
    id: str
    contract_number: str
    title: str
    end_date: date
    days_remaining: int


class DashboardSummary(BaseModel):
    total_contracts: int
    active_contracts: int
    expiring_contracts: int
    total_active_value: float
    active_suppliers: int
    pending_obligations: int
    expiry_days: int
    expiring: List[ExpiringContract]
