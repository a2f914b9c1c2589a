from fastapi import APIRouter, Depends
from app.modules.payments.schemas import (
    PaymentCreate, PaymentUpdate, PaymentResponse, PaymentStatus
)
from app.modules.payments.service import PaymentService
from app.config.permissions_config import Operation
from app.core.dependencies import get_user_supabase, require_access
from app.core.session import SessionContext
from supabase import Client
from typing import List, Optional

router = APIRouter(prefix="/payments", tags=["payments"])


def get_payment_service(supabase: Client = Depends(get_user_supabase)) -> PaymentService:
    return PaymentService(supabase)


@router.post("", response_model=PaymentResponse, status_code=201)
async def create_payment(
    payment_data: PaymentCreate,
    session: SessionContext = Depends(require_access("payments", Operation.INSERT)),
    service: PaymentService = Depends(get_payment_service)
):
    """Register a payment for a contract (admin/gestor)"""
    return service.create(session, payment_data)


@router.get("", response_model=List[PaymentResponse])
async def list_payments(
    contract_id: Optional[str] = None,
    status: Optional[PaymentStatus] = None,
    limit: int = 100,
    offset: int = 0,
    session: SessionContext = Depends(require_access("payments", Operation.SELECT)),
    service: PaymentService = Depends(get_payment_service)
):
    """List payments ordered by due date"""
    return service.list(limit=limit, offset=offset, contract_id=contract_id, status=status)


@router.get("/{payment_id}", response_model=PaymentResponse)
async def get_payment(
    payment_id: str,
    session: SessionContext = Depends(require_access("payments", Operation.SELECT)),
    service: PaymentService = Depends(get_payment_service)
):
    """Get payment by ID"""
    return service.get(payment_id)


@router.put("/{payment_id}", response_model=PaymentResponse)
async def update_payment(
    payment_id: str,
    payment_data: PaymentUpdate,
    session: SessionContext = Depends(require_access("payments", Operation.UPDATE)),
    service: PaymentService = Depends(get_payment_service)
):
    """Update payment (admin/gestor); marking it paid stamps payment_date"""
    return service.update(session, payment_id, payment_data)


@router.delete("/{payment_id}", status_code=204)
async def delete_payment(
    payment_id: str,
    session: SessionContext = Depends(require_access("payments", Operation.DELETE)),
    service: PaymentService = Depends(get_payment_service)
):
    """Delete payment (admin only)"""
    service.delete(session, payment_id)
    return None
