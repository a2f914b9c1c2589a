from fastapi import APIRouter, Depends
from app.modules.obligations.schemas import (
    ObligationCreate, ObligationUpdate, ObligationResponse, ObligationStatus
)
from app.modules.obligations.service import ObligationService
from app.config.permissions_config import Operation
from app.core.dependencies import get_user_supabase, require_access
from app.core.session import SessionContext
from supabase import Client
from typing import List, Optional

router = APIRouter(prefix="/obligations", tags=["obligations"])


def get_obligation_service(supabase: Client = Depends(get_user_supabase)) -> ObligationService:
    return ObligationService(supabase)


@router.post("", response_model=ObligationResponse, status_code=201)
async def create_obligation(
    obligation_data: ObligationCreate,
    session: SessionContext = Depends(require_access("obligations", Operation.INSERT)),
    service: ObligationService = Depends(get_obligation_service)
):
    """Create an obligation for a contract (admin/gestor)"""
    return service.create(session, obligation_data)


@router.get("", response_model=List[ObligationResponse])
async def list_obligations(
    contract_id: Optional[str] = None,
    status: Optional[ObligationStatus] = None,
    limit: int = 100,
    offset: int = 0,
    session: SessionContext = Depends(require_access("obligations", Operation.SELECT)),
    service: ObligationService = Depends(get_obligation_service)
):
    """List obligations ordered by due date"""
    return service.list(limit=limit, offset=offset, contract_id=contract_id, status=status)


@router.get("/{obligation_id}", response_model=ObligationResponse)
async def get_obligation(
    obligation_id: str,
    session: SessionContext = Depends(require_access("obligations", Operation.SELECT)),
    service: ObligationService = Depends(get_obligation_service)
):
    """Get obligation by ID"""
    return service.get(obligation_id)


@router.put("/{obligation_id}", response_model=ObligationResponse)
async def update_obligation(
    obligation_id: str,
    obligation_data: ObligationUpdate,
    session: SessionContext = Depends(require_access("obligations", Operation.UPDATE)),
    service: ObligationService = Depends(get_obligation_service)
):
    """Update obligation (admin/gestor); completing it stamps completed_at"""
    return service.update(session, obligation_id, obligation_data)


@router.delete("/{obligation_id}", status_code=204)
async def delete_obligation(
    obligation_id: str,
    session: SessionContext = Depends(require_access("obligations", Operation.DELETE)),
    service: ObligationService = Depends(get_obligation_service)
):
    """Delete obligation (admin only)"""
    service.delete(session, obligation_id)
    return None
