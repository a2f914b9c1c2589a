from fastapi import APIRouter, Depends, Query
from app.modules.contracts.schemas import ContractCreate, ContractUpdate, ContractResponse, ContractStatus
from app.modules.contracts.service import ContractService
from app.config.permissions_config import Operation
from app.core.dependencies import get_user_supabase, require_access
from app.core.session import SessionContext
from supabase import Client
from typing import List, Optional

router = APIRouter(prefix="/contracts", tags=["contracts"])


def get_contract_service(supabase: Client = Depends(get_user_supabase)) -> ContractService:
    return ContractService(supabase)


@router.post("", response_model=ContractResponse, status_code=201)
async def create_contract(
    contract_data: ContractCreate,
    session: SessionContext = Depends(require_access("contracts", Operation.INSERT)),
    service: ContractService = Depends(get_contract_service)
):
    """Create a contract (admin/gestor)"""
    return service.create(session, contract_data)


@router.get("", response_model=List[ContractResponse])
async def list_contracts(
    status: Optional[ContractStatus] = None,
    supplier_id: Optional[str] = None,
    search: Optional[str] = None,
    expiring_within_days: Optional[int] = Query(default=None, ge=1, le=365),
    limit: int = 100,
    offset: int = 0,
    session: SessionContext = Depends(require_access("contracts", Operation.SELECT)),
    service: ContractService = Depends(get_contract_service)
):
    """List contracts, optionally filtered by status, supplier, text or upcoming expiry"""
    return service.list(
        limit=limit,
        offset=offset,
        status=status,
        supplier_id=supplier_id,
        search=search,
        expiring_within_days=expiring_within_days,
    )


@router.get("/{contract_id}", response_model=ContractResponse)
async def get_contract(
    contract_id: str,
    session: SessionContext = Depends(require_access("contracts", Operation.SELECT)),
    service: ContractService = Depends(get_contract_service)
):
    """Get contract by ID"""
    return service.get(contract_id)


@router.put("/{contract_id}", response_model=ContractResponse)
async def update_contract(
    contract_id: str,
    contract_data: ContractUpdate,
    session: SessionContext = Depends(require_access("contracts", Operation.UPDATE)),
    service: ContractService = Depends(get_contract_service)
):
    """Update contract (admin/gestor)"""
    return service.update(session, contract_id, contract_data)


@router.delete("/{contract_id}", status_code=204)
async def delete_contract(
    contract_id: str,
    session: SessionContext = Depends(require_access("contracts", Operation.DELETE)),
    service: ContractService = Depends(get_contract_service)
):
    """Delete contract and, by cascade, its documents, obligations and payments (admin only)"""
    service.delete(session, contract_id)
    return None
