from fastapi import APIRouter, Depends
from app.modules.suppliers.schemas import SupplierCreate, SupplierUpdate, SupplierResponse
from app.modules.suppliers.service import SupplierService
from app.config.permissions_config import Operation
from app.core.dependencies import get_user_supabase, require_access
from app.core.session import SessionContext
from supabase import Client
from typing import List, Optional

router = APIRouter(prefix="/suppliers", tags=["suppliers"])


def get_supplier_service(supabase: Client = Depends(get_user_supabase)) -> SupplierService:
    return SupplierService(supabase)


@router.post("", response_model=SupplierResponse, status_code=201)
async def create_supplier(
    supplier_data: SupplierCreate,
    session: SessionContext = Depends(require_access("suppliers", Operation.INSERT)),
    service: SupplierService = Depends(get_supplier_service)
):
    """Create a supplier (admin/gestor)"""
    return service.create(session, supplier_data)


@router.get("", response_model=List[SupplierResponse])
async def list_suppliers(
    search: Optional[str] = None,
    is_active: Optional[bool] = None,
    category: Optional[str] = None,
    limit: int = 100,
    offset: int = 0,
    session: SessionContext = Depends(require_access("suppliers", Operation.SELECT)),
    service: SupplierService = Depends(get_supplier_service)
):
    """List suppliers"""
    return service.list(limit=limit, offset=offset, search=search, is_active=is_active, category=category)


@router.get("/{supplier_id}", response_model=SupplierResponse)
async def get_supplier(
    supplier_id: str,
    session: SessionContext = Depends(require_access("suppliers", Operation.SELECT)),
    service: SupplierService = Depends(get_supplier_service)
):
    """Get supplier by ID"""
    return service.get(supplier_id)


@router.put("/{supplier_id}", response_model=SupplierResponse)
async def update_supplier(
    supplier_id: str,
    supplier_data: SupplierUpdate,
    session: SessionContext = Depends(require_access("suppliers", Operation.UPDATE)),
    service: SupplierService = Depends(get_supplier_service)
):
    """Update supplier (admin/gestor)"""
    return service.update(session, supplier_id, supplier_data)


@router.delete("/{supplier_id}", status_code=204)
async def delete_supplier(
    supplier_id: str,
    session: SessionContext = Depends(require_access("suppliers", Operation.DELETE)),
    service: SupplierService = Depends(get_supplier_service)
):
    """Delete supplier (admin only)"""
    service.delete(session, supplier_id)
    return None
