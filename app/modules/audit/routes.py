from fastapi import APIRouter, Depends
from app.modules.audit.schemas import AuditLogListResponse, AuditLogView
from app.modules.audit.service import AuditService, filter_entries, summarize
from app.config.permissions_config import Operation
from app.core.dependencies import get_user_supabase, require_access
from app.core.session import SessionContext
from supabase import Client
from typing import Optional

router = APIRouter(prefix="/audit-logs", tags=["audit"])


def get_audit_service(supabase: Client = Depends(get_user_supabase)) -> AuditService:
    return AuditService(supabase)


@router.get("", response_model=AuditLogListResponse)
async def list_audit_logs(
    search: Optional[str] = None,
    action: Optional[str] = None,
    table_name: Optional[str] = None,
    limit: Optional[int] = None,
    session: SessionContext = Depends(require_access("audit_logs", Operation.SELECT)),
    service: AuditService = Depends(get_audit_service)
):
    """Recent audit entries (admin only). Stats cover every loaded entry, not just the filtered ones."""
    entries = service.list_recent(limit)
    return AuditLogListResponse(
        entries=filter_entries(entries, search=search, action=action, table_name=table_name),
        summary=summarize(entries),
        limit=service.effective_limit(limit),
    )


@router.get("/{entry_id}", response_model=AuditLogView)
async def get_audit_log(
    entry_id: str,
    session: SessionContext = Depends(require_access("audit_logs", Operation.SELECT)),
    service: AuditService = Depends(get_audit_service)
):
    """Full details of one audit entry (admin only)"""
    return service.get_entry(entry_id)
