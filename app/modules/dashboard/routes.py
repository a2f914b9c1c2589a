from fastapi import APIRouter, Depends, Query
from app.modules.dashboard.schemas import DashboardSummary
from app.modules.dashboard.service import DashboardService
from app.core.dependencies import get_user_supabase, get_session
from app.core.session import SessionContext
from supabase import Client

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


def get_dashboard_service(supabase: Client = Depends(get_user_supabase)) -> DashboardService:
    return DashboardService(supabase)


@router.get("/summary", response_model=DashboardSummary)
async def get_summary(
    expiry_days: int = Query(30, ge=1, le=365),
    session: SessionContext = Depends(get_session),
    service: DashboardService = Depends(get_dashboard_service)
):
    """Contract, supplier and obligation figures (any authenticated user)"""
    return service.summary(expiry_days)
