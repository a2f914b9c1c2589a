from supabase import Client
from app.core.errors import backend_error
from app.modules.contracts.schemas import ContractStatus
from app.modules.dashboard.schemas import DashboardSummary, ExpiringContract
from app.modules.obligations.schemas import OPEN_OBLIGATION_STATUSES
from datetime import date, timedelta
from typing import Optional
import logging

logger = logging.getLogger(__name__)


class DashboardService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def summary(self, expiry_days: int = 30, today: Optional[date] = None) -> DashboardSummary:
        """Headline figures for the home screen"""
        today = today or date.today()
        until = today + timedelta(days=expiry_days)
        try:
            contracts = self.supabase.table("contracts")\
                .select("id, contract_number, title, status, total_value, end_date")\
                .execute().data or []
            active_suppliers = self.supabase.table("suppliers")\
                .select("id")\
                .eq("is_active", True)\
                .execute().data or []
            pending_obligations = self.supabase.table("obligations")\
                .select("id")\
                .in_("status", [s.value for s in OPEN_OBLIGATION_STATUSES])\
                .execute().data or []
        except Exception as e:
            raise backend_error(e, "loading dashboard summary")

        active = [c for c in contracts if c.get("status") == ContractStatus.ATIVO.value]
        expiring = []
        for contract in active:
            end = date.fromisoformat(str(contract["end_date"])[:10])
            if today <= end <= until:
                expiring.append(ExpiringContract(
                    id=contract["id"],
                    contract_number=contract["contract_number"],
                    title=contract["title"],
                    end_date=end,
                    days_remaining=(end - today).days,
                ))
        expiring.sort(key=lambda c: c.end_date)

        return DashboardSummary(
            total_contracts=len(contracts),
            active_contracts=len(active),
            expiring_contracts=len(expiring),
            total_active_value=sum(float(c.get("total_value") or 0) for c in active),
            active_suppliers=len(active_suppliers),
            pending_obligations=len(pending_obligations),
            expiry_days=expiry_days,
            expiring=expiring,
        )
