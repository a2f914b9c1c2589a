from supabase import Client
from fastapi.encoders import jsonable_encoder
from app.config import settings
from app.core.errors import backend_error, not_found
from app.core.session import SessionContext
from app.modules.audit.schemas import (
    AuditAction, AuditLogEntry, AuditLogView, AuditSummary, SYSTEM_ACTOR_LABEL
)
from app.modules.profiles.service import ProfileService
from typing import Any, Iterable, List, Optional, Union
import logging

logger = logging.getLogger(__name__)

_ALL = "all"


def _snapshot(data: Any) -> Any:
    if data is None:
        return None
    if hasattr(data, "model_dump"):
        return data.model_dump(mode="json")
    return jsonable_encoder(data)


def filter_entries(
    entries: Iterable[AuditLogView],
    search: Optional[str] = None,
    action: Optional[str] = None,
    table_name: Optional[str] = None,
) -> List[AuditLogView]:
    """
    Filter audit entries, preserving order.

    search is a case-insensitive substring match over actor name, table name
    and record id; action and table_name must match exactly. None, "" and
    "all" disable a filter.
    """
    term = (search or "").strip().lower()
    filtered = []
    for entry in entries:
        if term:
            haystacks = (entry.user_name, entry.table_name, entry.record_id)
            if not any(h and term in h.lower() for h in haystacks):
                continue
        if action and action != _ALL and entry.action != action:
            continue
        if table_name and table_name != _ALL and entry.table_name != table_name:
            continue
        filtered.append(entry)
    return filtered


def summarize(entries: List[AuditLogView]) -> AuditSummary:
    tables = []
    for entry in entries:
        if entry.table_name not in tables:
            tables.append(entry.table_name)
    return AuditSummary(
        total=len(entries),
        inserts=sum(1 for e in entries if e.action == AuditAction.INSERT.value),
        updates=sum(1 for e in entries if e.action == AuditAction.UPDATE.value),
        deletes=sum(1 for e in entries if e.action == AuditAction.DELETE.value),
        tables=tables,
    )


class AuditService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def record(
        self,
        actor_id: Optional[str],
        action: Union[AuditAction, str],
        table_name: str,
        record_id: Optional[str] = None,
        old_data: Any = None,
        new_data: Any = None,
        ip_address: Optional[str] = None,
    ) -> Optional[AuditLogEntry]:
        """
        Append one audit entry. A failure is logged and does not propagate:
        the audited mutation has already been applied.
        """
        row = {
            "user_id": actor_id,
            "action": AuditAction(action).value,
            "table_name": table_name,
            "record_id": str(record_id) if record_id is not None else None,
            "old_data": _snapshot(old_data),
            "new_data": _snapshot(new_data),
            "ip_address": ip_address,
        }
        try:
            result = self.supabase.table("audit_logs").insert(row).execute()
        except Exception as e:
            logger.error(f"Failed to record audit entry {row['action']} on {table_name}/{record_id}: {e}")
            return None
        if not result.data:
            return None
        return AuditLogEntry(**result.data[0])

    def record_change(
        self,
        session: SessionContext,
        action: Union[AuditAction, str],
        table_name: str,
        record_id: Optional[str],
        old_data: Any = None,
        new_data: Any = None,
    ) -> Optional[AuditLogEntry]:
        return self.record(
            actor_id=session.user_id,
            action=action,
            table_name=table_name,
            record_id=record_id,
            old_data=old_data,
            new_data=new_data,
            ip_address=session.client_ip,
        )

    @staticmethod
    def effective_limit(limit: Optional[int] = None) -> int:
        cap = settings.audit_log_limit
        return cap if limit is None else max(1, min(limit, cap))

    def list_recent(self, limit: Optional[int] = None) -> List[AuditLogView]:
        """Most recent entries, newest first, with actor display names"""
        limit = self.effective_limit(limit)
        try:
            result = self.supabase.table("audit_logs")\
                .select("*")\
                .order("created_at", desc=True)\
                .limit(limit)\
                .execute()
        except Exception as e:
            raise backend_error(e, "loading audit logs")

        names = ProfileService(self.supabase).get_display_names()
        entries = []
        for row in (result.data or [])[:limit]:
            name = names.get(row.get("user_id")) if row.get("user_id") else None
            entries.append(AuditLogView(**row, user_name=name or SYSTEM_ACTOR_LABEL))
        return entries

    def get_entry(self, entry_id: str) -> AuditLogView:
        try:
            result = self.supabase.table("audit_logs")\
                .select("*")\
                .eq("id", entry_id)\
                .limit(1)\
                .execute()
        except Exception as e:
            raise backend_error(e, f"loading audit entry {entry_id}")
        if not result.data:
            raise not_found()
        row = result.data[0]
        actor = row.get("user_id")
        name = ProfileService(self.supabase).find_profile(actor) if actor else None
        return AuditLogView(**row, user_name=(name.full_name if name and name.full_name else SYSTEM_ACTOR_LABEL))
