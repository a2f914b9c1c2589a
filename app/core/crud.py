"""
Base service for the domain tables (suppliers, contracts, obligations,
payments, documents).

Every mutation re-checks the permission matrix against the session before
touching the backend, and records an audit entry with before/after snapshots
once the backend has accepted it.
"""

from supabase import Client
from pydantic import BaseModel
from app.config.permissions_config import Operation
from app.core.dependencies import ensure_allowed
from app.core.errors import backend_error, not_found
from app.core.session import SessionContext
from app.modules.audit.service import AuditService
from app.modules.audit.schemas import AuditAction
from typing import Any, Dict, List, Optional, Type
from datetime import datetime, timezone


def ilike_value(term: str) -> str:
    """
    Quoted PostgREST value matching `term` literally anywhere in a column.

    LIKE wildcards in the term are escaped, and the whole pattern is wrapped in
    double quotes so `,.:()` inside it cannot break an `or=` expression.
    PostgREST rewrites `*` to `%`, so an asterisk matches any single character.
    """
    pattern = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_").replace("*", "_")
    quoted = pattern.replace("\\", "\\\\").replace('"', '\\"')
    return f'"%{quoted}%"'


def search_clauses(columns: List[str], term: str) -> List[str]:
    """One case-insensitive substring clause per column, for use inside or_()"""
    value = ilike_value(term)
    return [f"{column}.ilike.{value}" for column in columns]


class DomainTableService:
    table: str = ""
    response_model: Type[BaseModel] = BaseModel
    owner_field: str = "created_by"
    order_by: str = "created_at"
    order_desc: bool = True
    has_updated_at: bool = True
    not_found_message: Optional[str] = None

    def __init__(self, supabase: Client, audit: Optional[AuditService] = None):
        self.supabase = supabase
        self.audit = audit or AuditService(supabase)

    # Hooks for subclasses

    def apply_filters(self, query, filters: Dict[str, Any]):
        return query

    def prepare_insert(self, session: SessionContext, row: Dict[str, Any]) -> Dict[str, Any]:
        return row

    def prepare_update(self, old: Dict[str, Any], changes: Dict[str, Any]) -> Dict[str, Any]:
        return changes

    # Helpers

    def _check(self, session: SessionContext, operation: Operation):
        ensure_allowed(session, operation, self.table)

    def _not_found(self):
        return not_found(self.not_found_message)

    # Reads

    def list(
        self,
        limit: int = 100,
        offset: int = 0,
        order_by: Optional[str] = None,
        desc: Optional[bool] = None,
        **filters
    ) -> List[BaseModel]:
        try:
            query = self.supabase.table(self.table).select("*")
            query = self.apply_filters(query, {k: v for k, v in filters.items() if v is not None})
            result = query.order(order_by or self.order_by, desc=self.order_desc if desc is None else desc)\
                .limit(limit)\
                .offset(offset)\
                .execute()
        except Exception as e:
            raise backend_error(e, f"listing {self.table}")
        return [self.response_model(**row) for row in result.data or []]

    def find_row(self, record_id: str) -> Optional[Dict[str, Any]]:
        try:
            result = self.supabase.table(self.table)\
                .select("*")\
                .eq("id", record_id)\
                .limit(1)\
                .execute()
        except Exception as e:
            raise backend_error(e, f"loading {self.table}/{record_id}")
        return result.data[0] if result.data else None

    def get(self, record_id: str) -> BaseModel:
        row = self.find_row(record_id)
        if row is None:
            raise self._not_found()
        return self.response_model(**row)

    # Mutations

    def create(self, session: SessionContext, data: BaseModel) -> BaseModel:
        self._check(session, Operation.INSERT)
        row = data.model_dump(mode="json")
        row[self.owner_field] = session.user_id
        row = self.prepare_insert(session, row)
        try:
            result = self.supabase.table(self.table).insert(row).execute()
        except Exception as e:
            raise backend_error(e, f"creating {self.table}")
        if not result.data:
            raise backend_error(RuntimeError("insert returned no rows"), f"creating {self.table}")
        created = result.data[0]
        self.audit.record_change(session, AuditAction.INSERT, self.table, created.get("id"), None, created)
        return self.response_model(**created)

    def update(self, session: SessionContext, record_id: str, data: BaseModel) -> BaseModel:
        self._check(session, Operation.UPDATE)
        old = self.find_row(record_id)
        if old is None:
            raise self._not_found()
        changes = self.prepare_update(old, data.model_dump(mode="json", exclude_unset=True))
        if self.has_updated_at:
            changes["updated_at"] = datetime.now(timezone.utc).isoformat()
        try:
            result = self.supabase.table(self.table)\
                .update(changes)\
                .eq("id", record_id)\
                .execute()
        except Exception as e:
            raise backend_error(e, f"updating {self.table}/{record_id}")
        if not result.data:
            raise self._not_found()
        updated = result.data[0]
        self.audit.record_change(session, AuditAction.UPDATE, self.table, record_id, old, updated)
        return self.response_model(**updated)

    def delete(self, session: SessionContext, record_id: str) -> Dict[str, Any]:
        """Delete a row and return its last state"""
        self._check(session, Operation.DELETE)
        old = self.find_row(record_id)
        if old is None:
            raise self._not_found()
        try:
            self.supabase.table(self.table)\
                .delete()\
                .eq("id", record_id)\
                .execute()
        except Exception as e:
            raise backend_error(e, f"deleting {self.table}/{record_id}")
        self.audit.record_change(session, AuditAction.DELETE, self.table, record_id, old, None)
        return old
