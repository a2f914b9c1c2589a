from enum import Enum
from pydantic import BaseModel
from typing import Optional, List, Any
from datetime import datetime

SYSTEM_ACTOR_LABEL = "System"


class AuditAction(str, Enum):
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


class AuditLogEntry(BaseModel):
    id: str
    user_id: Optional[str] = None
    action: str
    table_name: str
    record_id: Optional[str] = None
    old_data: Optional[Any] = None
    new_data: Optional[Any] = None
    ip_address: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class AuditLogView(AuditLogEntry):
    user_name: str = SYSTEM_ACTOR_LABEL


class AuditSummary(BaseModel):
    total: int
    inserts: int
    updates: int
    deletes: int
    tables: List[str]


class AuditLogListResponse(BaseModel):
    entries: List[AuditLogView]
    summary: AuditSummary
    limit: int
