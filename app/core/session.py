"""
Per-request session context.

Built once per request by app.core.dependencies.get_session and passed
explicitly to handlers and services, so authorization can be exercised
without any ambient global state.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

from app.config.permissions_config import (
    AppRole,
    Operation,
    can_edit,
    is_admin,
    is_allowed,
)


@dataclass(frozen=True)
class SessionContext:
    user_id: str
    email: Optional[str] = None
    role: Optional[AppRole] = None  # None when resolution failed
    user_metadata: Dict[str, Any] = field(default_factory=dict)
    client_ip: Optional[str] = None

    @property
    def can_edit(self) -> bool:
        return can_edit(self.role)

    @property
    def is_admin(self) -> bool:
        return is_admin(self.role)

    def can(
        self,
        operation: Union[str, Operation],
        table: str,
        owner_id: Optional[str] = None,
    ) -> bool:
        return is_allowed(self.role, operation, table, is_owner=owner_id == self.user_id)
