"""
Core dependencies for route protection and permission checking
"""

from fastapi import Depends, Request, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from slowapi.util import get_remote_address
from app.config.permissions_config import Operation, permission_name
from app.core.errors import forbidden
from app.core.session import SessionContext
from app.database.supabase_client import get_supabase, create_user_client
from app.modules.auth.service import AuthService
from app.modules.roles.service import RoleService
from supabase import Client
from typing import Optional, Dict, Any, Union
import logging

logger = logging.getLogger(__name__)

security = HTTPBearer()

_ROLE_CACHE_KEY = "role"


def _get_request_cache(request: Request) -> Dict[str, Any]:
    """Return request-scoped cache for access data (resolved role)."""
    if not hasattr(request.state, "access_cache"):
        request.state.access_cache = {}
    return request.state.access_cache


def get_client_ip(request: Request) -> Optional[str]:
    """Peer address of the connection, the same key the rate limiter uses"""
    return get_remote_address(request) if request.client else None


def get_user_supabase(
    credentials: HTTPAuthorizationCredentials = Security(security)
) -> Client:
    """Per-request client acting as the caller, so RLS sees their auth.uid()"""
    return create_user_client(credentials.credentials)


def get_auth_service(supabase: Client = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase)


def get_role_service(supabase: Client = Depends(get_user_supabase)) -> RoleService:
    return RoleService(supabase)


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Security(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> dict:
    """Extract current user info from JWT token"""
    token = credentials.credentials
    return auth_service.get_current_user(token)


def get_session(
    request: Request,
    user_data: dict = Depends(get_current_user),
    role_service: RoleService = Depends(get_role_service)
) -> SessionContext:
    """Build the session context; the role is resolved once per request"""
    cache = _get_request_cache(request)
    if _ROLE_CACHE_KEY not in cache:
        cache[_ROLE_CACHE_KEY] = role_service.resolve_role(user_data["id"])
    return SessionContext(
        user_id=user_data["id"],
        email=user_data.get("email"),
        role=cache[_ROLE_CACHE_KEY],
        user_metadata=user_data.get("user_metadata") or {},
        client_ip=get_client_ip(request),
    )


def ensure_allowed(
    session: SessionContext,
    operation: Union[str, Operation],
    table: str,
    owner_id: Optional[str] = None
) -> SessionContext:
    """Raise a forbidden error unless the session may perform operation on table"""
    if not session.can(operation, table, owner_id=owner_id):
        logger.debug(
            "Denied %s for user %s (role=%s)",
            permission_name(table, operation),
            session.user_id,
            session.role.value if session.role else None,
        )
        raise forbidden()
    return session


def require_access(table: str, *operations: Union[str, Operation]):
    """Factory function to create a (table, operation) check dependency"""
    if not operations:
        raise ValueError("require_access needs at least one operation")

    def check_access(session: SessionContext = Depends(get_session)) -> SessionContext:
        """Dependency to check the session against the permission matrix"""
        for operation in operations:
            ensure_allowed(session, operation, table)
        return session
    return check_access


def require_admin(session: SessionContext = Depends(get_session)) -> SessionContext:
    if not session.is_admin:
        raise forbidden()
    return session
