from fastapi import APIRouter, Depends
from app.modules.roles.schemas import RoleUpdate
from app.modules.users.schemas import UserListResponse, RoleChangeResponse
from app.modules.users.service import UserAdminService
from app.config.permissions_config import Operation
from app.core.dependencies import get_user_supabase, require_admin, require_access
from app.core.session import SessionContext
from supabase import Client
from typing import Optional

router = APIRouter(prefix="/users", tags=["users"])


def get_user_admin_service(supabase: Client = Depends(get_user_supabase)) -> UserAdminService:
    return UserAdminService(supabase)


@router.get("", response_model=UserListResponse)
async def list_users(
    search: Optional[str] = None,
    role: Optional[str] = None,
    session: SessionContext = Depends(require_admin),
    service: UserAdminService = Depends(get_user_admin_service)
):
    """List users with their role (admin only)"""
    return service.list_users(search=search, role=role)


@router.put("/{user_id}/role", response_model=RoleChangeResponse)
async def change_user_role(
    user_id: str,
    role_data: RoleUpdate,
    session: SessionContext = Depends(require_access("user_roles", Operation.UPDATE)),
    service: UserAdminService = Depends(get_user_admin_service)
):
    """Change the role of another user (admin only; changing your own role is rejected)"""
    return service.change_role(session, user_id, role_data.role)
