from pydantic import BaseModel
from typing import Optional, List, Dict
from datetime import datetime

from app.config.permissions_config import AppRole


class UserRoleResponse(BaseModel):
    id: str
    user_id: str
    role: AppRole
    created_at: datetime

    class Config:
        from_attributes = True


class RoleUpdate(BaseModel):
    role: AppRole


class CapabilitiesResponse(BaseModel):
    role: Optional[AppRole] = None
    can_edit: bool
    is_admin: bool
    permissions: List[str]


class PermissionMatrixResponse(BaseModel):
    tables: Dict[str, Dict[str, str]]
    roles: Dict[str, List[str]]
