from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime

from app.config.permissions_config import AppRole


class UserWithRole(BaseModel):
    id: str
    user_id: str
    full_name: str
    email: Optional[str] = None
    department: Optional[str] = None
    avatar_url: Optional[str] = None
    role: AppRole
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class UserStats(BaseModel):
    total: int
    admins: int
    gestors: int
    viewers: int


class UserListResponse(BaseModel):
    users: List[UserWithRole]
    stats: UserStats


class RoleChangeResponse(BaseModel):
    user_id: str
    previous_role: Optional[AppRole] = None
    role: AppRole
