from supabase import Client
from app.config.permissions_config import AppRole, DEFAULT_ROLE, coerce_role
from app.core.errors import forbidden, not_found
from app.core.session import SessionContext
from app.modules.audit.schemas import AuditAction
from app.modules.audit.service import AuditService
from app.modules.profiles.service import ProfileService
from app.modules.roles.service import RoleService
from app.modules.users.schemas import UserWithRole, UserStats, UserListResponse, RoleChangeResponse
from typing import List, Optional
import logging

logger = logging.getLogger(__name__)


def filter_users(
    users: List[UserWithRole],
    search: Optional[str] = None,
    role: Optional[str] = None
) -> List[UserWithRole]:
    """Case-insensitive search over name, email and department, plus an exact role match"""
    term = (search or "").strip().lower()
    filtered = []
    for user in users:
        if term and not any(v and term in v.lower() for v in (user.full_name, user.email, user.department)):
            continue
        if role and role != "all" and user.role.value != role:
            continue
        filtered.append(user)
    return filtered


def user_stats(users: List[UserWithRole]) -> UserStats:
    return UserStats(
        total=len(users),
        admins=sum(1 for u in users if u.role == AppRole.ADMIN),
        gestors=sum(1 for u in users if u.role == AppRole.GESTOR),
        viewers=sum(1 for u in users if u.role == AppRole.VISUALIZADOR),
    )


class UserAdminService:
    def __init__(self, supabase: Client, audit: Optional[AuditService] = None):
        self.supabase = supabase
        self.profiles = ProfileService(supabase)
        self.roles = RoleService(supabase)
        self.audit = audit or AuditService(supabase)

    def list_users(self, search: Optional[str] = None, role: Optional[str] = None) -> UserListResponse:
        """Profiles with their role, ordered by name. Stats cover all users."""
        profiles = self.profiles.list_profiles()
        roles = {}
        for row in self.roles.get_role_rows():
            roles[row["user_id"]] = coerce_role(row.get("role")) or DEFAULT_ROLE

        users = [
            UserWithRole(
                id=profile.id,
                user_id=profile.user_id,
                full_name=profile.full_name,
                email=profile.email,
                department=profile.department,
                avatar_url=profile.avatar_url,
                role=roles.get(profile.user_id, DEFAULT_ROLE),
                created_at=profile.created_at,
            )
            for profile in profiles
        ]
        return UserListResponse(users=filter_users(users, search, role), stats=user_stats(users))

    def change_role(self, session: SessionContext, user_id: str, role: AppRole) -> RoleChangeResponse:
        """Replace the role of another user and audit the change"""
        if user_id == session.user_id:
            logger.warning(f"User {session.user_id} tried to change their own role")
            raise forbidden("Você não pode alterar sua própria função.")

        if self.profiles.find_profile(user_id) is None:
            raise not_found("Usuário não encontrado.")

        previous, row = self.roles.set_role(user_id, role)
        self.audit.record_change(
            session,
            AuditAction.UPDATE,
            "user_roles",
            row.id,
            {"user_id": user_id, "role": previous.value if previous else None},
            {"user_id": user_id, "role": row.role.value},
        )
        return RoleChangeResponse(user_id=user_id, previous_role=previous, role=row.role)
