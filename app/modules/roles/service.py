from supabase import Client
from app.config.permissions_config import (
    AppRole,
    DEFAULT_ROLE,
    coerce_role,
    can_edit,
    is_admin,
    permissions_for_role,
)
from app.core.errors import backend_error
from app.modules.roles.schemas import UserRoleResponse, CapabilitiesResponse
from typing import Optional, List, Tuple
import logging

logger = logging.getLogger(__name__)


def get_capabilities(role: Optional[AppRole]) -> CapabilitiesResponse:
    """Derive capability flags from a resolved role (None fails closed)"""
    return CapabilitiesResponse(
        role=role,
        can_edit=can_edit(role),
        is_admin=is_admin(role),
        permissions=permissions_for_role(role),
    )


class RoleService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def resolve_role(self, user_id: str) -> Optional[AppRole]:
        """
        Resolve the single role of a user.

        No role row means the default viewer role. A failed lookup or an
        unrecognised stored value returns None so callers deny edit capability.
        """
        try:
            result = self.supabase.table("user_roles")\
                .select("role, created_at")\
                .eq("user_id", user_id)\
                .order("created_at", desc=True)\
                .limit(1)\
                .execute()
        except Exception as e:
            logger.error(f"Error resolving role for user {user_id}: {e}")
            return None
        if not result.data:
            return DEFAULT_ROLE
        role = coerce_role(result.data[0].get("role"))
        if role is None:
            logger.warning(f"Unrecognised role value for user {user_id}: {result.data[0].get('role')}")
        return role

    def has_role(self, user_id: str, role: AppRole) -> bool:
        """Mirror of the backend has_role function"""
        try:
            result = self.supabase.rpc(
                "has_role", {"_user_id": user_id, "_role": AppRole(role).value}
            ).execute()
            return bool(result.data)
        except Exception as e:
            logger.error(f"Error checking role {role} for user {user_id}: {e}")
            return False

    def get_user_role(self, user_id: str) -> Optional[AppRole]:
        """Mirror of the backend get_user_role function; None when the call fails"""
        try:
            result = self.supabase.rpc("get_user_role", {"_user_id": user_id}).execute()
        except Exception as e:
            logger.error(f"Error calling get_user_role for user {user_id}: {e}")
            return None
        return coerce_role(result.data) if result.data else DEFAULT_ROLE

    def get_role_rows(self, user_ids: Optional[List[str]] = None) -> List[dict]:
        try:
            query = self.supabase.table("user_roles").select("*")
            if user_ids is not None:
                if not user_ids:
                    return []
                query = query.in_("user_id", user_ids)
            result = query.execute()
            return result.data or []
        except Exception as e:
            raise backend_error(e, "listing user roles")

    def set_role(self, user_id: str, role: AppRole) -> Tuple[Optional[AppRole], UserRoleResponse]:
        """
        Replace the role of a user, keeping exactly one role row.
        Returns the previous role (None when the user had no row) and the new row.
        """
        role = AppRole(role)
        try:
            existing = self.supabase.table("user_roles")\
                .select("role")\
                .eq("user_id", user_id)\
                .execute()
            previous = coerce_role(existing.data[0]["role"]) if existing.data else None

            result = self.supabase.table("user_roles")\
                .upsert({"user_id": user_id, "role": role.value}, on_conflict="user_id")\
                .execute()

            # Rows left over from the old multi-role schema
            self.supabase.table("user_roles")\
                .delete()\
                .eq("user_id", user_id)\
                .neq("role", role.value)\
                .execute()
        except Exception as e:
            raise backend_error(e, f"setting role for user {user_id}")

        if not result.data:
            raise backend_error(RuntimeError("upsert returned no rows"), f"setting role for user {user_id}")

        logger.info(f"Role of user {user_id} changed from {previous.value if previous else None} to {role.value}")
        return previous, UserRoleResponse(**result.data[0])
