"""
Bootstrap Admin Script
Promotes an existing user (looked up by profile email) to admin.
Needed once per installation: only admins can change roles through the API.

Usage: python -m app.scripts.bootstrap_admin someone@example.com
"""

import sys

from app.config.permissions_config import AppRole
from app.database.supabase_client import get_service_supabase
from app.modules.audit.schemas import AuditAction
from app.modules.audit.service import AuditService
from app.modules.roles.service import RoleService
from supabase import Client
from typing import Optional
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def find_user_id_by_email(supabase: Client, email: str) -> Optional[str]:
    result = supabase.table("profiles")\
        .select("user_id")\
        .eq("email", email.strip().lower())\
        .limit(1)\
        .execute()
    return result.data[0]["user_id"] if result.data else None


def promote_to_admin(supabase: Client, email: str) -> bool:
    """Give the user with this email the admin role; audited with no actor"""
    user_id = find_user_id_by_email(supabase, email)
    if user_id is None:
        logger.error(f"No profile found for {email}; the user must sign in once first")
        return False

    previous, row = RoleService(supabase).set_role(user_id, AppRole.ADMIN)
    AuditService(supabase).record(
        actor_id=None,
        action=AuditAction.UPDATE,
        table_name="user_roles",
        record_id=row.id,
        old_data={"user_id": user_id, "role": previous.value if previous else None},
        new_data={"user_id": user_id, "role": row.role.value},
    )
    logger.info(f"{email} is now admin (was {previous.value if previous else 'unset'})")
    return True


def main():
    if len(sys.argv) != 2:
        print(__doc__)
        sys.exit(2)
    try:
        if not promote_to_admin(get_service_supabase(), sys.argv[1]):
            sys.exit(1)
    except Exception as e:
        logger.error(f"Error promoting {sys.argv[1]}: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
