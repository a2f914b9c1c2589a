"""
Signup provisioning.

A new identity needs exactly one profile, one role (viewer) and one
notification-settings row. provision() creates whatever is missing, never
duplicates what exists, and deletes the rows it created itself if a later
step fails, so a partially provisioned identity is never left behind.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple
import logging

from postgrest.exceptions import APIError
from supabase import Client

from app.config.permissions_config import DEFAULT_ROLE
from app.modules.notification_settings.service import default_settings_row

logger = logging.getLogger(__name__)

PROVISIONED_TABLES = ("profiles", "user_roles", "notification_settings")


class ProvisioningError(Exception):
    """Provisioning failed; rows created by the failed run were removed"""


@dataclass
class ProvisioningResult:
    user_id: str
    created: List[str] = field(default_factory=list)

    @property
    def is_new(self) -> bool:
        return bool(self.created)


class ProvisioningService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _rows_for(self, user_id: str, email: str, full_name: Optional[str]) -> List[Tuple[str, dict]]:
        return [
            ("profiles", {
                "user_id": user_id,
                "full_name": (full_name or "").strip(),
                "email": email,
                "department": None,
                "phone": None,
            }),
            ("user_roles", {"user_id": user_id, "role": DEFAULT_ROLE.value}),
            ("notification_settings", default_settings_row(user_id)),
        ]

    def _exists(self, table: str, user_id: str) -> bool:
        result = self.supabase.table(table)\
            .select("id")\
            .eq("user_id", user_id)\
            .limit(1)\
            .execute()
        return bool(result.data)

    def _insert(self, table: str, row: dict) -> Optional[str]:
        """Insert a row and return its id, or None if a concurrent run created it first"""
        try:
            result = self.supabase.table(table).insert(row).execute()
        except APIError as e:
            if str(e.code) == "23505":
                logger.info(f"{table} row for user {row['user_id']} created concurrently")
                return None
            raise
        if not result.data:
            raise RuntimeError(f"Insert into {table} returned no rows")
        return result.data[0]["id"]

    def _rollback(self, user_id: str, created: List[Tuple[str, str]]):
        for table, row_id in reversed(created):
            try:
                self.supabase.table(table).delete().eq("id", row_id).execute()
            except Exception as e:
                logger.error(f"Could not roll back {table} row {row_id} for user {user_id}: {e}")

    def provision(self, user_id: str, email: str, full_name: Optional[str] = None) -> ProvisioningResult:
        """Ensure profile, role and notification settings exist for an identity"""
        created: List[Tuple[str, str]] = []
        try:
            for table, row in self._rows_for(user_id, email, full_name):
                if self._exists(table, user_id):
                    continue
                row_id = self._insert(table, row)
                if row_id is not None:
                    created.append((table, row_id))
        except Exception as e:
            logger.error(f"Provisioning failed for user {user_id}: {e}")
            self._rollback(user_id, created)
            raise ProvisioningError(f"Provisioning failed for user {user_id}") from e

        result = ProvisioningResult(user_id=user_id, created=[table for table, _ in created])
        if result.is_new:
            logger.info(f"Provisioned user {user_id}: {', '.join(result.created)}")
        return result
