from supabase import Client
from app.core.errors import backend_error, not_found
from app.modules.notification_settings.schemas import (
    DEFAULT_DAYS_BEFORE_EXPIRY,
    NotificationSettingsUpdate,
    NotificationSettingsResponse,
)
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)


def default_settings_row(user_id: str) -> dict:
    return {
        "user_id": user_id,
        "email_enabled": True,
        "days_before_expiry": list(DEFAULT_DAYS_BEFORE_EXPIRY),
        "weekly_summary": True,
    }


class NotificationSettingsService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_settings(self, user_id: str) -> NotificationSettingsResponse:
        """Get the notification settings of a user"""
        try:
            result = self.supabase.table("notification_settings")\
                .select("*")\
                .eq("user_id", user_id)\
                .limit(1)\
                .execute()
        except Exception as e:
            raise backend_error(e, f"loading notification settings of {user_id}")
        if not result.data:
            raise not_found("Configurações de notificação não encontradas.")
        return NotificationSettingsResponse(**result.data[0])

    def update_settings(self, user_id: str, data: NotificationSettingsUpdate) -> NotificationSettingsResponse:
        """Update (or create) the notification settings of a user"""
        changes = data.model_dump(exclude_none=True)
        try:
            existing = self.supabase.table("notification_settings")\
                .select("*")\
                .eq("user_id", user_id)\
                .limit(1)\
                .execute()
            if existing.data:
                changes["updated_at"] = datetime.now(timezone.utc).isoformat()
                result = self.supabase.table("notification_settings")\
                    .update(changes)\
                    .eq("user_id", user_id)\
                    .execute()
            else:
                row = default_settings_row(user_id)
                row.update(changes)
                result = self.supabase.table("notification_settings").insert(row).execute()
        except Exception as e:
            raise backend_error(e, f"updating notification settings of {user_id}")
        if not result.data:
            raise not_found("Configurações de notificação não encontradas.")
        return NotificationSettingsResponse(**result.data[0])
