from fastapi import APIRouter, Depends
from app.modules.notification_settings.schemas import (
    NotificationSettingsUpdate, NotificationSettingsResponse
)
from app.modules.notification_settings.service import NotificationSettingsService
from app.config.permissions_config import Operation
from app.core.dependencies import get_user_supabase, get_session, ensure_allowed
from app.core.session import SessionContext
from supabase import Client

router = APIRouter(prefix="/notification-settings", tags=["notification-settings"])


def get_notification_settings_service(supabase: Client = Depends(get_user_supabase)) -> NotificationSettingsService:
    return NotificationSettingsService(supabase)


@router.get("/me", response_model=NotificationSettingsResponse)
async def get_my_settings(
    session: SessionContext = Depends(get_session),
    service: NotificationSettingsService = Depends(get_notification_settings_service)
):
    """Notification settings of the current user"""
    ensure_allowed(session, Operation.SELECT, "notification_settings", owner_id=session.user_id)
    return service.get_settings(session.user_id)


@router.put("/me", response_model=NotificationSettingsResponse)
async def update_my_settings(
    data: NotificationSettingsUpdate,
    session: SessionContext = Depends(get_session),
    service: NotificationSettingsService = Depends(get_notification_settings_service)
):
    """Update notification settings of the current user"""
    ensure_allowed(session, Operation.UPDATE, "notification_settings", owner_id=session.user_id)
    return service.update_settings(session.user_id, data)
