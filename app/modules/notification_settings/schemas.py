from pydantic import BaseModel, field_validator
from typing import Optional, List
from datetime import datetime

DEFAULT_DAYS_BEFORE_EXPIRY = [7, 15, 30]


class NotificationSettingsUpdate(BaseModel):
    email_enabled: Optional[bool] = None
    days_before_expiry: Optional[List[int]] = None
    weekly_summary: Optional[bool] = None

    @field_validator("days_before_expiry")
    @classmethod
    def normalize_days(cls, value):
        if value is None:
            return value
        if any(day < 1 or day > 365 for day in value):
            raise ValueError("days_before_expiry values must be between 1 and 365")
        return sorted(set(value))


class NotificationSettingsResponse(BaseModel):
    id: str
    user_id: str
    email_enabled: bool = True
    days_before_expiry: List[int] = DEFAULT_DAYS_BEFORE_EXPIRY
    weekly_summary: bool = True
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
