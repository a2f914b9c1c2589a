from supabase import Client
from app.core.errors import backend_error, not_found
from app.modules.profiles.schemas import ProfileUpdate, ProfileResponse
from typing import List, Optional, Dict
from datetime import datetime, timezone


class ProfileService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_profiles(self, limit: Optional[int] = None, offset: int = 0) -> List[ProfileResponse]:
        """List profiles ordered by name"""
        try:
            query = self.supabase.table("profiles")\
                .select("*")\
                .order("full_name")
            if limit is not None:
                query = query.limit(limit).offset(offset)
            result = query.execute()
        except Exception as e:
            raise backend_error(e, "listing profiles")
        return [ProfileResponse(**profile) for profile in result.data]

    def find_profile(self, user_id: str) -> Optional[ProfileResponse]:
        """Get the profile of a user, or None when it does not exist"""
        try:
            result = self.supabase.table("profiles")\
                .select("*")\
                .eq("user_id", user_id)\
                .limit(1)\
                .execute()
        except Exception as e:
            raise backend_error(e, f"loading profile of {user_id}")
        if not result.data:
            return None
        return ProfileResponse(**result.data[0])

    def get_profile(self, user_id: str) -> ProfileResponse:
        profile = self.find_profile(user_id)
        if profile is None:
            raise not_found("Perfil não encontrado.")
        return profile

    def get_display_names(self) -> Dict[str, str]:
        """Map user_id -> full_name for every profile"""
        try:
            result = self.supabase.table("profiles")\
                .select("user_id, full_name")\
                .execute()
        except Exception as e:
            raise backend_error(e, "loading profile names")
        return {p["user_id"]: p.get("full_name") or "" for p in result.data or []}

    def update_profile(self, user_id: str, profile_data: ProfileUpdate) -> ProfileResponse:
        """Update the profile of a user"""
        update_data = profile_data.model_dump(exclude_none=True)
        if "full_name" in update_data:
            update_data["full_name"] = update_data["full_name"].strip()
        update_data["updated_at"] = datetime.now(timezone.utc).isoformat()
        try:
            result = self.supabase.table("profiles")\
                .update(update_data)\
                .eq("user_id", user_id)\
                .execute()
        except Exception as e:
            raise backend_error(e, f"updating profile of {user_id}")
        if not result.data:
            raise not_found("Perfil não encontrado.")
        return ProfileResponse(**result.data[0])
