from fastapi import APIRouter, Depends
from app.modules.profiles.schemas import ProfileUpdate, ProfileResponse
from app.modules.profiles.service import ProfileService
from app.modules.audit.service import AuditService
from app.config.permissions_config import Operation
from app.core.dependencies import get_user_supabase, get_session, require_access, ensure_allowed
from app.core.session import SessionContext
from supabase import Client
from typing import List

router = APIRouter(prefix="/profiles", tags=["profiles"])


def get_profile_service(supabase: Client = Depends(get_user_supabase)) -> ProfileService:
    return ProfileService(supabase)


@router.get("", response_model=List[ProfileResponse])
async def list_profiles(
    session: SessionContext = Depends(require_access("profiles", Operation.SELECT)),
    service: ProfileService = Depends(get_profile_service)
):
    """List all profiles"""
    return service.list_profiles()


@router.get("/me", response_model=ProfileResponse)
async def get_my_profile(
    session: SessionContext = Depends(require_access("profiles", Operation.SELECT)),
    service: ProfileService = Depends(get_profile_service)
):
    """Profile of the current user"""
    return service.get_profile(session.user_id)


@router.get("/{user_id}", response_model=ProfileResponse)
async def get_profile(
    user_id: str,
    session: SessionContext = Depends(require_access("profiles", Operation.SELECT)),
    service: ProfileService = Depends(get_profile_service)
):
    """Profile of any user"""
    return service.get_profile(user_id)


@router.put("/me", response_model=ProfileResponse)
async def update_my_profile(
    profile_data: ProfileUpdate,
    session: SessionContext = Depends(get_session),
    service: ProfileService = Depends(get_profile_service),
    supabase: Client = Depends(get_user_supabase)
):
    """Update the current user's profile (owner only)"""
    ensure_allowed(session, Operation.UPDATE, "profiles", owner_id=session.user_id)
    before = service.get_profile(session.user_id)
    after = service.update_profile(session.user_id, profile_data)
    AuditService(supabase).record_change(session, "UPDATE", "profiles", before.id, before, after)
    return after


@router.put("/{user_id}", response_model=ProfileResponse)
async def update_profile(
    user_id: str,
    profile_data: ProfileUpdate,
    session: SessionContext = Depends(get_session),
    service: ProfileService = Depends(get_profile_service),
    supabase: Client = Depends(get_user_supabase)
):
    """Update a profile; only its owner may do so"""
    ensure_allowed(session, Operation.UPDATE, "profiles", owner_id=user_id)
    before = service.get_profile(user_id)
    after = service.update_profile(user_id, profile_data)
    AuditService(supabase).record_change(session, "UPDATE", "profiles", before.id, before, after)
    return after
