from fastapi import APIRouter, Depends, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from app.database.supabase_client import get_auth_supabase, get_service_supabase
from app.modules.auth.schemas import (
    LoginRequest, RegisterRequest, TokenResponse, RegisterResponse, MeResponse
)
from app.modules.auth.service import AuthService
from app.modules.profiles.provisioning import ProvisioningService
from app.modules.profiles.service import ProfileService
from app.modules.roles.service import get_capabilities
from app.core.dependencies import get_session, get_user_supabase
from app.core.session import SessionContext
from supabase import Client

router = APIRouter(prefix="/auth", tags=["auth"])

# Security scheme for JWT Bearer token
security = HTTPBearer()


def get_provisioning_service(service_client: Client = Depends(get_service_supabase)) -> ProvisioningService:
    return ProvisioningService(service_client)


def get_auth_flow_service(
    supabase: Client = Depends(get_auth_supabase),
    provisioning: ProvisioningService = Depends(get_provisioning_service)
) -> AuthService:
    return AuthService(supabase, provisioning)


def get_current_token(
    credentials: HTTPAuthorizationCredentials = Security(security)
) -> str:
    """Extract JWT token from Authorization header"""
    return credentials.credentials


@router.post("/register", response_model=RegisterResponse, status_code=201)
async def register(
    register_data: RegisterRequest,
    service: AuthService = Depends(get_auth_flow_service)
):
    """Register a new user and provision profile, role and notification settings"""
    return service.register(register_data)


@router.post("/login", response_model=TokenResponse)
async def login(
    login_data: LoginRequest,
    service: AuthService = Depends(get_auth_flow_service)
):
    """Login and get access token"""
    return service.login(login_data)


@router.post("/logout", status_code=200)
async def logout(
    token: str = Depends(get_current_token),
    service: AuthService = Depends(get_auth_flow_service)
):
    """Logout and invalidate token"""
    service.logout(token)
    return {"message": "Logged out successfully"}


@router.get("/me", response_model=MeResponse)
async def get_me(
    session: SessionContext = Depends(get_session),
    supabase: Client = Depends(get_user_supabase)
):
    """Current user, resolved role and capabilities (for frontend UI gating)."""
    profile = ProfileService(supabase).find_profile(session.user_id)
    capabilities = get_capabilities(session.role)
    return MeResponse(
        id=session.user_id,
        email=session.email,
        full_name=profile.full_name if profile else session.user_metadata.get("full_name"),
        role=capabilities.role,
        can_edit=capabilities.can_edit,
        is_admin=capabilities.is_admin,
        permissions=capabilities.permissions,
    )
