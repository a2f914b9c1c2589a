import hashlib
import time
from supabase import Client
from app.modules.auth.schemas import LoginRequest, RegisterRequest, TokenResponse, RegisterResponse
from app.core.errors import AppError, ErrorCategory, backend_error, unauthorized
from app.modules.profiles.provisioning import ProvisioningService, ProvisioningError
from fastapi import HTTPException
from typing import Dict, Any, Optional
import logging

logger = logging.getLogger(__name__)

# In-memory cache for get_current_user to reduce Supabase auth calls (e.g. many parallel requests with same token)
_AUTH_USER_CACHE: Dict[str, tuple] = {}
_AUTH_CACHE_TTL_SEC = 60
_AUTH_CACHE_MAX_SIZE = 500


def clear_auth_cache():
    _AUTH_USER_CACHE.clear()


class AuthService:
    def __init__(self, supabase: Client, provisioning: Optional[ProvisioningService] = None):
        self.supabase = supabase
        self.provisioning = provisioning

    def _provision(self, user) -> bool:
        """Run signup provisioning for an auth user; True when rows were created"""
        if self.provisioning is None:
            return False
        metadata = getattr(user, "user_metadata", None) or {}
        try:
            result = self.provisioning.provision(
                user_id=user.id,
                email=user.email,
                full_name=metadata.get("full_name"),
            )
        except ProvisioningError as e:
            raise backend_error(e.__cause__ or e, f"provisioning user {user.id}")
        return result.is_new

    def register(self, register_data: RegisterRequest) -> RegisterResponse:
        """Register a new user using Supabase Auth, then provision its rows"""
        try:
            auth_response = self.supabase.auth.sign_up({
                "email": register_data.email,
                "password": register_data.password,
                "options": {
                    "data": {"full_name": register_data.full_name}
                }
            })
        except Exception as e:
            error_message = str(e).lower()
            if "already registered" in error_message or "already exists" in error_message:
                raise AppError(ErrorCategory.CONFLICT, "Usuário já cadastrado.")
            raise backend_error(e, "registering user")

        if not auth_response.user:
            raise AppError(ErrorCategory.VALIDATION, "Não foi possível cadastrar o usuário.")

        provisioned = self._provision(auth_response.user)
        logger.info(f"Registered user {auth_response.user.id} (provisioned={provisioned})")
        return RegisterResponse(
            user_id=auth_response.user.id,
            email=auth_response.user.email or register_data.email,
            provisioned=provisioned,
            message="User registered successfully"
        )

    def login(self, login_data: LoginRequest) -> TokenResponse:
        """Authenticate user using Supabase Auth; provisions on first authentication"""
        try:
            auth_response = self.supabase.auth.sign_in_with_password({
                "email": login_data.email,
                "password": login_data.password
            })
        except Exception as e:
            error_message = str(e).lower()
            if "invalid" in error_message or "credentials" in error_message:
                raise unauthorized("Email ou senha inválidos.")
            raise backend_error(e, "signing in")

        if not auth_response.user or not auth_response.session:
            raise unauthorized("Email ou senha inválidos.")

        if self._provision(auth_response.user):
            logger.info(f"Provisioned missing rows for user {auth_response.user.id} at login")

        return TokenResponse(
            access_token=auth_response.session.access_token,
            token_type="bearer",
            user_id=auth_response.user.id,
            email=auth_response.user.email or login_data.email
        )

    def get_current_user(self, token: str) -> Dict[str, Any]:
        """Get current user details from Supabase Auth token. Uses short TTL cache to reduce auth API calls."""
        try:
            cache_key = hashlib.sha256(token.encode()).hexdigest()
            now = time.monotonic()
            if cache_key in _AUTH_USER_CACHE:
                user_data, expiry = _AUTH_USER_CACHE[cache_key]
                if now < expiry:
                    return user_data
                del _AUTH_USER_CACHE[cache_key]
            user_response = self.supabase.auth.get_user(jwt=token)
            if not user_response or not user_response.user:
                raise unauthorized()
            user = user_response.user
            user_data = {
                "id": user.id,
                "email": user.email,
                "user_metadata": user.user_metadata or {},
                "app_metadata": user.app_metadata or {},
            }
            if len(_AUTH_USER_CACHE) < _AUTH_CACHE_MAX_SIZE:
                _AUTH_USER_CACHE[cache_key] = (user_data, now + _AUTH_CACHE_TTL_SEC)
            return user_data
        except HTTPException:
            raise
        except Exception as e:
            logger.debug(f"Token validation failed: {e}")
            raise unauthorized()

    def logout(self, token: str) -> bool:
        """Logout user using Supabase Auth"""
        try:
            # Revokes the refresh tokens of this session; issued access tokens live until expiry
            self.supabase.auth.admin.sign_out(token)
            _AUTH_USER_CACHE.pop(hashlib.sha256(token.encode()).hexdigest(), None)
            return True
        except Exception as e:
            logger.warning(f"Logout failed: {e}")
            return False
