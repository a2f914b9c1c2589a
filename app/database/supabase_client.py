from supabase import create_client, Client, ClientOptions
from app.config import settings
from typing import Optional
import logging

logger = logging.getLogger(__name__)


def _isolated_options(access_token: Optional[str] = None) -> ClientOptions:
    """Options for a client that never keeps or refreshes a session of its own"""
    headers = {"Authorization": f"Bearer {access_token}"} if access_token else {}
    return ClientOptions(headers=headers, persist_session=False, auto_refresh_token=False)


class SupabaseClient:
    """
    Process-wide Supabase clients, created lazily from settings.

    The shared anon client only validates tokens and answers the readiness
    check. It never signs anyone in, so its Authorization header stays the
    anon key. Sign-up and sign-in run on a throwaway client, and data access
    runs on a client bound to the caller's token.
    """
    _client: Client = None
    _service_client: Client = None

    @classmethod
    def get_client(cls) -> Client:
        if cls._client is None:
            cls._client = create_client(settings.supabase_url, settings.supabase_key)
        return cls._client

    @classmethod
    def get_service_client(cls) -> Client:
        """
        Client with the service_role key. Bypasses RLS, so it is only handed to
        signup provisioning and the admin bootstrap script. Falls back to the
        regular client when no service key is configured.
        """
        if cls._service_client is None and settings.supabase_service_role_key:
            cls._service_client = create_client(
                settings.supabase_url,
                settings.supabase_service_role_key,
                options=_isolated_options(),
            )
        if cls._service_client is None:
            logger.warning("SUPABASE_SERVICE_ROLE_KEY not set; provisioning uses the regular client")
        return cls._service_client or cls.get_client()

    @classmethod
    def reset_client(cls):
        cls._client = None
        cls._service_client = None


def create_auth_client() -> Client:
    """Fresh anon client for sign-up and sign-in; the session it receives dies with it"""
    return create_client(settings.supabase_url, settings.supabase_key, options=_isolated_options())


def create_user_client(access_token: str) -> Client:
    """Anon client whose PostgREST and Storage calls run as the token's user (RLS applies)"""
    return create_client(
        settings.supabase_url,
        settings.supabase_key,
        options=_isolated_options(access_token),
    )


def get_supabase() -> Client:
    return SupabaseClient.get_client()


def get_service_supabase() -> Client:
    return SupabaseClient.get_service_client()


def get_auth_supabase() -> Client:
    return create_auth_client()


def check_connection(supabase: Client) -> bool:
    """Cheap read used by the readiness probe"""
    try:
        supabase.table("user_roles").select("id").limit(1).execute()
        return True
    except Exception as e:
        logger.warning(f"Supabase readiness check failed: {e}")
        return False
