from fastapi import APIRouter, Depends
from app.config.permissions_config import get_permission_matrix
from app.core.dependencies import get_session
from app.core.session import SessionContext
from app.modules.roles.schemas import CapabilitiesResponse, PermissionMatrixResponse
from app.modules.roles.service import get_capabilities

router = APIRouter(prefix="/roles", tags=["roles"])


@router.get("/me", response_model=CapabilitiesResponse)
async def get_my_capabilities(session: SessionContext = Depends(get_session)):
    """Resolved role and capability flags of the current session"""
    return get_capabilities(session.role)


@router.get("/matrix", response_model=PermissionMatrixResponse)
async def get_matrix(session: SessionContext = Depends(get_session)):
    """Full permission matrix, for clients gating affordances"""
    return get_permission_matrix()
