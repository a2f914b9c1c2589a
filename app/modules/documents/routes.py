from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import Response
from app.config import settings
from app.modules.documents.schemas import DocumentUpdate, DocumentResponse, SignedUrlResponse
from app.modules.documents.service import DocumentService
from app.config.permissions_config import Operation, STORAGE
from app.core.dependencies import get_user_supabase, require_access, ensure_allowed
from app.core.session import SessionContext
from supabase import Client
from typing import List
from urllib.parse import quote

router = APIRouter(tags=["documents"])


def get_document_service(supabase: Client = Depends(get_user_supabase)) -> DocumentService:
    return DocumentService(supabase)


@router.get("/contracts/{contract_id}/documents", response_model=List[DocumentResponse])
async def list_contract_documents(
    contract_id: str,
    session: SessionContext = Depends(require_access("documents", Operation.SELECT)),
    service: DocumentService = Depends(get_document_service)
):
    """Documents of a contract, newest first"""
    return service.list_for_contract(contract_id)


@router.post("/contracts/{contract_id}/documents", response_model=DocumentResponse, status_code=201)
async def upload_contract_document(
    contract_id: str,
    file: UploadFile = File(...),
    session: SessionContext = Depends(require_access("documents", Operation.INSERT)),
    service: DocumentService = Depends(get_document_service)
):
    """Upload a PDF (at most document_max_size_mb) for a contract (admin/gestor)"""
    ensure_allowed(session, Operation.INSERT, STORAGE)
    # One byte past the limit is enough to reject oversized files
    content = await file.read(settings.document_max_size_bytes + 1)
    return service.upload(session, contract_id, file.filename or "", file.content_type, content)


@router.get("/documents/{document_id}", response_model=DocumentResponse)
async def get_document(
    document_id: str,
    session: SessionContext = Depends(require_access("documents", Operation.SELECT)),
    service: DocumentService = Depends(get_document_service)
):
    """Get document metadata by ID"""
    return service.get(document_id)


@router.get("/documents/{document_id}/download")
async def download_document(
    document_id: str,
    session: SessionContext = Depends(require_access("documents", Operation.SELECT)),
    service: DocumentService = Depends(get_document_service)
):
    """Download the stored PDF"""
    document, content = service.download(session, document_id)
    return Response(
        content=content,
        media_type=document.file_type or "application/pdf",
        headers={"Content-Disposition": f"attachment; filename*=UTF-8''{quote(document.file_name)}"},
    )


@router.get("/documents/{document_id}/signed-url", response_model=SignedUrlResponse)
async def get_document_signed_url(
    document_id: str,
    session: SessionContext = Depends(require_access("documents", Operation.SELECT)),
    service: DocumentService = Depends(get_document_service)
):
    """Short-lived signed URL for inline viewing"""
    url, expires_in = service.signed_url(session, document_id)
    return SignedUrlResponse(document_id=document_id, signed_url=url, expires_in=expires_in)


@router.put("/documents/{document_id}", response_model=DocumentResponse)
async def update_document(
    document_id: str,
    document_data: DocumentUpdate,
    session: SessionContext = Depends(require_access("documents", Operation.UPDATE)),
    service: DocumentService = Depends(get_document_service)
):
    """Rename a document or attach extracted data (admin/gestor)"""
    return service.update(session, document_id, document_data)


@router.delete("/documents/{document_id}", status_code=204)
async def delete_document(
    document_id: str,
    session: SessionContext = Depends(require_access("documents", Operation.DELETE)),
    service: DocumentService = Depends(get_document_service)
):
    """Delete a document and its stored file (admin only)"""
    ensure_allowed(session, Operation.DELETE, STORAGE)
    service.delete(session, document_id)
    return None
