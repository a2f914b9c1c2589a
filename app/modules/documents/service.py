from supabase import Client
from app.config import settings
from app.config.permissions_config import Operation, STORAGE
from app.core.crud import DomainTableService
from app.core.dependencies import ensure_allowed
from app.core.errors import backend_error, not_found, validation_error
from app.core.session import SessionContext
from app.modules.audit.schemas import AuditAction
from app.modules.audit.service import AuditService
from app.modules.documents.schemas import DocumentResponse
from app.modules.documents.storage import (
    DocumentStorage, build_storage_key, safe_file_name, PDF_CONTENT_TYPE, PDF_SIGNATURE
)
from typing import List, Optional, Tuple
import logging

logger = logging.getLogger(__name__)


def validate_pdf_upload(content_type: Optional[str], content: bytes, max_bytes: Optional[int] = None):
    """Server-side upload rules: PDF only, non-empty, at most max_bytes"""
    max_bytes = max_bytes or settings.document_max_size_bytes
    if not content:
        raise validation_error("O arquivo está vazio.")
    if content_type != PDF_CONTENT_TYPE or not content.startswith(PDF_SIGNATURE):
        raise validation_error("Apenas arquivos PDF são permitidos.")
    if len(content) > max_bytes:
        raise validation_error(f"O arquivo deve ter no máximo {max_bytes // (1024 * 1024)}MB.")


class DocumentService(DomainTableService):
    table = "documents"
    response_model = DocumentResponse
    owner_field = "uploaded_by"
    has_updated_at = False
    not_found_message = "Documento não encontrado."

    def __init__(
        self,
        supabase: Client,
        storage: Optional[DocumentStorage] = None,
        audit: Optional[AuditService] = None
    ):
        super().__init__(supabase, audit)
        self.storage = storage or DocumentStorage(supabase)

    def _check_storage(self, session: SessionContext, operation: Operation):
        ensure_allowed(session, operation, STORAGE)

    def apply_filters(self, query, filters):
        if "contract_id" in filters:
            query = query.eq("contract_id", filters["contract_id"])
        return query

    def list_for_contract(self, contract_id: str) -> List[DocumentResponse]:
        """Documents of a contract, newest first"""
        return self.list(limit=1000, contract_id=contract_id)

    def _ensure_contract(self, contract_id: str):
        try:
            result = self.supabase.table("contracts")\
                .select("id")\
                .eq("id", contract_id)\
                .limit(1)\
                .execute()
        except Exception as e:
            raise backend_error(e, f"loading contract {contract_id}")
        if not result.data:
            raise not_found("Contrato não encontrado.")

    def upload(
        self,
        session: SessionContext,
        contract_id: str,
        file_name: str,
        content_type: Optional[str],
        content: bytes
    ) -> DocumentResponse:
        """Store a PDF for a contract and register it; the object is removed if registration fails"""
        self._check(session, Operation.INSERT)
        self._check_storage(session, Operation.INSERT)
        validate_pdf_upload(content_type, content)
        self._ensure_contract(contract_id)

        key = build_storage_key(contract_id, file_name)
        try:
            self.storage.upload_file(content, key, PDF_CONTENT_TYPE)
        except Exception as e:
            raise backend_error(e, f"uploading {key}")

        row = {
            "contract_id": contract_id,
            "file_name": safe_file_name(file_name),
            "file_path": key,
            "file_size": len(content),
            "file_type": PDF_CONTENT_TYPE,
            self.owner_field: session.user_id,
        }
        try:
            result = self.supabase.table(self.table).insert(row).execute()
            if not result.data:
                raise RuntimeError("insert returned no rows")
        except Exception as e:
            self.storage.discard_file(key)
            raise backend_error(e, f"registering document {key}")

        created = result.data[0]
        logger.info(f"Document {created.get('id')} uploaded to {key} by {session.user_id}")
        self.audit.record_change(session, AuditAction.INSERT, self.table, created.get("id"), None, created)
        return DocumentResponse(**created)

    def download(self, session: SessionContext, document_id: str) -> Tuple[DocumentResponse, bytes]:
        self._check_storage(session, Operation.SELECT)
        document = self.get(document_id)
        try:
            content = self.storage.download_file(document.file_path)
        except Exception as e:
            raise backend_error(e, f"downloading {document.file_path}")
        return document, content

    def signed_url(self, session: SessionContext, document_id: str) -> Tuple[str, int]:
        self._check_storage(session, Operation.SELECT)
        document = self.get(document_id)
        expires_in = settings.signed_url_expires_in
        try:
            url = self.storage.create_signed_url(document.file_path, expires_in)
        except Exception as e:
            raise backend_error(e, f"signing {document.file_path}")
        return url, expires_in

    def delete(self, session: SessionContext, record_id: str):
        """Remove the stored object, then the row"""
        self._check(session, Operation.DELETE)
        self._check_storage(session, Operation.DELETE)
        document = self.get(record_id)
        try:
            self.storage.delete_file(document.file_path)
        except Exception as e:
            raise backend_error(e, f"removing {document.file_path}")
        return super().delete(session, record_id)
