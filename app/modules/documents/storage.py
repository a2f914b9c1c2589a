from supabase import Client
from app.config import settings
from pathlib import PurePosixPath
from typing import Optional
import time
import logging

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "application/pdf"
PDF_SIGNATURE = b"%PDF-"


def safe_file_name(file_name: str) -> str:
    """Base name of an uploaded file, ignoring any client-side directories"""
    return PurePosixPath((file_name or "").replace("\\", "/")).name or "document.pdf"


def build_storage_key(contract_id: str, file_name: str, timestamp_ms: Optional[int] = None) -> str:
    """Storage key {contract_id}/{epoch_ms}_{file_name}, keeping only the base name"""
    name = safe_file_name(file_name)
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    return f"{contract_id}/{timestamp_ms}_{name}"


class DocumentStorage:
    """Supabase Storage bucket holding contract documents"""

    def __init__(self, supabase: Client, bucket_name: Optional[str] = None):
        self.bucket_name = bucket_name or settings.documents_bucket
        self._bucket = supabase.storage.from_(self.bucket_name)

    def upload_file(self, file_content: bytes, key: str, content_type: str = PDF_CONTENT_TYPE) -> str:
        """Upload file and return its storage key"""
        self._bucket.upload(key, file_content, file_options={"content-type": content_type})
        return key

    def download_file(self, key: str) -> bytes:
        return self._bucket.download(key)

    def delete_file(self, key: str):
        self._bucket.remove([key])

    def discard_file(self, key: str) -> bool:
        """Best-effort delete used to undo an upload"""
        try:
            self.delete_file(key)
            return True
        except Exception as e:
            logger.error(f"Failed to discard uploaded object {key}: {str(e)}")
            return False

    def create_signed_url(self, key: str, expires_in: Optional[int] = None) -> str:
        expires_in = expires_in or settings.signed_url_expires_in
        result = self._bucket.create_signed_url(key, expires_in)
        url = (result.get("signedURL") or result.get("signedUrl")) if isinstance(result, dict) else None
        if not url:
            raise RuntimeError(f"Signed URL missing from storage response for {key}")
        return url
