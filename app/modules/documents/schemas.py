from pydantic import BaseModel, Field
from typing import Optional, Any
from datetime import datetime


class DocumentUpdate(BaseModel):
    file_name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    extracted_data: Optional[Any] = None


class DocumentResponse(BaseModel):
    id: str
    contract_id: str
    file_name: str
    file_path: str
    file_type: Optional[str] = None
    file_size: Optional[int] = None
    extracted_data: Optional[Any] = None
    uploaded_by: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class SignedUrlResponse(BaseModel):
    document_id: str
    signed_url: str
    expires_in: int
