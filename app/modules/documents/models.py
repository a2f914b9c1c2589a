# Supabase table: documents, storage bucket: contracts-documents
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py and storage.py

"""
Expected Supabase table structure:

documents:
- id: uuid (primary key)
- contract_id: uuid (not null, references contracts.id on delete cascade)
- file_name: text (not null)
- file_path: text (not null) - storage key {contract_id}/{epoch_ms}_{file_name}
- file_type: text (nullable) - always application/pdf for uploads through the API
- file_size: bigint (nullable)
- extracted_data: jsonb (nullable)
- uploaded_by: uuid (references auth.users.id)
- created_at: timestamp (default: now())

Storage bucket contracts-documents (private):
- select: any authenticated user
- insert: admin, gestor
- delete: admin
"""
