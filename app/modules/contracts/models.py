# Supabase table: contracts
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

contracts:
- id: uuid (primary key)
- contract_number: text (not null, unique)
- title: text (not null)
- description: text (nullable)
- contract_type: text (not null)
- status: contract_status enum ('ativo' | 'suspenso' | 'encerrado' | 'em_renovacao' | 'rascunho'), default 'rascunho'
- supplier_id: uuid (nullable, references suppliers.id)
- responsible_id: uuid (nullable, references auth.users.id)
- total_value: decimal(15,2) (nullable)
- start_date, end_date: date (not null)
- signature_date, renewal_date: date (nullable)
- auto_renewal: boolean (default: false)
- payment_terms, notes: text (nullable)
- created_at, updated_at: timestamp
- created_by: uuid (references auth.users.id)

Documents, obligations and payments reference contracts with ON DELETE CASCADE.
"""
