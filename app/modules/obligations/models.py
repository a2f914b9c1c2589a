# Supabase table: obligations
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

obligations:
- id: uuid (primary key)
- contract_id: uuid (not null, references contracts.id on delete cascade)
- title: text (not null)
- description: text (nullable)
- obligation_type: text (not null)
- due_date: date (not null)
- status: obligation_status enum ('pendente' | 'em_andamento' | 'concluido' | 'atrasado'), default 'pendente'
- responsible_id: uuid (nullable, references auth.users.id)
- completed_at: timestamp (nullable)
- notes: text (nullable)
- created_at, updated_at: timestamp
- created_by: uuid (references auth.users.id)
"""
