# Supabase table: payments
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

payments:
- id: uuid (primary key)
- contract_id: uuid (not null, references contracts.id on delete cascade)
- description: text (nullable)
- amount: decimal(15,2) (not null)
- due_date: date (not null)
- payment_date: date (nullable)
- status: text (not null, default 'pendente') - pendente | pago | atrasado | cancelado
- invoice_number: text (nullable)
- notes: text (nullable)
- created_at, updated_at: timestamp
- created_by: uuid (references auth.users.id)
"""
