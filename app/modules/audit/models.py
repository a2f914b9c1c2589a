# Supabase table: audit_logs
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

audit_logs:
- id: uuid (primary key)
- user_id: uuid (nullable, references auth.users.id) - null for system-originated entries
- action: text (not null) - INSERT | UPDATE | DELETE
- table_name: text (not null)
- record_id: uuid (nullable)
- old_data: jsonb (nullable) - snapshot before the change
- new_data: jsonb (nullable) - snapshot after the change
- ip_address: text (nullable)
- created_at: timestamp (default: now())

Append-only: the application never updates or deletes entries.
Select is admin-only; any authenticated request may insert through the recorder.
"""
