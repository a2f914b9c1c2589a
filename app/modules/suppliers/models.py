# Supabase table: suppliers
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

suppliers:
- id: uuid (primary key)
- name: text (not null)
- cnpj: text (unique, nullable) - XX.XXX.XXX/XXXX-XX
- email, phone, address, city, state, category, contact_name, notes: text (nullable)
- is_active: boolean (default: true)
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now(), maintained by trigger)
- created_by: uuid (references auth.users.id)
"""
