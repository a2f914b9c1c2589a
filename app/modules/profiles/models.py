# Supabase table: profiles
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py
# Authentication is handled by Supabase Auth (auth.users table)

"""
Expected Supabase table structure:

profiles:
- id: uuid (primary key)
- user_id: uuid (unique, not null, references auth.users.id on delete cascade)
- full_name: text (not null) - from identity metadata, empty string if absent
- email: text (not null) - from the identity
- avatar_url: text (nullable)
- department: text (nullable)
- phone: text (nullable)
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now(), maintained by trigger)

Rows are created only by ProvisioningService, never through the API.
Updates are allowed for the owner only.
"""
