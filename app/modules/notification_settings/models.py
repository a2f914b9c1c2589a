# Supabase table: notification_settings
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

notification_settings:
- id: uuid (primary key)
- user_id: uuid (unique, not null, references auth.users.id on delete cascade)
- email_enabled: boolean (default: true)
- days_before_expiry: integer[] (default: {7,15,30})
- weekly_summary: boolean (default: true)
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now(), maintained by trigger)

Select, insert and update are allowed for the owner only.
"""
