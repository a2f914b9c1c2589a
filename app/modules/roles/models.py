# Supabase table: user_roles
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

user_roles:
- id: uuid (primary key)
- user_id: uuid (foreign key to auth.users.id, not null, on delete cascade)
- role: app_role enum ('admin' | 'gestor' | 'visualizador'), default 'visualizador'
- created_at: timestamp (default: now())
- unique constraint on (user_id): one role per user

Remote functions (SECURITY DEFINER):
- has_role(_user_id uuid, _role app_role) -> boolean
- get_user_role(_user_id uuid) -> app_role
"""
