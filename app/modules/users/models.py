# Supabase tables: profiles, user_roles
# User administration has no table of its own; it reads profiles joined
# with user_roles and writes user_roles only.

"""
Read model (assembled in service.py):

user (per profile):
- user_id: uuid (profiles.user_id)
- full_name, email, department, avatar_url: from profiles
- role: user_roles.role, or 'visualizador' when the user has no role row

Writes:
- PUT /users/{user_id}/role replaces the single user_roles row of the target
  and appends an UPDATE entry to audit_logs with the old and new role.
"""
