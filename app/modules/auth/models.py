# Authentication is delegated to Supabase Auth (auth.users); no table of ours.
# Identities live in auth.users, tokens are Supabase JWTs validated with
# auth.get_user() on each request (cached briefly in AuthService).

"""
Flows:
- register: auth.sign_up() with full_name in user_metadata, then provisioning
- login: auth.sign_in_with_password(), then provisioning of any missing rows
- logout: auth.admin.sign_out(token) and eviction from the token cache

register and login run on a client created for that call
(get_auth_supabase). A sign-in rewrites the Authorization header of the client
it runs on, so it must never touch the shared one.

A new identity gets its profile, viewer role and notification settings from
ProvisioningService (app/modules/profiles/provisioning.py) called by these
flows with the service client. There is no database trigger doing it.
"""
