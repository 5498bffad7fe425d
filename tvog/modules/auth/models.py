# Supabase Auth
# This module uses Supabase's built-in authentication system
# No custom tables are required - Supabase Auth handles:
# - User registration (auth.users table) and e-mail confirmation
# - Password, Google OAuth and anonymous (guest) sign-in
# - TOTP second factor (auth.mfa_factors)
# - JWT token generation and validation

"""
Supabase Auth provides:
- auth.sign_up() - Register new users (display_name stored in user_metadata)
- auth.sign_in_with_password() - Authenticate users
- auth.sign_in_anonymously() - Guest sessions (user.is_anonymous = true)
- auth.sign_in_with_oauth() - Provider authorization URL
- auth.resend() - Resend the sign-up confirmation e-mail
- auth.mfa.list_factors() / challenge() / verify() - TOTP second factor
- auth.get_user() - Get current user from JWT token

A row in public.profiles is created for every new auth.users row by the
on_auth_user_created trigger (see supabase/migrations).
"""
