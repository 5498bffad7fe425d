# Supabase table: profiles
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key, references auth.users.id on delete cascade)
- display_name: text (nullable) - defaults to user_metadata.display_name or the e-mail local part
- avatar_url: text (nullable)
- deletion_scheduled_at: timestamptz (nullable) - account is purged 7 days after this
- created_at: timestamptz (default: now())
- updated_at: timestamptz (default: now(), maintained by trigger)

RLS: a user can select, insert and update only the row whose id = auth.uid().
Expired accounts are removed by the security-definer function public.delete_expired_accounts().
"""
