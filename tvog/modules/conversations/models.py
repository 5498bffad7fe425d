# Supabase table: conversations
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- user_id: uuid (foreign key to auth.users.id, on delete cascade)
- title: text (not null, default: 'New Chat')
- created_at: timestamptz (default: now())
- updated_at: timestamptz (default: now()) - bumped after every assistant reply

RLS: every verb is limited to rows where user_id = auth.uid().
"""
