# Supabase table: messages
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- conversation_id: uuid (foreign key to conversations.id, on delete cascade)
- role: text (not null) - 'user' or 'assistant'
- content: text (not null)
- file_url: text (nullable) - object path in the chat-files bucket
- file_name: text (nullable) - original file name
- file_type: text (nullable) - MIME type
- file_size: integer (nullable) - bytes
- created_at: timestamptz (default: now())

RLS: select, insert, update and delete are allowed when the parent
conversation's user_id = auth.uid().
"""
