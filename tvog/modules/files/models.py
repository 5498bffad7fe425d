# Supabase Storage bucket: chat-files (private)
# Actual operations are handled via Supabase SDK in service.py

"""
Object layout:
- <conversation_id>/<uuid4>.<ext>

The object path is stored in messages.file_url together with the original
file name, MIME type and size.

Storage RLS on storage.objects:
- insert: any authenticated user
- select/delete: only when a message in one of the caller's conversations
  has file_url = object name
"""
