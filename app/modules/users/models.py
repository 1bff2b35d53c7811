# Supabase tables: profiles, auth.users
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py
# Authentication is handled by Supabase Auth (auth.users table)

"""
Expected Supabase table structure:

profiles:
- id: uuid (primary key, references auth.users.id)
- name: text (not null)
- email: text (unique, not null) - synced from auth.users
- user_type: text (not null) - values: trainer, student; set at registration
- phone: text (nullable)
- avatar_url: text (nullable) - public URL in the images storage bucket
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

Storage bucket "images": avatars are stored under avatars/<user_id>_<ts>.<ext>
"""
