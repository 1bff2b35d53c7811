# Supabase tables: chat_rooms, chat_room_participants, messages
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py
# Clients listen to new rows in messages through a realtime channel per room

"""
Expected Supabase table structure:

chat_rooms:
- id: uuid (primary key)
- name: text (nullable)
- last_message: text (nullable) - denormalized preview
- last_message_time: timestamp (nullable)
- created_at: timestamp (default: now())

chat_room_participants:
- id: uuid (primary key)
- room_id: uuid (foreign key to chat_rooms.id)
- user_id: uuid (foreign key to profiles.id)
- unread_count: integer (default: 0)

messages:
- id: uuid (primary key)
- room_id: uuid (foreign key to chat_rooms.id)
- user_id: uuid (foreign key to profiles.id) - the sender
- content: text (not null)
- created_at: timestamp (default: now())

Messages are append-only.
"""
