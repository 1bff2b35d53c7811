# Supabase table: student_workouts
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- student_id: uuid (foreign key to profiles.id, not null)
- workout_id: uuid (foreign key to workouts.id, not null)
- scheduled_date: date (nullable)
- status: text (not null, default: 'pending') - values: pending, completed
- completed_at: timestamp (nullable)
"""
