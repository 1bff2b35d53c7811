# Supabase tables: workouts, workout_exercises, exercise
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

workouts:
- id: uuid (primary key)
- name: text (not null)
- description: text (nullable)
- category: text (not null)
- duration: integer (not null) - minutes
- difficulty: text (not null) - values: beginner, intermediate, advanced
- user_id: uuid (foreign key to profiles.id, not null) - the assigned student
- created_by: uuid (foreign key to profiles.id, not null) - the authoring trainer
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

workout_exercises:
- id: uuid (primary key)
- workout_id: uuid (foreign key to workouts.id, ON DELETE CASCADE)
- exercise_id: uuid (foreign key to exercise.id)
- sets: integer
- reps: integer
- rest_seconds: integer
- notes: text (nullable)
- order: integer - 0-based position inside the workout

exercise:
- id: uuid (primary key)
- name: text (not null)
- muscle_group: text (nullable)
- description: text (nullable)
"""
