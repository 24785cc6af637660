# Supabase table: profiles, storage bucket: avatars
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in store.py and storage.py
# Provisioning SQL lives in supabase/migrations/

"""
Expected Supabase table structure:

profiles:
- id: uuid (primary key, references auth.users.id)
- first_name: text (not null)
- last_name: text (not null)
- date_of_birth: date (not null)
- country: text (not null)
- religion: text (nullable)
- blood_group: text (nullable) - one of A+, A-, B+, B-, O+, O-, AB+, AB-
- marital_status: text (nullable) - one of single, married, divorced, widowed
- institution: text (nullable)
- hobbies: text[] (nullable)
- avatar_url: text (nullable) - public URL issued by Supabase Storage
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())

Row level security: a user can select, insert and update only the row whose
id equals auth.uid().

avatars (storage bucket, public):
- objects live at "<owner id>/avatar.<ext>"
- writes are restricted to the folder matching auth.uid()
- reads are public

Note: Profile rows are only ever upserted by id; this service never deletes them.
"""


# Columns read from and written to the profiles table. Bump the version when
# the list changes so callers notice the entity shape moved.
PROFILE_COLUMNS_VERSION = 1
PROFILE_COLUMNS = (
    "id",
    "first_name",
    "last_name",
    "date_of_birth",
    "country",
    "religion",
    "blood_group",
    "marital_status",
    "institution",
    "hobbies",
    "avatar_url",
)
PROFILE_SELECT = ", ".join(PROFILE_COLUMNS)
