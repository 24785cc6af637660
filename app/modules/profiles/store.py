import asyncio
import logging
from supabase import Client
from app.config import settings
from app.core.exceptions import PersistFailure, ProfileNotFound
from app.modules.profiles.models import PROFILE_SELECT
from app.modules.profiles.schemas import Profile

logger = logging.getLogger(__name__)


class ProfileStore:
    """Profiles table access. Calls the synchronous SDK off the event loop."""

    def __init__(self, supabase: Client, table: str = None):
        self.supabase = supabase
        self.table = table or settings.profiles_table

    async def fetch_one(self, owner_id: str) -> Profile:
        """Fetch the profile row owned by owner_id; raises ProfileNotFound when there is none"""
        result = await asyncio.to_thread(self._select, owner_id)
        if not result.data:
            raise ProfileNotFound(owner_id)
        return Profile.from_row(result.data[0])

    async def upsert(self, profile: Profile) -> Profile:
        """Insert or update the row keyed by profile.id"""
        try:
            result = await asyncio.to_thread(self._upsert, profile.to_row())
        except Exception as e:
            logger.error(f"Failed to upsert profile {profile.id}: {str(e)}")
            raise PersistFailure(getattr(e, "message", None) or str(e)) from e

        if result.data:
            return Profile.from_row(result.data[0])
        return profile

    def _select(self, owner_id: str):
        return self.supabase.table(self.table)\
            .select(PROFILE_SELECT)\
            .eq("id", owner_id)\
            .limit(1)\
            .execute()

    def _upsert(self, row: dict):
        return self.supabase.table(self.table)\
            .upsert(row, on_conflict="id")\
            .execute()
