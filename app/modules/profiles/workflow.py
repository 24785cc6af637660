"""
Profile workflow.

Holds the state of one session's profile form: the draft, whether the form is
being edited, an optional avatar file waiting to be uploaded, and the row last
read from the store. All external access goes through the identity client,
the profile store and the avatar storage handed in at construction.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from app.core.exceptions import InvalidProfile, NotAuthenticated, ProfileError, ProfileNotFound
from app.modules.auth.identity import IdentityClient
from app.modules.profiles.fields import apply_update
from app.modules.profiles.schemas import Profile, ProfileDraft, ProfileField
from app.modules.profiles.storage import AvatarStorage, avatar_path
from app.modules.profiles.store import ProfileStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PendingAvatar:
    filename: str
    content_type: str
    data: bytes


class ProfileWorkflow:
    def __init__(self, identity: IdentityClient, store: ProfileStore, storage: AvatarStorage):
        self.identity = identity
        self.store = store
        self.storage = storage
        self.draft = ProfileDraft()
        self.editing = True
        self.pending_avatar: Optional[PendingAvatar] = None
        self.stored: Optional[Profile] = None
        self.loaded = False
        self.error: Optional[str] = None

    async def load(self) -> Optional[Profile]:
        """Fetch the caller's row into the draft.

        No user: nothing happens. No row yet: the draft keeps its defaults and
        the form stays editable. Any other failure is logged and the draft is
        left as it was.
        """
        user = await self.identity.get_current_user()
        if user is None:
            return None

        try:
            profile = await self.store.fetch_one(user.id)
        except ProfileNotFound:
            logger.info("No profile yet for user %s", user.id)
            return None
        except Exception as e:
            logger.error("Error loading profile for user %s: %s", user.id, e)
            return None
        finally:
            self.loaded = True

        self.stored = profile
        self.draft = profile.to_draft()
        self.editing = False
        return profile

    def begin_edit(self) -> None:
        self.editing = True

    def update_field(self, field: ProfileField, value: str) -> ProfileDraft:
        self.draft = apply_update(self.draft, field, value)
        return self.draft

    def select_avatar(self, filename: str, content_type: str, data: bytes) -> PendingAvatar:
        self.pending_avatar = PendingAvatar(filename=filename, content_type=content_type, data=data)
        return self.pending_avatar

    async def save(self) -> Profile:
        """Upload the pending avatar if any, upsert the draft, then reload.

        On failure the draft and edit mode are kept, the message is stored in
        self.error and the ProfileError is re-raised.
        """
        self.error = None
        try:
            profile = await self._persist()
        except ProfileError as e:
            self.error = e.message
            raise

        self.pending_avatar = None
        self.editing = False
        reloaded = await self.load()
        return reloaded or profile

    async def _persist(self) -> Profile:
        user = await self.identity.get_current_user()
        if user is None:
            raise NotAuthenticated()

        missing = self.draft.missing_required()
        if missing:
            raise InvalidProfile(f"Missing required fields: {', '.join(missing)}")

        avatar_url = self.draft.avatar_url
        if self.pending_avatar is not None:
            avatar_url = await self._upload_avatar(user.id, self.pending_avatar)

        profile = self.draft.to_profile(user.id, avatar_url=avatar_url)
        return await self.store.upsert(profile)

    async def _upload_avatar(self, owner_id: str, avatar: PendingAvatar) -> str:
        path = avatar_path(owner_id, avatar.filename)
        await self.storage.upload(path, avatar.data, content_type=avatar.content_type, overwrite=True)
        return self.storage.public_url(path)
