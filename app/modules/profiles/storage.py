import asyncio
import logging
from supabase import Client
from app.config import settings
from app.core.exceptions import UploadFailure

logger = logging.getLogger(__name__)

DEFAULT_AVATAR_EXTENSION = "bin"


def avatar_path(owner_id: str, filename: str) -> str:
    """Object path for an owner's avatar. The same path is reused for every upload with the same extension."""
    extension = ""
    if filename and "." in filename:
        extension = filename.rsplit(".", 1)[1].strip().lower()
    return f"{owner_id}/avatar.{extension or DEFAULT_AVATAR_EXTENSION}"


class AvatarStorage:
    """Avatar uploads to a public Supabase Storage bucket"""

    def __init__(self, supabase: Client, bucket_name: str = None):
        self.supabase = supabase
        self.bucket_name = bucket_name or settings.avatars_bucket

    async def upload(
        self,
        path: str,
        file_content: bytes,
        content_type: str = "application/octet-stream",
        overwrite: bool = True,
    ) -> str:
        """Upload file to the bucket, replacing any existing object at path"""
        file_options = {
            "content-type": content_type,
            "upsert": "true" if overwrite else "false",
        }
        try:
            await asyncio.to_thread(
                self.supabase.storage.from_(self.bucket_name).upload,
                path,
                file_content,
                file_options,
            )
        except Exception as e:
            logger.error(f"Failed to upload avatar to {self.bucket_name}/{path}: {str(e)}")
            raise UploadFailure(f"Avatar upload failed: {getattr(e, 'message', None) or str(e)}") from e
        return path

    def public_url(self, path: str) -> str:
        return self.supabase.storage.from_(self.bucket_name).get_public_url(path)
