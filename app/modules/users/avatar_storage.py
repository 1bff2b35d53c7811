from supabase import Client
from typing import Optional
import time
import logging

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES = {"jpg", "jpeg", "png", "gif", "webp"}


class AvatarStorage:
    def __init__(self, supabase: Client, bucket_name: str):
        self.supabase = supabase
        self.bucket_name = bucket_name

    @staticmethod
    def build_key(user_id: str, filename: Optional[str]) -> str:
        """avatars/<user_id>_<ms>.<ext>; the timestamp keeps CDN caches from serving the old image"""
        ext = (filename or "").rsplit(".", 1)[-1].lower() if filename and "." in filename else "jpg"
        return f"avatars/{user_id}_{int(time.time() * 1000)}.{ext}"

    def upload_file(self, file_content: bytes, key: str, content_type: str = "image/jpeg") -> str:
        """Upload file to the bucket and return its public URL"""
        try:
            bucket = self.supabase.storage.from_(self.bucket_name)
            bucket.upload(
                path=key,
                file=file_content,
                file_options={"content-type": content_type, "upsert": "true"},
            )
            return bucket.get_public_url(key)
        except Exception as e:
            logger.error(f"Failed to upload {key} to bucket {self.bucket_name}: {str(e)}")
            raise

    def key_from_url(self, url: Optional[str]) -> Optional[str]:
        """Object key of a public URL in this bucket, None for foreign or empty URLs"""
        marker = f"/{self.bucket_name}/"
        if not url or marker not in url:
            return None
        return url.split(marker, 1)[1].split("?", 1)[0] or None

    def delete_file(self, key: str) -> bool:
        try:
            self.supabase.storage.from_(self.bucket_name).remove([key])
            return True
        except Exception as e:
            logger.error(f"Failed to delete {key} from bucket {self.bucket_name}: {str(e)}")
            return False
