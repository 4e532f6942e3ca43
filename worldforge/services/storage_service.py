# worldforge/services/storage_service.py
from datetime import datetime, timezone
from typing import Any, List, Optional
import logging
import re
import secrets

from supabase import Client

from worldforge.errors import UpstreamFailure

logger = logging.getLogger(__name__)


def sanitize_filename(name: str) -> str:
    """Reduce a filename to a safe storage key segment."""
    base = re.sub(r"[^A-Za-z0-9._-]+", "-", name)
    return re.sub(r"^[-.]+", "", re.sub(r"-+", "-", base))[:255]


def build_world_file_path(world_id: str, filename: str, kind: str = "uploads", prefix: Optional[str] = None) -> str:
    """Unique storage key: world/{world}/{kind}/{prefix/}{timestamp}-{random}-{name}"""
    safe_kind = re.sub(r"[^A-Za-z0-9._-]+", "-", kind or "uploads").lower()
    safe = sanitize_filename(filename or "file")
    stamp = datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace(":", "-").replace(".", "-")
    rand = secrets.token_hex(3)
    folder = f"{re.sub(r'[^A-Za-z0-9._-]+', '-', prefix)}/" if prefix else ""
    return f"world/{world_id}/{safe_kind}/{folder}{stamp}-{rand}-{safe}"


def build_map_path(world_id: str, map_id: str, filename: str) -> str:
    return f"maps/worlds/{world_id}/{map_id}/{filename}"


def map_image_filename(content_type: str) -> str:
    """Map images are stored as base.<subtype>, e.g. base.png"""
    subtype = content_type.split("/", 1)[-1].split("+", 1)[0]
    return f"base.{subtype}"


class StorageService:
    """Object storage through the Supabase storage API."""

    def __init__(self, client: Client, bucket: str):
        self.client = client
        self.bucket = bucket

    def upload(self, path: str, content: bytes, content_type: str, upsert: bool = True) -> str:
        try:
            self.client.storage.from_(self.bucket).upload(
                path,
                content,
                {"content-type": content_type, "upsert": "true" if upsert else "false"},
            )
        except Exception as e:
            logger.error(f"Upload to {self.bucket}/{path} failed: {e}")
            raise UpstreamFailure("File upload failed", str(e))
        logger.info(f"Uploaded {len(content)} bytes to {self.bucket}/{path}")
        return path

    def remove(self, paths: List[str]) -> Any:
        try:
            return self.client.storage.from_(self.bucket).remove(paths)
        except Exception as e:
            logger.warning(f"Failed to remove {paths} from {self.bucket}: {e}")
            return None
