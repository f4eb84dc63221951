"""
Upload service - profile photos stored on local disk

Files land under UPLOAD_DIR/profile-photos and are served back by the static
mount at /uploads.
"""

import logging
import os
import random
import time
from pathlib import Path

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ... import config
from ...models import User
from ..provider_profiles.service import ProviderProfileService

logger = logging.getLogger(__name__)

PROFILE_PHOTO_DIR = "profile-photos"
ALLOWED_IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp"}
MAX_FILENAME_LENGTH = 255


def photo_filename(original: str) -> str:
    """photo-<epoch millis>-<random><ext>, keeping the original extension"""
    ext = os.path.splitext(original)[1]
    return f"photo-{int(time.time() * 1000)}-{random.randint(0, 10**9)}{ext}"


def validate_image_filename(filename: str) -> str:
    if not filename:
        raise HTTPException(status_code=400, detail="No file uploaded")

    # Path components are never trusted
    if os.path.basename(filename) != filename or ".." in filename:
        logger.warning(f"❌ Rejected upload filename: '{filename}'")
        raise HTTPException(status_code=400, detail="Invalid filename")
    if len(filename) > MAX_FILENAME_LENGTH:
        raise HTTPException(status_code=400, detail="Filename too long - maximum 255 characters")

    if os.path.splitext(filename)[1].lower() not in ALLOWED_IMAGE_EXTENSIONS:
        raise HTTPException(status_code=400, detail="Only image files are allowed!")
    return filename


class UploadService:
    """Service layer for file uploads"""

    def __init__(self, db: Session):
        self.db = db
        self.profiles = ProviderProfileService(db)

    def save_profile_photo(self, user: User, filename: str, contents: bytes) -> dict:
        validate_image_filename(filename)

        if len(contents) > config.MAX_UPLOAD_SIZE:
            limit_mb = config.MAX_UPLOAD_SIZE / (1024 * 1024)
            raise HTTPException(
                status_code=400,
                detail=f"File size exceeds {limit_mb:g}MB limit. Your file is {len(contents) / (1024 * 1024):.2f}MB.",
            )

        target_dir = Path(config.UPLOAD_DIR) / PROFILE_PHOTO_DIR
        target_dir.mkdir(parents=True, exist_ok=True)
        stored_name = photo_filename(filename)
        (target_dir / stored_name).write_bytes(contents)

        url = f"/uploads/{PROFILE_PHOTO_DIR}/{stored_name}"
        if self.profiles.set_photo(user.id, url):
            logger.info(f"🖼️ Profile photo updated for user {user.id}")
        else:
            logger.info(f"📤 Photo stored for user {user.id} (no provider profile yet)")

        return {"message": "Photo uploaded successfully", "url": url}
