"""Upload router - multipart file uploads"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from pydantic import BaseModel
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from .service import UploadService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/uploads", tags=["Uploads"])


class UploadResponse(BaseModel):
    message: str
    url: str


def get_upload_service(db: Session = Depends(get_db)) -> UploadService:
    """Dependency injection for UploadService"""
    return UploadService(db)


@router.post("/profile-photo", response_model=UploadResponse, status_code=201)
async def upload_profile_photo(
    photo: Optional[UploadFile] = File(None),
    current_user: User = Depends(get_current_user),
    service: UploadService = Depends(get_upload_service),
):
    """Upload a profile photo (multipart field "photo")"""
    if photo is None:
        raise HTTPException(status_code=400, detail="No file uploaded")

    logger.info(f"📤 Uploading profile photo for user {current_user.id}")
    contents = await photo.read()
    return service.save_profile_photo(current_user, photo.filename or "", contents)
