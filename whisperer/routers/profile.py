# whisperer/routers/profile.py
import logging
import os
from uuid import uuid4

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.orm import Session

from whisperer.core import storage
from whisperer.core.auth import get_current_profile
from whisperer.core.database import get_db
from whisperer.core.exceptions import ValidationFailedError
from whisperer.core.updates import collect_updates
from whisperer.models.profile import Profile
from whisperer.schemas.profile import ProfileResponse, ProfileUpdate

logger = logging.getLogger(__name__)

router = APIRouter()

MAX_PROFILE_IMAGE_BYTES = 2 * 1024 * 1024
IMAGE_EXTENSIONS = {".png", ".jpg", ".jpeg", ".gif", ".webp"}


@router.get("", response_model=ProfileResponse)
def get_profile(profile: Profile = Depends(get_current_profile)):
    return profile


@router.patch("", response_model=ProfileResponse)
def update_profile(payload: ProfileUpdate, profile: Profile = Depends(get_current_profile), db: Session = Depends(get_db)):
    """
    Save the profile settings form. Only the fields in ProfileUpdate can be
    written; the role and image path are not editable here.
    """
    updates = collect_updates(payload, Profile, empty_message="No fields to update")

    for key, value in updates.items():
        setattr(profile, key, value)
    db.commit()
    db.refresh(profile)
    return profile


@router.post("/image", response_model=ProfileResponse)
async def upload_profile_image(
    image: UploadFile = File(...),
    profile: Profile = Depends(get_current_profile),
    db: Session = Depends(get_db),
):
    """
    Store a new profile image and point the profile at it.

    The two steps are independent: if the profile update fails after the
    upload succeeded, the stored image is left behind.
    """
    ext = os.path.splitext(image.filename or "")[1].lower()
    if ext not in IMAGE_EXTENSIONS:
        raise ValidationFailedError("Unsupported image type.")

    data = await image.read()
    if len(data) > MAX_PROFILE_IMAGE_BYTES:
        raise ValidationFailedError("Image must be less than 2MB.")

    path = storage.save_object(f"profile-images/{profile.user_id}/{uuid4()}{ext}", data)

    profile.image_path = path
    profile.image_url = f"/{path}"
    db.commit()
    db.refresh(profile)
    return profile
