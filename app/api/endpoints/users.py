"""
Users Endpoint — Volunteer Profile

GET  /api/v1/users/{user_id}          → profile
PUT  /api/v1/users/{user_id}          → partial profile update
POST /api/v1/users/{user_id}/avatar   → upload a profile picture

The avatar is pushed to the external image host first; only its returned
URL is stored on the user row.
"""

import logging

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.image_host import ALLOWED_CONTENT_TYPES, ImageUploadError, upload_image
from app.core.limiter import limiter
from app.core.user_store import UserNotFoundError, get_user, update_user
from app.models.schemas import UserProfile, UserUpdate

logger = logging.getLogger(__name__)

router = APIRouter()

MAX_AVATAR_BYTES = 5 * 1024 * 1024
_USER_NOT_FOUND = "User not found"


def _to_profile(user) -> UserProfile:
    return UserProfile(
        id=user.id,
        first_name=user.first_name,
        last_name=user.last_name,
        email=user.email,
        phone=user.phone,
        image=user.image,
        created_at=user.created_at,
    )


@router.get(
    "/{user_id}",
    response_model=UserProfile,
    summary="Get a volunteer profile",
)
@limiter.limit("60/minute")
async def get_profile(
    request: Request,
    user_id: str,
    db: AsyncSession = Depends(get_db),
) -> UserProfile:
    try:
        user = await get_user(user_id, db)
    except UserNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=_USER_NOT_FOUND)
    return _to_profile(user)


@router.put(
    "/{user_id}",
    response_model=UserProfile,
    summary="Update a volunteer profile",
    description="Only the fields present in the body are changed.",
)
@limiter.limit("30/minute")
async def put_profile(
    request: Request,
    user_id: str,
    payload: UserUpdate,
    db: AsyncSession = Depends(get_db),
) -> UserProfile:
    changes = payload.model_dump(exclude_unset=True)
    try:
        user = await update_user(user_id, changes, db)
    except UserNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=_USER_NOT_FOUND)
    except IntegrityError:
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email is already in use")
    return _to_profile(user)


@router.post(
    "/{user_id}/avatar",
    response_model=UserProfile,
    summary="Upload a profile picture",
)
@limiter.limit("10/minute")
async def post_avatar(
    request: Request,
    user_id: str,
    file: UploadFile = File(...),
    db: AsyncSession = Depends(get_db),
) -> UserProfile:
    if file.content_type not in ALLOWED_CONTENT_TYPES:
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            detail=f"Unsupported image type '{file.content_type}'",
        )
    content = await file.read()
    if len(content) > MAX_AVATAR_BYTES:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail="Image exceeds the 5 MB limit",
        )

    try:
        await get_user(user_id, db)
    except UserNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=_USER_NOT_FOUND)

    try:
        image_url = await upload_image(file.filename or "avatar", content, file.content_type)
    except ImageUploadError:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to upload image")

    user = await update_user(user_id, {"image": image_url}, db)
    logger.info("Profile picture updated for user %s", user_id)
    return _to_profile(user)
