"""User profile API endpoints."""

from fastapi import APIRouter, Depends, File, Request, UploadFile

from app.dependencies import CurrentUser, get_current_user
from app.rate_limit import limiter
from app.schemas.user import ProfilePicResponse
from app.services.auth import get_auth_service
from app.services.uploads import PROFILE_PIC_FIELD, get_upload_service
from app.store import Store, get_store

router = APIRouter(prefix="/api", tags=["Users"])


@router.post("/user/profile-pic", response_model=ProfilePicResponse)
@router.post("/auth/profile-pic", response_model=ProfilePicResponse, include_in_schema=False)
@limiter.limit("10/minute")
async def upload_profile_pic(
    request: Request,
    profile_pic: UploadFile | None = File(None, alias=PROFILE_PIC_FIELD),
    user: CurrentUser = Depends(get_current_user),
    store: Store = Depends(get_store),
) -> ProfilePicResponse:
    """Upload a new profile picture for the caller."""
    auth_service = get_auth_service()
    auth_service.get_user(store, user.user_id)

    filename = await get_upload_service().store_file(PROFILE_PIC_FIELD, profile_pic)
    updated = auth_service.set_profile_picture(store, user.user_id, filename)
    return ProfilePicResponse(profile_pic=updated.profile_pic)
