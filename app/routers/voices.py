"""Voice feed API endpoints."""

from fastapi import APIRouter, Depends, File, Request, UploadFile

from app.dependencies import CurrentUser, get_current_user
from app.rate_limit import limiter
from app.schemas.voice import (
    FeedVoiceResponse,
    LikeRequest,
    LikeResponse,
    MyVoiceResponse,
    ReplyResponse,
    SuccessResponse,
)
from app.services.auth import get_auth_service
from app.services.uploads import AUDIO_FIELD, get_upload_service
from app.services.voices import get_voice_service
from app.store import Store, get_store

router = APIRouter(prefix="/api", tags=["Voices"])


@router.post("/voice", response_model=SuccessResponse)
@limiter.limit("20/minute")
async def post_voice(
    request: Request,
    audio: UploadFile | None = File(None, alias=AUDIO_FIELD),
    user: CurrentUser = Depends(get_current_user),
    store: Store = Depends(get_store),
) -> SuccessResponse:
    """Post a recorded clip to the feed."""
    get_auth_service().get_user(store, user.user_id)

    filename = await get_upload_service().store_file(AUDIO_FIELD, audio)
    voice = get_voice_service().post_voice(store, user.user_id, filename)
    return SuccessResponse(id=voice.id)


@router.post("/voice/{voice_id}/reply", response_model=SuccessResponse)
@limiter.limit("20/minute")
async def reply_to_voice(
    request: Request,
    voice_id: str,
    audio: UploadFile | None = File(None, alias=AUDIO_FIELD),
    user: CurrentUser = Depends(get_current_user),
    store: Store = Depends(get_store),
) -> SuccessResponse:
    """Attach an audio reply to a voice."""
    service = get_voice_service()
    service.get_voice(store, voice_id)

    filename = await get_upload_service().store_file(AUDIO_FIELD, audio)
    reply = service.reply(store, voice_id, user.user_id, filename)
    return SuccessResponse(id=reply.id)


@router.post("/voice/{voice_id}/like", response_model=LikeResponse)
def like_voice(
    voice_id: str,
    body: LikeRequest | None = None,
    user: CurrentUser = Depends(get_current_user),
    store: Store = Depends(get_store),
) -> LikeResponse:
    """Like (``like: true``) or unlike a voice."""
    like = body.like if body else False
    result = get_voice_service().set_like(store, voice_id, user.user_id, like)
    return LikeResponse(**result)


@router.get("/voice/{voice_id}/replies", response_model=list[ReplyResponse])
def list_replies(
    voice_id: str,
    user: CurrentUser = Depends(get_current_user),
    store: Store = Depends(get_store),
) -> list[ReplyResponse]:
    """List the replies of one voice."""
    return [ReplyResponse(**r) for r in get_voice_service().get_replies(store, voice_id)]


@router.get("/voices", response_model=list[FeedVoiceResponse])
def list_feed(
    user: CurrentUser = Depends(get_current_user),
    store: Store = Depends(get_store),
) -> list[FeedVoiceResponse]:
    """List every voice, newest first."""
    return [FeedVoiceResponse(**v) for v in get_voice_service().list_feed(store, user.user_id)]


@router.get("/my-voices", response_model=list[MyVoiceResponse])
def list_my_voices(
    user: CurrentUser = Depends(get_current_user),
    store: Store = Depends(get_store),
) -> list[MyVoiceResponse]:
    """List the caller's own voices, newest first."""
    return [MyVoiceResponse(**v) for v in get_voice_service().list_mine(store, user.user_id)]


@router.delete("/voice/{voice_id}", response_model=SuccessResponse, response_model_exclude_none=True)
def delete_voice(
    voice_id: str,
    user: CurrentUser = Depends(get_current_user),
    store: Store = Depends(get_store),
) -> SuccessResponse:
    """Delete one of the caller's voices."""
    get_voice_service().delete_voice(store, voice_id, user.user_id)
    return SuccessResponse()
