"""Static audio server for uploaded files."""

from fastapi import APIRouter, HTTPException
from fastapi.responses import FileResponse

from app.services.uploads import get_upload_service

router = APIRouter(tags=["Audio"])


@router.get("/audio/{filename}")
def get_audio(filename: str) -> FileResponse:
    """Serve a stored upload by its generated filename."""
    path = get_upload_service().resolve(filename)
    if path is None:
        raise HTTPException(status_code=404, detail="File not found")
    return FileResponse(path)
