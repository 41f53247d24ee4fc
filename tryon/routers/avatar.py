import os
import tempfile
from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile, status
import structlog

from ..config import settings
from ..security import verify_client
from ..schemas.avatar import Avatar
from ..services.avatar_api import AvatarApiClient, AvatarApiError
from ..services.avatar_store import AvatarStore


logger = structlog.get_logger("tryon.avatars")

router = APIRouter(prefix="/avatar", tags=["avatar"], dependencies=[Depends(verify_client)])


def get_avatar_store(request: Request) -> AvatarStore:
    return request.app.state.avatar_store


def get_avatar_client() -> AvatarApiClient:
    return AvatarApiClient()


def _safe_suffix(filename: str | None, fallback: str = ".jpg") -> str:
    if not filename:
        return fallback
    suffix = os.path.splitext(os.path.basename(filename))[1]
    return suffix or fallback


@router.post("/generate", response_model=Avatar, status_code=status.HTTP_201_CREATED)
async def generate_avatar(
    photo: UploadFile | None = File(None),
    store: AvatarStore = Depends(get_avatar_store),
    client: AvatarApiClient = Depends(get_avatar_client),
):
    """Generate a 3D avatar (mesh, texture and measurements) from a user photo."""
    if photo is None:
        raise HTTPException(status_code=400, detail="No photo uploaded")
    if photo.content_type is None or not photo.content_type.startswith("image/"):
        raise HTTPException(status_code=400, detail="Please upload an image file")

    content = await photo.read()
    if len(content) > settings.max_upload_bytes:
        raise HTTPException(status_code=413, detail="Photo exceeds maximum upload size")

    with tempfile.NamedTemporaryFile(delete=False, suffix=_safe_suffix(photo.filename)) as tmp:
        tmp.write(content)
        photo_path = tmp.name
    try:
        avatar = await client.generate(photo_path)
    except AvatarApiError as e:
        raise HTTPException(status_code=502, detail=str(e))
    finally:
        try:
            os.remove(photo_path)
        except OSError:
            logger.warning("temp_file_cleanup_failed", path=photo_path)

    return store.save(avatar)


@router.get("/{avatar_id}", response_model=Avatar)
async def get_avatar(avatar_id: str, store: AvatarStore = Depends(get_avatar_store)):
    avatar = store.get(avatar_id)
    if avatar is None:
        raise HTTPException(status_code=404, detail="Avatar not found")
    return avatar
