import math
import os
import uuid
import mimetypes
from datetime import datetime, timezone
from typing import Any, Dict, List
import httpx
import structlog

from ..config import settings
from ..schemas.avatar import Avatar
from ..schemas.size import Measurements


logger = structlog.get_logger("tryon.avatar_api")

# Fields copied from the provider's measurement payload, provider name -> ours
_MEASUREMENT_FIELDS = {
    "height": "height",
    "bust": "bust",
    "waist": "waist",
    "hips": "hips",
    "shoulder_width": "shoulder_width",
    "inseam": "inseam",
}


class AvatarApiError(RuntimeError):
    pass


def parse_measurements(raw: Any) -> Measurements:
    """Pick the known body measurements out of the provider payload.

    Zero, empty, non-finite and non-numeric values are dropped.
    """
    values: Dict[str, float] = {}
    if isinstance(raw, dict):
        for src, dst in _MEASUREMENT_FIELDS.items():
            v = raw.get(src)
            if isinstance(v, bool) or not isinstance(v, (int, float, str)):
                continue
            try:
                num = float(v)
            except ValueError:
                continue
            if num and math.isfinite(num):
                values[dst] = num
    return Measurements(**values)


class AvatarApiClient:
    def __init__(self) -> None:
        self.base = settings.avatar_api_base.rstrip("/")
        self.api_key = settings.avatar_api_key
        self.timeout = settings.avatar_api_timeout
        self.storage_dir = settings.storage_dir

    def _headers(self) -> Dict[str, str]:
        if not self.api_key:
            raise AvatarApiError("AVATAR_API_KEY not configured")
        return {"Authorization": f"Bearer {self.api_key}"}

    async def generate(self, photo_path: str) -> Avatar:
        headers = self._headers()
        guessed, _ = mimetypes.guess_type(photo_path)
        content_type = guessed or "image/jpeg"
        avatar_id = uuid.uuid4().hex
        written: List[str] = []
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                with open(photo_path, "rb") as f:
                    files = {"image": ("user_photo" + (os.path.splitext(photo_path)[1] or ".jpg"), f, content_type)}
                    data = {"model_type": "full_body", "include_measurements": "true"}
                    resp = await client.post(f"{self.base}/avatar/generate", headers=headers, files=files, data=data)
                resp.raise_for_status()
                payload = resp.json()
                if not isinstance(payload, dict):
                    raise AvatarApiError("Avatar API returned an invalid response")

                mesh_url = payload.get("mesh_url")
                texture_url = payload.get("texture_url")
                if not mesh_url or not texture_url:
                    raise AvatarApiError("Avatar API response missing mesh_url/texture_url")

                mesh_name = f"{avatar_id}_mesh.glb"
                texture_name = f"{avatar_id}_texture.jpg"
                written.append(await self._download(client, mesh_url, mesh_name))
                written.append(await self._download(client, texture_url, texture_name))
        except httpx.HTTPError as e:
            self._discard(written)
            logger.error("avatar_api_failed", avatar_id=avatar_id, error=str(e))
            raise AvatarApiError(f"Avatar API request failed: {e}") from e
        except ValueError as e:
            # body was not JSON
            self._discard(written)
            raise AvatarApiError("Avatar API returned an invalid response") from e
        except AvatarApiError:
            self._discard(written)
            raise

        measurements = parse_measurements(payload.get("measurements"))
        logger.info(
            "avatar_generated",
            avatar_id=avatar_id,
            measurements=measurements.model_dump(exclude_none=True),
        )
        return Avatar(
            id=avatar_id,
            mesh_url=f"/files/{mesh_name}",
            texture_url=f"/files/{texture_name}",
            created_at=datetime.now(tz=timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
            measurements=measurements,
        )

    async def _download(self, client: httpx.AsyncClient, url: str, name: str) -> str:
        os.makedirs(self.storage_dir, exist_ok=True)
        resp = await client.get(url)
        resp.raise_for_status()
        out_path = os.path.join(self.storage_dir, name)
        with open(out_path, "wb") as out:
            out.write(resp.content)
        return out_path

    def _discard(self, paths: List[str]) -> None:
        for path in paths:
            try:
                os.remove(path)
            except OSError:
                logger.warning("avatar_asset_cleanup_failed", path=path)
