"""
Campus Match - Photo hosting.

Uploads profile photos to Cloudinary with unsigned upload presets.
One attempt per photo; retry policy belongs to the caller.
"""

import logging
from typing import Protocol

import httpx

from campus_match.config import settings
from onboarding.errors import UploadError
from onboarding.state import PhotoAsset

logger = logging.getLogger(__name__)

CLOUDINARY_UPLOAD_URL = "https://api.cloudinary.com/v1_1/{cloud_name}/image/upload"


class AssetUploader(Protocol):
    """Uploads one photo and returns its public URL, or raises UploadError."""

    async def upload(self, photo: PhotoAsset) -> str:
        ...


class CloudinaryUploader:
    """Unsigned Cloudinary image upload over httpx."""

    def __init__(
        self,
        cloud_name: str,
        upload_preset: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.cloud_name = cloud_name
        self.upload_preset = upload_preset
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls) -> "CloudinaryUploader":
        return cls(
            cloud_name=settings.cloudinary_cloud_name,
            upload_preset=settings.cloudinary_upload_preset,
            timeout=settings.upload_timeout_seconds,
        )

    @property
    def upload_url(self) -> str:
        return CLOUDINARY_UPLOAD_URL.format(cloud_name=self.cloud_name)

    async def upload(self, photo: PhotoAsset) -> str:
        if photo.released:
            raise UploadError(f"{photo.filename} was removed before upload")

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(
                    self.upload_url,
                    data={"upload_preset": self.upload_preset},
                    files={"file": (photo.filename, photo.content, photo.content_type)},
                )
                response.raise_for_status()
                body = response.json()
        except httpx.HTTPError as e:
            logger.warning(f"Cloudinary upload failed for {photo.filename}: {e}")
            raise UploadError() from e
        except ValueError as e:
            logger.warning(f"Cloudinary returned invalid JSON for {photo.filename}: {e}")
            raise UploadError() from e

        url = body.get("secure_url") or body.get("url")
        if not url:
            raise UploadError(f"No URL returned for {photo.filename}")
        return url
