"""
Profile image hosting.

Uploads go to Cloudinary's signed upload API:
https://cloudinary.com/documentation/image_upload_api_reference
"""

import hashlib
import logging
import time
from dataclasses import dataclass, field
from typing import Optional

import httpx

from employee_service.core.config import settings

logger = logging.getLogger("employee_service.image_storage")


class ImageUploadError(Exception):
    """Raised when the image host rejects or fails an upload."""
    pass


@dataclass
class ProfileImage:
    """An uploaded image held in memory until validation has passed."""
    filename: str
    content_type: str
    content: bytes = field(repr=False)

    @property
    def size(self) -> int:
        return len(self.content)


class ImageStorage:
    """Base class for image hosting backends."""

    async def upload(self, image: ProfileImage) -> str:
        """Upload the image and return its public URL."""
        raise NotImplementedError


def sign_upload_params(params: dict[str, str], api_secret: str) -> str:
    """
    Compute a Cloudinary request signature: SHA-1 over the alphabetically
    sorted ``key=value`` pairs joined by ``&``, followed by the API secret.
    """
    to_sign = "&".join(f"{key}={params[key]}" for key in sorted(params) if params[key] != "")
    return hashlib.sha1(f"{to_sign}{api_secret}".encode("utf-8")).hexdigest()


class CloudinaryImageStorage(ImageStorage):
    """Cloudinary-backed image storage using httpx."""

    API_BASE_URL = "https://api.cloudinary.com/v1_1/{cloud_name}/image/upload"

    def __init__(
        self,
        cloud_name: Optional[str] = None,
        api_key: Optional[str] = None,
        api_secret: Optional[str] = None,
        folder: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.cloud_name = cloud_name or settings.CLOUDINARY_CLOUD_NAME
        self.api_key = api_key or settings.CLOUDINARY_API_KEY
        self.api_secret = api_secret or settings.CLOUDINARY_API_SECRET
        self.folder = folder if folder is not None else settings.CLOUDINARY_FOLDER
        self.timeout = timeout or settings.IMAGE_UPLOAD_TIMEOUT
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

        if not (self.cloud_name and self.api_key and self.api_secret):
            logger.warning("Cloudinary storage initialized without complete credentials")

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self.timeout, transport=self._transport)
        return self._client

    async def close(self) -> None:
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()

    async def upload(self, image: ProfileImage) -> str:
        if not (self.cloud_name and self.api_key and self.api_secret):
            raise ImageUploadError("Image storage is not configured")

        params = {"timestamp": str(int(time.time())), "folder": self.folder}
        data = {
            **params,
            "api_key": self.api_key,
            "signature": sign_upload_params(params, self.api_secret),
        }
        files = {"file": (image.filename, image.content, image.content_type)}
        url = self.API_BASE_URL.format(cloud_name=self.cloud_name)

        try:
            client = await self._get_client()
            response = await client.post(url, data=data, files=files)
        except httpx.HTTPError as e:
            logger.error(f"Cloudinary upload request failed: {e}")
            raise ImageUploadError("Image upload request failed") from e

        if response.status_code != 200:
            logger.error(f"Cloudinary upload rejected: HTTP {response.status_code}")
            raise ImageUploadError(f"Image host returned HTTP {response.status_code}")

        try:
            body = response.json()
        except ValueError as e:
            raise ImageUploadError("Image host returned an invalid response") from e

        image_url = body.get("secure_url") or body.get("url")
        if not image_url:
            raise ImageUploadError("Image host response has no URL")

        logger.info(f"Uploaded profile image {body.get('public_id', image.filename)}")
        return image_url


_image_storage: Optional[ImageStorage] = None


def get_image_storage() -> ImageStorage:
    """Get the process-wide image storage instance."""
    global _image_storage
    if _image_storage is None:
        _image_storage = CloudinaryImageStorage()
    return _image_storage
