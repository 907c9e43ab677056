import io
import logging
from dataclasses import dataclass
from typing import Optional

import cloudinary.exceptions
import cloudinary.uploader

from ..core.config import settings
from ..core.errors import ImageUploadError

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES = ("image/png", "image/jpeg", "image/webp")


@dataclass
class UploadedImage:
    public_id: str
    url: str


class CloudinaryImageHost:
    """Uploads doctor avatars to Cloudinary through its SDK."""

    def __init__(
        self,
        cloud_name: Optional[str],
        api_key: Optional[str],
        api_secret: Optional[str],
        timeout: float = 30.0,
    ):
        self.cloud_name = cloud_name
        self.api_key = api_key
        self.api_secret = api_secret
        self.timeout = timeout

    def upload(self, filename: str, content: bytes, content_type: str) -> UploadedImage:
        if not (self.cloud_name and self.api_key and self.api_secret):
            raise ImageUploadError("Image hosting is not configured")

        # Credentials go with each call so no global SDK config is shared
        try:
            result = cloudinary.uploader.upload(
                io.BytesIO(content),
                filename=filename,
                resource_type="image",
                cloud_name=self.cloud_name,
                api_key=self.api_key,
                api_secret=self.api_secret,
                timeout=self.timeout,
            )
        except cloudinary.exceptions.Error as exc:
            logger.error(f"Cloudinary upload failed: {exc}")
            raise ImageUploadError("Failed To Upload Doctor Avatar To Cloudinary")

        if not result or "public_id" not in result or "secure_url" not in result:
            logger.error(f"Cloudinary upload returned an unexpected result: {result}")
            raise ImageUploadError("Failed To Upload Doctor Avatar To Cloudinary")

        return UploadedImage(public_id=result["public_id"], url=result["secure_url"])


def get_image_host() -> CloudinaryImageHost:
    """Image host dependency."""
    return CloudinaryImageHost(
        cloud_name=settings.CLOUDINARY_CLOUD_NAME,
        api_key=settings.CLOUDINARY_API_KEY,
        api_secret=settings.CLOUDINARY_API_SECRET,
        timeout=settings.IMAGE_HOST_TIMEOUT,
    )
