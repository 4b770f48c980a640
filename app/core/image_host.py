"""
Client for the third-party image host used for profile pictures.

Uses an unsigned Cloudinary upload preset, so no API secret ever reaches
this service. The host returns the public HTTPS URL that is then stored on
the user row.
"""

import logging

import httpx

from app.core.config import settings

logger = logging.getLogger(__name__)

UPLOAD_URL_TEMPLATE = "https://api.cloudinary.com/v1_1/{cloud_name}/image/upload"
ALLOWED_CONTENT_TYPES = frozenset({"image/jpeg", "image/png", "image/gif", "image/webp"})


class ImageUploadError(RuntimeError):
    pass


async def upload_image(
    filename: str,
    content: bytes,
    content_type: str,
    client: httpx.AsyncClient | None = None,
) -> str:
    """Upload ``content`` and return the hosted image's secure URL.

    Raises:
        ImageUploadError: if the host is not configured, rejects the file,
            or cannot be reached.
    """
    if not settings.IMAGE_HOST_CLOUD_NAME or not settings.IMAGE_HOST_UPLOAD_PRESET:
        raise ImageUploadError("Image host is not configured")

    url = UPLOAD_URL_TEMPLATE.format(cloud_name=settings.IMAGE_HOST_CLOUD_NAME)
    owns_client = client is None
    if owns_client:
        client = httpx.AsyncClient(timeout=settings.IMAGE_HOST_TIMEOUT_SECONDS)

    try:
        response = await client.post(
            url,
            data={"upload_preset": settings.IMAGE_HOST_UPLOAD_PRESET},
            files={"file": (filename, content, content_type)},
        )
        response.raise_for_status()
        body = response.json()
    except (httpx.HTTPError, ValueError) as exc:
        logger.warning("Image upload failed for %s: %s", filename, exc)
        raise ImageUploadError("Failed to upload image") from exc
    finally:
        if owns_client:
            await client.aclose()

    secure_url = body.get("secure_url") if isinstance(body, dict) else None
    if not secure_url:
        raise ImageUploadError("Image host response did not include a URL")
    return secure_url
