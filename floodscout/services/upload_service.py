import logging

from fastapi import UploadFile

from floodscout.services.image_store import ImageStore
from floodscout.utils.exceptions import UpstreamError, ValidationError
from floodscout.utils.response import mask_secrets

logger = logging.getLogger(__name__)


def _size_label(max_size_bytes: int) -> str:
    return f"{max_size_bytes // (1024 * 1024)}MB"


def validate_image(content_type: str | None, size: int, max_size_bytes: int) -> None:
    """Reject non-images and oversize files before anything is stored."""
    if not content_type or not content_type.startswith("image/"):
        logger.warning("Rejected upload with content type %r", content_type)
        raise ValidationError("File must be an image")
    if size > max_size_bytes:
        logger.warning("Rejected upload of %d bytes (limit %d)", size, max_size_bytes)
        raise ValidationError(f"File size must be less than {_size_label(max_size_bytes)}")


class UploadService:
    def __init__(self, image_store: ImageStore, max_size_bytes: int):
        self.image_store = image_store
        self.max_size_bytes = max_size_bytes

    async def upload(self, file: UploadFile | None) -> str:
        """Validate and persist one uploaded image, returning its URL."""
        if file is None:
            raise ValidationError("No file provided")

        content = await file.read()
        validate_image(file.content_type, len(content), self.max_size_bytes)

        try:
            image_url = await self.image_store.save(
                content, file.filename or "upload", file.content_type
            )
        except Exception as e:
            logger.exception("Image upload failed: %s", mask_secrets(str(e)))
            raise UpstreamError("Failed to upload image") from e

        logger.info("Uploaded %s (%d bytes) via %s", file.filename, len(content), type(self.image_store).__name__)
        return image_url
