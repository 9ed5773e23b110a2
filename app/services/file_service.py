"""File service for pet image uploads and storage."""

import io
import logging
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from fastapi import UploadFile
from PIL import Image

from app.config import Settings


logger = logging.getLogger(__name__)


@dataclass
class StoredImage:
    """An image written to storage."""
    public_id: str
    url: str
    original_filename: str


class FileService:
    """Service for validating, resizing and storing pet images."""

    def __init__(self, settings: Settings):
        """
        Initialize FileService with configuration.

        Args:
            settings: Application settings containing storage configuration
        """
        self.settings = settings
        self.storage_path = Path(settings.storage_path)
        self.storage_path.mkdir(parents=True, exist_ok=True)
        self.allowed_types = settings.get_allowed_image_types_list()
        self.max_size = settings.max_image_size_bytes
        self.max_width = settings.image_max_width
        self.max_height = settings.image_max_height
        self.quality = settings.image_quality

    async def save_image(self, file: UploadFile, prefix: str = "pet") -> StoredImage:
        """
        Validate an uploaded image, downsize it if needed and store it.

        Args:
            file: Uploaded file from FastAPI
            prefix: Filename prefix, e.g. the pet id the image belongs to

        Returns:
            StoredImage: Public id, storage path and URL of the stored file

        Raises:
            ValueError: If file is not a valid image or exceeds size limits
        """
        if file.content_type not in self.allowed_types:
            raise ValueError(
                f"Invalid file type. Allowed types: {', '.join(self.allowed_types)}"
            )

        contents = await file.read()

        if len(contents) > self.max_size:
            size_mb = len(contents) / (1024 * 1024)
            max_mb = self.max_size / (1024 * 1024)
            raise ValueError(
                f"File size ({size_mb:.2f}MB) exceeds maximum allowed size ({max_mb}MB)"
            )

        # verify() leaves the image unusable, so decode twice
        try:
            Image.open(io.BytesIO(contents)).verify()
            image = Image.open(io.BytesIO(contents))
        except Exception as e:
            raise ValueError(f"File is not a valid image: {str(e)}")

        ext = Path(file.filename).suffix.lower() if file.filename else ""
        if not ext:
            ext = ".jpg"
        public_id = f"{prefix}_{uuid.uuid4().hex}{ext}"
        file_path = self.storage_path / public_id

        max_box = (self.max_width, self.max_height)
        if image.width > max_box[0] or image.height > max_box[1]:
            image.thumbnail(max_box, Image.Resampling.LANCZOS)

        # JPEG has no alpha channel
        if ext in (".jpg", ".jpeg") and image.mode in ("RGBA", "LA", "P"):
            background = Image.new("RGB", image.size, (255, 255, 255))
            if image.mode == "P":
                image = image.convert("RGBA")
            background.paste(image, mask=image.split()[-1])
            image = background

        image.save(file_path, optimize=True, quality=self.quality)

        logger.info(f"Stored image {public_id} ({len(contents)} bytes)")

        return StoredImage(
            public_id=public_id,
            url=self.get_image_url(public_id),
            original_filename=file.filename or public_id,
        )

    async def delete_image(self, public_id: str) -> None:
        """
        Delete a stored image.

        Args:
            public_id: Identifier returned by save_image

        Raises:
            ValueError: If public_id is not a bare file name
            FileNotFoundError: If image file does not exist
        """
        if not public_id or Path(public_id).name != public_id:
            raise ValueError("Invalid image id")

        file_path = self.storage_path / public_id
        if not file_path.exists():
            raise FileNotFoundError(f"Image file not found: {public_id}")

        file_path.unlink()
        logger.info(f"Deleted image {public_id}")

    def get_image_url(self, public_id: Optional[str]) -> Optional[str]:
        """
        Generate public URL for a stored image.

        Args:
            public_id: Identifier returned by save_image

        Returns:
            Public URL for the image, or None if public_id is None
        """
        if not public_id:
            return None

        return f"{self.settings.storage_url.rstrip('/')}/{public_id}"
