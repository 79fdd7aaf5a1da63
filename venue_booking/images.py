"""File-system storage for uploaded venue images."""

import logging
import shutil
import uuid
from pathlib import Path

from fastapi import UploadFile

from .config import IMAGE_DIR
from .domain.errors import ValidationError

logger = logging.getLogger(__name__)

URL_PREFIX = "/static/images/"
ALLOWED_EXTENSIONS = {".png", ".jpg", ".jpeg", ".gif", ".webp"}


class ImageStorage:
    def __init__(self, directory: Path = IMAGE_DIR) -> None:
        self.directory = Path(directory)

    def save(self, upload: UploadFile) -> str:
        """Store the upload under a random name and return its public path.

        Raises:
            ValidationError: If the file extension is not an image type.
        """
        extension = Path(upload.filename or "").suffix.lower()
        if extension not in ALLOWED_EXTENSIONS:
            raise ValidationError(f"Unsupported image type '{extension or upload.filename}'")
        self.directory.mkdir(parents=True, exist_ok=True)
        filename = f"{uuid.uuid4()}{extension}"
        with (self.directory / filename).open("wb") as target:
            shutil.copyfileobj(upload.file, target)
        logger.debug("Image saved as %s", filename)
        return URL_PREFIX + filename

    def delete(self, image_path: str | None) -> None:
        if not image_path or not image_path.startswith(URL_PREFIX):
            return
        path = self.directory / Path(image_path).name
        try:
            path.unlink(missing_ok=True)
            logger.debug("Image deleted: %s", image_path)
        except OSError:
            logger.exception("Could not delete image file %s", image_path)
