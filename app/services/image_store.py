import logging
import os
import shutil
import threading
import time
from functools import lru_cache
from pathlib import Path
from typing import BinaryIO

from app.config import get_settings

logger = logging.getLogger(__name__)


class ImageStore:
    """
    Disk directory holding uploaded product images.

    Files are named ``prod_<unix-ms><ext>`` and exposed under ``url_prefix``.
    The millisecond component never repeats within a process, so two uploads
    in the same millisecond still get distinct names.
    """

    FILENAME_PREFIX = "prod_"

    def __init__(self, directory, url_prefix: str = "/uploads"):
        self.directory = Path(directory)
        self.url_prefix = url_prefix.rstrip("/")
        self._lock = threading.Lock()
        self._last_stamp = 0

    def ensure_directory(self) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)

    def _next_stamp(self) -> int:
        with self._lock:
            stamp = max(int(time.time() * 1000), self._last_stamp + 1)
            self._last_stamp = stamp
            return stamp

    def generate_filename(self, original_name: str) -> str:
        """Build a unique file name keeping the original extension."""
        ext = os.path.splitext(original_name or "")[1]
        return f"{self.FILENAME_PREFIX}{self._next_stamp()}{ext}"

    def save(self, fileobj: BinaryIO, original_name: str) -> str:
        """
        Write an uploaded file into the store.

        Args:
            fileobj: Readable binary stream with the upload content
            original_name: Client-side file name, used for the extension

        Returns:
            Public URL path of the stored file (``/uploads/<filename>``)
        """
        self.ensure_directory()
        filename = self.generate_filename(original_name)
        with open(self.directory / filename, "wb") as out:
            shutil.copyfileobj(fileobj, out)
        logger.info(f"Stored image {filename}")
        return self.public_path(filename)

    def public_path(self, filename: str) -> str:
        return f"{self.url_prefix}/{filename}"


@lru_cache
def get_image_store() -> ImageStore:
    """Dependency returning the configured image store."""
    return ImageStore(get_settings().UPLOAD_DIR)
