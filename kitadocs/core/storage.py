"""
Object storage for uploaded documents and article images, backed by Cloudinary.

Routes receive a storage instance through ``Depends(get_storage)`` so tests can
substitute an in-memory implementation.
"""
import logging
import secrets
import time
from dataclasses import dataclass
from functools import lru_cache
from typing import List, Optional

import cloudinary
import cloudinary.uploader
import cloudinary.exceptions
from fastapi import UploadFile

from ..config import settings
from ..exceptions import ValidationException, ExternalServiceException

# Set up logger for this module
logger = logging.getLogger(__name__)


@dataclass
class StoredFile:
    """Result of a successful upload"""
    url: str
    public_id: str
    filename: Optional[str] = None
    content_type: Optional[str] = None


def generate_object_key(prefix: str) -> str:
    """Build a collision-resistant key of the form ``<prefix>-<millis>-<hex>``"""
    return f"{prefix}-{int(time.time() * 1000)}-{secrets.token_hex(8)}"


async def read_upload(file: UploadFile, max_size: Optional[int] = None) -> bytes:
    """
    Read an uploaded file fully into memory and enforce the size limit.

    Raises:
        ValidationException: If the file exceeds ``max_size`` bytes
    """
    max_size = max_size or settings.upload_max_file_size
    content = await file.read()
    if len(content) > max_size:
        raise ValidationException(
            f"File {file.filename} exceeds the maximum size of {max_size // (1024 * 1024)}MB"
        )
    return content


def validate_documents(files: List[UploadFile]) -> None:
    """Check the document count before anything is read or uploaded"""
    if len(files) > settings.upload_max_files:
        raise ValidationException(f"A maximum of {settings.upload_max_files} files can be uploaded")


def validate_image(file: UploadFile) -> None:
    """Only image/* content types are accepted for article images"""
    if not (file.content_type or "").startswith("image/"):
        raise ValidationException("Only image files are allowed")


class CloudinaryStorage:
    """Uploads raw bytes to Cloudinary under a configured folder"""

    def __init__(self, folder: str):
        self.folder = folder
        cloudinary.config(
            cloud_name=settings.cloudinary_cloud_name,
            api_key=settings.cloudinary_api_key,
            api_secret=settings.cloudinary_api_secret,
            secure=True
        )

    def upload(self, content: bytes, prefix: str, filename: Optional[str] = None,
               content_type: Optional[str] = None) -> StoredFile:
        """
        Upload file content and return its public URL.

        Raises:
            ExternalServiceException: If Cloudinary rejects the upload
        """
        key = generate_object_key(prefix)
        try:
            result = cloudinary.uploader.upload(
                content,
                folder=self.folder,
                public_id=key,
                resource_type="auto"
            )
        except cloudinary.exceptions.Error as e:
            logger.error(f"Cloudinary API error during upload of {filename or key}: {str(e)}")
            raise ExternalServiceException("Failed to upload file") from e

        secure_url = result.get("secure_url")
        if not secure_url:
            logger.error("Cloudinary upload result did not contain a secure_url.")
            raise ExternalServiceException("Failed to upload file")

        logger.info(f"Successfully uploaded {filename or key} to Cloudinary. URL: {secure_url}")
        return StoredFile(
            url=secure_url,
            public_id=result.get("public_id", f"{self.folder}/{key}"),
            filename=filename,
            content_type=content_type
        )

    def delete(self, public_id: str) -> None:
        try:
            cloudinary.uploader.destroy(public_id)
            logger.info(f"Deleted {public_id} from Cloudinary")
        except cloudinary.exceptions.Error as e:
            logger.error(f"Cloudinary API error while deleting {public_id}: {str(e)}")


def discard_uploads(storage, uploaded: List[StoredFile]) -> None:
    """Best-effort removal of objects whose owning record was never saved"""
    for stored in uploaded:
        try:
            storage.delete(stored.public_id)
        except Exception as e:
            logger.error(f"Failed to clean up uploaded file {stored.public_id}: {str(e)}")


@lru_cache()
def get_storage() -> CloudinaryStorage:
    """FastAPI dependency returning the configured storage backend"""
    return CloudinaryStorage(folder=settings.storage_folder)
