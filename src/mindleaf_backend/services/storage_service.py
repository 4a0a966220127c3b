import io
import logging
import os
import uuid
from datetime import timedelta
from typing import Optional
from minio import Minio

from ..minio_client import get_minio_client
from ..settings import settings

logger = logging.getLogger(__name__)

LOCAL_FILES_PREFIX = "/files/"
PDF_FOLDER = "pdfs"


class LessonFileStorage:
    """Stores lesson attachments in the S3 bucket, or on local disk when that is unavailable.

    A stored reference is either an object key (``pdfs/<uuid>_<name>``) or a
    public local path starting with ``/files/``.
    """

    def __init__(self, client: Optional[Minio] = None, bucket: Optional[str] = None,
                 uploads_dir: Optional[str] = None, url_ttl: Optional[int] = None):
        self.client = client
        self.bucket = bucket
        self.uploads_dir = uploads_dir or settings.UPLOADS_DIR
        self.url_ttl = url_ttl or settings.PRESIGNED_URL_TTL

    @property
    def remote_enabled(self) -> bool:
        return self.client is not None and bool(self.bucket)

    @staticmethod
    def _object_name(filename: str) -> str:
        name = os.path.basename(filename or "") or "file.pdf"
        return f"{PDF_FOLDER}/{uuid.uuid4()}_{name}"

    def store(self, data: bytes, filename: str, content_type: Optional[str] = None) -> str:
        """Persist data and return the reference to save on the lesson."""
        object_name = self._object_name(filename)

        if self.remote_enabled:
            try:
                self.client.put_object(
                    bucket_name=self.bucket,
                    object_name=object_name,
                    data=io.BytesIO(data),
                    length=len(data),
                    content_type=content_type or "application/pdf"
                )
                logger.info(f"Uploaded object: {self.bucket}/{object_name}")
                return object_name
            except Exception as e:
                logger.error(f"Upload to {self.bucket} failed, storing locally: {e}")

        return self._store_local(data, object_name)

    def _store_local(self, data: bytes, object_name: str) -> str:
        path = os.path.join(self.uploads_dir, object_name)
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "wb") as f:
            f.write(data)
        logger.info(f"Stored file locally: {path}")
        return f"{LOCAL_FILES_PREFIX}{object_name}"

    def resolve(self, reference: Optional[str]) -> Optional[str]:
        """URL a client can fetch the file from, None if it cannot be produced."""
        if not reference:
            return None

        if reference.startswith(LOCAL_FILES_PREFIX):
            return reference

        if not self.remote_enabled:
            return None

        try:
            return self.client.presigned_get_object(
                self.bucket,
                reference,
                expires=timedelta(seconds=self.url_ttl)
            )
        except Exception as e:
            logger.error(f"Could not sign URL for {reference}: {e}")
            return None

    def resolve_or_keep(self, reference: Optional[str]) -> Optional[str]:
        return self.resolve(reference) or reference


_storage_service: Optional[LessonFileStorage] = None


def get_storage_service() -> LessonFileStorage:
    global _storage_service
    if _storage_service is None:
        _storage_service = LessonFileStorage(
            client=get_minio_client(),
            bucket=settings.AWS_S3_BUCKET_NAME
        )
    return _storage_service
