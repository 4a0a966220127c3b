import logging
from typing import Optional
from urllib.parse import urlparse
from minio import Minio

from .settings import settings

logger = logging.getLogger(__name__)


def get_storage_endpoint() -> tuple:
    """
    Split AWS_ENDPOINT_URL into the host[:port] Minio expects and the TLS flag.

    Returns:
        tuple: (endpoint, secure)
    """
    url = settings.AWS_ENDPOINT_URL
    parsed = urlparse(url if "://" in url else f"https://{url}")
    return parsed.netloc, parsed.scheme == "https"


_minio_client: Optional[Minio] = None


def get_minio_client() -> Optional[Minio]:
    """Get the singleton S3 client, or None when object storage is not configured"""
    global _minio_client

    if not settings.AWS_S3_ENABLED:
        return None

    if not settings.AWS_S3_BUCKET_NAME:
        logger.warning("AWS_S3_ENABLED is set but AWS_S3_BUCKET_NAME is missing, using local storage")
        return None

    if _minio_client is None:
        endpoint, secure = get_storage_endpoint()
        logger.info(f"Initializing S3 client for endpoint: {endpoint}")
        _minio_client = Minio(
            endpoint,
            access_key=settings.AWS_ACCESS_KEY_ID,
            secret_key=settings.AWS_SECRET_ACCESS_KEY,
            secure=secure,
            region=settings.AWS_REGION
        )

    return _minio_client


def reset_minio_client():
    """Reset the S3 client (useful for testing)"""
    global _minio_client
    _minio_client = None
