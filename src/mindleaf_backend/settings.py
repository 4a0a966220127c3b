import os
import threading
from typing import List


def _env_flag(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).lower() in ["true", "1", "yes", "on"]


class BackendSettings:
    _instance = None
    _lock = threading.Lock()

    def __init__(self):
        self.DEBUG_MODE = os.environ.get("DEBUG_MODE", "development")
        self.DATABASE_URL = os.environ.get("DATABASE_URL", None)

        origins = os.environ.get(
            "CORS_ALLOWED_ORIGINS",
            "https://mind-leaf.netlify.app,http://localhost:3000,http://127.0.0.1:3000",
        )
        self.CORS_ALLOWED_ORIGINS: List[str] = [o.strip() for o in origins.split(",") if o.strip()]

        self.UPLOADS_DIR = os.environ.get("UPLOADS_DIR", "uploads")

        # Object storage
        self.AWS_S3_ENABLED = _env_flag("AWS_S3_ENABLED")
        self.AWS_S3_BUCKET_NAME = os.environ.get("AWS_S3_BUCKET_NAME", None)
        self.AWS_REGION = os.environ.get("AWS_REGION", "eu-west-1")
        self.AWS_ENDPOINT_URL = os.environ.get("AWS_ENDPOINT_URL", "https://s3.amazonaws.com")
        self.AWS_ACCESS_KEY_ID = os.environ.get("AWS_ACCESS_KEY_ID", None)
        self.AWS_SECRET_ACCESS_KEY = os.environ.get("AWS_SECRET_ACCESS_KEY", None)
        self.PRESIGNED_URL_TTL = int(os.environ.get("PRESIGNED_URL_TTL", "3600"))

        # Authentication
        self.PASSWORD_RESET_TTL = int(os.environ.get("PASSWORD_RESET_TTL", "3600"))
        self.BCRYPT_ROUNDS = int(os.environ.get("BCRYPT_ROUNDS", "12"))
        self.ADMIN_EMAIL = os.environ.get("ADMIN_EMAIL", None)
        self.ADMIN_PASSWORD = os.environ.get("ADMIN_PASSWORD", None)

    def __new__(cls):
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super(BackendSettings, cls).__new__(cls)
        return cls._instance

settings = BackendSettings()
