"""
Application configuration and settings
"""

import os

# Load environment variables from .env file
from dotenv import load_dotenv
load_dotenv()

from .constants import (
    USER_ID,
    EFFECT_ID,
    MODEL,
    TOOL_TYPE,
    POLL_INTERVAL_SECONDS,
    MAX_POLL_ATTEMPTS,
    ID_ALPHABET,
    ID_LENGTH,
    DEFAULT_EXTENSION,
    DOWNLOAD_ID_LENGTH,
    DOWNLOAD_FILENAME_TEMPLATE,
    RESULT_IMAGE_KEYS,
    API_TITLE,
    API_DESCRIPTION,
    API_VERSION,
    ALLOWED_MIME_PREFIX,
)

# Remote endpoints
API_BASE_URL = os.getenv("IMAGEFX_API_BASE", "https://api.chromastudio.ai").rstrip("/")
PUBLIC_CONTENT_BASE = os.getenv("IMAGEFX_CONTENT_BASE", "https://contents.maxstudio.ai").rstrip("/")

# Default timeout for upload/submit/status requests (seconds)
HTTP_TIMEOUT_SECONDS = float(os.getenv("IMAGEFX_HTTP_TIMEOUT", "30"))

# File upload settings
MAX_UPLOAD_SIZE = int(os.getenv("MAX_UPLOAD_SIZE", str(20 * 1024 * 1024)))  # 20MB default

# CORS origins
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv(
        "CORS_ORIGINS",
        "http://localhost:3000,http://localhost:5173",
    ).split(",")
    if origin.strip()
]
