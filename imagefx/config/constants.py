"""
Constants configuration

Compiled-in identifiers and workflow timing. None of these are read from the
environment.
"""

# Account and effect the playground submits jobs for
USER_ID = "DObRu1vyStbUynoQmTcHBlhs55z2"
EFFECT_ID = "mugshot"
MODEL = "image-effects"
TOOL_TYPE = "image-effects"

# Polling: 60 attempts x 2s = 120s ceiling
POLL_INTERVAL_SECONDS = 2.0
MAX_POLL_ATTEMPTS = 60

# Generated file names
ID_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789"
ID_LENGTH = 21
DEFAULT_EXTENSION = "jpg"
DOWNLOAD_ID_LENGTH = 8
DOWNLOAD_FILENAME_TEMPLATE = "mugshot_result_{id}.jpg"

# Result payload keys, primary first
RESULT_IMAGE_KEYS = ("image", "mediaUrl")

# API settings
API_TITLE = "ImageFX Playground API"
API_DESCRIPTION = "Upload an image, apply the mugshot effect and download the result"
API_VERSION = "1.0.0"

ALLOWED_MIME_PREFIX = "image/"

__all__ = [
    "USER_ID",
    "EFFECT_ID",
    "MODEL",
    "TOOL_TYPE",
    "POLL_INTERVAL_SECONDS",
    "MAX_POLL_ATTEMPTS",
    "ID_ALPHABET",
    "ID_LENGTH",
    "DEFAULT_EXTENSION",
    "DOWNLOAD_ID_LENGTH",
    "DOWNLOAD_FILENAME_TEMPLATE",
    "RESULT_IMAGE_KEYS",
    "API_TITLE",
    "API_DESCRIPTION",
    "API_VERSION",
    "ALLOWED_MIME_PREFIX",
]
