"""
File utilities - generated names, extensions and content types
"""

import mimetypes
import os
import re
import secrets
from pathlib import Path

from imagefx.config import (
    DEFAULT_EXTENSION,
    DOWNLOAD_FILENAME_TEMPLATE,
    DOWNLOAD_ID_LENGTH,
    ID_ALPHABET,
    ID_LENGTH,
    PUBLIC_CONTENT_BASE,
)


def generate_id(length: int = ID_LENGTH, alphabet: str = ID_ALPHABET) -> str:
    """Random identifier drawn from `alphabet` with a CSPRNG

    21 characters over 62 symbols is ~125 bits, so no uniqueness check is made.
    """
    if length <= 0:
        raise ValueError("length must be positive")
    return "".join(secrets.choice(alphabet) for _ in range(length))


def get_file_extension(filename: str, default: str = DEFAULT_EXTENSION) -> str:
    """Extension without the dot, or `default` when there is none

    Example:
        >>> get_file_extension("photo.PNG")
        'PNG'
        >>> get_file_extension("photo")
        'jpg'
    """
    base = os.path.basename(filename or "")
    if "." not in base:
        return default
    ext = re.sub(r"[^A-Za-z0-9]", "", base.rsplit(".", 1)[1])
    return ext or default


def make_generated_filename(original_name: str) -> str:
    return f"{generate_id()}.{get_file_extension(original_name)}"


def public_reference_for(generated_filename: str, base: str = PUBLIC_CONTENT_BASE) -> str:
    """Read URL of an uploaded object. Pure: no network involved."""
    return f"{base.rstrip('/')}/{generated_filename}"


def guess_content_type(filename: str, default: str = "application/octet-stream") -> str:
    content_type, _ = mimetypes.guess_type(filename or "")
    return content_type or default


def make_download_filename() -> str:
    return DOWNLOAD_FILENAME_TEMPLATE.format(id=generate_id(DOWNLOAD_ID_LENGTH))


def ensure_directory(dir_path: Path) -> Path:
    dir_path.mkdir(parents=True, exist_ok=True)
    return dir_path
