"""
Use Cases package - one module per workflow step.

Modules:
- base: Base use case abstract class
- upload_use_case: Move the selected image to storage
- generation_use_case: Submit the effect job and poll it
- download_use_case: Fetch the finished artifact
"""

from .base import UseCase
from .upload_use_case import UploadUseCase, validate_source_file
from .generation_use_case import (
    GenerationUseCase,
    GenerationRequest,
    extract_artifact,
    progress_percent,
)
from .download_use_case import DownloadUseCase, DownloadResult, cache_busted

__all__ = [
    "UseCase",
    "UploadUseCase",
    "validate_source_file",
    "GenerationUseCase",
    "GenerationRequest",
    "extract_artifact",
    "progress_percent",
    "DownloadUseCase",
    "DownloadResult",
    "cache_busted",
]
