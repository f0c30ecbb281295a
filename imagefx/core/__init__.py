"""
Core Module - Cross-cutting concerns and shared infrastructure

Organization:
    - logging.py: Structured logging configuration and utilities
    - exceptions.py: Transport and workflow error taxonomy
    - files.py: Generated identifiers, file names and content types

Usage:
    from imagefx.core import get_logger, UploadFailed, generate_id
"""

# Logging
from .logging import (
    setup_logging,
    get_logger,
    set_job_id,
    set_generation,
    clear_context,
    LogTimer,
)

# Exceptions
from .exceptions import (
    ImageFxError,
    TransportError,
    NetworkUnavailable,
    RequestFailed,
    MalformedResponse,
    DownloadFailed,
    WorkflowError,
    InvalidSourceFile,
    UploadFailed,
    SubmissionFailed,
    MissingArtifact,
    JobFailed,
    JobTimedOut,
    JobSuperseded,
    ActionNotAllowed,
)

# File helpers
from .files import (
    generate_id,
    get_file_extension,
    make_generated_filename,
    public_reference_for,
    guess_content_type,
    make_download_filename,
    ensure_directory,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "set_job_id",
    "set_generation",
    "clear_context",
    "LogTimer",
    "ImageFxError",
    "TransportError",
    "NetworkUnavailable",
    "RequestFailed",
    "MalformedResponse",
    "DownloadFailed",
    "WorkflowError",
    "InvalidSourceFile",
    "UploadFailed",
    "SubmissionFailed",
    "MissingArtifact",
    "JobFailed",
    "JobTimedOut",
    "JobSuperseded",
    "ActionNotAllowed",
    "generate_id",
    "get_file_extension",
    "make_generated_filename",
    "public_reference_for",
    "guess_content_type",
    "make_download_filename",
    "ensure_directory",
]
