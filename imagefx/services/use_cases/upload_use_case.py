"""
Upload use case.

Moves a user-selected image to storage and returns its public reference:
    1. Validate the source file (non-empty image)
    2. Generate a unique, extension-preserving file name
    3. Request a writable URL for that name
    4. PUT the bytes to the writable URL
    5. Derive the public URL from the generated name (no extra round-trip)

Nothing is cached locally; the bytes only travel through the PUT.
"""

from typing import Optional

from imagefx.config import ALLOWED_MIME_PREFIX, PUBLIC_CONTENT_BASE
from imagefx.core import (
    get_logger,
    guess_content_type,
    make_generated_filename,
    public_reference_for,
    InvalidSourceFile,
    LogTimer,
    TransportError,
    UploadFailed,
)
from imagefx.models import SourceFile, UploadTask
from ..transport import ApiTransport
from .base import UseCase

logger = get_logger(__name__, component="upload")


def validate_source_file(source: SourceFile) -> SourceFile:
    """Reject empty or non-image files; fill in a missing content type."""
    if not source.content:
        raise InvalidSourceFile(f"File {source.name!r} is empty")

    content_type = source.content_type or guess_content_type(source.name)
    if not content_type.lower().startswith(ALLOWED_MIME_PREFIX):
        raise InvalidSourceFile(f"File type {content_type} not supported. Please select an image.")

    if content_type != source.content_type:
        source = SourceFile(name=source.name, content=source.content, content_type=content_type)
    return source


class UploadUseCase(UseCase[SourceFile, UploadTask]):
    """
    Upload coordinator.

    Error Handling:
        - InvalidSourceFile before any network call
        - UploadFailed(stage="slot") when the writable URL cannot be obtained
        - UploadFailed(stage="transfer") when the PUT fails
    """

    def __init__(self, transport: ApiTransport, content_base: Optional[str] = None):
        self.transport = transport
        self.content_base = content_base or PUBLIC_CONTENT_BASE

    async def execute(self, request: SourceFile) -> UploadTask:
        source = validate_source_file(request)
        generated_name = make_generated_filename(source.name)

        logger.info("Upload initiated", extra={
            "original_name": source.name,
            "generated_name": generated_name,
            "size": source.size,
            "content_type": source.content_type,
        })

        try:
            destination_url = await self.transport.request_upload_slot(generated_name)
        except TransportError as e:
            raise UploadFailed("slot", e) from e

        try:
            with LogTimer(logger, f"transfer {generated_name}"):
                await self.transport.put_bytes(destination_url, source.content, source.content_type)
        except TransportError as e:
            raise UploadFailed("transfer", e) from e

        public_reference = public_reference_for(generated_name, self.content_base)
        logger.info("Upload completed", extra={"public_reference": public_reference})

        return UploadTask(
            source_file=source,
            generated_file_name=generated_name,
            destination_url=destination_url,
            public_reference=public_reference,
        )
