"""
Upload value objects.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class SourceFile:
    """A file picked by the user.

    Attributes:
        name: Original file name, used only for its extension
        content: Raw bytes
        content_type: MIME type sent with the byte transfer
    """
    name: str
    content: bytes = field(repr=False)
    content_type: str

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class UploadTask:
    """One upload: where the bytes were written and where they can be read."""
    source_file: SourceFile
    generated_file_name: str
    destination_url: str = field(repr=False)
    public_reference: str
