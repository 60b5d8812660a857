"""Attachment models used by the intake service."""

import mimetypes
import os
from pydantic import BaseModel, field_validator, model_validator

from config.settings import get_portal_config


class CVAttachment(BaseModel):
    """Uploaded CV document (PDF, DOC or DOCX, size capped by config)."""
    filename: str
    content_type: str = "application/octet-stream"
    data: bytes

    @field_validator("filename")
    @classmethod
    def _check_extension(cls, value: str) -> str:
        allowed = get_portal_config().allowed_attachment_extensions
        name = os.path.basename(value.strip())
        ext = os.path.splitext(name)[1].lower()
        if ext not in allowed:
            raise ValueError(f"Unsupported CV format '{ext or name}'. Allowed: {', '.join(allowed)}")
        return name

    @model_validator(mode="after")
    def _check_size(self) -> "CVAttachment":
        max_bytes = get_portal_config().max_attachment_bytes
        if not self.data:
            raise ValueError("CV document is empty")
        if len(self.data) > max_bytes:
            raise ValueError(f"CV document exceeds {max_bytes // (1024 * 1024)}MB limit")
        return self

    @property
    def size(self) -> int:
        return len(self.data)

    @classmethod
    def from_path(cls, path: str) -> "CVAttachment":
        """Build an attachment from a file on disk."""
        with open(path, "rb") as f:
            data = f.read()
        content_type = mimetypes.guess_type(path)[0] or "application/octet-stream"
        return cls(filename=os.path.basename(path), content_type=content_type, data=data)
