"""Shared data type definitions (MediaItem, SelectedFile) and MIME helpers."""

import mimetypes
import os
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Literal, Optional

from common.constants import SUPPORTED_MIME_PREFIXES

MediaType = Literal["image", "audio", "video"]

MEDIA_TYPES: tuple[MediaType, ...] = ("image", "audio", "video")


def media_type_from_mimetype(mimetype: Optional[str]) -> MediaType:
    """
    Classify a MIME type by its prefix.

    Anything that is not audio or video, including an empty or missing
    type, is treated as an image.
    """
    if not mimetype:
        return "image"
    if mimetype.startswith("audio"):
        return "audio"
    if mimetype.startswith("video"):
        return "video"
    return "image"


def upload_kind(mimetype: Optional[str]) -> Optional[MediaType]:
    """
    Return the upload endpoint kind for a MIME type, or None if unsupported.

    Unlike media_type_from_mimetype there is no fallback here: only the
    image/, audio/ and video/ prefixes are accepted.
    """
    mimetype = mimetype or ""
    for prefix in SUPPORTED_MIME_PREFIXES:
        if mimetype.startswith(prefix):
            return prefix.rstrip("/")
    return None


@dataclass(frozen=True)
class SelectedFile:
    """
    A local file picked for upload.
    """
    path: str
    filename: str
    mimetype: str
    size: int

    @classmethod
    def from_path(cls, path: str, mimetype: Optional[str] = None) -> "SelectedFile":
        """
        Build a SelectedFile from a filesystem path.

        The MIME type is guessed from the file extension when not given.

        Raises:
            FileNotFoundError: If the path does not exist or is not a file
        """
        resolved = Path(path).expanduser()
        if not resolved.is_file():
            raise FileNotFoundError(f"File not found: {path}")
        if mimetype is None:
            mimetype, _ = mimetypes.guess_type(resolved.name)
        return cls(
            path=str(resolved),
            filename=resolved.name,
            mimetype=mimetype or "",
            size=os.path.getsize(resolved),
        )


@dataclass(frozen=True)
class MediaItem:
    """
    Client-side projection of a server media record.

    ``url`` stays None until a presigned URL is requested.
    """
    id: int
    filename: str
    type: MediaType
    size: int
    uploaded_at: datetime
    updated_at: datetime
    description: Optional[str] = None
    url: Optional[str] = None
    thumbnail: Optional[str] = None
    duration: Optional[float] = None
    mimetype: str = ""
    genre: Optional[str] = None
    tags: tuple[str, ...] = ()
