"""Formatting helpers for CLI output."""

from datetime import datetime
from typing import Optional

from cli.constants import GREEN, RED, RESET, YELLOW
from common.types import MediaItem
from dashboard.upload_queue import QueuedFile, UploadStatus

STATUS_COLORS = {
    UploadStatus.PENDING: "",
    UploadStatus.UPLOADING: YELLOW,
    UploadStatus.SUCCESS: GREEN,
    UploadStatus.ERROR: RED,
}


def format_file_size(size_bytes: int) -> str:
    """
    Format file size in bytes to human-readable format with appropriate unit.

    Uses binary units (1024-based) and automatically selects the most
    appropriate unit (B, KiB, MiB, GiB, TiB).

    Args:
        size_bytes: File size in bytes

    Returns:
        Formatted string with size and unit (e.g., "1.50 MiB", "512 B")
    """
    if size_bytes < 1024:
        return f"{size_bytes} B"

    units = ['KiB', 'MiB', 'GiB', 'TiB']
    size = size_bytes / 1024.0

    for unit in units:
        if size < 1024.0:
            return f"{size:.2f} {unit}"
        size /= 1024.0

    return f"{size:.2f} PiB"


def format_duration(seconds: Optional[float]) -> str:
    if seconds is None:
        return ""
    total = int(round(seconds))
    minutes, secs = divmod(total, 60)
    hours, minutes = divmod(minutes, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def format_date(value: Optional[datetime]) -> str:
    return value.strftime('%Y-%m-%d %H:%M') if value else "-"


def format_media_item(item: MediaItem) -> str:
    """Render one gallery entry as a short block of lines."""
    header = f"  [{item.id}] {item.filename} ({item.type}, {format_file_size(item.size)})"
    duration = format_duration(item.duration)
    if duration:
        header += f" {duration}"
    lines = [header]
    if item.description:
        lines.append(f"      {item.description}")
    extras = []
    if item.genre:
        extras.append(f"Genre: {item.genre}")
    if item.tags:
        extras.append(f"Tags: {', '.join(item.tags)}")
    extras.append(f"Uploaded: {format_date(item.uploaded_at)}")
    lines.append("      " + " | ".join(extras))
    return '\n'.join(lines)


def format_queued_file(position: int, item: QueuedFile) -> str:
    """Render one upload queue entry with its status."""
    color = STATUS_COLORS[item.status]
    status = f"{color}{item.status.value}{RESET if color else ''}"
    line = (
        f"  {position}. {item.file.filename} ({item.type}, "
        f"{format_file_size(item.file.size)}) [{status}]"
    )
    details = []
    if item.metadata.description:
        details.append(f"Description: {item.metadata.description}")
    if item.metadata.genre and item.type != 'image':
        details.append(f"Genre: {item.metadata.genre}")
    if item.metadata.tags:
        details.append(f"Tags: {', '.join(item.metadata.tags)}")
    if details:
        line += "\n     " + " | ".join(details)
    if item.error:
        line += f"\n     Error: {item.error}"
    return line
