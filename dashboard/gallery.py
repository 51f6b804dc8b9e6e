"""Gallery search, type filtering and library statistics."""

from typing import Iterable, Literal

from common.types import MEDIA_TYPES, MediaItem

TypeFilter = Literal["all", "image", "audio", "video"]

TYPE_FILTERS: tuple[str, ...] = ("all",) + MEDIA_TYPES


def filter_media(
    items: Iterable[MediaItem],
    query: str = "",
    media_type: TypeFilter = "all",
) -> list[MediaItem]:
    """
    Filter items by a case-insensitive text query and a type.

    The query matches against the filename and the description.
    """
    if media_type not in TYPE_FILTERS:
        raise ValueError(f"Unknown media type filter: {media_type}")

    needle = query.strip().lower()
    result = []
    for item in items:
        if media_type != "all" and item.type != media_type:
            continue
        if needle:
            haystacks = (item.filename.lower(), (item.description or "").lower())
            if not any(needle in text for text in haystacks):
                continue
        result.append(item)
    return result


def count_by_type(items: Iterable[MediaItem]) -> dict[str, int]:
    counts = {"all": 0, **{media_type: 0 for media_type in MEDIA_TYPES}}
    for item in items:
        counts["all"] += 1
        counts[item.type] += 1
    return counts


def total_size(items: Iterable[MediaItem]) -> int:
    return sum(item.size for item in items)
