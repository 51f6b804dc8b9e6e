"""Media state: the current user's media list and its mutations."""

from dataclasses import fields, replace
from datetime import datetime
from typing import Callable, Iterable, Optional

from common.constants import DEFAULT_PAGE_SIZE
from common.logging_config import get_logger
from common.types import MediaItem, media_type_from_mimetype
from mediaclient import media_api
from mediaclient.api_client import ApiClient
from mediaclient.exceptions import MediaDashError, ValidationError
from mediaclient.schemas import MediaSummary

logger = get_logger(__name__)

MEDIA_FIELDS = frozenset(f.name for f in fields(MediaItem))


def summary_to_item(summary: MediaSummary, now: Optional[datetime] = None) -> MediaItem:
    """
    Map a listing entry to a MediaItem.

    The type comes from the MIME prefix and defaults to image.
    """
    uploaded_at = summary.created_at or now or datetime.now()
    return MediaItem(
        id=summary.id,
        filename=summary.filename,
        type=media_type_from_mimetype(summary.mimetype),
        size=summary.size,
        uploaded_at=uploaded_at,
        updated_at=uploaded_at,
        description=summary.description,
        thumbnail=summary.thumbnail,
        duration=summary.duration,
        mimetype=summary.mimetype,
        genre=summary.genre,
        tags=tuple(summary.tags),
    )


class MediaStore:
    """
    Owns the list of media items for the current session.

    Readers get an immutable tuple from ``items``.
    """

    def __init__(
        self,
        client: ApiClient,
        page_size: int = DEFAULT_PAGE_SIZE,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.client = client
        self.page_size = page_size
        self.clock = clock
        self._items: tuple[MediaItem, ...] = ()
        self._loading = False

    @property
    def items(self) -> tuple[MediaItem, ...]:
        return self._items

    @property
    def is_loading(self) -> bool:
        return self._loading

    def clear(self) -> None:
        self._items = ()

    def refresh_media(self) -> tuple[MediaItem, ...]:
        """Replace the list with the backend's full current listing."""
        self._loading = True
        try:
            summaries = media_api.list_media(self.client, limit=self.page_size)
        finally:
            self._loading = False

        now = self.clock()
        self._items = tuple(summary_to_item(s, now) for s in summaries)
        logger.info(f"Refreshed media list: {len(self._items)} item(s)")
        return self._items

    def search_media(self, q: str) -> tuple[MediaItem, ...]:
        """
        Run a server-side search without touching the owned list.

        Returns:
            Matching items, for display only
        """
        summaries = media_api.list_media(self.client, q=q, limit=self.page_size)
        now = self.clock()
        return tuple(summary_to_item(s, now) for s in summaries)

    def add_media(self, item: MediaItem) -> None:
        self._items = (item,) + self._items

    def update_media(self, media_id: int, **updates) -> Optional[MediaItem]:
        """
        Merge fields into the cached item and stamp ``updated_at``.

        This is a local cache hint only; the next refresh_media overwrites
        it with whatever the backend holds.

        Raises:
            TypeError: If a field name is not a MediaItem field
        """
        unknown = set(updates) - MEDIA_FIELDS
        if unknown:
            raise TypeError(f"Unknown media fields: {', '.join(sorted(unknown))}")

        updated: Optional[MediaItem] = None
        items = []
        for item in self._items:
            if item.id == media_id:
                updated = replace(item, **{**updates, 'updated_at': self.clock()})
                items.append(updated)
            else:
                items.append(item)
        self._items = tuple(items)
        return updated

    def edit_media(
        self,
        media_id: int,
        description: Optional[str] = None,
        genre: Optional[str] = None,
        tags: Optional[Iterable[str]] = None,
    ) -> MediaItem:
        """
        Persist metadata changes, then merge them locally.

        The local copy changes only after the backend accepts the update.

        Raises:
            KeyError: If the item is not in the list
            ValidationError: If no field is left to send; images have no genre
            ApiError: If the backend rejects the update
        """
        item = self.get_media(media_id)
        if item is None:
            raise KeyError(media_id)

        if item.type == 'image':
            genre = None
        tag_list = list(tags) if tags is not None else None

        changes: dict = {}
        if description is not None:
            changes['description'] = description
        if genre is not None:
            changes['genre'] = genre
        if tag_list is not None:
            changes['tags'] = tuple(tag_list)
        if not changes:
            raise ValidationError(f"Nothing to update for {item.type} {media_id}")

        media_api.update_media(
            self.client, item.type, media_id,
            description=description, genre=genre, tags=tag_list,
        )
        return self.update_media(media_id, **changes) or item

    def delete_media(self, media_id: int) -> None:
        """
        Delete on the backend, then drop the item locally.

        On failure the error propagates and the item stays in the list.
        """
        media_api.delete_media(self.client, media_id)
        self._items = tuple(item for item in self._items if item.id != media_id)

    def get_media(self, media_id: int) -> Optional[MediaItem]:
        for item in self._items:
            if item.id == media_id:
                return item
        return None

    def get_media_url(self, media_id: int) -> Optional[str]:
        """
        Fetch a presigned URL for an item.

        Returns:
            The URL, or None if the request failed
        """
        try:
            presigned = media_api.get_media_url(self.client, media_id)
        except MediaDashError as e:
            logger.error(f"Could not fetch URL for media {media_id}: {e}")
            return None

        if self.get_media(media_id) is not None:
            self._items = tuple(
                replace(item, url=presigned.url) if item.id == media_id else item
                for item in self._items
            )
        return presigned.url
