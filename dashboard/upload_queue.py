"""
Upload queue: client-side staging of files before they reach the backend.

Each queued file moves through ``pending -> uploading -> success | error``.
State changes go through the pure ``reduce`` function; ``UploadQueue``
drives it and performs the uploads one at a time.
"""

import time
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, Iterable, Optional, Union

from common.constants import DEFAULT_CLEAR_DELAY_SECONDS
from common.logging_config import get_logger
from common.types import MediaType, SelectedFile, upload_kind
from mediaclient.exceptions import MediaDashError
from mediaclient.media_api import UploadMetadata

logger = get_logger(__name__)


class UploadStatus(str, Enum):
    PENDING = "pending"
    UPLOADING = "uploading"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class QueuedFile:
    """A selected file waiting for, or going through, upload."""

    id: str
    file: SelectedFile
    type: MediaType
    metadata: UploadMetadata = UploadMetadata()
    status: UploadStatus = UploadStatus.PENDING
    error: Optional[str] = None


@dataclass(frozen=True)
class QueueState:
    items: tuple[QueuedFile, ...] = ()
    processing: bool = False


@dataclass(frozen=True)
class FilesSelected:
    files: tuple[QueuedFile, ...]


@dataclass(frozen=True)
class FileRemoved:
    file_id: str


@dataclass(frozen=True)
class MetadataEdited:
    file_id: str
    metadata: UploadMetadata


@dataclass(frozen=True)
class RetryRequested:
    file_id: str


@dataclass(frozen=True)
class UploadStarted:
    file_id: str


@dataclass(frozen=True)
class UploadSucceeded:
    file_id: str


@dataclass(frozen=True)
class UploadFailed:
    file_id: str
    error: str


@dataclass(frozen=True)
class ProcessingStarted:
    pass


@dataclass(frozen=True)
class ProcessingFinished:
    pass


@dataclass(frozen=True)
class SucceededCleared:
    pass


QueueAction = Union[
    FilesSelected,
    FileRemoved,
    MetadataEdited,
    RetryRequested,
    UploadStarted,
    UploadSucceeded,
    UploadFailed,
    ProcessingStarted,
    ProcessingFinished,
    SucceededCleared,
]


def parse_tags(text: str) -> list[str]:
    """
    Split a comma-separated tag string.

    Segments are trimmed, empty ones dropped, and repeated tags kept only
    at their first position.
    """
    tags: list[str] = []
    for segment in text.split(','):
        tag = segment.strip()
        if tag and tag not in tags:
            tags.append(tag)
    return tags


def _update_item(
    state: QueueState,
    file_id: str,
    allowed: tuple[UploadStatus, ...],
    **changes,
) -> QueueState:
    items = []
    changed = False
    for item in state.items:
        if item.id == file_id and item.status in allowed:
            items.append(replace(item, **changes))
            changed = True
        else:
            items.append(item)
    if not changed:
        return state
    return replace(state, items=tuple(items))


def reduce(state: QueueState, action: QueueAction) -> QueueState:
    """
    Apply one action to the queue state.

    Actions that are not valid for an item's current status return the
    state unchanged.
    """
    if isinstance(action, FilesSelected):
        if not action.files:
            return state
        return replace(state, items=state.items + tuple(action.files))

    if isinstance(action, FileRemoved):
        items = tuple(
            item for item in state.items
            if not (item.id == action.file_id and item.status == UploadStatus.PENDING)
        )
        if len(items) == len(state.items):
            return state
        return replace(state, items=items)

    if isinstance(action, MetadataEdited):
        return _update_item(state, action.file_id, (UploadStatus.PENDING,), metadata=action.metadata)

    if isinstance(action, RetryRequested):
        return _update_item(
            state, action.file_id, (UploadStatus.ERROR,),
            status=UploadStatus.PENDING, error=None,
        )

    if isinstance(action, UploadStarted):
        return _update_item(
            state, action.file_id, (UploadStatus.PENDING,),
            status=UploadStatus.UPLOADING, error=None,
        )

    if isinstance(action, UploadSucceeded):
        return _update_item(state, action.file_id, (UploadStatus.UPLOADING,), status=UploadStatus.SUCCESS)

    if isinstance(action, UploadFailed):
        return _update_item(
            state, action.file_id, (UploadStatus.UPLOADING,),
            status=UploadStatus.ERROR, error=action.error,
        )

    if isinstance(action, ProcessingStarted):
        return replace(state, processing=True)

    if isinstance(action, ProcessingFinished):
        return replace(state, processing=False)

    if isinstance(action, SucceededCleared):
        items = tuple(item for item in state.items if item.status != UploadStatus.SUCCESS)
        return replace(state, items=items)

    raise TypeError(f"Unknown queue action: {type(action).__name__}")


@dataclass(frozen=True)
class QueueSummary:
    """Outcome of one pass over the queue."""

    succeeded: tuple[str, ...]
    failed: tuple[tuple[str, str], ...]


class UploadQueue:
    """
    Drives the reducer and uploads pending files strictly one at a time.

    Successful items stay in the queue for ``clear_delay`` seconds after a
    pass so their status can be shown; they are dropped by the first queue
    operation after that.

    Args:
        uploader: Called as ``uploader(file, metadata)`` for each file
        on_complete: Called once after a pass, typically a media refresh
        clear_delay: Seconds to keep successful items before removing them
        clock: Time source for synthetic ids and the clear deadline
    """

    def __init__(
        self,
        uploader: Callable[[SelectedFile, UploadMetadata], Any],
        on_complete: Optional[Callable[[], Any]] = None,
        clear_delay: float = DEFAULT_CLEAR_DELAY_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        self.uploader = uploader
        self.on_complete = on_complete
        self.clear_delay = clear_delay
        self.clock = clock
        self._state = QueueState()
        self._clear_at: Optional[float] = None

    @property
    def state(self) -> QueueState:
        return self._state

    @property
    def items(self) -> tuple[QueuedFile, ...]:
        return self._state.items

    @property
    def can_submit(self) -> bool:
        return not self._state.processing and any(
            item.status == UploadStatus.PENDING for item in self._state.items
        )

    def dispatch(self, action: QueueAction) -> QueueState:
        self._state = reduce(self._state, action)
        return self._state

    def get(self, file_id: str) -> Optional[QueuedFile]:
        for item in self._state.items:
            if item.id == file_id:
                return item
        return None

    def clear_finished(self) -> bool:
        """
        Drop successful items once the clear delay of the last pass is over.

        Returns:
            True if items were cleared
        """
        if self._clear_at is None or self.clock() < self._clear_at:
            return False
        self._clear_at = None
        self.dispatch(SucceededCleared())
        return True

    def select_files(self, files: Iterable[SelectedFile]) -> list[SelectedFile]:
        """
        Queue the supported files from a selection.

        Returns:
            The files rejected because their MIME type is not
            image/*, audio/* or video/*
        """
        self.clear_finished()
        stamp = int(self.clock() * 1000)
        accepted: list[QueuedFile] = []
        rejected: list[SelectedFile] = []
        for index, selected in enumerate(files):
            kind = upload_kind(selected.mimetype)
            if kind is None:
                logger.warning(f"Rejected {selected.filename}: unsupported type {selected.mimetype or 'unknown'}")
                rejected.append(selected)
                continue
            accepted.append(QueuedFile(
                id=f"{stamp}-{index}-{selected.filename}",
                file=selected,
                type=kind,
            ))

        self.dispatch(FilesSelected(tuple(accepted)))
        return rejected

    def remove(self, file_id: str) -> bool:
        self.clear_finished()
        before = self._state
        return self.dispatch(FileRemoved(file_id)) is not before

    def retry(self, file_id: str) -> bool:
        self.clear_finished()
        before = self._state
        return self.dispatch(RetryRequested(file_id)) is not before

    def edit_metadata(
        self,
        file_id: str,
        description: Optional[str] = None,
        genre: Optional[str] = None,
        tags: Optional[Iterable[str]] = None,
    ) -> bool:
        """
        Replace the given metadata fields of a pending item.

        Returns:
            False if the item does not exist or is not pending
        """
        self.clear_finished()
        item = self.get(file_id)
        if item is None:
            return False
        changes: dict = {}
        if description is not None:
            changes['description'] = description
        if genre is not None:
            changes['genre'] = genre
        if tags is not None:
            changes['tags'] = tuple(tags)
        before = self._state
        return self.dispatch(MetadataEdited(file_id, replace(item.metadata, **changes))) is not before

    def add_tag(self, file_id: str, text: str) -> bool:
        """Append the tags in ``text`` that the item does not already carry."""
        self.clear_finished()
        item = self.get(file_id)
        if item is None:
            return False
        tags = list(item.metadata.tags)
        for tag in parse_tags(text):
            if tag not in tags:
                tags.append(tag)
        return self.edit_metadata(file_id, tags=tags)

    def process(self, on_progress: Optional[Callable[[QueuedFile], Any]] = None) -> QueueSummary:
        """
        Upload every pending file in selection order.

        A failed upload is recorded on its item and the pass continues.
        ``on_progress`` receives each item as soon as it reaches success or
        error. Afterwards ``on_complete`` runs and the successful items are
        scheduled for removal ``clear_delay`` seconds later; nothing here
        waits for that.
        """
        self.clear_finished()
        if self._state.processing:
            logger.debug("Upload pass already running")
            return QueueSummary((), ())

        pending = [item for item in self._state.items if item.status == UploadStatus.PENDING]
        if not pending:
            return QueueSummary((), ())

        succeeded: list[str] = []
        failed: list[tuple[str, str]] = []

        self.dispatch(ProcessingStarted())
        try:
            logger.info(f"Starting upload pass: {len(pending)} file(s)")
            for item in pending:
                self.dispatch(UploadStarted(item.id))
                try:
                    self.uploader(item.file, item.metadata)
                except Exception as e:
                    message = str(e) or type(e).__name__
                    logger.error(f"Upload failed for {item.file.filename}: {message}")
                    self.dispatch(UploadFailed(item.id, message))
                    failed.append((item.id, message))
                else:
                    logger.info(f"Uploaded {item.file.filename}")
                    self.dispatch(UploadSucceeded(item.id))
                    succeeded.append(item.id)
                if on_progress is not None:
                    on_progress(self.get(item.id))

            if self.on_complete is not None:
                try:
                    self.on_complete()
                except MediaDashError as e:
                    logger.warning(f"Refresh after upload failed: {e}")
        finally:
            self.dispatch(ProcessingFinished())

        if succeeded:
            self._clear_at = self.clock() + max(self.clear_delay, 0)
            if self.clear_delay <= 0:
                self.clear_finished()

        return QueueSummary(tuple(succeeded), tuple(failed))
