"""Media endpoint functions built on the request layer."""

from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional

from common.logging_config import get_logger
from common.types import MediaType, SelectedFile, upload_kind
from mediaclient.api_client import ApiClient
from mediaclient.exceptions import UnsupportedMediaTypeError
from mediaclient.schemas import (
    MediaDetail,
    MediaSummary,
    MediaUpdateRequest,
    PresignedUrl,
    parse_payload,
    parse_payload_list,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class UploadMetadata:
    """Optional per-file fields sent along with an upload."""

    description: str = ""
    genre: str = ""
    tags: tuple[str, ...] = field(default_factory=tuple)
    is_profile: bool = False


def list_media(
    client: ApiClient,
    q: Optional[str] = None,
    limit: int = 50,
    offset: int = 0,
) -> List[MediaSummary]:
    """
    List the current user's media.

    Args:
        client: Request layer
        q: Optional free-text query
        limit: Page size
        offset: Page offset

    Returns:
        Media summaries in server order
    """
    params: dict = {}
    if q:
        params['q'] = q
    params['limit'] = str(limit)
    params['offset'] = str(offset)

    data = client.request('/media/', 'GET', params=params)
    return parse_payload_list(MediaSummary, data)


def get_media(client: ApiClient, media_id: int) -> MediaDetail:
    return parse_payload(MediaDetail, client.request(f'/media/{media_id}', 'GET'))


def get_media_url(client: ApiClient, media_id: int) -> PresignedUrl:
    return parse_payload(PresignedUrl, client.request(f'/media/{media_id}/url', 'GET'))


def delete_media(client: ApiClient, media_id: int) -> Any:
    logger.info(f"Deleting media {media_id}")
    return client.request(f'/media/{media_id}', 'DELETE')


def _upload(client: ApiClient, kind: MediaType, file: SelectedFile, fields: dict) -> Any:
    form = {name: value for name, value in fields.items() if value}
    logger.info(f"Uploading {kind}: {file.filename} ({file.size} bytes)")
    with open(file.path, 'rb') as fh:
        files = {'file': (file.filename, fh, file.mimetype or 'application/octet-stream')}
        return client.upload(f'/media/upload/{kind}', files=files, data=form)


def _join_tags(tags: Optional[Iterable[str]]) -> str:
    return ','.join(tags) if tags else ''


def upload_image(
    client: ApiClient,
    file: SelectedFile,
    description: Optional[str] = None,
    tags: Optional[Iterable[str]] = None,
    is_profile: bool = False,
) -> Any:
    return _upload(client, 'image', file, {
        'description': description,
        'tags': _join_tags(tags),
        'is_profile': 'true' if is_profile else '',
    })


def upload_video(
    client: ApiClient,
    file: SelectedFile,
    description: Optional[str] = None,
    genre: Optional[str] = None,
    tags: Optional[Iterable[str]] = None,
) -> Any:
    return _upload(client, 'video', file, {
        'description': description,
        'genero': genre,
        'tags': _join_tags(tags),
    })


def upload_audio(
    client: ApiClient,
    file: SelectedFile,
    description: Optional[str] = None,
    genre: Optional[str] = None,
    tags: Optional[Iterable[str]] = None,
) -> Any:
    return _upload(client, 'audio', file, {
        'description': description,
        'genero': genre,
        'tags': _join_tags(tags),
    })


def upload_media(
    client: ApiClient,
    file: SelectedFile,
    metadata: Optional[UploadMetadata] = None,
) -> Any:
    """
    Route an upload to the endpoint matching the file's MIME prefix.

    Raises:
        UnsupportedMediaTypeError: If the MIME type is not image/audio/video;
            no request is sent in that case
    """
    metadata = metadata or UploadMetadata()
    kind = upload_kind(file.mimetype)

    if kind == 'image':
        return upload_image(
            client, file,
            description=metadata.description,
            tags=metadata.tags,
            is_profile=metadata.is_profile,
        )
    if kind == 'video':
        return upload_video(
            client, file,
            description=metadata.description,
            genre=metadata.genre,
            tags=metadata.tags,
        )
    if kind == 'audio':
        return upload_audio(
            client, file,
            description=metadata.description,
            genre=metadata.genre,
            tags=metadata.tags,
        )
    raise UnsupportedMediaTypeError(
        f"Unsupported file type for {file.filename}: {file.mimetype or 'unknown'}"
    )


def _update(client: ApiClient, kind: MediaType, media_id: int, update: MediaUpdateRequest) -> Any:
    body = update.model_dump(by_alias=True, exclude_none=True)
    logger.info(f"Updating {kind} {media_id}: fields={sorted(body)}")
    return client.request(f'/media/{kind}/{media_id}', 'PUT', json=body)


def update_image(
    client: ApiClient,
    media_id: int,
    description: Optional[str] = None,
    tags: Optional[List[str]] = None,
) -> Any:
    return _update(client, 'image', media_id, MediaUpdateRequest(description=description, tags=tags))


def update_video(
    client: ApiClient,
    media_id: int,
    description: Optional[str] = None,
    genre: Optional[str] = None,
    tags: Optional[List[str]] = None,
) -> Any:
    return _update(
        client, 'video', media_id,
        MediaUpdateRequest(description=description, genre=genre, tags=tags),
    )


def update_audio(
    client: ApiClient,
    media_id: int,
    description: Optional[str] = None,
    genre: Optional[str] = None,
    tags: Optional[List[str]] = None,
) -> Any:
    return _update(
        client, 'audio', media_id,
        MediaUpdateRequest(description=description, genre=genre, tags=tags),
    )


def update_media(
    client: ApiClient,
    media_type: MediaType,
    media_id: int,
    description: Optional[str] = None,
    genre: Optional[str] = None,
    tags: Optional[List[str]] = None,
) -> Any:
    """
    Route a metadata update to the typed endpoint.

    Images have no genre; a genre passed for an image is ignored.
    """
    if media_type == 'image':
        return update_image(client, media_id, description=description, tags=tags)
    if media_type == 'video':
        return update_video(client, media_id, description=description, genre=genre, tags=tags)
    if media_type == 'audio':
        return update_audio(client, media_id, description=description, genre=genre, tags=tags)
    raise UnsupportedMediaTypeError(f"Unsupported media type: {media_type}")
