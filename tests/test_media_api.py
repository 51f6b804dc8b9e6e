"""Tests for media endpoint functions."""

import httpx
import pytest

from mediaclient import media_api
from mediaclient.exceptions import ApiError, PayloadError, UnsupportedMediaTypeError
from mediaclient.media_api import UploadMetadata


def _multipart_fields(request: httpx.Request) -> str:
    return request.content.decode('latin-1')


def test_list_media_sends_query_params(make_client):
    """q, limit and offset are passed as query parameters."""
    seen = {}

    def handler(request):
        seen['path'] = request.url.path
        seen['params'] = dict(request.url.params)
        return httpx.Response(200, json=[])

    client = make_client(handler)
    media_api.list_media(client, q='beach', limit=10, offset=20)

    assert seen['path'] == '/media/'
    assert seen['params'] == {'q': 'beach', 'limit': '10', 'offset': '20'}


def test_list_media_omits_empty_query(make_client):
    """An empty query is not sent."""
    seen = {}

    def handler(request):
        seen['params'] = dict(request.url.params)
        return httpx.Response(200, json=[])

    client = make_client(handler)
    media_api.list_media(client)

    assert 'q' not in seen['params']
    assert seen['params']['limit'] == '50'
    assert seen['params']['offset'] == '0'


def test_list_media_parses_summaries(make_client):
    """Listing entries are validated into MediaSummary objects."""
    payload = [
        {'id': 1, 'filename': 'a.png', 'size': 10, 'mimetype': 'image/png', 'created_at': '2025-12-01T10:00:00Z'},
        {'id': 2, 'filename': 'b.mp3', 'size': 20, 'mime_type': 'audio/mpeg', 'tags': 'rock, live'},
    ]
    client = make_client(lambda request: httpx.Response(200, json=payload))

    summaries = media_api.list_media(client)

    assert [s.id for s in summaries] == [1, 2]
    assert summaries[0].mimetype == 'image/png'
    assert summaries[0].created_at.year == 2025
    assert summaries[1].mimetype == 'audio/mpeg'
    assert summaries[1].tags == ['rock', 'live']


def test_list_media_rejects_malformed_payload(make_client):
    """A listing that is not a list of media records is a PayloadError."""
    client = make_client(lambda request: httpx.Response(200, json={'items': []}))

    with pytest.raises(PayloadError):
        media_api.list_media(client)


def test_get_media_url(make_client):
    """The presigned URL endpoint is id-scoped."""
    seen = {}

    def handler(request):
        seen['path'] = request.url.path
        return httpx.Response(200, json={'url': 'https://cdn.test/a.png?sig=1'})

    client = make_client(handler)
    presigned = media_api.get_media_url(client, 7)

    assert seen['path'] == '/media/7/url'
    assert presigned.url == 'https://cdn.test/a.png?sig=1'


def test_get_media_keeps_type_specific_fields(make_client):
    """Unknown detail fields are preserved."""
    client = make_client(lambda request: httpx.Response(200, json={
        'id': 3, 'filename': 'c.mp4', 'genero': 'doc', 'resolution': '1080p',
    }))

    detail = media_api.get_media(client, 3)

    assert detail.genre == 'doc'
    assert detail.model_dump()['resolution'] == '1080p'


def test_delete_media(make_client):
    """Delete issues DELETE on the id path."""
    seen = {}

    def handler(request):
        seen['method'] = request.method
        seen['path'] = request.url.path
        return httpx.Response(204)

    client = make_client(handler)
    media_api.delete_media(client, 5)

    assert seen == {'method': 'DELETE', 'path': '/media/5'}


def test_upload_image_multipart_fields(make_client, media_files):
    """Image uploads carry description, joined tags and the profile flag."""
    seen = {}

    def handler(request):
        seen['path'] = request.url.path
        seen['body'] = _multipart_fields(request)
        seen['content_type'] = request.headers.get('content-type')
        seen['auth'] = request.headers.get('authorization')
        return httpx.Response(201, json={'id': 1})

    client = make_client(handler)
    client.token_store.set_token('tok')
    media_api.upload_image(client, media_files['image'], description='Sunset', tags=['beach', 'summer'], is_profile=True)

    assert seen['path'] == '/media/upload/image'
    assert seen['content_type'].startswith('multipart/form-data')
    assert seen['auth'] == 'Bearer tok'
    assert 'name="file"; filename="photo.png"' in seen['body']
    assert 'Sunset' in seen['body']
    assert 'beach,summer' in seen['body']
    assert 'name="is_profile"' in seen['body']


def test_upload_video_sends_genre_as_genero(make_client, media_files):
    """Video uploads send the genre in the 'genero' field."""
    seen = {}

    def handler(request):
        seen['path'] = request.url.path
        seen['body'] = _multipart_fields(request)
        return httpx.Response(201, json={'id': 2})

    client = make_client(handler)
    media_api.upload_video(client, media_files['video'], genre='documentary')

    assert seen['path'] == '/media/upload/video'
    assert 'name="genero"' in seen['body']
    assert 'documentary' in seen['body']
    assert 'name="description"' not in seen['body']
    assert 'name="tags"' not in seen['body']


def test_upload_failure_raises_with_body_text(make_client, media_files):
    """A failed upload raises ApiError built from the body text."""
    client = make_client(lambda request: httpx.Response(400, text='invalid audio file'))

    with pytest.raises(ApiError, match='invalid audio file'):
        media_api.upload_audio(client, media_files['audio'])


@pytest.mark.parametrize('kind', ['image', 'audio', 'video'])
def test_upload_media_routes_by_mime_prefix(monkeypatch, media_files, kind):
    """upload_media dispatches to the function for the file's MIME prefix."""
    calls = []
    for name in ('image', 'audio', 'video'):
        monkeypatch.setattr(
            media_api, f'upload_{name}',
            lambda client, file, _name=name, **kwargs: calls.append((_name, file.filename, kwargs)),
        )

    metadata = UploadMetadata(description='d', genre='g', tags=('t1',))
    media_api.upload_media(object(), media_files[kind], metadata)

    assert len(calls) == 1
    assert calls[0][0] == kind
    assert calls[0][1] == media_files[kind].filename
    if kind == 'image':
        assert 'genre' not in calls[0][2]
    else:
        assert calls[0][2]['genre'] == 'g'


def test_upload_media_rejects_unsupported_type_before_network(make_client, media_files):
    """Unsupported MIME types fail without any request."""
    call_count = 0

    def handler(request):
        nonlocal call_count
        call_count += 1
        return httpx.Response(201, json={})

    client = make_client(handler)

    with pytest.raises(UnsupportedMediaTypeError):
        media_api.upload_media(client, media_files['pdf'])

    assert call_count == 0


@pytest.mark.parametrize('kind', ['image', 'audio', 'video'])
def test_update_media_routes_to_typed_endpoint(make_client, kind):
    """Updates go to /media/{type}/{id} as JSON without empty fields."""
    seen = {}

    def handler(request):
        seen['method'] = request.method
        seen['path'] = request.url.path
        seen['body'] = request.content.decode()
        return httpx.Response(200, json={})

    client = make_client(handler)
    media_api.update_media(client, kind, 4, description='new', genre='jazz', tags=['a'])

    assert seen['method'] == 'PUT'
    assert seen['path'] == f'/media/{kind}/4'
    assert '"description":"new"' in seen['body'].replace(' ', '')
    if kind == 'image':
        assert 'genero' not in seen['body']
    else:
        assert '"genero":"jazz"' in seen['body'].replace(' ', '')
