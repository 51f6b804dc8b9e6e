"""Tests for MediaStore."""

import json
from datetime import datetime

import httpx
import pytest

from common.types import MediaItem
from dashboard.media_store import MediaStore
from mediaclient.exceptions import ApiError, ValidationError

LISTING = [
    {'id': 1, 'filename': 'a.png', 'size': 100, 'mimetype': 'image/png', 'created_at': '2025-12-01T10:00:00'},
    {'id': 2, 'filename': 'b.mp3', 'size': 200, 'mimetype': 'audio/mpeg', 'created_at': '2025-12-02T10:00:00'},
    {'id': 3, 'filename': 'c.mp4', 'size': 300, 'mimetype': 'video/mp4', 'created_at': '2025-12-03T10:00:00'},
    {'id': 4, 'filename': 'd.pdf', 'size': 400, 'mimetype': 'application/pdf'},
]

FIXED_NOW = datetime(2026, 1, 1, 12, 0, 0)


def backend(calls, delete_status=204, update_status=200, url_status=200):
    def handler(request):
        calls.append((request.method, request.url.path))
        path = request.url.path
        if path == '/media/' and request.method == 'GET':
            return httpx.Response(200, json=LISTING)
        if request.method == 'DELETE':
            if delete_status >= 400:
                return httpx.Response(delete_status, json={'detail': 'Cannot delete'})
            return httpx.Response(delete_status)
        if request.method == 'PUT':
            if update_status >= 400:
                return httpx.Response(update_status, json={'detail': 'Update rejected'})
            return httpx.Response(update_status, json=json.loads(request.content))
        if path.endswith('/url'):
            if url_status >= 400:
                return httpx.Response(url_status, json={'detail': 'Not found'})
            return httpx.Response(200, json={'url': f'https://cdn.test{path}'})
        return httpx.Response(404)
    return handler


@pytest.fixture
def calls():
    return []


def make_store(make_client, calls, **kwargs):
    return MediaStore(make_client(backend(calls, **kwargs)), clock=lambda: FIXED_NOW)


def test_refresh_maps_mimetypes_with_image_default(make_client, calls):
    store = make_store(make_client, calls)

    items = store.refresh_media()

    assert [item.type for item in items] == ['image', 'audio', 'video', 'image']
    assert items[0].uploaded_at == datetime(2025, 12, 1, 10, 0, 0)
    assert items[3].uploaded_at == FIXED_NOW
    assert all(item.url is None for item in items)


def test_refresh_replaces_list_wholesale(make_client, calls):
    store = make_store(make_client, calls)
    store.add_media(MediaItem(id=99, filename='local.png', type='image', size=1,
                              uploaded_at=FIXED_NOW, updated_at=FIXED_NOW))

    store.refresh_media()

    assert store.get_media(99) is None
    assert len(store.items) == 4


def test_refresh_sends_no_search_query(make_client, calls):
    seen = {}

    def handler(request):
        seen['params'] = dict(request.url.params)
        return httpx.Response(200, json=[])

    store = MediaStore(make_client(handler), page_size=25)
    store.refresh_media()

    assert seen['params'] == {'limit': '25', 'offset': '0'}


def test_search_media_leaves_items_untouched(make_client, calls):
    seen = []

    def handler(request):
        params = dict(request.url.params)
        seen.append(params)
        if params.get('q') == 'b':
            return httpx.Response(200, json=[LISTING[1]])
        return httpx.Response(200, json=LISTING)

    store = MediaStore(make_client(handler), page_size=25, clock=lambda: FIXED_NOW)
    store.refresh_media()

    results = store.search_media('b')

    assert seen[-1] == {'q': 'b', 'limit': '25', 'offset': '0'}
    assert [item.filename for item in results] == ['b.mp3']
    assert [item.id for item in store.items] == [1, 2, 3, 4]


def test_add_media_prepends(make_client, calls):
    store = make_store(make_client, calls)
    store.refresh_media()
    item = MediaItem(id=50, filename='new.png', type='image', size=1, uploaded_at=FIXED_NOW, updated_at=FIXED_NOW)

    store.add_media(item)

    assert store.items[0] is item
    assert calls == [('GET', '/media/')]


def test_update_media_is_local_and_stamps_time(make_client, calls):
    store = MediaStore(make_client(backend(calls)), clock=lambda: FIXED_NOW)
    store.refresh_media()
    count = len(calls)

    updated = store.update_media(2, description='Live set')

    assert updated.description == 'Live set'
    assert updated.updated_at == FIXED_NOW
    assert store.get_media(2).description == 'Live set'
    assert len(calls) == count


def test_update_media_unknown_id_returns_none(make_client, calls):
    store = make_store(make_client, calls)
    store.refresh_media()

    assert store.update_media(999, description='x') is None


def test_delete_success_removes_item(make_client, calls):
    store = make_store(make_client, calls)
    store.refresh_media()
    assert store.get_media(2) is not None

    store.delete_media(2)

    assert store.get_media(2) is None
    assert ('DELETE', '/media/2') in calls


def test_delete_failure_keeps_item(make_client, calls):
    store = make_store(make_client, calls, delete_status=500)
    store.refresh_media()

    with pytest.raises(ApiError, match='Cannot delete'):
        store.delete_media(2)

    assert store.get_media(2) is not None
    assert len(store.items) == 4


def test_edit_media_persists_then_merges(make_client, calls):
    store = make_store(make_client, calls)
    store.refresh_media()

    item = store.edit_media(3, description='Trailer', genre='action', tags=['hd'])

    assert ('PUT', '/media/video/3') in calls
    assert item.description == 'Trailer'
    assert item.genre == 'action'
    assert item.tags == ('hd',)


def test_edit_media_ignores_genre_for_images(make_client, calls):
    store = make_store(make_client, calls)
    store.refresh_media()

    item = store.edit_media(1, genre='landscape', tags=['sky'])

    assert ('PUT', '/media/image/1') in calls
    assert item.genre is None
    assert item.tags == ('sky',)


def test_edit_media_genre_only_on_image_sends_nothing(make_client, calls):
    store = make_store(make_client, calls)
    store.refresh_media()
    before = store.get_media(1)

    with pytest.raises(ValidationError, match='Nothing to update'):
        store.edit_media(1, genre='landscape')

    assert not [method for method, _ in calls if method == 'PUT']
    assert store.get_media(1) == before


def test_edit_media_failure_leaves_item_unchanged(make_client, calls):
    store = make_store(make_client, calls, update_status=400)
    store.refresh_media()
    before = store.get_media(2)

    with pytest.raises(ApiError, match='Update rejected'):
        store.edit_media(2, description='nope')

    assert store.get_media(2) == before


def test_edit_media_unknown_id(make_client, calls):
    store = make_store(make_client, calls)

    with pytest.raises(KeyError):
        store.edit_media(1, description='x')


def test_get_media_url_fetches_and_records_url(make_client, calls):
    store = make_store(make_client, calls)
    store.refresh_media()

    url = store.get_media_url(3)

    assert url == 'https://cdn.test/media/3/url'
    assert store.get_media(3).url == url


def test_get_media_url_fetches_every_time(make_client, calls):
    store = make_store(make_client, calls)
    store.refresh_media()

    store.get_media_url(3)
    store.get_media_url(3)

    assert calls.count(('GET', '/media/3/url')) == 2


def test_get_media_url_failure_returns_none(make_client, calls):
    store = make_store(make_client, calls, url_status=404)
    store.refresh_media()

    assert store.get_media_url(3) is None
    assert store.get_media(3).url is None


def test_items_snapshot_is_immutable(make_client, calls):
    store = make_store(make_client, calls)
    store.refresh_media()

    assert isinstance(store.items, tuple)
    with pytest.raises(AttributeError):
        store.items[0].filename = 'hacked'
