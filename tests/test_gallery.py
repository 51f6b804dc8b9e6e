"""Tests for gallery filtering and statistics."""

from datetime import datetime

import pytest

from common.types import MediaItem
from dashboard.gallery import count_by_type, filter_media, total_size

NOW = datetime(2026, 1, 1)


def _item(media_id, filename, media_type, size=10, description=None):
    return MediaItem(id=media_id, filename=filename, type=media_type, size=size,
                     uploaded_at=NOW, updated_at=NOW, description=description)


ITEMS = [
    _item(1, 'Beach.png', 'image', 100, 'Summer sunset'),
    _item(2, 'live.mp3', 'audio', 200),
    _item(3, 'trailer.mp4', 'video', 300, 'Beach trip'),
]


def test_filter_by_query_matches_filename_and_description():
    result = filter_media(ITEMS, query='beach')
    assert [item.id for item in result] == [1, 3]


def test_filter_by_type():
    assert [item.id for item in filter_media(ITEMS, media_type='audio')] == [2]


def test_filter_combines_query_and_type():
    assert [item.id for item in filter_media(ITEMS, query='beach', media_type='video')] == [3]


def test_blank_query_keeps_everything():
    assert len(filter_media(ITEMS, query='   ')) == 3


def test_unknown_type_filter_raises():
    with pytest.raises(ValueError):
        filter_media(ITEMS, media_type='document')


def test_count_by_type():
    assert count_by_type(ITEMS) == {'all': 3, 'image': 1, 'audio': 1, 'video': 1}
    assert count_by_type([]) == {'all': 0, 'image': 0, 'audio': 0, 'video': 0}


def test_total_size():
    assert total_size(ITEMS) == 600
