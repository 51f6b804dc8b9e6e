"""Shared pytest fixtures for all tests."""

import httpx
import pytest

from common.config import Config
from common.types import SelectedFile
from mediaclient.api_client import ApiClient


@pytest.fixture
def temp_config_dir(tmp_path):
    """
    Create temporary config directory.

    Args:
        tmp_path: pytest tmp_path fixture

    Returns:
        Path to temporary .mediadash directory
    """
    config_dir = tmp_path / '.mediadash'
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def temp_config(temp_config_dir):
    """
    Create temporary config instance.

    Args:
        temp_config_dir: Temporary config directory fixture

    Returns:
        Config instance with temp config file
    """
    return Config(temp_config_dir / 'config.json')


@pytest.fixture
def make_client(temp_config):
    """
    Factory for an ApiClient whose HTTP session is served by ``handler``.

    Returns:
        Callable taking an httpx MockTransport handler
    """
    clients = []

    def factory(handler):
        client = ApiClient(temp_config)
        client.session.close()
        client.session = httpx.Client(transport=httpx.MockTransport(handler), base_url='http://test')
        clients.append(client)
        return client

    yield factory

    for client in clients:
        client.close()


@pytest.fixture
def media_files(tmp_path):
    """
    Create one local file per type used in upload tests.

    Returns:
        Dict of SelectedFile keyed by 'image', 'audio', 'video', 'pdf'
    """
    specs = {
        'image': ('photo.png', 'image/png'),
        'audio': ('song.mp3', 'audio/mpeg'),
        'video': ('clip.mp4', 'video/mp4'),
        'pdf': ('doc.pdf', 'application/pdf'),
    }
    files = {}
    for key, (name, mimetype) in specs.items():
        path = tmp_path / name
        path.write_bytes(b'x' * 128)
        files[key] = SelectedFile(path=str(path), filename=name, mimetype=mimetype, size=128)
    return files
