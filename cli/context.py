"""Wiring of the client, stores and upload queue for one REPL session."""

from dataclasses import dataclass
from functools import partial

from common.config import Config
from dashboard.auth_store import AuthStore
from dashboard.media_store import MediaStore
from dashboard.upload_queue import UploadQueue
from mediaclient import media_api
from mediaclient.api_client import ApiClient


@dataclass
class AppContext:
    """Explicitly owned state services handed to every command handler."""

    config: Config
    client: ApiClient
    auth: AuthStore
    media: MediaStore
    queue: UploadQueue

    def close(self) -> None:
        self.client.close()


def build_context(config: Config, client: ApiClient = None) -> AppContext:
    """
    Create the stores for a session.

    Args:
        config: Loaded configuration
        client: Optional ApiClient for dependency injection (testing)
    """
    client = client or ApiClient(config)
    auth = AuthStore(client, max_bio_length=config.get_max_bio_length())
    media = MediaStore(client, page_size=config.get_page_size())
    queue = UploadQueue(
        uploader=partial(media_api.upload_media, client),
        on_complete=media.refresh_media,
        clear_delay=config.get_clear_delay(),
    )
    return AppContext(config=config, client=client, auth=auth, media=media, queue=queue)
