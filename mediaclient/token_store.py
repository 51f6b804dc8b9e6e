"""Persistent storage for the bearer token."""

from typing import Optional

from common.config import Config
from common.constants import TOKEN_KEY
from common.logging_config import get_logger

logger = get_logger(__name__)


class TokenStore:
    """Holds a single bearer token in the client configuration file."""

    def __init__(self, config: Config):
        self.config = config

    def get_token(self) -> Optional[str]:
        """
        Get stored token.

        Returns:
            Token string or None if not set
        """
        token = self.config.data.get(TOKEN_KEY)
        return token or None

    def set_token(self, token: Optional[str]) -> None:
        """
        Persist a token, or clear it when ``token`` is None.

        Write failures are logged and never raised.
        """
        if token:
            self.config.data[TOKEN_KEY] = token
        else:
            self.config.data.pop(TOKEN_KEY, None)

        try:
            self.config.save()
        except OSError as e:
            logger.warning(f"Could not persist token to {self.config.config_path}: {e}")
