"""Configuration management for the MediaDash client."""

import json
import os
import shutil
import tempfile
from pathlib import Path
from typing import Any, Optional

from common.constants import (
    DEFAULT_API_URL,
    DEFAULT_CLEAR_DELAY_SECONDS,
    DEFAULT_LOG_FILE,
    DEFAULT_PAGE_SIZE,
    MAX_BIO_LENGTH,
)
from common.logging_config import get_logger

logger = get_logger(__name__)


class Config:
    """Manages client configuration stored in a JSON file."""

    DEFAULT_CONFIG = {
        "api_url": os.environ.get("MEDIADASH_API_URL", DEFAULT_API_URL),
        "timeout": None,
        "page_size": DEFAULT_PAGE_SIZE,
        "upload_clear_delay": DEFAULT_CLEAR_DELAY_SECONDS,
        "max_bio_length": MAX_BIO_LENGTH,
        "log_file": DEFAULT_LOG_FILE,
    }

    def __init__(self, config_path: Path):
        """
        Initialize configuration manager.

        Args:
            config_path: Path to config JSON file (typically ~/.mediadash/config.json)
        """
        self.config_path = config_path
        self.data = self._load()

    def _load(self) -> dict:
        """
        Load configuration from file, creating defaults if necessary.

        Returns:
            Configuration dictionary
        """
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
        except PermissionError:
            self.config_path = Path(tempfile.gettempdir()) / '.mediadash' / 'config.json'
            self.config_path.parent.mkdir(parents=True, exist_ok=True)

        if self.config_path.exists():
            try:
                with open(self.config_path, 'r') as f:
                    data = json.load(f)
                if not isinstance(data, dict):
                    raise ValueError("config root must be an object")
                config = self.DEFAULT_CONFIG.copy()
                config.update(data)
                return config
            except (ValueError, OSError) as e:
                logger.warning(f"Unreadable config at {self.config_path}: {e}; using defaults")
                backup_path = self.config_path.with_suffix('.json.bak')
                try:
                    shutil.copy(self.config_path, backup_path)
                except OSError:
                    logger.warning(f"Could not back up config to {backup_path}")
                return self.DEFAULT_CONFIG.copy()

        config = self.DEFAULT_CONFIG.copy()
        try:
            with open(self.config_path, 'w') as f:
                json.dump(config, f, indent=2)
        except OSError as e:
            logger.warning(f"Could not write default config: {e}")
        return config

    def save(self) -> None:
        """
        Save current configuration to file.

        Raises:
            OSError: If the file cannot be written
        """
        with open(self.config_path, 'w') as f:
            json.dump(self.data, f, indent=2)

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def get_base_url(self) -> str:
        """
        Get backend base URL without trailing slash.

        Returns:
            Base URL string (e.g., "http://localhost:8000")
        """
        return str(self.data.get('api_url') or DEFAULT_API_URL).rstrip('/')

    def get_timeout(self) -> Optional[float]:
        """
        Get request timeout in seconds.

        Returns:
            Timeout in seconds, or None to wait indefinitely
        """
        return self.data.get('timeout')

    def get_page_size(self) -> int:
        return int(self.data.get('page_size', DEFAULT_PAGE_SIZE))

    def get_clear_delay(self) -> float:
        """Seconds to keep successful uploads visible before clearing them."""
        return float(self.data.get('upload_clear_delay', DEFAULT_CLEAR_DELAY_SECONDS))

    def get_max_bio_length(self) -> int:
        return int(self.data.get('max_bio_length', MAX_BIO_LENGTH))

    def get_log_file(self) -> Optional[str]:
        return self.data.get('log_file')
