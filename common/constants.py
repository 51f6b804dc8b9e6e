"""Project-wide constants (MIME prefixes, defaults, config keys)."""

from pathlib import Path

SUPPORTED_MIME_PREFIXES: tuple[str, ...] = ("image/", "audio/", "video/")

CONFIG_DIR: Path = Path.home() / ".mediadash"
CONFIG_PATH: Path = CONFIG_DIR / "config.json"
DEFAULT_LOG_FILE: str = str(CONFIG_DIR / "mediadash.log")

DEFAULT_API_URL: str = "http://localhost:8000"
DEFAULT_PAGE_SIZE: int = 50
DEFAULT_CLEAR_DELAY_SECONDS: float = 2.0
MAX_BIO_LENGTH: int = 300

TOKEN_KEY: str = "token"
