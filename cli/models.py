"""Command request data types for CLI."""

from dataclasses import dataclass
from typing import Literal, Optional


@dataclass(frozen=True)
class RegisterCommand:
    """Register a new account and log into it."""

    email: str
    username: str
    password: str
    command: Literal["register"] = "register"


@dataclass(frozen=True)
class LoginCommand:
    """Login with email and password."""

    email: str
    password: str
    command: Literal["login"] = "login"


@dataclass(frozen=True)
class LogoutCommand:
    command: Literal["logout"] = "logout"


@dataclass(frozen=True)
class WhoamiCommand:
    command: Literal["whoami"] = "whoami"


@dataclass(frozen=True)
class ListCommand:
    """List cached media, filtered locally by text and type."""

    query: str = ""
    media_type: str = "all"
    command: Literal["list"] = "list"


@dataclass(frozen=True)
class SearchCommand:
    """Show server-side search results without replacing the library."""

    query: str
    command: Literal["search"] = "search"


@dataclass(frozen=True)
class RefreshCommand:
    command: Literal["refresh"] = "refresh"


@dataclass(frozen=True)
class ShowCommand:
    media_id: int
    command: Literal["show"] = "show"


@dataclass(frozen=True)
class UrlCommand:
    media_id: int
    command: Literal["url"] = "url"


@dataclass(frozen=True)
class EditCommand:
    """Update description, genre or tags of a media item."""

    media_id: int
    description: Optional[str] = None
    genre: Optional[str] = None
    tags: Optional[tuple[str, ...]] = None
    command: Literal["edit"] = "edit"


@dataclass(frozen=True)
class DeleteCommand:
    media_id: int
    command: Literal["delete"] = "delete"


@dataclass(frozen=True)
class QueueAddCommand:
    """Select local files for upload."""

    paths: tuple[str, ...]
    command: Literal["queue-add"] = "queue-add"


@dataclass(frozen=True)
class QueueShowCommand:
    command: Literal["queue"] = "queue"


@dataclass(frozen=True)
class QueueRemoveCommand:
    file_ref: str
    command: Literal["queue-remove"] = "queue-remove"


@dataclass(frozen=True)
class QueueMetaCommand:
    """Edit metadata of a pending queued file."""

    file_ref: str
    description: Optional[str] = None
    genre: Optional[str] = None
    tags: Optional[tuple[str, ...]] = None
    command: Literal["queue-meta"] = "queue-meta"


@dataclass(frozen=True)
class QueueTagCommand:
    file_ref: str
    tag: str
    command: Literal["queue-tag"] = "queue-tag"


@dataclass(frozen=True)
class QueueRetryCommand:
    file_ref: str
    command: Literal["queue-retry"] = "queue-retry"


@dataclass(frozen=True)
class UploadCommand:
    command: Literal["upload"] = "upload"


@dataclass(frozen=True)
class ProfileCommand:
    command: Literal["profile"] = "profile"


@dataclass(frozen=True)
class ProfileSetCommand:
    """Change display name and/or bio."""

    full_name: Optional[str] = None
    bio: Optional[str] = None
    command: Literal["profile-set"] = "profile-set"


@dataclass(frozen=True)
class PasswordCommand:
    old_password: str
    new_password: str
    confirm_password: str
    command: Literal["password"] = "password"


CommandRequest = (
    RegisterCommand
    | LoginCommand
    | LogoutCommand
    | WhoamiCommand
    | ListCommand
    | SearchCommand
    | RefreshCommand
    | ShowCommand
    | UrlCommand
    | EditCommand
    | DeleteCommand
    | QueueAddCommand
    | QueueShowCommand
    | QueueRemoveCommand
    | QueueMetaCommand
    | QueueTagCommand
    | QueueRetryCommand
    | UploadCommand
    | ProfileCommand
    | ProfileSetCommand
    | PasswordCommand
)
