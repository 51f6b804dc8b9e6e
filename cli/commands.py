"""Command handler functions for CLI operations."""

from typing import Any, Callable, Optional

from cli.context import AppContext
from cli.models import (
    DeleteCommand,
    EditCommand,
    ListCommand,
    LoginCommand,
    PasswordCommand,
    ProfileSetCommand,
    QueueAddCommand,
    QueueMetaCommand,
    QueueRemoveCommand,
    QueueRetryCommand,
    QueueTagCommand,
    RegisterCommand,
    SearchCommand,
    ShowCommand,
    UrlCommand,
)
from cli.utils import format_date, format_file_size, format_media_item, format_queued_file
from common.logging_config import get_logger
from common.types import SelectedFile
from dashboard.gallery import count_by_type, filter_media, total_size
from dashboard.upload_queue import QueuedFile, UploadStatus
from mediaclient import media_api
from mediaclient.exceptions import MediaDashError

logger = get_logger(__name__)

NOT_LOGGED_IN = "Error: Not logged in. Please run: login <email> <password>"


def _require_login(ctx: AppContext) -> Optional[str]:
    if ctx.auth.user is None:
        return NOT_LOGGED_IN
    return None


def _resolve_queued(ctx: AppContext, file_ref: str) -> Optional[QueuedFile]:
    """Find a queued file by 1-based position or by id."""
    ctx.queue.clear_finished()
    items = ctx.queue.items
    if file_ref.isdigit():
        position = int(file_ref)
        if 1 <= position <= len(items):
            return items[position - 1]
        return None
    return ctx.queue.get(file_ref)


def handle_register(cmd: RegisterCommand, ctx: AppContext) -> str:
    """
    Handle 'register' command.

    Args:
        cmd: RegisterCommand with email, username and password
        ctx: Session context

    Returns:
        Success or error message
    """
    try:
        user = ctx.auth.signup(cmd.email, cmd.username, cmd.password)
    except MediaDashError as e:
        return f"Registration failed: {e}"

    greeting = f"Registration successful!\nLogged in as {user.username} <{user.email}>."
    try:
        ctx.media.refresh_media()
    except MediaDashError as e:
        return f"{greeting}\nError loading media: {e}"
    return greeting


def handle_login(cmd: LoginCommand, ctx: AppContext) -> str:
    """
    Handle 'login' command.

    Args:
        cmd: LoginCommand with email and password
        ctx: Session context

    Returns:
        Success or error message
    """
    try:
        user = ctx.auth.login(cmd.email, cmd.password)
    except MediaDashError as e:
        return f"Login failed: {e}"

    try:
        items = ctx.media.refresh_media()
    except MediaDashError as e:
        return f"Login successful! Welcome, {user.username}.\nError loading media: {e}"
    return f"Login successful! Welcome, {user.username}.\n{len(items)} media item(s) in your library."


def handle_logout(ctx: AppContext) -> str:
    ctx.auth.logout()
    ctx.media.clear()
    return "Logged out."


def handle_whoami(ctx: AppContext) -> str:
    user = ctx.auth.user
    if user is None:
        return "Not logged in."
    return f"{user.username} <{user.email}> (ID: {user.id})"


def handle_list(cmd: ListCommand, ctx: AppContext) -> str:
    """
    Handle 'list' command.

    Filters the cached list; use 'refresh' to reload it.
    """
    error = _require_login(ctx)
    if error:
        return error

    everything = ctx.media.items
    matches = filter_media(everything, cmd.query, cmd.media_type)
    counts = count_by_type(everything)

    summary = (
        f"{len(matches)} file(s) found of {len(everything)} total "
        f"(images: {counts['image']}, audio: {counts['audio']}, video: {counts['video']})"
    )
    if not matches:
        if not everything:
            return "Your library is empty. Use 'queue-add' and 'upload' to add media."
        return f"{summary}\nNo media matches the current filters."

    return '\n'.join([summary] + [format_media_item(item) for item in matches])


def handle_search(cmd: SearchCommand, ctx: AppContext) -> str:
    """
    Handle 'search' command.

    Results are shown only; the library list stays the full listing.
    """
    error = _require_login(ctx)
    if error:
        return error
    try:
        items = ctx.media.search_media(cmd.query)
    except MediaDashError as e:
        return f"Error: {e}"
    if not items:
        return f"No media found matching: {cmd.query}"
    lines = [f"Found {len(items)} item(s) matching: {cmd.query}"]
    lines.extend(format_media_item(item) for item in items)
    return '\n'.join(lines)


def handle_refresh(ctx: AppContext) -> str:
    error = _require_login(ctx)
    if error:
        return error
    try:
        items = ctx.media.refresh_media()
    except MediaDashError as e:
        return f"Error: {e}"
    return f"Loaded {len(items)} media item(s)."


def handle_show(cmd: ShowCommand, ctx: AppContext) -> str:
    """Handle 'show' command: print the backend's detail record."""
    error = _require_login(ctx)
    if error:
        return error
    try:
        detail = media_api.get_media(ctx.client, cmd.media_id)
    except MediaDashError as e:
        return f"Error: {e}"

    fields = detail.model_dump(exclude_none=True)
    lines = [f"Media {cmd.media_id}:"]
    for name, value in fields.items():
        if name == 'id':
            continue
        if isinstance(value, list):
            value = ', '.join(str(v) for v in value) or '-'
        lines.append(f"  {name}: {value}")
    return '\n'.join(lines)


def handle_url(cmd: UrlCommand, ctx: AppContext) -> str:
    error = _require_login(ctx)
    if error:
        return error
    url = ctx.media.get_media_url(cmd.media_id)
    if url is None:
        return f"Error: Could not get a link for media {cmd.media_id}"
    return url


def handle_edit(cmd: EditCommand, ctx: AppContext) -> str:
    """
    Handle 'edit' command.

    The local list is updated only after the backend accepts the change.
    """
    error = _require_login(ctx)
    if error:
        return error

    try:
        if ctx.media.get_media(cmd.media_id) is None:
            ctx.media.refresh_media()
        existing = ctx.media.get_media(cmd.media_id)
        if existing is None:
            return f"Error: Media {cmd.media_id} not found"
        if existing.type == 'image' and cmd.genre is not None:
            return "Error: Images have no genre; use --description or --tags"

        item = ctx.media.edit_media(
            cmd.media_id,
            description=cmd.description,
            genre=cmd.genre,
            tags=cmd.tags,
        )
    except MediaDashError as e:
        return f"Error updating media {cmd.media_id}: {e}"
    return f"Updated:\n{format_media_item(item)}"


def handle_delete(cmd: DeleteCommand, ctx: AppContext) -> str:
    error = _require_login(ctx)
    if error:
        return error
    try:
        ctx.media.delete_media(cmd.media_id)
    except MediaDashError as e:
        return f"Error deleting media {cmd.media_id}: {e}"
    return f"Deleted media {cmd.media_id}."


def handle_queue_add(cmd: QueueAddCommand, ctx: AppContext) -> str:
    """
    Handle 'queue-add' command.

    Unreadable files and files that are not image/audio/video are reported
    and skipped; nothing is sent to the server.
    """
    results = []
    selected = []
    for path in cmd.paths:
        try:
            selected.append(SelectedFile.from_path(path))
        except OSError as e:
            results.append(f"Error: {e}")

    rejected = ctx.queue.select_files(selected)
    for file in rejected:
        results.append(f"Error: Unsupported file type: {file.filename} ({file.mimetype or 'unknown'})")

    added = len(selected) - len(rejected)
    if added:
        results.append(f"Queued {added} file(s). {len(ctx.queue.items)} in queue.")
    elif not results:
        results.append("No files selected.")
    return '\n'.join(results)


def handle_queue_show(ctx: AppContext) -> str:
    ctx.queue.clear_finished()
    items = ctx.queue.items
    if not items:
        return "Upload queue is empty."
    lines = [f"Upload queue ({len(items)} file(s)):"]
    lines.extend(format_queued_file(position, item) for position, item in enumerate(items, start=1))
    if ctx.queue.can_submit:
        lines.append("Run 'upload' to send pending files.")
    return '\n'.join(lines)


def handle_queue_remove(cmd: QueueRemoveCommand, ctx: AppContext) -> str:
    item = _resolve_queued(ctx, cmd.file_ref)
    if item is None:
        return f"Error: No queued file {cmd.file_ref}"
    if not ctx.queue.remove(item.id):
        return f"Error: {item.file.filename} is {item.status.value} and cannot be removed"
    return f"Removed {item.file.filename} from the queue."


def handle_queue_meta(cmd: QueueMetaCommand, ctx: AppContext) -> str:
    item = _resolve_queued(ctx, cmd.file_ref)
    if item is None:
        return f"Error: No queued file {cmd.file_ref}"
    changed = ctx.queue.edit_metadata(
        item.id,
        description=cmd.description,
        genre=cmd.genre,
        tags=cmd.tags,
    )
    if not changed:
        return f"Error: {item.file.filename} is {item.status.value} and cannot be edited"
    return f"Updated metadata for {item.file.filename}."


def handle_queue_tag(cmd: QueueTagCommand, ctx: AppContext) -> str:
    item = _resolve_queued(ctx, cmd.file_ref)
    if item is None:
        return f"Error: No queued file {cmd.file_ref}"
    if not ctx.queue.add_tag(item.id, cmd.tag):
        return f"Error: {item.file.filename} is {item.status.value} and cannot be edited"
    updated = ctx.queue.get(item.id)
    return f"Tags for {item.file.filename}: {', '.join(updated.metadata.tags) or '-'}"


def handle_queue_retry(cmd: QueueRetryCommand, ctx: AppContext) -> str:
    item = _resolve_queued(ctx, cmd.file_ref)
    if item is None:
        return f"Error: No queued file {cmd.file_ref}"
    if not ctx.queue.retry(item.id):
        return f"Error: Only failed uploads can be retried ({item.file.filename} is {item.status.value})"
    return f"{item.file.filename} is pending again."


def _upload_outcome(item: QueuedFile) -> str:
    if item.status == UploadStatus.SUCCESS:
        return f"Uploaded: {item.file.filename}"
    return f"Error uploading {item.file.filename}: {item.error}"


def handle_upload(ctx: AppContext, echo: Optional[Callable[[str], Any]] = None) -> str:
    """
    Handle 'upload' command.

    Uploads pending files one at a time. Each outcome goes to ``echo`` as
    soon as it is known; without ``echo`` the outcomes are part of the
    returned text.
    """
    error = _require_login(ctx)
    if error:
        return error
    if not ctx.queue.can_submit:
        return "Nothing to upload. Use 'queue-add' to select files."

    logger.info(f"Executing upload command: {len(ctx.queue.items)} queued file(s)")
    results: list[str] = []

    def report(item: QueuedFile) -> None:
        line = _upload_outcome(item)
        if echo is not None:
            echo(line)
        else:
            results.append(line)

    summary = ctx.queue.process(on_progress=report)

    results.append(f"{len(summary.succeeded)} succeeded, {len(summary.failed)} failed.")
    if summary.failed:
        results.append("Failed files stay in the queue; use 'queue-retry' or 'queue-remove'.")
    return '\n'.join(results)


def handle_profile(ctx: AppContext) -> str:
    error = _require_login(ctx)
    if error:
        return error
    user = ctx.auth.user
    items = ctx.media.items
    counts = count_by_type(items)
    lines = [
        f"Username: {user.username}",
        f"Name: {user.full_name or '-'}",
        f"Email: {user.email}",
        f"Bio: {user.bio or '-'}",
        f"Member since: {format_date(user.created_at)}",
        "",
        f"Files: {counts['all']} (images: {counts['image']}, audio: {counts['audio']}, video: {counts['video']})",
        f"Storage used: {format_file_size(total_size(items))}",
    ]
    return '\n'.join(lines)


def handle_profile_set(cmd: ProfileSetCommand, ctx: AppContext) -> str:
    error = _require_login(ctx)
    if error:
        return error
    user = ctx.auth.user
    full_name = cmd.full_name if cmd.full_name is not None else (user.full_name or user.username)
    bio = cmd.bio if cmd.bio is not None else user.bio
    try:
        updated = ctx.auth.save_profile(full_name, bio)
    except MediaDashError as e:
        return f"Error saving profile: {e}"
    return f"Profile updated. Username: {updated.username}"


def handle_password(cmd: PasswordCommand, ctx: AppContext) -> str:
    error = _require_login(ctx)
    if error:
        return error
    try:
        ctx.auth.change_password(cmd.old_password, cmd.new_password, cmd.confirm_password)
    except MediaDashError as e:
        return f"Error changing password: {e}"
    return "Password changed."
