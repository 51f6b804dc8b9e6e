"""REPL with prompt_toolkit for user interaction."""

import os
import sys

from prompt_toolkit import PromptSession
from prompt_toolkit.history import InMemoryHistory

from cli.commands import (
    handle_delete,
    handle_edit,
    handle_list,
    handle_login,
    handle_logout,
    handle_password,
    handle_profile,
    handle_profile_set,
    handle_queue_add,
    handle_queue_meta,
    handle_queue_remove,
    handle_queue_retry,
    handle_queue_show,
    handle_queue_tag,
    handle_refresh,
    handle_register,
    handle_search,
    handle_show,
    handle_upload,
    handle_url,
    handle_whoami,
)
from cli.completer import MediaDashCompleter
from cli.constants import (
    HELP_TEXT,
    LOGO,
    PROMPT_TEXT,
    STYLE,
    WELCOME_HELP,
    WELCOME_TITLE,
)
from cli.context import AppContext
from cli.models import (
    DeleteCommand,
    EditCommand,
    ListCommand,
    LoginCommand,
    LogoutCommand,
    PasswordCommand,
    ProfileCommand,
    ProfileSetCommand,
    QueueAddCommand,
    QueueMetaCommand,
    QueueRemoveCommand,
    QueueRetryCommand,
    QueueShowCommand,
    QueueTagCommand,
    RefreshCommand,
    RegisterCommand,
    SearchCommand,
    ShowCommand,
    UploadCommand,
    UrlCommand,
    WhoamiCommand,
)
from cli.parser import ParseError, parse_command
from common.logging_config import get_logger
from mediaclient.exceptions import MediaDashError

logger = get_logger(__name__)


def clear_screen() -> None:
    """Clear the terminal screen (cross-platform)."""
    if sys.platform == "win32":
        os.system("cls")
    else:
        os.system("clear")


def show_welcome() -> None:
    print(LOGO)
    print(WELCOME_TITLE)
    print(WELCOME_HELP)


def dispatch_command(cmd_obj, ctx: AppContext, echo=None) -> str:
    """
    Dispatch parsed command to appropriate handler.

    ``echo`` receives the per-file lines of an upload as they happen.
    """
    if isinstance(cmd_obj, RegisterCommand):
        return handle_register(cmd_obj, ctx)
    elif isinstance(cmd_obj, LoginCommand):
        return handle_login(cmd_obj, ctx)
    elif isinstance(cmd_obj, LogoutCommand):
        return handle_logout(ctx)
    elif isinstance(cmd_obj, WhoamiCommand):
        return handle_whoami(ctx)
    elif isinstance(cmd_obj, ListCommand):
        return handle_list(cmd_obj, ctx)
    elif isinstance(cmd_obj, SearchCommand):
        return handle_search(cmd_obj, ctx)
    elif isinstance(cmd_obj, RefreshCommand):
        return handle_refresh(ctx)
    elif isinstance(cmd_obj, ShowCommand):
        return handle_show(cmd_obj, ctx)
    elif isinstance(cmd_obj, UrlCommand):
        return handle_url(cmd_obj, ctx)
    elif isinstance(cmd_obj, EditCommand):
        return handle_edit(cmd_obj, ctx)
    elif isinstance(cmd_obj, DeleteCommand):
        return handle_delete(cmd_obj, ctx)
    elif isinstance(cmd_obj, QueueAddCommand):
        return handle_queue_add(cmd_obj, ctx)
    elif isinstance(cmd_obj, QueueShowCommand):
        return handle_queue_show(ctx)
    elif isinstance(cmd_obj, QueueRemoveCommand):
        return handle_queue_remove(cmd_obj, ctx)
    elif isinstance(cmd_obj, QueueMetaCommand):
        return handle_queue_meta(cmd_obj, ctx)
    elif isinstance(cmd_obj, QueueTagCommand):
        return handle_queue_tag(cmd_obj, ctx)
    elif isinstance(cmd_obj, QueueRetryCommand):
        return handle_queue_retry(cmd_obj, ctx)
    elif isinstance(cmd_obj, UploadCommand):
        return handle_upload(ctx, echo=echo)
    elif isinstance(cmd_obj, ProfileCommand):
        return handle_profile(ctx)
    elif isinstance(cmd_obj, ProfileSetCommand):
        return handle_profile_set(cmd_obj, ctx)
    elif isinstance(cmd_obj, PasswordCommand):
        return handle_password(cmd_obj, ctx)
    else:
        return f"Unknown command type: {type(cmd_obj)}"


def start_session(ctx: AppContext) -> str:
    """Resume a stored session and load the library if it is still valid."""
    user = ctx.auth.bootstrap()
    if user is None:
        return "Not logged in. Use 'login' or 'register' to start."
    try:
        items = ctx.media.refresh_media()
    except MediaDashError as e:
        return f"Welcome back, {user.username}.\nError loading media: {e}"
    return f"Welcome back, {user.username}. {len(items)} media item(s) in your library."


def _prompt(ctx: AppContext) -> list:
    user = ctx.auth.user
    if user is None:
        return [("class:prompt", PROMPT_TEXT)]
    return [("class:user", f"({user.username}) "), ("class:prompt", PROMPT_TEXT)]


def repl_loop(ctx: AppContext) -> None:
    """Start interactive REPL with prompt_toolkit."""
    history = InMemoryHistory()
    session: PromptSession = PromptSession(
        completer=MediaDashCompleter(), history=history, style=STYLE
    )

    clear_screen()
    show_welcome()
    print(start_session(ctx))

    while True:
        try:
            user_input = session.prompt(_prompt(ctx))

            if not user_input.strip():
                continue

            if user_input.strip() == "exit":
                print("Goodbye!")
                break

            if user_input.strip() == "help":
                print(HELP_TEXT)
                continue

            if user_input.strip() == "clear":
                clear_screen()
                show_welcome()
                continue

            cmd_obj = parse_command(user_input)
            logger.debug(f"Dispatching {cmd_obj.command}")
            result = dispatch_command(cmd_obj, ctx, echo=print)
            print(result)

        except ParseError as e:
            print(f"Error: {e}")
        except KeyboardInterrupt:
            continue
        except EOFError:
            print("\nGoodbye!")
            break
