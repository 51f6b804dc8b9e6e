"""Command parser for CLI input."""

import shlex
from typing import Optional

from cli.constants import OPTION_ALIASES
from cli.models import (
    CommandRequest,
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
from dashboard.gallery import TYPE_FILTERS
from dashboard.upload_queue import parse_tags


class ParseError(Exception):
    """Raised when command parsing fails."""

    pass


def parse_command(input_line: str) -> CommandRequest:
    """Parse user input into a CommandRequest object.

    Args:
        input_line: Raw user input from REPL

    Returns:
        CommandRequest object

    Raises:
        ParseError: If command syntax is invalid
    """
    if not input_line.strip():
        raise ParseError("Empty command")

    try:
        tokens = shlex.split(input_line)
    except ValueError as e:
        raise ParseError(f"Invalid syntax: {e}")

    if not tokens:
        raise ParseError("Empty command")

    command_name = tokens[0]
    parser = _PARSERS.get(command_name)
    if parser is None:
        raise ParseError(f"Unknown command: {command_name}")
    return parser(tokens[1:])


def _split_options(args: list[str], allowed: tuple[str, ...]) -> tuple[list[str], dict[str, str]]:
    """Separate ``--name value`` pairs from positional arguments."""
    positionals: list[str] = []
    options: dict[str, str] = {}
    index = 0
    while index < len(args):
        arg = OPTION_ALIASES.get(args[index], args[index])
        if arg.startswith("--") and len(arg) > 2:
            name, _, inline_value = arg[2:].partition("=")
            if name not in allowed:
                raise ParseError(f"Unknown option: --{name}")
            if inline_value:
                options[name] = inline_value
            else:
                if index + 1 >= len(args):
                    raise ParseError(f"Option --{name} requires a value")
                options[name] = args[index + 1]
                index += 1
        else:
            positionals.append(args[index])
        index += 1
    return positionals, options


def _parse_id(value: str) -> int:
    try:
        media_id = int(value)
    except ValueError:
        raise ParseError(f"Invalid media id: {value}")
    if media_id < 0:
        raise ParseError(f"Invalid media id: {value}")
    return media_id


def _single_id(name: str, args: list[str]) -> int:
    if len(args) != 1:
        raise ParseError(f"{name} requires exactly 1 argument: <id>")
    return _parse_id(args[0])


def _tags_option(options: dict[str, str]) -> Optional[tuple[str, ...]]:
    if "tags" not in options:
        return None
    return tuple(parse_tags(options["tags"]))


def _parse_register(args: list[str]) -> RegisterCommand:
    """Parse 'register <email> <username> <password>' command."""
    if len(args) != 3:
        raise ParseError("register requires exactly 3 arguments: <email> <username> <password>")

    email, username, password = args
    return RegisterCommand(email=email, username=username, password=password)


def _parse_login(args: list[str]) -> LoginCommand:
    """Parse 'login <email> <password>' command."""
    if len(args) != 2:
        raise ParseError("login requires exactly 2 arguments: <email> <password>")

    email, password = args
    return LoginCommand(email=email, password=password)


def _no_args(name: str, command_type):
    def parse(args: list[str]):
        if args:
            raise ParseError(f"{name} takes no arguments")
        return command_type()
    return parse


def _parse_list(args: list[str]) -> ListCommand:
    """Parse 'list [--type T] [text]' command."""
    positionals, options = _split_options(args, ("type",))
    media_type = options.get("type", "all").lower()
    if media_type not in TYPE_FILTERS:
        raise ParseError(f"--type must be one of: {', '.join(TYPE_FILTERS)}")
    return ListCommand(query=" ".join(positionals), media_type=media_type)


def _parse_search(args: list[str]) -> SearchCommand:
    if not args:
        raise ParseError("search requires a query")
    return SearchCommand(query=" ".join(args))


def _parse_edit(args: list[str]) -> EditCommand:
    """Parse 'edit <id> [--description D] [--genre G] [--tags T]' command."""
    positionals, options = _split_options(args, ("description", "genre", "tags"))
    media_id = _single_id("edit", positionals)
    if not options:
        raise ParseError("edit requires at least one of --description, --genre, --tags")
    return EditCommand(
        media_id=media_id,
        description=options.get("description"),
        genre=options.get("genre"),
        tags=_tags_option(options),
    )


def _parse_queue_add(args: list[str]) -> QueueAddCommand:
    if not args:
        raise ParseError("queue-add requires at least one file")
    return QueueAddCommand(paths=tuple(args))


def _parse_queue_ref(name: str, command_type):
    def parse(args: list[str]):
        if len(args) != 1:
            raise ParseError(f"{name} requires exactly 1 argument: <n>")
        return command_type(file_ref=args[0])
    return parse


def _parse_queue_meta(args: list[str]) -> QueueMetaCommand:
    """Parse 'queue-meta <n> [--description D] [--genre G] [--tags T]' command."""
    positionals, options = _split_options(args, ("description", "genre", "tags"))
    if len(positionals) != 1:
        raise ParseError("queue-meta requires exactly 1 argument: <n>")
    if not options:
        raise ParseError("queue-meta requires at least one of --description, --genre, --tags")
    return QueueMetaCommand(
        file_ref=positionals[0],
        description=options.get("description"),
        genre=options.get("genre"),
        tags=_tags_option(options),
    )


def _parse_queue_tag(args: list[str]) -> QueueTagCommand:
    if len(args) < 2:
        raise ParseError("queue-tag requires 2 arguments: <n> <tag>")
    return QueueTagCommand(file_ref=args[0], tag=" ".join(args[1:]))


def _parse_profile_set(args: list[str]) -> ProfileSetCommand:
    positionals, options = _split_options(args, ("name", "bio"))
    if positionals:
        raise ParseError("profile-set only accepts --name and --bio")
    if not options:
        raise ParseError("profile-set requires --name and/or --bio")
    return ProfileSetCommand(full_name=options.get("name"), bio=options.get("bio"))


def _parse_password(args: list[str]) -> PasswordCommand:
    if len(args) != 3:
        raise ParseError("password requires exactly 3 arguments: <old> <new> <confirm>")
    old_password, new_password, confirm_password = args
    return PasswordCommand(
        old_password=old_password,
        new_password=new_password,
        confirm_password=confirm_password,
    )


_PARSERS = {
    "register": _parse_register,
    "login": _parse_login,
    "logout": _no_args("logout", LogoutCommand),
    "whoami": _no_args("whoami", WhoamiCommand),
    "list": _parse_list,
    "search": _parse_search,
    "refresh": _no_args("refresh", RefreshCommand),
    "show": lambda args: ShowCommand(media_id=_single_id("show", args)),
    "url": lambda args: UrlCommand(media_id=_single_id("url", args)),
    "edit": _parse_edit,
    "delete": lambda args: DeleteCommand(media_id=_single_id("delete", args)),
    "queue-add": _parse_queue_add,
    "queue": _no_args("queue", QueueShowCommand),
    "queue-remove": _parse_queue_ref("queue-remove", QueueRemoveCommand),
    "queue-meta": _parse_queue_meta,
    "queue-tag": _parse_queue_tag,
    "queue-retry": _parse_queue_ref("queue-retry", QueueRetryCommand),
    "upload": _no_args("upload", UploadCommand),
    "profile": _no_args("profile", ProfileCommand),
    "profile-set": _parse_profile_set,
    "password": _parse_password,
}
