"""CLI constants and configuration."""

from prompt_toolkit.styles import Style

COMMANDS = [
    "register", "login", "logout", "whoami",
    "list", "search", "refresh", "show", "url", "edit", "delete",
    "queue-add", "queue", "queue-remove", "queue-meta", "queue-tag", "queue-retry", "upload",
    "profile", "profile-set", "password",
    "clear", "exit", "help",
]

STYLE = Style.from_dict(
    {
        "prompt": "#2BB673 bold",
        "user": "#0088ff",
    }
)

GREEN = "\033[38;2;43;182;115m"
RED = "\033[38;2;229;72;77m"
YELLOW = "\033[38;2;230;180;60m"
RESET = "\033[0m"

LOGO = f"""{GREEN}
 __  __          _ _       ____            _
|  \\/  | ___  __| (_) __ _|  _ \\  __ _ ___| |__
| |\\/| |/ _ \\/ _` | |/ _` | | | |/ _` / __| '_ \\
| |  | |  __/ (_| | | (_| | |_| | (_| \\__ \\ | | |
|_|  |_|\\___|\\__,_|_|\\__,_|____/ \\__,_|___/_| |_|
{RESET}"""

WELCOME_TITLE = "MediaDash - image, audio and video library"
WELCOME_HELP = "Type 'help' for commands or 'exit' to quit.\n"

PROMPT_TEXT = "mediadash> "

HELP_TEXT = """Available commands:
  register <email> <username> <password>     Create an account and log in
  login <email> <password>                   Log in
  logout                                     Log out and forget the stored token
  whoami                                     Show the current user
  list [--type T] [text]                     List media; T is all|image|audio|video
  search <text>                              Reload the list with a server-side search
  refresh                                    Reload the full list from the server
  show <id>                                  Show details of a media item
  url <id>                                   Fetch a temporary download link
  edit <id> [--description D] [--genre G] [--tags T]
                                             Update metadata (tags comma-separated)
  delete <id>                                Delete a media item
  queue-add <path> [path ...]                Select image/audio/video files for upload
  queue                                      Show the upload queue
  queue-remove <n>                           Remove a pending file from the queue
  queue-meta <n> [--description D] [--genre G] [--tags T]
                                             Set metadata of a pending file
  queue-tag <n> <tag>                        Add a tag to a pending file
  queue-retry <n>                            Put a failed file back to pending
  upload                                     Upload all pending files, one at a time
  profile                                    Show profile and library statistics
  profile-set [--name N] [--bio B]           Update name and bio
  password <old> <new> <confirm>             Change password
  clear                                      Clear screen and redisplay welcome message
  help                                       Show this help
  exit                                       Exit REPL

Queue entries are referenced by their position in 'queue' output.
Examples:
  login alice@example.com s3cret
  queue-add ~/Music/song.mp3 ~/Pictures/cat.png
  queue-meta 1 --genre rock --tags "live, 2024"
  upload
  list --type audio live
  edit 12 --tags "live, encore" --description Encore"""

OPTION_ALIASES = {
    "-d": "--description",
    "-g": "--genre",
    "-t": "--tags",
    "-n": "--name",
    "-b": "--bio",
}
