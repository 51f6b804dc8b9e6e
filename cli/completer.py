"""Custom completer for MediaDash CLI with media file autocompletion."""

import mimetypes
from pathlib import Path
from typing import Iterable

from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document

from cli.constants import COMMANDS
from common.types import upload_kind


def is_media_file(path: Path) -> bool:
    mimetype, _ = mimetypes.guess_type(path.name)
    return upload_kind(mimetype) is not None


class MediaDashCompleter(Completer):
    """
    Custom completer that provides:
    - Command name completion for the first token
    - Media file path completion for the 'queue-add' command
    """

    def get_completions(
        self, document: Document, complete_event
    ) -> Iterable[Completion]:
        """
        Generate completions based on cursor position and context.

        For the first token, completes command names.
        For 'queue-add' arguments, completes directories and image/audio/video files.
        """
        text = document.text_before_cursor
        tokens = text.split()

        is_typing_new_token = text.endswith(" ") or not tokens

        if not tokens or (len(tokens) == 1 and not is_typing_new_token):
            yield from self._complete_commands(tokens[0] if tokens else "")
            return

        if tokens[0].lower() != "queue-add":
            return

        current_word = "" if is_typing_new_token else tokens[-1]
        already_typed = set(tokens[1:] if is_typing_new_token else tokens[1:-1])

        yield from self._complete_media_files(current_word, already_typed)

    def _complete_commands(self, partial: str) -> Iterable[Completion]:
        """Complete command names matching the partial input."""
        partial_lower = partial.lower()
        for cmd in COMMANDS:
            if cmd.startswith(partial_lower):
                yield Completion(cmd, start_position=-len(partial))

    def _complete_media_files(
        self, partial: str, exclude_files: set
    ) -> Iterable[Completion]:
        """
        Complete paths under the directory typed so far.

        Directories are offered with a trailing slash; files only when
        their extension maps to an image, audio or video type.
        """
        if partial.endswith("/"):
            directory, prefix = partial, ""
        else:
            head, _, prefix = partial.rpartition("/")
            directory = f"{head}/" if head or partial.startswith("/") else ""

        search_dir = Path(directory).expanduser() if directory else Path.cwd()
        if not search_dir.is_dir():
            return

        candidates = []
        for entry in search_dir.iterdir():
            if entry.name.startswith(".") and not prefix.startswith("."):
                continue
            if not entry.name.lower().startswith(prefix.lower()):
                continue
            if entry.is_dir():
                candidates.append(f"{directory}{entry.name}/")
            elif entry.is_file() and is_media_file(entry):
                candidate = f"{directory}{entry.name}"
                if candidate not in exclude_files:
                    candidates.append(candidate)

        for candidate in sorted(candidates):
            yield Completion(candidate, start_position=-len(partial))
