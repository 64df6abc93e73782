"""Editor host ports and the file-backed editor used by the CLI.

The executor only talks to the ``TextEditor`` and ``Notifier`` protocols, so
any host that can report a selection and show messages can drive it.
"""

from __future__ import annotations

import contextlib
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Protocol, runtime_checkable

from gpt_assistant.models.selection import Position, Selection

logger = logging.getLogger(__name__)

# File extension -> editor language identifier
LANGUAGE_IDS: dict[str, str] = {
    ".py": "python",
    ".pyi": "python",
    ".js": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".jsx": "javascriptreact",
    ".ts": "typescript",
    ".tsx": "typescriptreact",
    ".java": "java",
    ".kt": "kotlin",
    ".go": "go",
    ".rs": "rust",
    ".rb": "ruby",
    ".php": "php",
    ".c": "c",
    ".h": "c",
    ".cpp": "cpp",
    ".cc": "cpp",
    ".hpp": "cpp",
    ".cs": "csharp",
    ".swift": "swift",
    ".scala": "scala",
    ".sh": "shellscript",
    ".bash": "shellscript",
    ".ps1": "powershell",
    ".sql": "sql",
    ".html": "html",
    ".css": "css",
    ".scss": "scss",
    ".json": "json",
    ".yaml": "yaml",
    ".yml": "yaml",
    ".md": "markdown",
    ".lua": "lua",
    ".r": "r",
    ".dart": "dart",
}

DEFAULT_LANGUAGE_ID = "plaintext"


@runtime_checkable
class TextEditor(Protocol):
    """The active editor: a document, its language and the user's selection."""

    @property
    def language_id(self) -> str:
        """Language identifier of the document (e.g. ``python``)."""

    @property
    def selection(self) -> Selection:
        """The current selection."""

    def get_text(self, selection: Selection) -> str:
        """Return the document text covered by ``selection``."""

    def replace(self, selection: Selection, text: str) -> None:
        """Replace exactly the range covered by ``selection`` with ``text``."""


@runtime_checkable
class Notifier(Protocol):
    """User-visible messages and the free-text input box."""

    def info(self, message: str) -> None:
        """Show an information message."""

    def warning(self, message: str) -> None:
        """Show a warning message."""

    def error(self, message: str) -> None:
        """Show an error message."""

    def prompt(self, message: str, value: str = "") -> str | None:
        """Ask for free text; ``None`` when the user dismisses the prompt."""


def language_id_for(path: str | Path) -> str:
    """Infer the editor language identifier from a file extension."""
    return LANGUAGE_IDS.get(Path(path).suffix.lower(), DEFAULT_LANGUAGE_ID)


class FileEditor:
    """A source file treated as the active editor.

    Positions are zero-based line/character pairs. Line endings are kept as
    they are on disk, so text outside a replaced range is written back
    byte-for-byte.
    """

    def __init__(
        self,
        path: str | Path,
        selection: Selection | None = None,
        language_id: str | None = None,
    ):
        self.path = Path(path)
        with open(self.path, encoding="utf-8", newline="") as f:
            self._text = f.read()
        self._language_id = language_id or language_id_for(self.path)
        self._selection = selection or self.full_range()

    @property
    def text(self) -> str:
        return self._text

    @property
    def language_id(self) -> str:
        return self._language_id

    @property
    def selection(self) -> Selection:
        return self._selection

    def _line_starts(self) -> list[int]:
        starts = [0]
        for i, ch in enumerate(self._text):
            if ch == "\n":
                starts.append(i + 1)
        return starts

    def _line_content(self, starts: list[int], line: int) -> str:
        end = starts[line + 1] if line + 1 < len(starts) else len(self._text)
        return self._text[starts[line] : end].rstrip("\r\n")

    def line_count(self) -> int:
        return len(self._line_starts())

    def full_range(self) -> Selection:
        starts = self._line_starts()
        last = len(starts) - 1
        return Selection(
            start=Position(line=0, character=0),
            end=Position(line=last, character=len(self._line_content(starts, last))),
        )

    def offset_at(self, position: Position) -> int:
        """Character offset of ``position``, clamped to the document like an editor does."""
        starts = self._line_starts()
        if position.line >= len(starts):
            return len(self._text)
        content = self._line_content(starts, position.line)
        return starts[position.line] + min(position.character, len(content))

    def lines_range(self, first: int, last: int | None = None) -> Selection:
        """Selection covering 1-based inclusive lines ``first``..``last``, without the final EOL."""
        last = first if last is None else last
        starts = self._line_starts()
        if first < 1 or last < first:
            raise ValueError(f"Invalid line range: {first}:{last}")
        if first > len(starts):
            raise ValueError(f"Line {first} is past the end of {self.path} ({len(starts)} lines)")
        last = min(last, len(starts))
        return Selection(
            start=Position(line=first - 1, character=0),
            end=Position(line=last - 1, character=len(self._line_content(starts, last - 1))),
        )

    def select(self, selection: Selection) -> None:
        self._selection = selection

    def get_text(self, selection: Selection) -> str:
        return self._text[self.offset_at(selection.start) : self.offset_at(selection.end)]

    def replace(self, selection: Selection, text: str) -> None:
        """Replace the range and write the file back.

        The new content goes to a temporary file next to the original that is
        then moved over it, so a failed write leaves both the file and the
        buffer as they were.
        """
        start = self.offset_at(selection.start)
        end = self.offset_at(selection.end)
        new_text = self._text[:start] + text + self._text[end:]

        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
                f.write(new_text)
            shutil.copymode(self.path, tmp_name)
            os.replace(tmp_name, self.path)
        except BaseException:
            with contextlib.suppress(FileNotFoundError):
                os.unlink(tmp_name)
            raise

        self._text = new_text
        logger.debug("Replaced %d chars at offset %d in %s", end - start, start, self.path)
