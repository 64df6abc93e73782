"""Shared test fixtures."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import AsyncMock

import httpx
import pytest

from gpt_assistant.clients.completion_client import CompletionClient, CompletionResult
from gpt_assistant.config import APIConfig
from gpt_assistant.editor import FileEditor
from gpt_assistant.models.selection import Position, Selection


class RecordingNotifier:
    """Notifier that records every message and answers prompts from a queue."""

    def __init__(self, answers: list[str | None] | None = None):
        self.infos: list[str] = []
        self.warnings: list[str] = []
        self.errors: list[str] = []
        self.prompts: list[tuple[str, str]] = []
        self.answers = list(answers or [])

    def info(self, message: str) -> None:
        self.infos.append(message)

    def warning(self, message: str) -> None:
        self.warnings.append(message)

    def error(self, message: str) -> None:
        self.errors.append(message)

    def prompt(self, message: str, value: str = "") -> str | None:
        self.prompts.append((message, value))
        return self.answers.pop(0) if self.answers else None


class MemoryEditor:
    """In-memory editor over a single line-oriented document."""

    def __init__(self, text: str, selection: Selection, language_id: str = "javascript"):
        self.text = text
        self.selection = selection
        self.language_id = language_id
        self.replacements: list[tuple[Selection, str]] = []

    def _offset(self, position: Position) -> int:
        lines = self.text.split("\n")
        return sum(len(line) + 1 for line in lines[: position.line]) + position.character

    def get_text(self, selection: Selection) -> str:
        return self.text[self._offset(selection.start) : self._offset(selection.end)]

    def replace(self, selection: Selection, text: str) -> None:
        start, end = self._offset(selection.start), self._offset(selection.end)
        self.text = self.text[:start] + text + self.text[end:]
        self.replacements.append((selection, text))


def selection(start_line: int, start_char: int, end_line: int, end_char: int) -> Selection:
    return Selection(
        start=Position(line=start_line, character=start_char),
        end=Position(line=end_line, character=end_char),
    )


def edits_response(text: str, **usage) -> dict:
    body = {"object": "edit", "choices": [{"text": text, "index": 0}]}
    if usage:
        body["usage"] = usage
    return body


def chat_response(content: str, **usage) -> dict:
    body = {
        "object": "chat.completion",
        "model": "gpt-3.5-turbo",
        "choices": [{"index": 0, "message": {"role": "assistant", "content": content}}],
    }
    if usage:
        body["usage"] = usage
    return body


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request and replies with a fixed JSON body."""

    def __init__(self, body: dict | None = None, status_code: int = 200):
        self.requests: list[httpx.Request] = []
        self.body = body if body is not None else {}
        self.status_code = status_code
        super().__init__(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, json=self.body)

    def payload(self, index: int = 0) -> dict:
        return json.loads(self.requests[index].content)


@pytest.fixture
def api_config() -> APIConfig:
    return APIConfig(api_key="sk-test")


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def sample_js() -> str:
    return "const x = 1;\nfunction add(a,b){return a+b}\nconsole.log(add(x, 2));\n"


@pytest.fixture
def source_file(tmp_path: Path, sample_js: str) -> Path:
    path = tmp_path / "math.js"
    path.write_text(sample_js, encoding="utf-8")
    return path


@pytest.fixture
def file_editor(source_file: Path) -> FileEditor:
    return FileEditor(source_file)


@pytest.fixture
def mock_completion_client() -> CompletionClient:
    """Create a mock completion client."""
    client = AsyncMock(spec=CompletionClient)
    client.generate_edit = AsyncMock(
        return_value=CompletionResult(text="edited", model="code-davinci-edit-001")
    )
    client.generate_completion = AsyncMock(
        return_value=CompletionResult(text="answer", model="gpt-3.5-turbo")
    )
    return client
