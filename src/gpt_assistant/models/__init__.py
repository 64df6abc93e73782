"""Data models for the assistant commands."""

from gpt_assistant.models.command import Action, ActionInfo, ResolvedCommand
from gpt_assistant.models.request import CompletionRequest
from gpt_assistant.models.selection import Position, Selection

__all__ = [
    "Action",
    "ActionInfo",
    "CompletionRequest",
    "Position",
    "ResolvedCommand",
    "Selection",
]
