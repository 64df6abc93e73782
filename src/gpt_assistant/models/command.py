"""Pydantic models for the command dispatcher."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class Action(str, Enum):
    OPTIMIZE = "optimize"
    DOCUMENT = "document"
    ANALYZE = "analyze"
    DRY = "dry"
    INQUIRE = "inquire"


class ActionInfo(BaseModel):
    action: Action
    label: str
    edit: bool  # True: replace selection, False: show as message
    description: str


class ResolvedCommand(BaseModel):
    action: Action
    instruction: str
    edit: bool
