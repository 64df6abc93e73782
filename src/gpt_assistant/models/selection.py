"""Editor positions and selections (zero-based, end exclusive)."""

from __future__ import annotations

from pydantic import BaseModel, model_validator


class Position(BaseModel):
    line: int
    character: int

    model_config = {"frozen": True}

    def __lt__(self, other: Position) -> bool:
        return (self.line, self.character) < (other.line, other.character)


class Selection(BaseModel):
    start: Position
    end: Position

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_order(self) -> Selection:
        if self.end < self.start:
            raise ValueError("selection end must not precede its start")
        if self.start.line < 0 or self.start.character < 0:
            raise ValueError("selection positions must be non-negative")
        return self

    @property
    def is_empty(self) -> bool:
        return self.start == self.end
