"""Pydantic model for a single completion request."""

from __future__ import annotations

from pydantic import BaseModel


class CompletionRequest(BaseModel):
    selected_text: str
    instruction: str
    language_id: str | None = None

    def inquiry_prompt(self) -> str:
        """Prompt sent to the chat endpoint when the answer is only displayed."""
        return f"{self.instruction} \n\n{self.selected_text}"
