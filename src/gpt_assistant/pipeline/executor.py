"""Command executor - selection -> completion -> buffer edit or message."""

from __future__ import annotations

import logging

from gpt_assistant.clients.completion_client import (
    CompletionClient,
    CompletionError,
    MissingCredentialError,
)
from gpt_assistant.editor import Notifier, TextEditor
from gpt_assistant.models.command import Action
from gpt_assistant.models.request import CompletionRequest
from gpt_assistant.pipeline.dispatcher import resolve_command, substitute_language

logger = logging.getLogger(__name__)

NO_SELECTION_MESSAGE = "No text selected."
NO_INPUT_MESSAGE = "No input provided"
INQUIRE_PROMPT = "Ask a question about this code."
MISSING_KEY_MESSAGE = "Please configure the API key in the settings."
ERROR_PREFIX = "Error generating completion: "


class CommandExecutor:
    """Runs one assistant command against the active editor.

    Every invocation is independent: the buffer is only touched after a
    successful response, and every failure ends in a single error message.
    """

    def __init__(
        self,
        client: CompletionClient,
        notifier: Notifier,
        editor: TextEditor | None = None,
        prompt_overrides: dict[str, str] | None = None,
    ):
        self.client = client
        self.notifier = notifier
        self.editor = editor
        self.prompt_overrides = prompt_overrides or {}

    def _read_selection(self) -> str | None:
        if self.editor is None:
            logger.debug("No active editor")
            return None

        selected_text = self.editor.get_text(self.editor.selection)
        if not selected_text:
            self.notifier.info(NO_SELECTION_MESSAGE)
            return None
        return selected_text

    async def execute_command(self, instruction: str, edit: bool = True) -> bool:
        """Send the selection with ``instruction`` and apply or show the reply.

        Returns True when the buffer was updated or the answer shown.
        """
        selected_text = self._read_selection()
        if selected_text is None:
            return False
        request = CompletionRequest(
            selected_text=selected_text,
            instruction=instruction,
            language_id=self.editor.language_id,
        )

        # Captured before the call so the reply lands on the range that was sent
        selection = self.editor.selection

        try:
            if edit:
                prompt = substitute_language(request.instruction, request.language_id or "")
                logger.debug("PROMPT:\n%s", prompt)
                result = await self.client.generate_edit(request.selected_text, prompt)
                logger.debug("RESPONSE:\n%s", result.text)
                self.editor.replace(selection, result.text)
            else:
                result = await self.client.generate_completion(request.inquiry_prompt())
                logger.debug("RESPONSE:\n%s", result.text)
                self.notifier.info(result.text)
        except MissingCredentialError as e:
            self.notifier.error(MISSING_KEY_MESSAGE)
            self.notifier.error(ERROR_PREFIX + str(e))
            return False
        except (CompletionError, OSError) as e:
            logger.error("Command failed: %s", e)
            self.notifier.error(ERROR_PREFIX + str(e))
            return False

        return True

    async def run_action(self, action: Action) -> bool:
        """Run an action from the catalogue; ``inquire`` prompts for the question."""
        if action is Action.INQUIRE:
            return await self.inquire()

        language_id = self.editor.language_id if self.editor is not None else None
        command = resolve_command(action, language_id, self.prompt_overrides)
        return await self.execute_command(command.instruction, edit=command.edit)

    async def inquire(self, question: str | None = None) -> bool:
        """Ask a free-text question about the selection and show the answer.

        Without ``question`` the user is prompted, with the selected text as
        the pre-filled value.
        """
        selected_text = self._read_selection()
        if selected_text is None:
            return False

        if question is None:
            question = self.notifier.prompt(INQUIRE_PROMPT, value=selected_text)

        if question is None:
            self.notifier.warning(NO_INPUT_MESSAGE)
            return False

        return await self.execute_command(question, edit=False)
