"""Tests for the command dispatcher."""

import pytest

from gpt_assistant.models.command import Action
from gpt_assistant.pipeline.dispatcher import (
    LANG_TOKEN,
    ONLY_CODE_DIRECTIVE,
    PROMPTS,
    instruction_for,
    is_edit_action,
    list_actions,
    resolve_command,
    substitute_language,
)

EDIT_ACTIONS = [Action.OPTIMIZE, Action.DOCUMENT, Action.DRY]


class TestCatalogue:
    def test_actions_in_display_order(self):
        labels = [info.label for info in list_actions()]
        assert labels == ["Optimize", "Document", "Analyze", "DRY", "Inquire"]

    def test_modes(self):
        assert [is_edit_action(a) for a in Action] == [True, True, False, True, False]

    def test_list_actions_returns_copy(self):
        actions = list_actions()
        actions.clear()
        assert len(list_actions()) == 5


class TestPrompts:
    @pytest.mark.parametrize("action", EDIT_ACTIONS)
    def test_edit_prompts_demand_code_only(self, action):
        assert PROMPTS[action].endswith(ONLY_CODE_DIRECTIVE)
        assert LANG_TOKEN in PROMPTS[action]

    def test_analyze_prompt_has_no_code_directive(self):
        assert ONLY_CODE_DIRECTIVE not in PROMPTS[Action.ANALYZE]
        assert "plain English" in PROMPTS[Action.ANALYZE]


class TestSubstituteLanguage:
    def test_replaces_every_token(self):
        text = "receives {{LANG}} code and outputs {{LANG}} code"
        assert substitute_language(text, "python") == "receives python code and outputs python code"

    def test_no_token_is_noop(self):
        assert substitute_language("Explain this", "go") == "Explain this"


class TestInstructionFor:
    def test_override_for_edit_action_gets_directive(self):
        instruction = instruction_for(Action.OPTIMIZE, {"optimize": "Make {{LANG}} faster."})
        assert instruction == f"Make {{{{LANG}}}} faster. {ONLY_CODE_DIRECTIVE}"

    def test_override_for_inquiry_action_is_verbatim(self):
        assert instruction_for(Action.ANALYZE, {"analyze": "Summarize."}) == "Summarize."

    def test_blank_override_falls_back_to_builtin(self):
        assert instruction_for(Action.DRY, {"dry": "   "}) == PROMPTS[Action.DRY]

    def test_inquire_uses_question(self):
        assert instruction_for(Action.INQUIRE, question="Is this safe?") == "Is this safe?"

    def test_inquire_without_question_rejected(self):
        with pytest.raises(ValueError, match="question"):
            instruction_for(Action.INQUIRE)


class TestResolveCommand:
    @pytest.mark.parametrize("action", EDIT_ACTIONS)
    def test_edit_actions_substitute_language(self, action):
        command = resolve_command(action, "javascript")
        assert command.edit is True
        assert LANG_TOKEN not in command.instruction
        assert "javascript" in command.instruction

    def test_document_instruction(self):
        command = resolve_command(Action.DOCUMENT, "javascript")
        assert command.instruction.startswith(
            "You are a code documenting tool that receives javascript code"
        )

    def test_inquiry_action_keeps_instruction_unsubstituted(self):
        command = resolve_command(Action.ANALYZE, "python")
        assert command.edit is False
        assert command.instruction == PROMPTS[Action.ANALYZE]

    def test_unknown_language_leaves_token(self):
        command = resolve_command(Action.OPTIMIZE, None)
        assert LANG_TOKEN in command.instruction

    def test_inquire(self):
        command = resolve_command(Action.INQUIRE, "python", question="Why?")
        assert command.edit is False
        assert command.instruction == "Why?"
