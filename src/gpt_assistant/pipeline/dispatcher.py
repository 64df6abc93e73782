"""Command dispatcher - maps user actions to model instructions."""

from __future__ import annotations

from gpt_assistant.models.command import Action, ActionInfo, ResolvedCommand

LANG_TOKEN = "{{LANG}}"

ONLY_CODE_DIRECTIVE = (
    "Only reply with the output inside one unique code block, and nothing else. "
    "Do not write explanations."
)

PROMPTS: dict[Action, str] = {
    Action.OPTIMIZE: (
        "You are a code optimizer that receives {{LANG}} code and outputs an optimized "
        "version of the {{LANG}} code. " + ONLY_CODE_DIRECTIVE
    ),
    Action.DOCUMENT: (
        "You are a code documenting tool that receives {{LANG}} code and outputs the same "
        "code with comments in each line. " + ONLY_CODE_DIRECTIVE
    ),
    Action.ANALYZE: (
        "You are a code analyzer that receives {{LANG}} code and outputs an brief "
        "explanation of what the code does in plain English"
    ),
    Action.DRY: (
        "You are a code optimizer that receives {{LANG}} code and outputs refactored, "
        "concise, and DRY {{LANG}} code. " + ONLY_CODE_DIRECTIVE
    ),
}

ACTIONS: list[ActionInfo] = [
    ActionInfo(
        action=Action.OPTIMIZE,
        label="Optimize",
        edit=True,
        description="Replace the selection with an optimized version",
    ),
    ActionInfo(
        action=Action.DOCUMENT,
        label="Document",
        edit=True,
        description="Replace the selection with a line-by-line commented version",
    ),
    ActionInfo(
        action=Action.ANALYZE,
        label="Analyze",
        edit=False,
        description="Explain what the selected code does in plain English",
    ),
    ActionInfo(
        action=Action.DRY,
        label="DRY",
        edit=True,
        description="Replace the selection with refactored, concise, DRY code",
    ),
    ActionInfo(
        action=Action.INQUIRE,
        label="Inquire",
        edit=False,
        description="Ask a free-text question about the selection",
    ),
]

_BY_ACTION = {info.action: info for info in ACTIONS}


def list_actions() -> list[ActionInfo]:
    """Return the action catalogue in display order."""
    return list(ACTIONS)


def is_edit_action(action: Action) -> bool:
    return _BY_ACTION[action].edit


def substitute_language(instruction: str, language_id: str) -> str:
    """Replace every ``{{LANG}}`` token with the document's language identifier."""
    return instruction.replace(LANG_TOKEN, language_id)


def instruction_for(
    action: Action,
    overrides: dict[str, str] | None = None,
    question: str | None = None,
) -> str:
    """Return the raw instruction for ``action``, before language substitution.

    A configured override replaces the built-in prompt; edit-mode overrides
    get the code-only directive appended. ``inquire`` uses ``question``.
    """
    if action is Action.INQUIRE:
        if not question:
            raise ValueError("inquire requires a question")
        return question

    override = (overrides or {}).get(action.value, "").strip()
    if not override:
        return PROMPTS[action]
    if is_edit_action(action):
        return f"{override} {ONLY_CODE_DIRECTIVE}"
    return override


def resolve_command(
    action: Action,
    language_id: str | None = None,
    overrides: dict[str, str] | None = None,
    question: str | None = None,
) -> ResolvedCommand:
    """Resolve an action to its instruction and output mode.

    ``{{LANG}}`` is substituted only for edit-mode actions, and only when a
    language identifier is known.
    """
    edit = is_edit_action(action)
    instruction = instruction_for(action, overrides, question)
    if edit and language_id:
        instruction = substitute_language(instruction, language_id)
    return ResolvedCommand(action=action, instruction=instruction, edit=edit)
