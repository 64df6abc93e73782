"""Cost estimate for completion API usage."""

from __future__ import annotations

from typing import NamedTuple


class Pricing(NamedTuple):
    """USD per 1M tokens."""

    input: float
    output: float


MODEL_PRICING: dict[str, Pricing] = {
    "gpt-3.5-turbo": Pricing(0.50, 1.50),
    "gpt-4o-mini": Pricing(0.15, 0.60),
    "gpt-4o": Pricing(2.50, 10.00),
    "code-davinci-edit-001": Pricing(0.0, 0.0),
}


def price_for(model: str) -> Pricing | None:
    """Pricing for ``model``, matching dated snapshots to their family.

    The API reports the served snapshot (``gpt-4o-mini-2024-07-18``), so the
    longest table entry that prefixes the name wins.
    """
    if model in MODEL_PRICING:
        return MODEL_PRICING[model]
    family = max(
        (name for name in MODEL_PRICING if model.startswith(name + "-")),
        key=len,
        default=None,
    )
    return MODEL_PRICING[family] if family else None


def calculate_cost(calls: list[tuple[str, int, int]]) -> float:
    """Estimated USD cost of ``(model, input_tokens, output_tokens)`` calls.

    Models with no known pricing (local or self-hosted ones) count as free.
    """
    total = 0.0
    for model, input_tokens, output_tokens in calls:
        pricing = price_for(model)
        if pricing is not None:
            total += (input_tokens * pricing.input + output_tokens * pricing.output) / 1_000_000
    return total
