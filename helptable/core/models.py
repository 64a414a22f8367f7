"""
Model catalog.

Fixed table of the chat models helptable can talk to: wire name, per-1K
token pricing and context window.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Dict

from .token_counter import TokenUsage


class Model(str, Enum):
    """Selectable chat models. The value is the name used on the wire."""
    GPT_35_TURBO = "gpt-3.5-turbo"
    GPT_4 = "gpt-4"
    GPT_4_32K = "gpt-4-32k"

    @property
    def wire_name(self) -> str:
        return self.value

    @classmethod
    def from_wire_name(cls, name: str) -> "Model":
        """Look up a model by its wire name.

        Raises:
            ValueError: If the name is not in the catalog
        """
        try:
            return cls(name)
        except ValueError:
            raise ValueError(f"Unsupported model: {name}") from None

    def cost(self, prompt_tokens: int, completion_tokens: int) -> float:
        """Estimated cost in USD for the given token counts."""
        return calculate_cost(self, TokenUsage(prompt_tokens, completion_tokens))

    def context_size(self) -> int:
        return MODEL_CATALOG[self].context_size

    def __str__(self) -> str:
        return self.value


DEFAULT_MODEL = Model.GPT_35_TURBO


@dataclass(frozen=True)
class ModelSpec:
    """Per-token pricing and context window for a specific model."""
    prompt_cost_per_1k: Decimal  # USD per 1K prompt tokens
    completion_cost_per_1k: Decimal  # USD per 1K completion tokens
    context_size: int


# Fixed catalog - no dynamic fetching
MODEL_CATALOG: Dict[Model, ModelSpec] = {
    Model.GPT_35_TURBO: ModelSpec(
        prompt_cost_per_1k=Decimal("0.002"),
        completion_cost_per_1k=Decimal("0.002"),
        context_size=4096,
    ),
    Model.GPT_4: ModelSpec(
        prompt_cost_per_1k=Decimal("0.03"),
        completion_cost_per_1k=Decimal("0.06"),
        context_size=8192,
    ),
    Model.GPT_4_32K: ModelSpec(
        prompt_cost_per_1k=Decimal("0.06"),
        completion_cost_per_1k=Decimal("0.12"),
        context_size=32768,
    ),
}


def calculate_cost(model: Model, usage: TokenUsage) -> float:
    """Calculate the cost of a completion.

    The cost is linear in both token counts and is not rounded.

    Args:
        model: Catalog model
        usage: Token usage data

    Returns:
        Total cost in USD
    """
    spec = MODEL_CATALOG[model]

    # (tokens / 1000) * cost_per_1k
    prompt_cost = (Decimal(usage.prompt_tokens) / Decimal("1000")) * spec.prompt_cost_per_1k
    completion_cost = (Decimal(usage.completion_tokens) / Decimal("1000")) * spec.completion_cost_per_1k

    return float(prompt_cost + completion_cost)
