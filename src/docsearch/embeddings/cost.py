"""Token and price estimates for embedding a set of chunks before paying for it."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import tiktoken

logger = logging.getLogger(__name__)

# USD per token for text-embedding-3-small
DEFAULT_PRICE_PER_TOKEN = 0.00002 / 1000
ENCODING = "cl100k_base"


@dataclass(frozen=True)
class CostEstimate:
    estimated_tokens: int
    estimated_cost: float


def count_tokens(text: str) -> int:
    """Count tokens with the encoding used by OpenAI embedding models."""
    enc = tiktoken.get_encoding(ENCODING)
    return len(enc.encode(text))


def estimate_embedding_cost(
    texts: list[str],
    price_per_token: float = DEFAULT_PRICE_PER_TOKEN,
) -> CostEstimate:
    tokens = sum(count_tokens(t) for t in texts)
    estimate = CostEstimate(estimated_tokens=tokens, estimated_cost=tokens * price_per_token)
    logger.info(
        "Embedding estimate: %d tokens, $%.6f", estimate.estimated_tokens, estimate.estimated_cost
    )
    return estimate
