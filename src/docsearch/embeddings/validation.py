"""Embedding shape checks applied before vectors are used or stored."""

from __future__ import annotations

import math
from numbers import Real
from typing import Any


class InvalidEmbeddingError(ValueError):
    """Raised when a vector is not a non-empty list of finite numbers."""


def validate_embedding(vector: Any) -> list[float]:
    """Return ``vector`` unchanged or raise ``InvalidEmbeddingError``."""
    if not isinstance(vector, (list, tuple)):
        raise InvalidEmbeddingError(
            f"Embedding must be a list of floats, got {type(vector).__name__}"
        )
    if len(vector) == 0:
        raise InvalidEmbeddingError("Embedding is empty")
    for i, value in enumerate(vector):
        if isinstance(value, bool) or not isinstance(value, Real):
            raise InvalidEmbeddingError(
                f"Embedding component {i} is not numeric: {value!r}"
            )
        if math.isnan(value):
            raise InvalidEmbeddingError(f"Embedding component {i} is NaN")
    return list(vector)


def is_valid_embedding(vector: Any) -> bool:
    try:
        validate_embedding(vector)
    except InvalidEmbeddingError:
        return False
    return True
