# Copyright (c) 2026 Heureum AI. All rights reserved.

"""
Token estimation and truncation.

A chars/4 heuristic stands in for real tokenization. Every budget slot
and the conversation window are measured with the same estimator, so
slight over/under-estimation is consistent across the prompt.
"""

from __future__ import annotations

import math
from typing import Iterable

CHARS_PER_TOKEN = 4
ELLIPSIS = "..."


def estimate_tokens(text: str) -> int:
    """Estimate token count using the character heuristic.

    Args:
        text (str): Text to estimate tokens for.

    Returns:
        int: ``ceil(len(text) / CHARS_PER_TOKEN)``; 0 for empty text.
    """
    return math.ceil(len(text) / CHARS_PER_TOKEN)


def estimate_total_tokens(texts: Iterable[str]) -> int:
    """Sum of estimated tokens across several texts.

    Args:
        texts (Iterable[str]): Texts to estimate.

    Returns:
        int: Sum of per-text estimates.
    """
    return sum(estimate_tokens(t) for t in texts)


def truncate_to_token_limit(text: str, max_tokens: int) -> str:
    """Cut text so its estimate stays within *max_tokens*.

    Text within the limit is returned unchanged. Otherwise the text is
    sliced to ``max_tokens * CHARS_PER_TOKEN - len(ELLIPSIS)`` characters
    (never below zero) and the ellipsis is appended. The result estimates
    to at most ``max_tokens + 1`` and truncating it again is a no-op.

    Args:
        text (str): Text to truncate.
        max_tokens (int): Token ceiling for the text.

    Returns:
        str: The original or truncated text.
    """
    if estimate_tokens(text) <= max_tokens:
        return text
    keep_chars = max(0, max_tokens * CHARS_PER_TOKEN - len(ELLIPSIS))
    return text[:keep_chars] + ELLIPSIS
