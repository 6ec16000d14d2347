# Copyright (c) 2026 Heureum AI. All rights reserved.

"""Tests for token estimation, truncation and the budget table."""

import dataclasses

import pytest

from coach_partner.services.budget import (
    DEFAULT_BUDGET,
    ELLIPSIS,
    BudgetTable,
    estimate_tokens,
    estimate_total_tokens,
    truncate_to_token_limit,
)


# ---------------------------------------------------------------------------
# estimate_tokens
# ---------------------------------------------------------------------------


class TestEstimateTokens:
    """Tests for the chars/4 estimator."""

    def test_empty(self):
        assert estimate_tokens("") == 0

    def test_rounds_up(self):
        assert estimate_tokens("a") == 1
        assert estimate_tokens("abcd") == 1
        assert estimate_tokens("abcde") == 2

    def test_total(self):
        assert estimate_total_tokens(["abcd", "abcde", ""]) == 3


# ---------------------------------------------------------------------------
# truncate_to_token_limit
# ---------------------------------------------------------------------------


class TestTruncateToTokenLimit:
    """Tests for ellipsis truncation."""

    def test_within_limit_unchanged(self):
        text = "x" * 2000
        assert truncate_to_token_limit(text, 500) is text

    def test_role_prompt_example(self):
        """A 3000-char role prompt is cut to 1997 chars plus the ellipsis."""
        result = truncate_to_token_limit("r" * 3000, DEFAULT_BUDGET.role)
        assert len(result) == 2000
        assert result[:1997] == "r" * 1997
        assert result.endswith(ELLIPSIS)

    def test_idempotent(self):
        once = truncate_to_token_limit("abc " * 1000, 100)
        assert truncate_to_token_limit(once, 100) == once

    @pytest.mark.parametrize("length,limit", [(10, 1), (9, 2), (401, 100), (50, 0)])
    def test_bound(self, length, limit):
        result = truncate_to_token_limit("y" * length, limit)
        assert estimate_tokens(result) <= limit + 1

    def test_zero_limit(self):
        assert truncate_to_token_limit("hello", 0) == ELLIPSIS


# ---------------------------------------------------------------------------
# BudgetTable
# ---------------------------------------------------------------------------


class TestBudgetTable:
    """Tests for the default ceilings."""

    def test_defaults(self):
        b = BudgetTable()
        assert (b.role, b.methodology, b.memory, b.reference) == (500, 2000, 15000, 3000)
        assert (b.file_attachments, b.response_instructions) == (4000, 500)
        assert (b.conversation_buffer, b.current_input, b.total) == (11000, 1000, 30000)

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            DEFAULT_BUDGET.role = 1
