# Copyright (c) 2026 Heureum AI. All rights reserved.

"""
Context budget module.

Keeps every prompt the assistant sees within a fixed token budget:

  tokens.py    — chars/4 estimation and ellipsis truncation
  settings.py  — per-slot token ceilings (BudgetTable)
  window.py    — trailing conversation window and speaker serialization

Usage:

    budget = DEFAULT_BUDGET
    role = truncate_to_token_limit(role_prompt, budget.role)

    available = conversation_budget(budget.conversation_buffer, text, False)
    turns = select_window(history, available)
    chat_turns = to_chat_turns(turns)
"""

from coach_partner.services.budget.settings import DEFAULT_BUDGET, BudgetTable
from coach_partner.services.budget.tokens import (
    CHARS_PER_TOKEN,
    ELLIPSIS,
    estimate_tokens,
    estimate_total_tokens,
    truncate_to_token_limit,
)
from coach_partner.services.budget.window import (
    CLIENT_PREFIX,
    COACH_PREFIX,
    conversation_budget,
    is_three_way,
    select_window,
    to_chat_turn,
    to_chat_turns,
)

__all__ = [
    "BudgetTable",
    "DEFAULT_BUDGET",
    "CHARS_PER_TOKEN",
    "ELLIPSIS",
    "estimate_tokens",
    "estimate_total_tokens",
    "truncate_to_token_limit",
    "COACH_PREFIX",
    "CLIENT_PREFIX",
    "conversation_budget",
    "select_window",
    "is_three_way",
    "to_chat_turn",
    "to_chat_turns",
]
