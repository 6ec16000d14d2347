# Copyright (c) 2026 Heureum AI. All rights reserved.

"""
Context budget table.

Token ceilings per prompt slot. The ceilings are a soft decomposition of
the total budget: each slot is truncated against its own ceiling and the
sum is not forced to equal ``total``.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class BudgetTable:
    """Token ceilings for each slot of an assembled prompt.

    Attributes:
        total (int): Overall budget target for one model call.
        role (int): Persona instructions.
        methodology (int): Active coaching frameworks.
        memory (int): Living document sections.
        reference (int): Shared reference documents.
        file_attachments (int): Text extracted from attached files.
        response_instructions (int): Task prompt or exercise prompt.
        conversation_buffer (int): Trailing window of conversation turns,
            including the current message.
        current_input (int): Expected size of one incoming message.
        consultation_history (int): Flattened client history offered to a
            private coach consultation.
    """

    total: int = 30_000
    role: int = 500
    methodology: int = 2_000
    memory: int = 15_000
    reference: int = 3_000
    file_attachments: int = 4_000
    response_instructions: int = 500
    conversation_buffer: int = 11_000
    current_input: int = 1_000
    consultation_history: int = 8_000


DEFAULT_BUDGET = BudgetTable()
