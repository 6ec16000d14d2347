# Copyright (c) 2026 Heureum AI. All rights reserved.

"""
Conversation window selection and speaker serialization.

The window is the newest run of stored turns that fits the conversation
buffer. Turns keep their :class:`Speaker` until :func:`to_chat_turns`
folds them into the two-role transport the model understands:

    coach      -> user       "[COACH]: ..."
    assistant  -> assistant  (unchanged)
    client     -> user       "[CLIENT]: ..." once a coach has joined,
                             otherwise unchanged
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from coach_partner.models import ChatTurn, ConversationTurn, Speaker
from coach_partner.services.budget.tokens import estimate_tokens

logger = logging.getLogger(__name__)

COACH_PREFIX = "[COACH]: "
CLIENT_PREFIX = "[CLIENT]: "


def conversation_budget(
    buffer_tokens: int,
    current_message: Optional[str],
    message_already_stored: bool,
) -> int:
    """Tokens available to history after reserving the current message.

    Args:
        buffer_tokens (int): Conversation buffer ceiling.
        current_message (Optional[str]): The incoming message text.
        message_already_stored (bool): Whether the incoming message is
            already among the candidates (no reservation then).

    Returns:
        int: Remaining tokens for history. May be negative.
    """
    if message_already_stored or not current_message:
        return buffer_tokens
    return buffer_tokens - estimate_tokens(current_message)


def select_window(
    candidates: Sequence[ConversationTurn],
    budget_tokens: int,
) -> List[ConversationTurn]:
    """Pick the longest suffix of *candidates* that fits *budget_tokens*.

    Scans newest to oldest and stops at the first turn that would
    overflow. Turns are never split and the result keeps the original
    chronological order.

    Args:
        candidates (Sequence[ConversationTurn]): History, oldest first.
        budget_tokens (int): Tokens available for history.

    Returns:
        List[ConversationTurn]: Selected turns, oldest first.
    """
    selected: List[ConversationTurn] = []
    used = 0
    for turn in reversed(candidates):
        turn_tokens = estimate_tokens(turn.content)
        if used + turn_tokens > budget_tokens:
            break
        selected.append(turn)
        used += turn_tokens

    selected.reverse()
    if len(selected) < len(candidates):
        logger.debug(
            "Conversation window kept %d of %d turns (%d/%d tokens)",
            len(selected),
            len(candidates),
            used,
            budget_tokens,
        )
    return selected


def is_three_way(turns: Sequence[ConversationTurn]) -> bool:
    """Whether the coach takes part in the given turns."""
    return any(t.speaker == Speaker.COACH for t in turns)


def to_chat_turn(turn: ConversationTurn, three_way: bool) -> ChatTurn:
    """Serialize one tagged turn to its transport form.

    Args:
        turn (ConversationTurn): Turn to serialize.
        three_way (bool): Whether client turns carry a ``[CLIENT]:`` tag.

    Returns:
        ChatTurn: The ``user``/``assistant`` turn with speaker prefix.
    """
    if turn.speaker == Speaker.ASSISTANT:
        return ChatTurn(role="assistant", content=turn.content)
    if turn.speaker == Speaker.COACH:
        return ChatTurn(role="user", content=f"{COACH_PREFIX}{turn.content}")
    if three_way:
        return ChatTurn(role="user", content=f"{CLIENT_PREFIX}{turn.content}")
    return ChatTurn(role="user", content=turn.content)


def to_chat_turns(turns: Sequence[ConversationTurn]) -> List[ChatTurn]:
    """Serialize a conversation for the model call.

    Args:
        turns (Sequence[ConversationTurn]): Tagged turns, oldest first.

    Returns:
        List[ChatTurn]: Transport turns in the same order.
    """
    three_way = is_three_way(turns)
    return [to_chat_turn(t, three_way) for t in turns]
