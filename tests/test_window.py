# Copyright (c) 2026 Heureum AI. All rights reserved.

"""Tests for conversation window selection and speaker serialization."""

from coach_partner.models import ConversationTurn, Speaker
from coach_partner.services.budget import (
    CLIENT_PREFIX,
    COACH_PREFIX,
    conversation_budget,
    estimate_total_tokens,
    is_three_way,
    select_window,
    to_chat_turns,
)


def _turn(speaker: Speaker, content: str) -> ConversationTurn:
    return ConversationTurn(speaker=speaker, content=content)


# ---------------------------------------------------------------------------
# conversation_budget
# ---------------------------------------------------------------------------


class TestConversationBudget:
    """Tests for the current-message reservation."""

    def test_reserves_current_message(self):
        assert conversation_budget(100, "x" * 40, message_already_stored=False) == 90

    def test_no_reservation_when_stored(self):
        assert conversation_budget(100, "x" * 40, message_already_stored=True) == 100

    def test_can_go_negative(self):
        assert conversation_budget(5, "x" * 40, message_already_stored=False) == -5


# ---------------------------------------------------------------------------
# select_window
# ---------------------------------------------------------------------------


class TestSelectWindow:
    """Tests for the newest-first window scan."""

    def test_everything_fits(self):
        turns = [_turn(Speaker.CLIENT, "aaaa"), _turn(Speaker.ASSISTANT, "bbbb")]
        assert select_window(turns, 10) == turns

    def test_keeps_newest_suffix(self):
        turns = [_turn(Speaker.CLIENT, "x" * 40) for _ in range(5)]
        selected = select_window(turns, 25)
        assert selected == turns[-2:]

    def test_stops_at_first_overflow(self):
        """An older small turn is not picked up once a larger one overflows."""
        turns = [
            _turn(Speaker.CLIENT, "tiny"),
            _turn(Speaker.ASSISTANT, "x" * 400),
            _turn(Speaker.CLIENT, "recent"),
        ]
        assert select_window(turns, 10) == [turns[2]]

    def test_never_exceeds_budget(self):
        turns = [_turn(Speaker.CLIENT, "y" * n) for n in (3, 17, 41, 8, 29, 64, 5)]
        for budget in range(0, 60, 7):
            selected = select_window(turns, budget)
            assert estimate_total_tokens(t.content for t in selected) <= budget
            assert selected == turns[len(turns) - len(selected):]

    def test_non_positive_budget(self):
        assert select_window([_turn(Speaker.CLIENT, "hi")], 0) == []
        assert select_window([_turn(Speaker.CLIENT, "hi")], -3) == []


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------


class TestToChatTurns:
    """Tests for the two-role transport form."""

    def test_two_party_client_unprefixed(self):
        chat = to_chat_turns([_turn(Speaker.CLIENT, "hello"), _turn(Speaker.ASSISTANT, "hi there")])
        assert [(c.role, c.content) for c in chat] == [("user", "hello"), ("assistant", "hi there")]

    def test_three_way_prefixes(self):
        turns = [
            _turn(Speaker.CLIENT, "I feel stuck"),
            _turn(Speaker.COACH, "Try journaling"),
            _turn(Speaker.ASSISTANT, "Noted"),
        ]
        assert is_three_way(turns)
        chat = to_chat_turns(turns)
        assert chat[0].role == "user" and chat[0].content == f"{CLIENT_PREFIX}I feel stuck"
        assert chat[1].role == "user" and chat[1].content == f"{COACH_PREFIX}Try journaling"
        assert chat[2].role == "assistant" and chat[2].content == "Noted"

    def test_turn_content_untouched(self):
        turn = _turn(Speaker.COACH, "Guidance")
        to_chat_turns([turn])
        assert turn.content == "Guidance"
