# Copyright (c) 2026 Heureum AI. All rights reserved.

"""Tests for sign-off and coach-mention detection."""

import pytest

from coach_partner.services.triggers import detect_coach_mention, highlight_mentions, is_goodbye_message


class TestIsGoodbyeMessage:
    """Tests for sign-off detection."""

    @pytest.mark.parametrize(
        "text",
        [
            "Okay, bye!",
            "I gotta go, talk later",
            "Thanks so much, that's all for now",
            "thank you, I'll head off now",
            "Wrapping up for tonight",
            "ttyl",
        ],
    )
    def test_sign_offs(self, text):
        assert is_goodbye_message(text)

    @pytest.mark.parametrize(
        "text",
        [
            "I keep thinking about my career",
            "Thanks, that helps",
            "Maybe we could talk about my sister",
        ],
    )
    def test_not_sign_offs(self, text):
        assert not is_goodbye_message(text)


class TestDetectCoachMention:
    """Tests for @-mention detection."""

    @pytest.mark.parametrize("text", ["@coach can you look at this?", "Hey @Gena", "ask @MENTOR later"])
    def test_mentions(self, text):
        assert detect_coach_mention(text)

    @pytest.mark.parametrize("text", ["my coach said so", "email me at a@coaching.com", "@generic"])
    def test_no_mentions(self, text):
        assert not detect_coach_mention(text)

    def test_highlight(self):
        assert highlight_mentions("hi @coach") == "hi **@coach**"
