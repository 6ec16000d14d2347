# Copyright (c) 2026 Heureum AI. All rights reserved.

"""Tests for ModelCaller, create_llm and reply routing."""

from unittest.mock import MagicMock, patch

import pytest
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

from coach_partner.config import settings
from coach_partner.models import ChatTurn
from coach_partner.services.llm import (
    ModelCallError,
    ModelCaller,
    ModelTier,
    create_llm,
    extract_text,
    route_message,
)
from tests.conftest import mock_llm


# ---------------------------------------------------------------------------
# ModelCaller
# ---------------------------------------------------------------------------


class TestModelCaller:
    """Tests for the chat model seam."""

    @pytest.mark.asyncio
    async def test_message_construction(self):
        llm = mock_llm("reply")
        caller = ModelCaller("m", llm=llm)
        turns = [
            ChatTurn(role="user", content="hello"),
            ChatTurn(role="assistant", content="hi"),
            ChatTurn(role="user", content="[COACH]: nudge"),
        ]

        assert await caller.complete("system text", turns) == "reply"

        messages = llm.ainvoke.call_args[0][0]
        assert [type(m) for m in messages] == [SystemMessage, HumanMessage, AIMessage, HumanMessage]
        assert messages[0].content == "system text"
        assert messages[3].content == "[COACH]: nudge"

    @pytest.mark.asyncio
    async def test_failure_wrapped(self):
        llm = mock_llm()
        llm.ainvoke.side_effect = ConnectionError("boom")
        caller = ModelCaller("some-model", llm=llm)
        with pytest.raises(ModelCallError) as exc_info:
            await caller.complete("s", [])
        assert exc_info.value.model == "some-model"
        assert isinstance(exc_info.value.cause, ConnectionError)

    @pytest.mark.asyncio
    async def test_lazy_creation_per_max_tokens(self):
        with patch("coach_partner.services.llm.create_llm") as mock_create:
            mock_create.return_value = mock_llm("ok")
            caller = ModelCaller("gpt-4o")
            mock_create.assert_not_called()

            await caller.complete("s", [], max_tokens=100)
            await caller.complete("s", [], max_tokens=100)
            await caller.complete("s", [], max_tokens=200)

            assert mock_create.call_count == 2
            assert mock_create.call_args_list[0].kwargs["max_tokens"] == 100


class TestExtractText:
    def test_list_content(self):
        assert extract_text(["a", {"text": "b"}, {"type": "image"}]) == "a b "

    def test_str_content(self):
        assert extract_text("plain") == "plain"


# ---------------------------------------------------------------------------
# create_llm
# ---------------------------------------------------------------------------


class TestCreateLlm:
    """Tests for provider selection."""

    def test_openai_for_other_names(self):
        with patch("coach_partner.services.llm.ChatOpenAI") as mock_cls:
            create_llm("gpt-4o", max_tokens=321)
            kwargs = mock_cls.call_args.kwargs
            assert kwargs["model"] == "gpt-4o"
            assert kwargs["max_completion_tokens"] == 321

    def test_gemini_with_api_key(self, monkeypatch):
        monkeypatch.setattr(settings, "GOOGLE_API_KEY", "key")
        with patch("coach_partner.services.llm.ChatGoogleGenerativeAI") as mock_cls:
            create_llm("gemini-2.5-flash")
            kwargs = mock_cls.call_args.kwargs
            assert kwargs["google_api_key"] == "key"
            assert kwargs["max_output_tokens"] == settings.AGENT_MAX_TOKENS

    def test_gemini_vertex(self, monkeypatch):
        monkeypatch.setattr(settings, "GOOGLE_API_KEY", "")
        monkeypatch.setattr(settings, "GOOGLE_CLOUD_PROJECT", "proj")
        with patch("coach_partner.services.llm.ChatGoogleGenerativeAI") as mock_cls:
            create_llm("gemini-2.5-pro", temperature=0.1)
            kwargs = mock_cls.call_args.kwargs
            assert kwargs["vertexai"] is True
            assert kwargs["project"] == "proj"
            assert kwargs["temperature"] == 0.1


# ---------------------------------------------------------------------------
# route_message
# ---------------------------------------------------------------------------


class TestRouteMessage:
    """Tests for reply model routing."""

    @pytest.mark.parametrize("text", ["hi", "Good morning!", "thanks", "ok sure"])
    def test_simple_messages_fast(self, text):
        route = route_message(text)
        assert route.tier == ModelTier.FAST
        assert route.model == settings.FAST_MODEL

    def test_deep_question(self):
        route = route_message("Why do I always sabotage things when they start going well?")
        assert route.tier == ModelTier.DEEP
        assert route.model == settings.BALANCED_MODEL

    def test_emotional_keywords_balanced(self):
        route = route_message("Honestly I am overwhelmed by everything at work")
        assert route.tier == ModelTier.BALANCED

    def test_long_message_balanced(self):
        route = route_message("We went over the plan for the quarter. " * 6)
        assert route.tier == ModelTier.BALANCED

    def test_standard_message_fast(self):
        route = route_message("I went to the gym this morning before work")
        assert route.tier == ModelTier.FAST
