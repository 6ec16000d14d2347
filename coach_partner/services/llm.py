# Copyright (c) 2026 Heureum AI. All rights reserved.

"""
Chat model access and reply model routing.

:class:`ModelCaller` is the single seam between the services and a
LangChain chat model: a system prompt and ordered ``user``/``assistant``
turns go in, reply text comes out.
"""

import logging
import os
import re
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from langchain_google_genai import ChatGoogleGenerativeAI
from langchain_openai import ChatOpenAI
from pydantic import BaseModel, SecretStr

from coach_partner.config import settings
from coach_partner.models import ChatTurn

logger = logging.getLogger(__name__)


class ModelCallError(RuntimeError):
    """Raised when the underlying chat model call fails."""

    def __init__(self, model: str, cause: BaseException):
        super().__init__(f"Model call to {model} failed: {cause}")
        self.model = model
        self.cause = cause


def create_llm(
    model: str,
    max_tokens: Optional[int] = None,
    temperature: Optional[float] = None,
) -> BaseChatModel:
    """Create a chat model instance for *model*.

    Gemini routing:
      - GOOGLE_API_KEY set → Google AI Studio (simple API key auth)
      - Otherwise → Vertex AI (GCP service account / ADC)

    Any other model name goes to OpenAI.

    Args:
        model (str): Model name.
        max_tokens (Optional[int]): Output token ceiling. Defaults to
            ``AGENT_MAX_TOKENS``.
        temperature (Optional[float]): Sampling temperature. Defaults to
            ``AGENT_TEMPERATURE``.

    Returns:
        BaseChatModel: The configured chat model.
    """
    max_tokens = max_tokens or settings.AGENT_MAX_TOKENS
    temperature = settings.AGENT_TEMPERATURE if temperature is None else temperature
    if model.startswith("gemini"):
        if settings.GOOGLE_API_KEY:
            return ChatGoogleGenerativeAI(
                model=model,
                google_api_key=settings.GOOGLE_API_KEY,
                temperature=temperature,
                max_output_tokens=max_tokens,
            )
        # pydantic-settings reads .env into its own fields only;
        # google.auth.default() looks at os.environ.
        if settings.GOOGLE_APPLICATION_CREDENTIALS:
            os.environ.setdefault(
                "GOOGLE_APPLICATION_CREDENTIALS",
                settings.GOOGLE_APPLICATION_CREDENTIALS,
            )
        return ChatGoogleGenerativeAI(
            model=model,
            vertexai=True,
            project=settings.GOOGLE_CLOUD_PROJECT,
            location=settings.GOOGLE_CLOUD_LOCATION,
            temperature=temperature,
            max_output_tokens=max_tokens,
        )
    return ChatOpenAI(
        api_key=SecretStr(settings.OPENAI_API_KEY),
        model=model,
        temperature=temperature,
        max_completion_tokens=max_tokens,
    )


def extract_text(content: Any) -> str:
    """Extract plain text from LLM response content.

    Args:
        content (Any): Raw content from an LLM response (str, list, or
            other type).

    Returns:
        str: The concatenated text representation.
    """
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        return " ".join(
            item if isinstance(item, str) else item.get("text", "")
            for item in content
            if isinstance(item, (str, dict))
        )
    return str(content)


def to_lc_messages(system_prompt: str, turns: Sequence[ChatTurn]) -> List[BaseMessage]:
    """Build the LangChain message list: system prompt first, then turns."""
    messages: List[BaseMessage] = [SystemMessage(content=system_prompt)]
    for turn in turns:
        if turn.role == "assistant":
            messages.append(AIMessage(content=turn.content))
        else:
            messages.append(HumanMessage(content=turn.content))
    return messages


class ModelCaller:
    """Calls one named chat model.

    The LangChain model is created on first use so that constructing the
    service does not require provider credentials.

    Attributes:
        model (str): Model name.
        temperature (Optional[float]): Sampling temperature override.
    """

    def __init__(
        self,
        model: str,
        llm: Optional[BaseChatModel] = None,
        temperature: Optional[float] = None,
    ) -> None:
        self.model = model
        self.temperature = temperature
        self._llm = llm
        self._llms: Dict[Optional[int], BaseChatModel] = {}

    def _get_llm(self, max_tokens: Optional[int]) -> BaseChatModel:
        if self._llm is not None:
            return self._llm
        if max_tokens not in self._llms:
            self._llms[max_tokens] = create_llm(self.model, max_tokens=max_tokens, temperature=self.temperature)
        return self._llms[max_tokens]

    async def complete(
        self,
        system_prompt: str,
        turns: Sequence[ChatTurn],
        max_tokens: Optional[int] = None,
    ) -> str:
        """Run one completion.

        Args:
            system_prompt (str): System prompt text.
            turns (Sequence[ChatTurn]): Conversation turns, oldest first.
            max_tokens (Optional[int]): Output token ceiling for this call.

        Returns:
            str: The reply text.

        Raises:
            ModelCallError: If the provider call fails.
        """
        messages = to_lc_messages(system_prompt, turns)
        try:
            response = await self._get_llm(max_tokens).ainvoke(messages)
        except Exception as e:
            raise ModelCallError(self.model, e) from e
        return extract_text(response.content)


# ---------------------------------------------------------------------------
# Reply model routing
# ---------------------------------------------------------------------------


class ModelTier(str, Enum):
    FAST = "fast"
    BALANCED = "balanced"
    DEEP = "deep"


class ModelRoute(BaseModel):
    """Routing decision for one client message."""

    tier: ModelTier
    model: str
    reasoning: str


EMOTIONAL_KEYWORDS = [
    "feel", "feeling", "felt", "emotion", "scared", "afraid", "anxious", "worried",
    "sad", "depressed", "angry", "frustrated", "overwhelmed", "stressed", "hurt",
    "confused", "lost", "stuck", "hopeless", "excited", "happy", "grateful",
    "love", "hate", "fear", "grief", "shame", "guilt", "jealous", "lonely",
]

DEEP_QUESTION_PATTERNS = [
    re.compile(r"why (do|did|am|is|are|was|were) (i|we|they|he|she)", re.IGNORECASE),
    re.compile(r"what (does|do) .+ mean", re.IGNORECASE),
    re.compile(r"how (do|can|should) i .+ (life|career|relationship|meaning|purpose)", re.IGNORECASE),
    re.compile(r"what is (the meaning|my purpose|wrong with)", re.IGNORECASE),
    re.compile(r"(struggle|struggling) (with|to)", re.IGNORECASE),
    re.compile(r"can('t| not) (seem to|stop|figure out)", re.IGNORECASE),
    re.compile(r"keep (thinking|wondering|asking)", re.IGNORECASE),
    re.compile(r"deeper|underlying|root cause", re.IGNORECASE),
]

SIMPLE_GREETING_PATTERNS = [
    re.compile(r"^(hi|hello|hey|good morning|good afternoon|good evening)[\s!.]*$", re.IGNORECASE),
    re.compile(r"^(thanks|thank you|ok|okay|got it|sure|yes|no)[\s!.]*$", re.IGNORECASE),
    re.compile(r"^(bye|goodbye|see you|talk later)[\s!.]*$", re.IGNORECASE),
]

SHORT_MESSAGE_CHARS = 20
LONG_MESSAGE_CHARS = 200


def route_message(content: str) -> ModelRoute:
    """Pick the reply model for a client message.

    Short or trivial messages go to the fast model; deep questions,
    emotional content and long messages go to the balanced model.

    Args:
        content (str): Client message text.

    Returns:
        ModelRoute: Tier, model name and a short reason.
    """
    lowered = content.lower()
    if any(p.match(content.strip()) for p in SIMPLE_GREETING_PATTERNS) or len(content) < SHORT_MESSAGE_CHARS:
        route = ModelRoute(tier=ModelTier.FAST, model=settings.FAST_MODEL, reasoning="Simple message")
    elif any(p.search(content) for p in DEEP_QUESTION_PATTERNS):
        route = ModelRoute(tier=ModelTier.DEEP, model=settings.BALANCED_MODEL, reasoning="Deep or complex question")
    elif any(k in lowered for k in EMOTIONAL_KEYWORDS) or len(content) > LONG_MESSAGE_CHARS:
        route = ModelRoute(tier=ModelTier.BALANCED, model=settings.BALANCED_MODEL, reasoning="Emotional or long message")
    else:
        route = ModelRoute(tier=ModelTier.FAST, model=settings.FAST_MODEL, reasoning="Standard message")

    logger.info("Routed message to %s tier (%s): %s", route.tier.value, route.model, route.reasoning)
    return route
