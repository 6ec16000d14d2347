# Copyright (c) 2026 Heureum AI. All rights reserved.

"""
Section synthesis.

Asks the synthesis model for distilled rewrites of living document
sections. Two modes share one output contract:

  incremental  — one exchange, conservative, low max_tokens
  session      — everything since the checkpoint, full resynthesis

The reply must be a JSON array of ``{"sectionId", "newContent"}``
objects. Anything else is treated as "no proposals".
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Sequence

from pydantic import TypeAdapter, ValidationError

from coach_partner.config import settings
from coach_partner.models import ChatTurn, ConversationTurn, Message, Section, SectionUpdate, Speaker
from coach_partner.services.llm import ModelCaller
from coach_partner.services.prompts.base import (
    INCREMENTAL_SYNTHESIS_SYSTEM_PROMPT,
    INCREMENTAL_SYNTHESIS_USER_PROMPT,
    SESSION_SYNTHESIS_SYSTEM_PROMPT,
    SESSION_SYNTHESIS_USER_PROMPT,
    build_sections_listing,
    build_word_limits,
)

logger = logging.getLogger(__name__)

_UPDATES_ADAPTER = TypeAdapter(List[SectionUpdate])
_FENCE_RE = re.compile(r"^```[a-zA-Z]*\s*\n(?P<body>.*)\n\s*```$", re.DOTALL)

SPEAKER_LABELS = {
    Speaker.CLIENT: "Client",
    Speaker.COACH: "Coach",
    Speaker.ASSISTANT: "AI",
}


def _strip_fence(text: str) -> str:
    text = text.strip()
    match = _FENCE_RE.match(text)
    return match.group("body").strip() if match else text


def parse_section_updates(raw: str, sections: Sequence[Section]) -> List[SectionUpdate]:
    """Validate a synthesis reply against the current sections.

    A single surrounding markdown code fence is tolerated. Entries for
    unknown sections or with blank content are dropped.

    Args:
        raw (str): Model reply text.
        sections (Sequence[Section]): Current document sections.

    Returns:
        List[SectionUpdate]: Valid proposals; ``[]`` if the reply is not
            a well-formed list.
    """
    try:
        updates = _UPDATES_ADAPTER.validate_json(_strip_fence(raw))
    except ValidationError as e:
        logger.debug("Discarding malformed synthesis output (%d errors): %.200s", e.error_count(), raw)
        return []

    known = {s.id for s in sections}
    valid = [u for u in updates if u.section_id in known and u.new_content.strip()]
    if len(valid) < len(updates):
        logger.debug("Dropped %d of %d proposals with unknown ids or blank content", len(updates) - len(valid), len(updates))
    return valid


def format_transcript(turns: Sequence[ConversationTurn]) -> str:
    """Render turns as ``Label: content`` paragraphs."""
    return "\n\n".join(f"{SPEAKER_LABELS[t.speaker]}: {t.content}" for t in turns)


class SectionSynthesizer:
    """Proposes section rewrites from conversation excerpts.

    Attributes:
        caller (ModelCaller): Synthesis model.
    """

    def __init__(self, caller: Optional[ModelCaller] = None) -> None:
        self.caller = caller or ModelCaller(settings.SYNTHESIS_MODEL, temperature=0.3)

    async def _propose(
        self,
        system_prompt: str,
        user_prompt: str,
        sections: Sequence[Section],
        max_tokens: int,
    ) -> List[SectionUpdate]:
        raw = await self.caller.complete(
            system_prompt,
            [ChatTurn(role="user", content=user_prompt)],
            max_tokens=max_tokens,
        )
        return parse_section_updates(raw, sections)

    async def propose_for_exchange(
        self,
        sections: Sequence[Section],
        message: ConversationTurn,
        reply: str,
    ) -> List[SectionUpdate]:
        """Propose updates from a single exchange.

        Args:
            sections (Sequence[Section]): Current document sections.
            message (ConversationTurn): Client or coach turn.
            reply (str): Assistant reply to that turn.

        Returns:
            List[SectionUpdate]: Validated proposals, usually empty.

        Raises:
            ModelCallError: If the synthesis model call fails.
        """
        if not sections:
            return []
        exchange = format_transcript([message, ConversationTurn(speaker=Speaker.ASSISTANT, content=reply)])
        system_prompt = INCREMENTAL_SYNTHESIS_SYSTEM_PROMPT.format(
            sections=build_sections_listing(list(sections)),
            word_limits=build_word_limits(),
        )
        return await self._propose(
            system_prompt,
            INCREMENTAL_SYNTHESIS_USER_PROMPT.format(exchange=exchange),
            sections,
            settings.INCREMENTAL_SYNTHESIS_MAX_TOKENS,
        )

    async def propose_for_session(
        self,
        sections: Sequence[Section],
        messages: Sequence[Message],
    ) -> List[SectionUpdate]:
        """Propose a full resynthesis from a span of messages.

        Args:
            sections (Sequence[Section]): Current document sections.
            messages (Sequence[Message]): Messages since the checkpoint,
                oldest first.

        Returns:
            List[SectionUpdate]: Validated proposals.

        Raises:
            ModelCallError: If the synthesis model call fails.
        """
        if not sections or not messages:
            return []
        conversation = format_transcript([ConversationTurn(speaker=m.speaker, content=m.content) for m in messages])
        system_prompt = SESSION_SYNTHESIS_SYSTEM_PROMPT.format(
            word_limits=build_word_limits(),
            sections=build_sections_listing(list(sections)),
        )
        logger.info("Synthesizing %d sections from %d messages", len(sections), len(messages))
        return await self._propose(
            system_prompt,
            SESSION_SYNTHESIS_USER_PROMPT.format(conversation=conversation),
            sections,
            settings.SYNTHESIS_MAX_TOKENS,
        )
