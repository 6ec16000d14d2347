# Copyright (c) 2026 Heureum AI. All rights reserved.

"""
Living document maintenance.

Feeds synthesizer proposals through the reconciliation engine, owns the
session checkpoint and names conversation threads.
"""

import logging
from typing import List, Optional, Sequence

from coach_partner.config import settings
from coach_partner.models import ChatTurn, ConversationTurn, Message, SectionUpdate, Speaker, SynthesisResult
from coach_partner.services.llm import ModelCaller
from coach_partner.services.prompts.base import THREAD_TITLE_SYSTEM_PROMPT, THREAD_TITLE_USER_PROMPT
from coach_partner.services.reconciliation import ReconciliationEngine
from coach_partner.services.storage import CoachingStore
from coach_partner.services.synthesis.synthesizer import SectionSynthesizer, format_transcript

logger = logging.getLogger(__name__)

TITLE_CONTEXT_MESSAGES = 10
TITLE_MAX_TOKENS = 100
_TITLE_QUOTES = "\"'"


class LivingDocumentService:
    """Applies synthesized section rewrites and generates thread titles.

    Attributes:
        store (CoachingStore): Persistence.
        synthesizer (SectionSynthesizer): Proposal source.
        engine (ReconciliationEngine): Writes proposals as pending.
        title_caller (ModelCaller): Model used for thread titles.
    """

    def __init__(
        self,
        store: CoachingStore,
        synthesizer: Optional[SectionSynthesizer] = None,
        engine: Optional[ReconciliationEngine] = None,
        title_caller: Optional[ModelCaller] = None,
    ) -> None:
        self.store = store
        self.synthesizer = synthesizer or SectionSynthesizer()
        self.engine = engine or ReconciliationEngine(store)
        self.title_caller = title_caller or ModelCaller(settings.TITLE_MODEL)

    async def _apply(self, updates: Sequence[SectionUpdate]) -> List[str]:
        applied: List[str] = []
        for update in updates:
            await self.engine.propose_update(update.section_id, update.new_content)
            applied.append(update.section_id)
        return applied

    async def update_from_exchange(
        self,
        client_id: str,
        message: str,
        reply: str,
        speaker: Speaker = Speaker.CLIENT,
    ) -> SynthesisResult:
        """Run incremental synthesis over one exchange.

        Args:
            client_id (str): Client whose document is updated.
            message (str): Client or coach message text.
            reply (str): Assistant reply text.
            speaker (Speaker): Author of *message*.

        Returns:
            SynthesisResult: Sections that received a proposal.

        Raises:
            ModelCallError: If the synthesis model call fails.
        """
        document = await self.store.get_or_create_client_document(client_id)
        sections = await self.store.get_document_sections(document.id)
        updates = await self.synthesizer.propose_for_exchange(
            sections, ConversationTurn(speaker=speaker, content=message), reply
        )
        applied = await self._apply(updates)
        if applied:
            logger.info("Client %s: exchange updated %d sections", client_id, len(applied))
        return SynthesisResult(updated_sections=len(applied), section_ids=applied)

    async def summarize_session(self, client_id: str) -> SynthesisResult:
        """Resynthesize the document from everything since the checkpoint.

        With fewer than ``MIN_SESSION_MESSAGES`` new messages nothing
        happens and the checkpoint stays put. Otherwise the checkpoint
        moves to the newest considered message even when no section
        changed.

        Args:
            client_id (str): Client whose session ended.

        Returns:
            SynthesisResult: Applied proposals and whether the checkpoint
                advanced.

        Raises:
            ModelCallError: If the synthesis model call fails. The
                checkpoint is left untouched.
        """
        messages = await self.store.get_messages_since_summarization(client_id)
        if len(messages) < settings.MIN_SESSION_MESSAGES:
            logger.info(
                "Client %s: %d new messages, need %d to summarize",
                client_id,
                len(messages),
                settings.MIN_SESSION_MESSAGES,
            )
            return SynthesisResult()

        document = await self.store.get_or_create_client_document(client_id)
        sections = await self.store.get_document_sections(document.id)
        updates = await self.synthesizer.propose_for_session(sections, messages)
        applied = await self._apply(updates)

        await self.store.mark_client_summarized(client_id, messages[-1].timestamp)
        logger.info("Client %s: session applied %d updates, checkpoint advanced", client_id, len(applied))
        return SynthesisResult(updated_sections=len(applied), section_ids=applied, checkpoint_advanced=True)

    async def generate_thread_title(self, thread_id: str, messages: Sequence[Message]) -> Optional[str]:
        """Name a thread from its opening messages.

        Args:
            thread_id (str): Thread to rename.
            messages (Sequence[Message]): Thread messages, oldest first.

        Returns:
            Optional[str]: The new title, or ``None`` with fewer than two
                messages or an empty reply.

        Raises:
            ModelCallError: If the title model call fails.
        """
        if len(messages) < 2:
            return None

        conversation = format_transcript(
            [ConversationTurn(speaker=m.speaker, content=m.content) for m in messages[:TITLE_CONTEXT_MESSAGES]]
        )
        raw = await self.title_caller.complete(
            THREAD_TITLE_SYSTEM_PROMPT,
            [ChatTurn(role="user", content=THREAD_TITLE_USER_PROMPT.format(conversation=conversation))],
            max_tokens=TITLE_MAX_TOKENS,
        )
        title = raw.strip().strip(_TITLE_QUOTES).strip()
        if not title:
            return None

        await self.store.update_thread_title(thread_id, title)
        logger.info("Generated title for thread %s: %s", thread_id, title)
        return title
