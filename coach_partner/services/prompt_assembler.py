# Copyright (c) 2026 Heureum AI. All rights reserved.

"""
Prompt assembly for the thinking-partner assistant.

Builds the system prompt from independently budgeted blocks and fits the
conversation history into the remaining buffer. Block order is fixed:

    # Your Role
    # Coaching Framework
    # Reference Material   (with ## Attached Files)
    # Client Context
    # Response Instructions
    # Active Exercise
    # Three-Way Conversation
    # Areas to Explore
"""

import logging
from typing import List, Optional, Sequence

from pydantic import BaseModel, Field

from coach_partner.models import (
    ChatTurn,
    ConversationTurn,
    ExerciseSessionContext,
    FileAttachment,
    Message,
    Section,
    Speaker,
)
from coach_partner.services.budget import (
    DEFAULT_BUDGET,
    BudgetTable,
    conversation_budget,
    estimate_tokens,
    estimate_total_tokens,
    select_window,
    to_chat_turns,
    truncate_to_token_limit,
)
from coach_partner.services.extractors import TextExtractor
from coach_partner.services.gap_advisor import detect_gaps
from coach_partner.services.prompts.base import (
    ATTACHMENTS_HEADING,
    BLOCK_SEPARATOR,
    CONSULTATION_GUIDELINES,
    CONSULTATION_HISTORY_HEADING,
    CONSULTATION_PROFILE_HEADING,
    CONSULTATION_PROMPT,
    FRAMEWORK_HEADING,
    MEMORY_HEADING,
    OPENING_PLACEHOLDER_INPUT,
    OPENING_TASK_PROMPT,
    REFERENCE_HEADING,
    RESPONSE_HEADING,
    ROLE_HEADING,
    THREE_WAY_CONVERSATION_PROMPT,
    build_exercise_directive,
)
from coach_partner.services.storage import CoachingStore

logger = logging.getLogger(__name__)

CONSULTATION_MESSAGE_LIMIT = 30
DEFAULT_MESSAGE_LIMIT = 50


class PromptContext(BaseModel):
    """Inputs for one reply prompt.

    Attributes:
        client_id (str): Client the conversation belongs to.
        current_message (str): The message being answered.
        current_speaker (Speaker): Who sent the current message.
        message_already_stored (bool): Whether ``current_message`` is
            already the last of ``recent_messages``.
        recent_messages (Optional[List[ConversationTurn]]): Candidate
            history, oldest first. Loaded from the store when ``None``.
        sections (Optional[List[Section]]): Living document sections.
            Loaded from the store when ``None``.
        thread_id (Optional[str]): Thread the message belongs to.
        exercise (Optional[ExerciseSessionContext]): Active exercise.
            Loaded from the store for ``thread_id`` when ``None``.
    """

    client_id: str
    current_message: str
    current_speaker: Speaker = Speaker.CLIENT
    message_already_stored: bool = False
    recent_messages: Optional[List[ConversationTurn]] = None
    sections: Optional[List[Section]] = None
    thread_id: Optional[str] = None
    exercise: Optional[ExerciseSessionContext] = None


class AssembledPrompt(BaseModel):
    """A budgeted prompt ready for the model.

    Attributes:
        system_prompt (str): Joined system prompt blocks.
        conversation (List[ConversationTurn]): Speaker-tagged window,
            current message last.
        estimated_tokens (int): Estimate over the system prompt and the
            serialized turns. Informational only.
    """

    system_prompt: str
    conversation: List[ConversationTurn] = Field(default_factory=list)
    estimated_tokens: int = 0

    def to_chat_turns(self) -> List[ChatTurn]:
        return to_chat_turns(self.conversation)


def _block(heading: str, body: str) -> str:
    return f"{heading}\n{body}" if body.strip() else ""


def _join_blocks(blocks: Sequence[str]) -> str:
    return BLOCK_SEPARATOR.join(b for b in blocks if b)


def to_conversation_turns(messages: Sequence[Message]) -> List[ConversationTurn]:
    """Tag stored messages with their speakers."""
    return [ConversationTurn(speaker=m.speaker, content=m.content) for m in messages]


def format_memory(sections: Sequence[Section]) -> str:
    """Render non-blank sections as ``## title`` blocks."""
    return "\n\n".join(f"## {s.title}\n{s.content}" for s in sections if s.content.strip())


class PromptAssembler:
    """Assembles reply, opening and consultation prompts.

    Attributes:
        store (CoachingStore): Source of prompts, documents and messages.
        extractor (TextExtractor): Text source for file attachments.
        budget (BudgetTable): Per-slot token ceilings.
    """

    def __init__(
        self,
        store: CoachingStore,
        extractor: TextExtractor,
        budget: BudgetTable = DEFAULT_BUDGET,
    ) -> None:
        self.store = store
        self.extractor = extractor
        self.budget = budget

    # -- collaborators ------------------------------------------------------

    async def get_client_context(self, client_id: str) -> List[Section]:
        """Sections of the client's living document, in sort order."""
        document = await self.store.get_or_create_client_document(client_id)
        return await self.store.get_document_sections(document.id)

    async def get_recent_messages(
        self, client_id: str, limit: int = DEFAULT_MESSAGE_LIMIT
    ) -> List[ConversationTurn]:
        messages = await self.store.get_client_messages(client_id, limit=limit)
        return to_conversation_turns(messages)

    async def get_thread_messages(
        self, thread_id: str, limit: int = DEFAULT_MESSAGE_LIMIT
    ) -> List[ConversationTurn]:
        messages = await self.store.get_thread_messages(thread_id, limit=limit)
        return to_conversation_turns(messages)

    async def get_exercise_context(
        self, client_id: str, thread_id: Optional[str]
    ) -> Optional[ExerciseSessionContext]:
        if thread_id is None:
            return None
        return await self.store.get_exercise_context(client_id, thread_id)

    # -- blocks -------------------------------------------------------------

    async def _role_block(self, client_id: str) -> str:
        role = await self.store.get_or_create_role_prompt(client_id)
        return _block(ROLE_HEADING, truncate_to_token_limit(role.content.strip(), self.budget.role))

    async def _framework_block(self, client_id: str) -> str:
        links = await self.store.get_client_methodologies(client_id)
        content = "\n\n".join(
            f"## {link.methodology.name}\n{link.methodology.content}" for link in links if link.is_active
        )
        return _block(FRAMEWORK_HEADING, truncate_to_token_limit(content, self.budget.methodology))

    async def _extract_attachments(self, attachments: Sequence[FileAttachment]) -> str:
        parts: List[str] = []
        for attachment in attachments:
            text = await self.extractor.extract(attachment.object_path, attachment.mime_type, attachment.filename)
            parts.append(f"### {attachment.filename}\n{text}")
        return "\n\n".join(parts)

    async def _reference_block(self, exercise: Optional[ExerciseSessionContext]) -> str:
        documents = await self.store.get_active_reference_documents()
        reference = truncate_to_token_limit(
            "\n\n".join(f"## {d.title}\n{d.content}" for d in documents),
            self.budget.reference,
        )

        attachments: List[FileAttachment] = []
        for doc in documents:
            attachments.extend(await self.store.get_reference_attachments(doc.id))
        if exercise is not None:
            attachments.extend(await self.store.get_exercise_attachments(exercise.exercise.id))

        files = ""
        if attachments:
            files = truncate_to_token_limit(await self._extract_attachments(attachments), self.budget.file_attachments)

        body = reference
        if files.strip():
            nested = f"{ATTACHMENTS_HEADING}\n{files}"
            body = f"{body}\n\n{nested}" if body.strip() else nested
        return _block(REFERENCE_HEADING, body)

    def _memory_block(self, sections: Sequence[Section], heading: str = MEMORY_HEADING) -> str:
        return _block(heading, truncate_to_token_limit(format_memory(sections), self.budget.memory))

    async def _response_block(self, client_id: str, exercise: Optional[ExerciseSessionContext]) -> str:
        if exercise is not None and exercise.exercise.system_prompt.strip():
            instructions = exercise.exercise.system_prompt
        else:
            instructions = (await self.store.get_or_create_task_prompt(client_id)).content
        return _block(
            RESPONSE_HEADING,
            truncate_to_token_limit(instructions.strip(), self.budget.response_instructions),
        )

    # -- prompts ------------------------------------------------------------

    async def assemble_prompt(self, context: PromptContext) -> AssembledPrompt:
        """Assemble the reply prompt for one incoming message.

        Args:
            context (PromptContext): Message and optional preloaded
                history, sections and exercise.

        Returns:
            AssembledPrompt: System prompt, tagged conversation window and
                the token estimate.
        """
        sections = context.sections
        if sections is None:
            sections = await self.get_client_context(context.client_id)

        exercise = context.exercise
        if exercise is None:
            exercise = await self.get_exercise_context(context.client_id, context.thread_id)

        candidates = context.recent_messages
        if candidates is None:
            if context.thread_id is not None:
                candidates = await self.get_thread_messages(context.thread_id)
            else:
                candidates = await self.get_recent_messages(context.client_id)

        blocks = [
            await self._role_block(context.client_id),
            await self._framework_block(context.client_id),
            await self._reference_block(exercise),
            self._memory_block(sections),
            await self._response_block(context.client_id, exercise),
            build_exercise_directive(exercise) if exercise is not None else "",
            THREE_WAY_CONVERSATION_PROMPT,
            detect_gaps(sections),
        ]
        system_prompt = _join_blocks(blocks)

        available = conversation_budget(
            self.budget.conversation_buffer,
            context.current_message,
            context.message_already_stored,
        )
        conversation = select_window(candidates, available)
        if context.message_already_stored and not conversation and candidates:
            # The stored current message alone overflows the buffer; send it truncated.
            last = candidates[-1]
            if last.content == context.current_message:
                logger.warning(
                    "Current message for client %s exceeds the conversation buffer; truncating",
                    context.client_id,
                )
                conversation = [
                    ConversationTurn(
                        speaker=last.speaker,
                        content=truncate_to_token_limit(last.content, self.budget.conversation_buffer),
                    )
                ]
        if not context.message_already_stored:
            conversation.append(ConversationTurn(speaker=context.current_speaker, content=context.current_message))

        assembled = AssembledPrompt(system_prompt=system_prompt, conversation=conversation)
        assembled.estimated_tokens = estimate_tokens(system_prompt) + estimate_total_tokens(
            t.content for t in assembled.to_chat_turns()
        )
        if assembled.estimated_tokens > self.budget.total:
            logger.warning(
                "Assembled prompt for client %s estimated at %d tokens (budget %d)",
                context.client_id,
                assembled.estimated_tokens,
                self.budget.total,
            )
        return assembled

    async def assemble_opening_prompt(
        self,
        client_id: str,
        exercise: Optional[ExerciseSessionContext] = None,
    ) -> AssembledPrompt:
        """Assemble the prompt that produces a new thread's greeting.

        Args:
            client_id (str): Client the thread belongs to.
            exercise (Optional[ExerciseSessionContext]): Exercise the
                thread opens with, if any.

        Returns:
            AssembledPrompt: System prompt and a single placeholder turn.
        """
        client = await self.store.get_client(client_id)
        first_name = client.name.split(" ")[0] if client and client.name.strip() else "there"
        sections = await self.get_client_context(client_id)

        blocks = [
            await self._role_block(client_id),
            await self._framework_block(client_id),
            self._memory_block(sections),
            await self._response_block(client_id, exercise),
            build_exercise_directive(exercise) if exercise is not None else "",
            OPENING_TASK_PROMPT.format(client_name=first_name),
        ]
        system_prompt = _join_blocks(blocks)
        conversation = [ConversationTurn(speaker=Speaker.CLIENT, content=OPENING_PLACEHOLDER_INPUT)]
        return AssembledPrompt(
            system_prompt=system_prompt,
            conversation=conversation,
            estimated_tokens=estimate_tokens(system_prompt) + estimate_tokens(OPENING_PLACEHOLDER_INPUT),
        )

    async def assemble_consultation_prompt(self, client_id: str) -> str:
        """Assemble the system prompt for a private coach consultation.

        Args:
            client_id (str): Client under discussion.

        Returns:
            str: System prompt with the living document and recent
                client conversations.
        """
        client = await self.store.get_client(client_id)
        client_name = client.name if client else "Unknown Client"
        sections = await self.get_client_context(client_id)

        messages = await self.store.get_client_messages(client_id, limit=CONSULTATION_MESSAGE_LIMIT)
        history = "\n\n".join(f"{m.role.value.upper()}: {m.content}" for m in messages)

        blocks = [
            CONSULTATION_PROMPT.format(client_name=client_name),
            self._memory_block(sections, heading=CONSULTATION_PROFILE_HEADING),
            _block(
                CONSULTATION_HISTORY_HEADING,
                truncate_to_token_limit(history, self.budget.consultation_history),
            ),
            CONSULTATION_GUIDELINES,
        ]
        return _join_blocks(blocks)
