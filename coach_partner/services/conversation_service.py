# Copyright (c) 2026 Heureum AI. All rights reserved.

"""
Conversation flow.

Client message:
  store -> mention check -> assemble -> route -> model -> store reply
        -> background: thread title, exchange synthesis, session synthesis

Background work runs as fire-and-forget tasks. Failures are logged and
never reach the caller, whose response has already been produced.
"""

import asyncio
import logging
from typing import Awaitable, Dict, List, Optional, Set, Tuple

from langchain_core.language_models import BaseChatModel
from pydantic import BaseModel

from coach_partner.config import settings
from coach_partner.models import ChatTurn, Message, MessageRole, Speaker, SynthesisResult, Thread
from coach_partner.services.extractors import PlatformTextExtractor, TextExtractor
from coach_partner.services.llm import ModelCallError, ModelCaller, ModelRoute, route_message
from coach_partner.services.prompt_assembler import PromptAssembler, PromptContext
from coach_partner.services.storage import CoachingStore
from coach_partner.services.synthesis import LivingDocumentService
from coach_partner.services.triggers import detect_coach_mention, is_goodbye_message

logger = logging.getLogger(__name__)

AI_ERROR_MESSAGE = "Failed to generate AI response"


class ThreadNotFoundError(LookupError):
    """Raised when a thread id does not exist."""

    def __init__(self, thread_id: str):
        super().__init__(f"Thread not found: {thread_id}")
        self.thread_id = thread_id


class SendResult(BaseModel):
    """Outcome of sending one message.

    Attributes:
        message (Message): The stored incoming message.
        ai_message (Optional[Message]): The stored assistant reply.
        coach_mentioned (bool): Whether the reply was skipped because the
            client addressed the coach.
        ai_error (Optional[str]): Set when the reply could not be produced.
        route (Optional[ModelRoute]): Model routing decision.
    """

    message: Message
    ai_message: Optional[Message] = None
    coach_mentioned: bool = False
    ai_error: Optional[str] = None
    route: Optional[ModelRoute] = None


class ConversationService:
    """Runs the message, session and consultation flows for the API."""

    def __init__(
        self,
        store: CoachingStore,
        extractor: Optional[TextExtractor] = None,
        documents: Optional[LivingDocumentService] = None,
        llm: Optional[BaseChatModel] = None,
    ) -> None:
        """Initialize the service.

        Args:
            store (CoachingStore): Persistence.
            extractor (Optional[TextExtractor]): File text source. Defaults
                to the platform extractor.
            documents (Optional[LivingDocumentService]): Living document
                maintenance. Built over *store* if None.
            llm (Optional[BaseChatModel]): Chat model shared by every reply
                caller. When None each routed model is created lazily with
                ``create_llm``.
        """
        self.store = store
        self.assembler = PromptAssembler(store, extractor or PlatformTextExtractor())
        self.documents = documents or LivingDocumentService(store)
        self._llm = llm
        self._callers: Dict[str, ModelCaller] = {}
        self._background: Set[asyncio.Task] = set()

    # -- helpers ------------------------------------------------------------

    def caller_for(self, model: str) -> ModelCaller:
        if model not in self._callers:
            self._callers[model] = ModelCaller(model, llm=self._llm)
        return self._callers[model]

    def _spawn(self, coro: Awaitable, label: str) -> asyncio.Task:
        task = asyncio.create_task(self._run_background(coro, label))
        self._background.add(task)
        task.add_done_callback(self._background.discard)
        return task

    @staticmethod
    async def _run_background(coro: Awaitable, label: str) -> None:
        try:
            await coro
        except Exception:
            logger.exception("Background task %s failed", label)

    async def drain(self) -> None:
        """Wait for every pending background task."""
        while True:
            pending = [t for t in self._background if not t.done()]
            if not pending:
                return
            await asyncio.gather(*pending)

    async def _title_thread(self, thread_id: str) -> None:
        messages = await self.store.get_thread_messages(thread_id)
        await self.documents.generate_thread_title(thread_id, messages)

    async def _reply(
        self,
        client_id: str,
        thread_id: Optional[str],
        content: str,
        speaker: Speaker,
    ) -> Tuple[Message, ModelRoute]:
        assembled = await self.assembler.assemble_prompt(
            PromptContext(
                client_id=client_id,
                current_message=content,
                current_speaker=speaker,
                message_already_stored=True,
                thread_id=thread_id,
            )
        )
        route = route_message(content)
        reply = await self.caller_for(route.model).complete(
            assembled.system_prompt,
            assembled.to_chat_turns(),
            max_tokens=settings.AGENT_MAX_TOKENS,
        )
        ai_message = await self.store.create_message(
            Message(client_id=client_id, thread_id=thread_id, role=MessageRole.AI, content=reply)
        )
        return ai_message, route

    # -- flows --------------------------------------------------------------

    async def send_client_message(
        self,
        client_id: str,
        content: str,
        thread_id: Optional[str] = None,
    ) -> SendResult:
        """Store a client message and answer it.

        Args:
            client_id (str): Sending client.
            content (str): Message text.
            thread_id (Optional[str]): Thread the message belongs to.

        Returns:
            SendResult: The stored message plus the reply, or an
                ``ai_error`` when the reply failed.

        Raises:
            ThreadNotFoundError: If *thread_id* does not exist or belongs
                to another client.
        """
        first_in_thread = False
        if thread_id is not None:
            thread = await self.store.get_thread(thread_id)
            if thread is None or thread.client_id != client_id:
                raise ThreadNotFoundError(thread_id)
            existing = await self.store.get_thread_messages(thread_id)
            first_in_thread = not any(m.role == MessageRole.CLIENT for m in existing)

        mentions_coach = detect_coach_mention(content)
        message = await self.store.create_message(
            Message(
                client_id=client_id,
                thread_id=thread_id,
                role=MessageRole.CLIENT,
                content=content,
                mentions_coach=mentions_coach,
            )
        )
        if mentions_coach:
            logger.info("Client %s addressed the coach; skipping AI reply", client_id)
            return SendResult(message=message, coach_mentioned=True)

        try:
            ai_message, route = await self._reply(client_id, thread_id, content, Speaker.CLIENT)
        except ModelCallError as e:
            logger.warning("AI reply for client %s failed: %s", client_id, e)
            return SendResult(message=message, ai_error=AI_ERROR_MESSAGE)

        if thread_id is not None and first_in_thread:
            self._spawn(self._title_thread(thread_id), "thread title")
        self._spawn(
            self.documents.update_from_exchange(client_id, content, ai_message.content),
            "exchange synthesis",
        )
        if is_goodbye_message(content):
            logger.info("Sign-off detected from client %s", client_id)
            self._spawn(self.documents.summarize_session(client_id), "session synthesis")

        return SendResult(message=message, ai_message=ai_message, route=route)

    async def send_coach_message(
        self,
        thread_id: str,
        content: str,
        trigger_ai: bool = True,
    ) -> SendResult:
        """Post a coach message into a client thread.

        Raises:
            ThreadNotFoundError: If the thread does not exist.
        """
        thread = await self.store.get_thread(thread_id)
        if thread is None:
            raise ThreadNotFoundError(thread_id)

        message = await self.store.create_message(
            Message(client_id=thread.client_id, thread_id=thread.id, role=MessageRole.COACH, content=content)
        )
        if not trigger_ai:
            return SendResult(message=message)

        try:
            ai_message, route = await self._reply(thread.client_id, thread.id, content, Speaker.COACH)
        except ModelCallError as e:
            logger.warning("AI reply to coach in thread %s failed: %s", thread.id, e)
            return SendResult(message=message, ai_error=AI_ERROR_MESSAGE)
        return SendResult(message=message, ai_message=ai_message, route=route)

    async def end_session(self, client_id: str) -> SynthesisResult:
        """Synthesize the session and name any untitled threads.

        Raises:
            ModelCallError: If the session synthesis call fails.
        """
        result = await self.documents.summarize_session(client_id)
        for thread in await self.store.get_client_threads(client_id):
            if thread.title:
                continue
            try:
                await self._title_thread(thread.id)
            except ModelCallError as e:
                logger.warning("Could not title thread %s: %s", thread.id, e)
        logger.info("Client %s: session end updated %d sections", client_id, result.updated_sections)
        return result

    async def open_thread(
        self,
        client_id: str,
        exercise_id: Optional[str] = None,
    ) -> Tuple[Thread, Optional[Message]]:
        """Create a thread and post the assistant's opening message.

        The thread is kept even if the opening message cannot be produced.

        Args:
            client_id (str): Owning client.
            exercise_id (Optional[str]): Exercise to start in the thread.

        Returns:
            Tuple[Thread, Optional[Message]]: The thread and the opening
                message, if any.
        """
        thread = await self.store.create_thread(client_id)
        exercise = None
        if exercise_id is not None:
            await self.store.start_exercise(client_id, exercise_id, thread.id)
            exercise = await self.store.get_exercise_context(client_id, thread.id)

        assembled = await self.assembler.assemble_opening_prompt(client_id, exercise)
        try:
            reply = await self.caller_for(settings.BALANCED_MODEL).complete(
                assembled.system_prompt,
                assembled.to_chat_turns(),
                max_tokens=settings.AGENT_MAX_TOKENS,
            )
        except ModelCallError as e:
            logger.warning("Opening message for thread %s failed: %s", thread.id, e)
            return thread, None

        opening = await self.store.create_message(
            Message(client_id=client_id, thread_id=thread.id, role=MessageRole.AI, content=reply)
        )
        logger.info("Created opening message for thread %s", thread.id)
        return thread, opening

    async def consult(
        self,
        client_id: str,
        question: str,
        history: Optional[List[ChatTurn]] = None,
    ) -> str:
        """Answer a coach's private question about a client.

        Raises:
            ModelCallError: If the model call fails.
        """
        system_prompt = await self.assembler.assemble_consultation_prompt(client_id)
        turns = list(history or []) + [ChatTurn(role="user", content=question)]
        return await self.caller_for(settings.BALANCED_MODEL).complete(
            system_prompt, turns, max_tokens=settings.AGENT_MAX_TOKENS
        )
