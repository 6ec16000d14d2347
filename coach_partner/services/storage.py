# Copyright (c) 2026 Heureum AI. All rights reserved.

"""
Coaching data store.

:class:`CoachingStore` is the persistence boundary the services depend
on. :class:`InMemoryCoachingStore` keeps everything in process memory
and backs the HTTP service and the test suite; a database-backed store
implements the same protocol.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Dict, List, Optional, Protocol

from coach_partner.models import (
    Client,
    ClientMethodology,
    Document,
    Exercise,
    ExerciseSessionContext,
    ExerciseStep,
    FileAttachment,
    MethodologyFrame,
    Message,
    ReferenceDocument,
    RolePrompt,
    Section,
    SectionType,
    TaskPrompt,
    Thread,
    utc_now,
)
from coach_partner.services.prompts.base import DEFAULT_ROLE_PROMPT, DEFAULT_TASK_PROMPT

logger = logging.getLogger(__name__)

DEFAULT_SECTIONS = [
    ("Overview", SectionType.OVERVIEW),
    ("Key Highlights", SectionType.HIGHLIGHT),
    ("Current Focus Areas", SectionType.FOCUS),
    ("Background & Context", SectionType.CONTEXT),
]


class CoachingStore(Protocol):
    """Async persistence operations used by the coaching services."""

    # Clients and threads
    async def get_client(self, client_id: str) -> Optional[Client]: ...

    async def save_client(self, client: Client) -> Client: ...

    async def mark_client_summarized(self, client_id: str, at: Optional[datetime] = None) -> None: ...

    async def get_thread(self, thread_id: str) -> Optional[Thread]: ...

    async def create_thread(self, client_id: str, title: Optional[str] = None) -> Thread: ...

    async def get_client_threads(self, client_id: str) -> List[Thread]: ...

    async def update_thread_title(self, thread_id: str, title: str) -> Optional[Thread]: ...

    # Messages
    async def create_message(self, message: Message) -> Message: ...

    async def get_client_messages(
        self, client_id: str, since: Optional[datetime] = None, limit: Optional[int] = None
    ) -> List[Message]: ...

    async def get_thread_messages(self, thread_id: str, limit: Optional[int] = None) -> List[Message]: ...

    async def get_messages_since_summarization(self, client_id: str) -> List[Message]: ...

    # Living document
    async def get_or_create_client_document(self, client_id: str) -> Document: ...

    async def get_document_sections(self, document_id: str) -> List[Section]: ...

    async def get_section(self, section_id: str) -> Optional[Section]: ...

    async def save_section(self, section: Section) -> Section: ...

    async def create_section(self, section: Section) -> Section: ...

    async def delete_section(self, section_id: str) -> bool: ...

    # Prompts and context
    async def get_or_create_role_prompt(self, client_id: str) -> RolePrompt: ...

    async def update_role_prompt(self, client_id: str, content: str) -> RolePrompt: ...

    async def get_or_create_task_prompt(self, client_id: str) -> TaskPrompt: ...

    async def update_task_prompt(self, client_id: str, content: str) -> TaskPrompt: ...

    async def get_client_methodologies(self, client_id: str) -> List[ClientMethodology]: ...

    async def get_active_reference_documents(self) -> List[ReferenceDocument]: ...

    async def get_reference_attachments(self, reference_document_id: str) -> List[FileAttachment]: ...

    async def get_exercise_attachments(self, exercise_id: str) -> List[FileAttachment]: ...

    async def start_exercise(
        self,
        client_id: str,
        exercise_id: str,
        thread_id: Optional[str] = None,
        current_step_id: Optional[str] = None,
    ) -> None: ...

    async def get_exercise_context(
        self, client_id: str, thread_id: Optional[str] = None
    ) -> Optional[ExerciseSessionContext]: ...


class InMemoryCoachingStore:
    """Dict-backed :class:`CoachingStore`.

    Models are copied on the way in and out so callers never share
    mutable state with the store.
    """

    def __init__(self) -> None:
        self.clients: Dict[str, Client] = {}
        self.threads: Dict[str, Thread] = {}
        self.messages: List[Message] = []
        self.documents: Dict[str, Document] = {}
        self.sections: Dict[str, Section] = {}
        self.role_prompts: Dict[str, RolePrompt] = {}
        self.task_prompts: Dict[str, TaskPrompt] = {}
        self.methodologies: List[ClientMethodology] = []
        self.reference_documents: Dict[str, ReferenceDocument] = {}
        self.attachments: Dict[str, FileAttachment] = {}
        self.exercises: Dict[str, Exercise] = {}
        self.exercise_steps: Dict[str, List[ExerciseStep]] = {}
        # (client_id, thread_id) -> (exercise_id, current_step_id)
        self.exercise_sessions: Dict[tuple, tuple] = {}

    # -- clients / threads -------------------------------------------------

    async def get_client(self, client_id: str) -> Optional[Client]:
        client = self.clients.get(client_id)
        return client.model_copy() if client else None

    async def save_client(self, client: Client) -> Client:
        self.clients[client.id] = client.model_copy()
        return client

    async def mark_client_summarized(self, client_id: str, at: Optional[datetime] = None) -> None:
        client = self.clients.get(client_id)
        if client is None:
            logger.warning("Cannot mark unknown client %s as summarized", client_id)
            return
        self.clients[client_id] = client.model_copy(update={"last_summarized_at": at or utc_now()})

    async def get_thread(self, thread_id: str) -> Optional[Thread]:
        thread = self.threads.get(thread_id)
        return thread.model_copy() if thread else None

    async def create_thread(self, client_id: str, title: Optional[str] = None) -> Thread:
        thread = Thread(client_id=client_id, title=title)
        self.threads[thread.id] = thread
        return thread.model_copy()

    async def get_client_threads(self, client_id: str) -> List[Thread]:
        found = [t.model_copy() for t in self.threads.values() if t.client_id == client_id]
        found.sort(key=lambda t: t.created_at)
        return found

    async def update_thread_title(self, thread_id: str, title: str) -> Optional[Thread]:
        thread = self.threads.get(thread_id)
        if thread is None:
            return None
        self.threads[thread_id] = thread.model_copy(update={"title": title})
        return self.threads[thread_id].model_copy()

    # -- messages ----------------------------------------------------------

    async def create_message(self, message: Message) -> Message:
        self.messages.append(message)
        return message

    async def get_client_messages(
        self, client_id: str, since: Optional[datetime] = None, limit: Optional[int] = None
    ) -> List[Message]:
        """Messages for a client, oldest first.

        Args:
            client_id (str): Owning client.
            since (Optional[datetime]): Only messages strictly after this.
            limit (Optional[int]): Keep only the newest ``limit`` messages.
        """
        found = [
            m
            for m in self.messages
            if m.client_id == client_id and (since is None or m.timestamp > since)
        ]
        found.sort(key=lambda m: m.timestamp)
        if limit is not None:
            found = found[-limit:] if limit > 0 else []
        return found

    async def get_thread_messages(self, thread_id: str, limit: Optional[int] = None) -> List[Message]:
        found = sorted((m for m in self.messages if m.thread_id == thread_id), key=lambda m: m.timestamp)
        if limit is not None:
            found = found[-limit:] if limit > 0 else []
        return found

    async def get_messages_since_summarization(self, client_id: str) -> List[Message]:
        client = self.clients.get(client_id)
        since = client.last_summarized_at if client else None
        return await self.get_client_messages(client_id, since=since)

    # -- living document ---------------------------------------------------

    async def get_or_create_client_document(self, client_id: str) -> Document:
        """Return the client's document, creating it with default sections."""
        for doc in self.documents.values():
            if doc.client_id == client_id:
                return doc.model_copy()

        doc = Document(client_id=client_id)
        self.documents[doc.id] = doc
        for order, (title, section_type) in enumerate(DEFAULT_SECTIONS):
            section = Section(document_id=doc.id, section_type=section_type, title=title, sort_order=order)
            self.sections[section.id] = section
        logger.info("Created living document %s for client %s", doc.id, client_id)
        return doc.model_copy()

    async def get_document_sections(self, document_id: str) -> List[Section]:
        found = [s.model_copy() for s in self.sections.values() if s.document_id == document_id]
        found.sort(key=lambda s: s.sort_order)
        return found

    async def get_section(self, section_id: str) -> Optional[Section]:
        section = self.sections.get(section_id)
        return section.model_copy() if section else None

    async def save_section(self, section: Section) -> Section:
        self.sections[section.id] = section.model_copy()
        doc = self.documents.get(section.document_id)
        if doc is not None:
            self.documents[doc.id] = doc.model_copy(update={"last_updated": section.updated_at})
        return section

    async def create_section(self, section: Section) -> Section:
        return await self.save_section(section)

    async def delete_section(self, section_id: str) -> bool:
        return self.sections.pop(section_id, None) is not None

    # -- prompts / context -------------------------------------------------

    async def get_or_create_role_prompt(self, client_id: str) -> RolePrompt:
        if client_id not in self.role_prompts:
            self.role_prompts[client_id] = RolePrompt(client_id=client_id, content=DEFAULT_ROLE_PROMPT)
        return self.role_prompts[client_id].model_copy()

    async def update_role_prompt(self, client_id: str, content: str) -> RolePrompt:
        self.role_prompts[client_id] = RolePrompt(client_id=client_id, content=content)
        return self.role_prompts[client_id].model_copy()

    async def get_or_create_task_prompt(self, client_id: str) -> TaskPrompt:
        if client_id not in self.task_prompts:
            self.task_prompts[client_id] = TaskPrompt(client_id=client_id, content=DEFAULT_TASK_PROMPT)
        return self.task_prompts[client_id].model_copy()

    async def update_task_prompt(self, client_id: str, content: str) -> TaskPrompt:
        self.task_prompts[client_id] = TaskPrompt(client_id=client_id, content=content)
        return self.task_prompts[client_id].model_copy()

    async def get_client_methodologies(self, client_id: str) -> List[ClientMethodology]:
        found = [m for m in self.methodologies if m.client_id == client_id]
        found.sort(key=lambda m: m.methodology.sort_order)
        return found

    async def add_client_methodology(
        self, client_id: str, methodology: MethodologyFrame, is_active: bool = True
    ) -> ClientMethodology:
        link = ClientMethodology(client_id=client_id, methodology=methodology, is_active=is_active)
        self.methodologies.append(link)
        return link

    async def get_active_reference_documents(self) -> List[ReferenceDocument]:
        return [d for d in self.reference_documents.values() if d.is_active]

    async def save_reference_document(self, document: ReferenceDocument) -> ReferenceDocument:
        self.reference_documents[document.id] = document
        return document

    async def get_reference_attachments(self, reference_document_id: str) -> List[FileAttachment]:
        return [a for a in self.attachments.values() if a.reference_document_id == reference_document_id]

    async def get_exercise_attachments(self, exercise_id: str) -> List[FileAttachment]:
        return [a for a in self.attachments.values() if a.exercise_id == exercise_id]

    async def save_attachment(self, attachment: FileAttachment) -> FileAttachment:
        self.attachments[attachment.id] = attachment
        return attachment

    async def save_exercise(self, exercise: Exercise, steps: List[ExerciseStep]) -> Exercise:
        self.exercises[exercise.id] = exercise
        self.exercise_steps[exercise.id] = sorted(steps, key=lambda s: s.step_order)
        return exercise

    async def start_exercise(
        self,
        client_id: str,
        exercise_id: str,
        thread_id: Optional[str] = None,
        current_step_id: Optional[str] = None,
    ) -> None:
        steps = self.exercise_steps.get(exercise_id, [])
        if current_step_id is None and steps:
            current_step_id = steps[0].id
        self.exercise_sessions[(client_id, thread_id)] = (exercise_id, current_step_id)

    async def get_exercise_context(
        self, client_id: str, thread_id: Optional[str] = None
    ) -> Optional[ExerciseSessionContext]:
        session = self.exercise_sessions.get((client_id, thread_id))
        if session is None:
            return None
        exercise_id, current_step_id = session
        exercise = self.exercises.get(exercise_id)
        if exercise is None:
            return None
        return ExerciseSessionContext(
            exercise=exercise,
            steps=list(self.exercise_steps.get(exercise_id, [])),
            current_step_id=current_step_id,
        )
