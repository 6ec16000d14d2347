# Copyright (c) 2026 Heureum AI. All rights reserved.

"""Shared domain models for the application."""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


def _new_id() -> str:
    return str(uuid.uuid4())


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


class MessageRole(str, Enum):
    """Stored author of a message.

    Attributes:
        CLIENT (str): The coaching client.
        COACH (str): The human coach.
        AI (str): The AI thinking partner.
    """

    CLIENT = "client"
    COACH = "coach"
    AI = "ai"


class Speaker(str, Enum):
    """Party of the three-way conversation a turn belongs to.

    Carried alongside turn content inside the core; converted to the
    two-role transport form only when a prompt is handed to the model.

    Attributes:
        CLIENT (str): The coaching client.
        COACH (str): The human coach.
        ASSISTANT (str): The AI thinking partner.
    """

    CLIENT = "client"
    COACH = "coach"
    ASSISTANT = "assistant"

    @classmethod
    def from_role(cls, role: MessageRole) -> "Speaker":
        """Map a stored message role to its speaker."""
        if role == MessageRole.COACH:
            return cls.COACH
        if role == MessageRole.AI:
            return cls.ASSISTANT
        return cls.CLIENT


class Editor(str, Enum):
    """Who last wrote a section's content."""

    COACH = "coach"
    AI = "ai"
    CLIENT = "client"


class SectionType(str, Enum):
    """Fixed set of living document section types."""

    OVERVIEW = "overview"
    HIGHLIGHT = "highlight"
    FOCUS = "focus"
    CONTEXT = "context"
    CUSTOM = "custom"


class Client(BaseModel):
    """Coaching client.

    Attributes:
        id (str): Client identifier.
        name (str): Display name.
        last_summarized_at (Optional[datetime]): Checkpoint of the last
            session-level synthesis. Messages after it are "new".
    """

    id: str = Field(default_factory=_new_id)
    name: str
    last_summarized_at: Optional[datetime] = None


class Thread(BaseModel):
    """Conversation thread belonging to a client."""

    id: str = Field(default_factory=_new_id)
    client_id: str
    title: Optional[str] = None
    created_at: datetime = Field(default_factory=utc_now)


class Message(BaseModel):
    """Stored conversation message. Immutable once created.

    Attributes:
        id (str): Message identifier.
        client_id (str): Owning client.
        thread_id (Optional[str]): Owning thread, when threads are used.
        role (MessageRole): Author of the message.
        content (str): Message text.
        timestamp (datetime): Creation time; defines ordering.
        mentions_coach (bool): Whether the text addresses the coach.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=_new_id)
    client_id: str
    thread_id: Optional[str] = None
    role: MessageRole
    content: str
    timestamp: datetime = Field(default_factory=utc_now)
    mentions_coach: bool = False

    @property
    def speaker(self) -> Speaker:
        return Speaker.from_role(self.role)


class Document(BaseModel):
    """A client's living document."""

    id: str = Field(default_factory=_new_id)
    client_id: str
    title: str = "Client Profile"
    last_updated: datetime = Field(default_factory=utc_now)


class Section(BaseModel):
    """A typed block of a living document.

    ``previous_content`` is set only while an AI proposal awaits review;
    it holds the last human-approved content.

    Attributes:
        id (str): Section identifier.
        document_id (str): Owning document.
        section_type (SectionType): Type tag, selects the word ceiling.
        title (str): Heading shown to coach, client and model.
        content (str): Current content.
        previous_content (Optional[str]): Content before the pending
            proposal, or ``None`` when stable.
        last_updated_by (Editor): Last writer.
        pending_review (bool): Whether an AI proposal awaits review.
        sort_order (int): Position within the document.
        is_collapsed (bool): UI collapsed flag.
    """

    id: str = Field(default_factory=_new_id)
    document_id: str
    section_type: SectionType = SectionType.CUSTOM
    title: str
    content: str = ""
    previous_content: Optional[str] = None
    last_updated_by: Editor = Editor.COACH
    pending_review: bool = False
    sort_order: int = 0
    is_collapsed: bool = False
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class RolePrompt(BaseModel):
    """Per-client persona definition."""

    client_id: str
    content: str
    updated_at: datetime = Field(default_factory=utc_now)


class TaskPrompt(BaseModel):
    """Per-client response style guidance."""

    client_id: str
    content: str
    updated_at: datetime = Field(default_factory=utc_now)


class MethodologyFrame(BaseModel):
    """A named coaching framework."""

    id: str = Field(default_factory=_new_id)
    name: str
    content: str
    sort_order: int = 0


class ClientMethodology(BaseModel):
    """Association of a methodology with a client."""

    client_id: str
    methodology: MethodologyFrame
    is_active: bool = True


class ReferenceDocument(BaseModel):
    """Shared reference material offered to every conversation."""

    id: str = Field(default_factory=_new_id)
    title: str
    content: str
    is_active: bool = True


class FileAttachment(BaseModel):
    """Metadata for a stored file whose text can be extracted.

    Attributes:
        id (str): Attachment identifier.
        object_path (str): Object storage reference.
        mime_type (str): MIME type of the stored object.
        filename (str): Original filename.
        reference_document_id (Optional[str]): Owning reference document.
        exercise_id (Optional[str]): Owning exercise.
    """

    id: str = Field(default_factory=_new_id)
    object_path: str
    mime_type: str
    filename: str
    reference_document_id: Optional[str] = None
    exercise_id: Optional[str] = None


class Exercise(BaseModel):
    """A predefined multi-step guided activity."""

    id: str = Field(default_factory=_new_id)
    title: str
    description: str = ""
    system_prompt: str = ""


class ExerciseStep(BaseModel):
    """One ordered step of an exercise."""

    id: str = Field(default_factory=_new_id)
    exercise_id: str
    title: str
    instructions: str = ""
    supporting_material: str = ""
    step_order: int = 0


class ExerciseSessionContext(BaseModel):
    """The active exercise for a (client, thread) pair.

    Attributes:
        exercise (Exercise): Exercise being run.
        steps (List[ExerciseStep]): All steps, in order.
        current_step_id (Optional[str]): The step the client is on.
    """

    exercise: Exercise
    steps: List[ExerciseStep]
    current_step_id: Optional[str] = None

    @property
    def current_index(self) -> Optional[int]:
        for i, step in enumerate(self.steps):
            if step.id == self.current_step_id:
                return i
        return None

    @property
    def current_step(self) -> Optional[ExerciseStep]:
        idx = self.current_index
        return self.steps[idx] if idx is not None else None

    @property
    def next_step(self) -> Optional[ExerciseStep]:
        idx = self.current_index
        if idx is None or idx + 1 >= len(self.steps):
            return None
        return self.steps[idx + 1]


class ConversationTurn(BaseModel):
    """A conversation turn tagged with its speaker.

    Attributes:
        speaker (Speaker): Party that produced the turn.
        content (str): Untagged turn text.
    """

    speaker: Speaker
    content: str


class ChatTurn(BaseModel):
    """Two-role transport form of a turn handed to the model.

    Attributes:
        role (Literal["user", "assistant"]): Transport role.
        content (str): Text, including any speaker prefix.
    """

    role: Literal["user", "assistant"]
    content: str


class SectionUpdate(BaseModel):
    """A proposed rewrite of one section.

    Accepts the camelCase keys the model is asked to produce.

    Attributes:
        section_id (str): Target section.
        new_content (str): Proposed replacement content.
    """

    model_config = ConfigDict(populate_by_name=True)

    section_id: str = Field(alias="sectionId")
    new_content: str = Field(alias="newContent")


class SynthesisResult(BaseModel):
    """Outcome of applying a synthesis run to a document.

    Attributes:
        updated_sections (int): Number of proposals written.
        section_ids (List[str]): Sections that received a proposal.
        checkpoint_advanced (bool): Whether the session checkpoint moved.
    """

    updated_sections: int = 0
    section_ids: List[str] = Field(default_factory=list)
    checkpoint_advanced: bool = False
