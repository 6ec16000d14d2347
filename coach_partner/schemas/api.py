# Copyright (c) 2026 Heureum AI. All rights reserved.

"""Request and response bodies for the coaching API."""

from typing import List, Optional

from pydantic import BaseModel, Field

from coach_partner.models import ChatTurn, Client, Document, Editor, Message, Section, Thread


class ClientCreate(BaseModel):
    name: str = Field(min_length=1)


class MessageCreate(BaseModel):
    """A client message.

    Attributes:
        content (str): Message text.
        thread_id (Optional[str]): Thread the message belongs to.
    """

    content: str = Field(min_length=1)
    thread_id: Optional[str] = None


class CoachMessageCreate(BaseModel):
    """A coach message posted into a client thread.

    Attributes:
        content (str): Message text.
        trigger_ai (bool): Whether the assistant answers the coach.
    """

    content: str = Field(min_length=1)
    trigger_ai: bool = True


class SendResponse(BaseModel):
    """Result of posting a message.

    Attributes:
        message (Message): The stored message.
        ai_message (Optional[Message]): The assistant reply, if produced.
        coach_mentioned (bool): Reply skipped because the coach was addressed.
        ai_error (Optional[str]): Why the reply is missing.
    """

    message: Message
    ai_message: Optional[Message] = None
    coach_mentioned: bool = False
    ai_error: Optional[str] = None


class ThreadCreate(BaseModel):
    exercise_id: Optional[str] = None


class ThreadResponse(BaseModel):
    thread: Thread
    opening_message: Optional[Message] = None


class DocumentResponse(BaseModel):
    client: Client
    document: Document
    sections: List[Section]


class SessionEndResponse(BaseModel):
    """Result of an explicit session end.

    Attributes:
        success (bool): Always ``True`` on a 200 response.
        updated_sections (int): Sections that received a proposal.
        checkpoint_advanced (bool): Whether the session checkpoint moved.
    """

    success: bool = True
    updated_sections: int = 0
    checkpoint_advanced: bool = False


class SectionEdit(BaseModel):
    """A direct human edit of a section.

    Attributes:
        title (Optional[str]): New title.
        content (Optional[str]): New content.
        is_collapsed (Optional[bool]): New collapsed flag.
        actor (Editor): Who is editing.
    """

    title: Optional[str] = None
    content: Optional[str] = None
    is_collapsed: Optional[bool] = None
    actor: Editor = Editor.COACH


class ConsultationRequest(BaseModel):
    question: str = Field(min_length=1)
    history: List[ChatTurn] = Field(default_factory=list)


class ConsultationResponse(BaseModel):
    reply: str
