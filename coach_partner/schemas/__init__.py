# Copyright (c) 2026 Heureum AI. All rights reserved.

"""Schemas for the coaching HTTP API."""
from .api import (
    ClientCreate,
    CoachMessageCreate,
    ConsultationRequest,
    ConsultationResponse,
    DocumentResponse,
    MessageCreate,
    SectionEdit,
    SendResponse,
    SessionEndResponse,
    ThreadCreate,
    ThreadResponse,
)

__all__ = [
    "ClientCreate",
    "CoachMessageCreate",
    "ConsultationRequest",
    "ConsultationResponse",
    "DocumentResponse",
    "MessageCreate",
    "SectionEdit",
    "SendResponse",
    "SessionEndResponse",
    "ThreadCreate",
    "ThreadResponse",
]
