# Copyright (c) 2026 Heureum AI. All rights reserved.

"""
Living document synthesis module.

  synthesizer.py       — asks the model for section rewrites and validates them
  document_service.py  — applies rewrites as pending proposals, checkpoints
                         sessions, names threads

Usage:

    service = LivingDocumentService(store)

    # after every assistant reply
    await service.update_from_exchange(client_id, message, reply)

    # on sign-off or explicit session end
    result = await service.summarize_session(client_id)
"""

from coach_partner.services.synthesis.document_service import LivingDocumentService
from coach_partner.services.synthesis.synthesizer import (
    SectionSynthesizer,
    format_transcript,
    parse_section_updates,
)

__all__ = [
    "LivingDocumentService",
    "SectionSynthesizer",
    "format_transcript",
    "parse_section_updates",
]
