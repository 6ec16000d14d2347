# Copyright (c) 2026 Heureum AI. All rights reserved.

"""
Gap advisor — steers the assistant towards thin living document sections.
"""

from typing import List, Sequence

from coach_partner.models import Section
from coach_partner.services.prompts.base import (
    GAP_DIRECTIVE_INTRO,
    GAP_DIRECTIVE_OUTRO,
    GAPS_HEADING,
)

THIN_SECTION_CHARS = 30


def is_thin(content: str, threshold: int = THIN_SECTION_CHARS) -> bool:
    """Whether stripped *content* is shorter than *threshold* characters."""
    return len((content or "").strip()) < threshold


def find_thin_sections(
    sections: Sequence[Section],
    threshold: int = THIN_SECTION_CHARS,
) -> List[Section]:
    """Sections that hold too little content to be useful.

    Args:
        sections (Sequence[Section]): Sections in document order.
        threshold (int): Minimum stripped length of a filled section.

    Returns:
        List[Section]: Thin sections, in the given order.
    """
    return [s for s in sections if is_thin(s.content, threshold)]


def detect_gaps(
    sections: Sequence[Section],
    threshold: int = THIN_SECTION_CHARS,
) -> str:
    """Build a directive asking the assistant to fill thin sections.

    The directive names each thin section and forbids the assistant from
    announcing that it is collecting information.

    Args:
        sections (Sequence[Section]): Sections in document order.
        threshold (int): Minimum stripped length of a filled section.
            Defaults to ``THIN_SECTION_CHARS``.

    Returns:
        str: The ``# Areas to Explore`` block, or ``""`` when no section
            is thin.
    """
    thin = find_thin_sections(sections, threshold)
    if not thin:
        return ""

    names = "\n".join(f"- {s.title}" for s in thin)
    return f"{GAPS_HEADING}\n{GAP_DIRECTIVE_INTRO}\n{names}\n\n{GAP_DIRECTIVE_OUTRO}"
