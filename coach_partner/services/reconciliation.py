# Copyright (c) 2026 Heureum AI. All rights reserved.

"""
Section review state machine.

Every section is either Stable or PendingReview:

    Stable        --propose_update--> PendingReview (previous_content = old content)
    PendingReview --propose_update--> PendingReview (previous_content kept)
    PendingReview --accept---------->  Stable
    PendingReview --revert---------->  Stable       (content = previous_content)
    any           --human_edit------>  Stable

Transitions are pure functions over :class:`Section`; the engine loads
and saves through the store. Concurrent writers are not serialized and
the last write wins.
"""

from __future__ import annotations

import logging
from typing import Optional

from coach_partner.models import Editor, Section, utc_now
from coach_partner.services.storage import CoachingStore

logger = logging.getLogger(__name__)


class SectionNotFoundError(LookupError):
    """Raised when a section id does not exist."""

    def __init__(self, section_id: str):
        super().__init__(f"Section not found: {section_id}")
        self.section_id = section_id


class NothingToRevertError(ValueError):
    """Raised when reverting a section that has no pending proposal."""

    def __init__(self, section_id: str):
        super().__init__(f"No previous content to revert to for section {section_id}")
        self.section_id = section_id


# ---------------------------------------------------------------------------
# Pure transitions
# ---------------------------------------------------------------------------


def apply_proposal(section: Section, new_content: str) -> Section:
    """Write an AI proposal, keeping the last human-approved content.

    Args:
        section (Section): Current section state.
        new_content (str): Proposed replacement content.

    Returns:
        Section: The section in PendingReview.
    """
    previous = section.previous_content if section.pending_review else section.content
    return section.model_copy(
        update={
            "content": new_content,
            "previous_content": previous,
            "pending_review": True,
            "last_updated_by": Editor.AI,
            "updated_at": utc_now(),
        }
    )


def apply_accept(section: Section) -> Section:
    """Keep the current content and clear pending state."""
    if not section.pending_review and section.previous_content is None:
        return section
    return section.model_copy(
        update={"previous_content": None, "pending_review": False, "updated_at": utc_now()}
    )


def apply_revert(section: Section) -> Section:
    """Restore the content that preceded the pending proposal.

    Raises:
        NothingToRevertError: If the section is not pending review or
            there is no earlier content to restore.
    """
    if not section.pending_review or not section.previous_content:
        raise NothingToRevertError(section.id)
    return section.model_copy(
        update={
            "content": section.previous_content,
            "previous_content": None,
            "pending_review": False,
            "last_updated_by": Editor.COACH,
            "updated_at": utc_now(),
        }
    )


def apply_human_edit(
    section: Section,
    actor: Editor,
    title: Optional[str] = None,
    content: Optional[str] = None,
    is_collapsed: Optional[bool] = None,
) -> Section:
    """Apply a direct edit. Any pending proposal is discarded."""
    update = {
        "previous_content": None,
        "pending_review": False,
        "last_updated_by": actor,
        "updated_at": utc_now(),
    }
    if title is not None:
        update["title"] = title
    if content is not None:
        update["content"] = content
    if is_collapsed is not None:
        update["is_collapsed"] = is_collapsed
    return section.model_copy(update=update)


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------


class ReconciliationEngine:
    """Loads, transitions and saves sections through a store."""

    def __init__(self, store: CoachingStore):
        self.store = store

    async def _load(self, section_id: str) -> Section:
        section = await self.store.get_section(section_id)
        if section is None:
            raise SectionNotFoundError(section_id)
        return section

    async def propose_update(self, section_id: str, new_content: str) -> Section:
        """Record an AI-proposed rewrite as pending review.

        Args:
            section_id (str): Target section.
            new_content (str): Proposed content.

        Returns:
            Section: The saved section.

        Raises:
            SectionNotFoundError: If the section does not exist.
        """
        section = apply_proposal(await self._load(section_id), new_content)
        await self.store.save_section(section)
        logger.info("Proposed update for section %s (%s)", section.id, section.title)
        return section

    async def accept(self, section_id: str) -> Section:
        """Accept the pending proposal. Accepting a stable section is a no-op.

        Raises:
            SectionNotFoundError: If the section does not exist.
        """
        current = await self._load(section_id)
        section = apply_accept(current)
        if section is not current:
            await self.store.save_section(section)
            logger.info("Accepted update for section %s", section.id)
        return section

    async def revert(self, section_id: str) -> Section:
        """Discard the pending proposal and restore the prior content.

        Raises:
            SectionNotFoundError: If the section does not exist.
            NothingToRevertError: If no proposal is pending.
        """
        section = apply_revert(await self._load(section_id))
        await self.store.save_section(section)
        logger.info("Reverted section %s", section.id)
        return section

    async def human_edit(
        self,
        section_id: str,
        actor: Editor = Editor.COACH,
        title: Optional[str] = None,
        content: Optional[str] = None,
        is_collapsed: Optional[bool] = None,
    ) -> Section:
        """Apply a coach or client edit, discarding any pending proposal.

        Args:
            section_id (str): Target section.
            actor (Editor): Who is editing. Defaults to the coach.
            title (Optional[str]): New title, if changing.
            content (Optional[str]): New content, if changing.
            is_collapsed (Optional[bool]): New collapsed flag, if changing.

        Returns:
            Section: The saved section.

        Raises:
            SectionNotFoundError: If the section does not exist.
        """
        current = await self._load(section_id)
        if current.pending_review:
            logger.info("Human edit on section %s discards a pending proposal", section_id)
        section = apply_human_edit(current, actor, title=title, content=content, is_collapsed=is_collapsed)
        await self.store.save_section(section)
        return section
