# Copyright (c) 2026 Heureum AI. All rights reserved.

"""Tests for InMemoryCoachingStore."""

import pytest

from coach_partner.models import Exercise, ExerciseStep, SectionType


class TestDocuments:
    """Tests for living document storage."""

    @pytest.mark.asyncio
    async def test_document_created_once_with_defaults(self, store, client):
        first = await store.get_or_create_client_document(client.id)
        second = await store.get_or_create_client_document(client.id)
        assert first.id == second.id

        sections = await store.get_document_sections(first.id)
        assert [s.section_type for s in sections] == [
            SectionType.OVERVIEW,
            SectionType.HIGHLIGHT,
            SectionType.FOCUS,
            SectionType.CONTEXT,
        ]
        assert [s.sort_order for s in sections] == [0, 1, 2, 3]

    @pytest.mark.asyncio
    async def test_returned_sections_are_copies(self, store, sections):
        sections[0].content = "mutated outside"
        assert (await store.get_section(sections[0].id)).content == ""

    @pytest.mark.asyncio
    async def test_delete_section(self, store, sections):
        assert await store.delete_section(sections[0].id) is True
        assert await store.delete_section(sections[0].id) is False
        assert await store.get_section(sections[0].id) is None


class TestMessages:
    """Tests for message queries and the summarization checkpoint."""

    @pytest.mark.asyncio
    async def test_limit_keeps_newest(self, store, client, add_messages):
        await add_messages(client.id, ("client", "one"), ("ai", "two"), ("client", "three"))
        recent = await store.get_client_messages(client.id, limit=2)
        assert [m.content for m in recent] == ["two", "three"]

    @pytest.mark.asyncio
    async def test_since_is_exclusive(self, store, client, add_messages):
        stored = await add_messages(client.id, ("client", "one"), ("ai", "two"))
        await store.mark_client_summarized(client.id, stored[0].timestamp)
        assert [m.content for m in await store.get_messages_since_summarization(client.id)] == ["two"]

    @pytest.mark.asyncio
    async def test_thread_messages_filtered(self, store, client, add_messages):
        thread = await store.create_thread(client.id)
        await add_messages(client.id, ("client", "outside"))
        await add_messages(client.id, ("client", "inside"), thread_id=thread.id)
        assert [m.content for m in await store.get_thread_messages(thread.id)] == ["inside"]

    @pytest.mark.asyncio
    async def test_mark_unknown_client_is_noop(self, store):
        await store.mark_client_summarized("ghost")
        assert await store.get_client("ghost") is None


class TestExercises:
    """Tests for exercise sessions."""

    @pytest.mark.asyncio
    async def test_start_defaults_to_first_step(self, store, client):
        exercise = Exercise(title="Wheel of Life")
        steps = [
            ExerciseStep(exercise_id=exercise.id, title="Rate", step_order=1),
            ExerciseStep(exercise_id=exercise.id, title="Reflect", step_order=2),
        ]
        await store.save_exercise(exercise, list(reversed(steps)))

        await store.start_exercise(client.id, exercise.id, thread_id="t1")
        context = await store.get_exercise_context(client.id, "t1")

        assert context.current_step_id == steps[0].id
        assert [s.title for s in context.steps] == ["Rate", "Reflect"]
        assert await store.get_exercise_context(client.id, "other") is None
