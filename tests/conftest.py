# Copyright (c) 2026 Heureum AI. All rights reserved.

"""Shared test fixtures for the coach-partner test suite."""

from datetime import timedelta
from typing import List, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest

from coach_partner.models import Client, Message, MessageRole, Section, SectionType, utc_now
from coach_partner.services.llm import ModelCaller
from coach_partner.services.storage import InMemoryCoachingStore
from coach_partner.services.synthesis import LivingDocumentService, SectionSynthesizer


# ---------------------------------------------------------------------------
# LLM response mocking helpers
# ---------------------------------------------------------------------------


def mock_response(text: str = "Hello!") -> MagicMock:
    """Create a mock chat model response carrying *text*."""
    resp = MagicMock()
    resp.content = text
    return resp


def mock_llm(*texts: str) -> AsyncMock:
    """Chat model mock whose ``ainvoke`` returns *texts* in order."""
    llm = AsyncMock()
    if len(texts) == 1:
        llm.ainvoke.return_value = mock_response(texts[0])
    elif texts:
        llm.ainvoke.side_effect = [mock_response(t) for t in texts]
    return llm


class FakeExtractor:
    """Extractor returning canned text per filename."""

    def __init__(self, text: str = "extracted text") -> None:
        self.text = text
        self.calls: List[str] = []

    async def extract(self, object_path: str, mime_type: str, filename: str) -> str:
        self.calls.append(filename)
        return self.text


# ---------------------------------------------------------------------------
# Store fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def store() -> InMemoryCoachingStore:
    return InMemoryCoachingStore()


@pytest.fixture
def extractor() -> FakeExtractor:
    return FakeExtractor()


@pytest.fixture
async def client(store) -> Client:
    return await store.save_client(Client(name="Alex Morgan"))


@pytest.fixture
async def sections(store, client) -> List[Section]:
    """The four default sections of the client's document."""
    document = await store.get_or_create_client_document(client.id)
    return await store.get_document_sections(document.id)


@pytest.fixture
def make_section():
    """Factory fixture for standalone Section instances."""

    def _factory(
        content: str = "",
        title: str = "Overview",
        section_type: SectionType = SectionType.OVERVIEW,
        document_id: str = "doc-1",
        section_id: Optional[str] = None,
    ) -> Section:
        kwargs = {}
        if section_id is not None:
            kwargs["id"] = section_id
        return Section(document_id=document_id, title=title, section_type=section_type, content=content, **kwargs)

    return _factory


@pytest.fixture
def add_messages(store):
    """Factory fixture storing messages one second apart, starting an hour ago.

    Timestamps keep increasing across calls within a test.
    """
    base = utc_now() - timedelta(hours=1)
    counter = [0]

    async def _factory(client_id: str, *pairs, thread_id: Optional[str] = None) -> List[Message]:
        stored = []
        for role, content in pairs:
            counter[0] += 1
            msg = Message(
                client_id=client_id,
                thread_id=thread_id,
                role=MessageRole(role),
                content=content,
                timestamp=base + timedelta(seconds=counter[0]),
            )
            stored.append(await store.create_message(msg))
        return stored

    return _factory


@pytest.fixture
def document_service_factory(store):
    """Build a LivingDocumentService whose model calls use mocks."""

    def _factory(synthesis_llm=None, title_llm=None) -> LivingDocumentService:
        synthesizer = SectionSynthesizer(ModelCaller("synthesis-model", llm=synthesis_llm or mock_llm("[]")))
        return LivingDocumentService(
            store,
            synthesizer=synthesizer,
            title_caller=ModelCaller("title-model", llm=title_llm or mock_llm("A Title")),
        )

    return _factory
