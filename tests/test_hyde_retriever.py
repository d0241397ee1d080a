# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-08-26
# Description: test_hyde_retriever.py
# -----------------------------------------------------------------------------
import logging

import pytest

from conftest import FakeChat, FakeEmbedder, unit_vector
from embedding.EmbeddingRecord import Metadata
from errors.HydeErrors import (
    HydeStage,
    HypotheticalGenerationError,
    RetrievalError,
    StreamError,
)
from services.HydeRetriever import HydeRetriever
from vectorstore.IndexFactory import build_index

HYPOTHETICAL = "func Add(a, b int) int { return a + b }"


class _CountingIndex:
    """Wraps an index and counts queries."""

    def __init__(self, inner):
        self.inner = inner
        self.backend = inner.backend
        self.queries = 0

    def __len__(self):
        return len(self.inner)

    def query(self, vector, k):
        self.queries += 1
        return self.inner.query(vector, k)


def _index():
    return _CountingIndex(build_index(
        [unit_vector(0), unit_vector(1)],
        [
            Metadata(file="a.go", code="func Add(a, b int) int { return a + b }"),
            Metadata(file="b.go", code="func Sub(a, b int) int { return a - b }"),
        ],
    ))


def _retriever(chat=None, embedder=None, index=None, **kwargs) -> HydeRetriever:
    return HydeRetriever(
        chat=chat or FakeChat(hypothetical=HYPOTHETICAL),
        embedder=embedder or FakeEmbedder({HYPOTHETICAL: unit_vector(0)}),
        index=index or _index(),
        **kwargs,
    )


@pytest.mark.asyncio
async def test_retrieve_returns_refs_then_streams_answer():
    chat = FakeChat(hypothetical=HYPOTHETICAL, tokens=["Use ", "Add", "."])
    retriever = _retriever(chat=chat)

    response = await retriever.retrieve("how do I add two ints?", k=1)

    assert [r.metadata.file for r in response.code_refs] == ["a.go"]
    assert response.code_refs[0].distance == pytest.approx(0.0, abs=1e-6)
    # Nothing synthesized until the caller pulls
    assert chat.stream_calls == []

    assert await response.collect_answer() == "Use Add."
    system, user = chat.stream_calls[0]
    assert "File: a.go" in user
    assert "how do I add two ints?" in user
    assert "Go" in system


@pytest.mark.asyncio
async def test_hypothetical_prompt_names_the_language():
    chat = FakeChat(hypothetical=HYPOTHETICAL)
    retriever = _retriever(chat=chat, language="Rust")

    await retriever.retrieve("parse a file", k=1)

    system, user = chat.chat_calls[0]
    assert "Rust" in system
    assert "parse a file" in user


@pytest.mark.asyncio
async def test_default_k_is_used_and_capped_by_corpus():
    retriever = _retriever(default_k=5)
    response = await retriever.retrieve("add")
    assert len(response.code_refs) == 2


@pytest.mark.asyncio
@pytest.mark.parametrize("hypothetical", ["", "   \n\t"])
async def test_empty_hypothetical_skips_embedding_and_search(hypothetical: str):
    embedder = FakeEmbedder()
    index = _index()
    retriever = _retriever(chat=FakeChat(hypothetical=hypothetical), embedder=embedder, index=index)

    with pytest.raises(HypotheticalGenerationError) as exc_info:
        await retriever.retrieve("add", k=1)

    assert exc_info.value.stage == HydeStage.GENERATING
    assert embedder.calls == 0
    assert index.queries == 0


@pytest.mark.asyncio
async def test_chat_failure_is_a_generation_error():
    retriever = _retriever(chat=FakeChat(chat_error=ConnectionError("refused")))

    with pytest.raises(RetrievalError) as exc_info:
        await retriever.retrieve("add", k=1)

    assert exc_info.value.stage == HydeStage.GENERATING
    assert "refused" in str(exc_info.value)


@pytest.mark.asyncio
async def test_embedding_failure_names_embedding_stage():
    index = _index()
    retriever = _retriever(embedder=FakeEmbedder(fail_on="func"), index=index)

    with pytest.raises(RetrievalError) as exc_info:
        await retriever.retrieve("add", k=1)

    assert exc_info.value.stage == HydeStage.EMBEDDING
    assert str(exc_info.value).startswith("[embedding_hypothetical]")
    assert index.queries == 0


@pytest.mark.asyncio
async def test_search_failure_names_search_stage():
    class _BrokenIndex:
        backend = "exact"

        def __len__(self):
            return 1

        def query(self, vector, k):
            raise RuntimeError("index corrupted")

    retriever = _retriever(index=_BrokenIndex())

    with pytest.raises(RetrievalError) as exc_info:
        await retriever.retrieve("add", k=1)

    assert exc_info.value.stage == HydeStage.SEARCHING


@pytest.mark.asyncio
async def test_invalid_arguments_raise_value_error():
    retriever = _retriever()
    with pytest.raises(ValueError):
        await retriever.retrieve("add", k=0)
    with pytest.raises(ValueError):
        await retriever.retrieve("   ", k=1)


@pytest.mark.asyncio
async def test_mid_stream_failure_keeps_delivered_tokens():
    chat = FakeChat(
        hypothetical=HYPOTHETICAL,
        tokens=["partial ", "answer"],
        stream_error=ConnectionResetError("peer went away"),
        fail_after=1,
    )
    response = await _retriever(chat=chat).retrieve("add", k=1)

    received = []
    with pytest.raises(StreamError):
        async for delta in response.answer:
            received.append(delta)

    assert received == ["partial "]
    assert chat.stream_closed is True


@pytest.mark.asyncio
async def test_stream_error_from_gateway_passes_through():
    chat = FakeChat(hypothetical=HYPOTHETICAL, stream_error=StreamError("no finish_reason"), fail_after=2)
    response = await _retriever(chat=chat).retrieve("add", k=1)

    with pytest.raises(StreamError, match="no finish_reason"):
        await response.collect_answer()


@pytest.mark.asyncio
async def test_abandoning_the_answer_closes_the_upstream_stream():
    chat = FakeChat(hypothetical=HYPOTHETICAL, tokens=["a", "b", "c"])
    response = await _retriever(chat=chat).retrieve("add", k=1)

    first = await response.answer.__anext__()
    await response.answer.aclose()

    assert first == "a"
    assert chat.stream_closed is True


@pytest.mark.asyncio
async def test_similarity_search_embeds_text_directly():
    embedder = FakeEmbedder({"func Sub": unit_vector(1)})
    retriever = _retriever(embedder=embedder)

    results = await retriever.similarity_search("func Sub", k=1)

    assert results[0].metadata.file == "b.go"
    assert embedder.batches == [["func Sub"]]


def _capturing_retriever(caplog, **kwargs) -> HydeRetriever:
    logger = logging.getLogger("tests.hyde_retriever")
    caplog.set_level(logging.DEBUG, logger=logger.name)
    return _retriever(logger=logger, **kwargs)


def _stage_messages(caplog) -> list:
    return [r.getMessage() for r in caplog.records if "-> " in r.getMessage()]


@pytest.mark.asyncio
async def test_failed_stage_records_error_transition(caplog):
    retriever = _capturing_retriever(caplog, embedder=FakeEmbedder(fail_on="func"))

    with pytest.raises(RetrievalError):
        await retriever.retrieve("add", k=1)

    stages = _stage_messages(caplog)
    assert stages[-1].endswith("-> error")
    assert any(m.endswith("-> embedding_hypothetical") for m in stages)


@pytest.mark.asyncio
async def test_failed_stream_records_error_transition(caplog):
    chat = FakeChat(hypothetical=HYPOTHETICAL, stream_error=ConnectionResetError("gone"), fail_after=1)
    retriever = _capturing_retriever(caplog, chat=chat)
    response = await retriever.retrieve("add", k=1)

    with pytest.raises(StreamError):
        await response.collect_answer()

    stages = _stage_messages(caplog)
    assert stages[-1].endswith("-> error")
    assert not any(m.endswith("-> done") for m in stages)


@pytest.mark.asyncio
async def test_synthesis_prompt_asks_for_an_explanation_in_the_corpus_language():
    chat = FakeChat(hypothetical=HYPOTHETICAL)
    response = await _retriever(chat=chat, language="Rust").retrieve("add", k=1)
    await response.collect_answer()

    _, user = chat.stream_calls[0]
    assert user.startswith("Explain the following Rust code in detail:\n\n")
