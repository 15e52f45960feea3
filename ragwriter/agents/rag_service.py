"""
Retrieval-augmented answering over previous Q&A pairs.

For each query:
1. Embed the query
2. Find the most similar stored interactions (cosine, full scan)
3. Format them as context for the model
4. Generate the answer
5. Store (query, answer, query embedding) for future retrieval
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from ..core.config import Settings
from ..core.dao import IChatHistoryStore
from ..core.errors import EmbeddingFailure, GenerationFailure, PersistenceFailure, RagWriterError
from ..util.logging import logger, log_failure, summarize_texts
from ..vector.embeddings import IEmbeddingProvider
from ..vector.similarity import rank
from ..vector.types import InteractionRecord
from .chat_provider import IChatProvider

# Number of previous interactions supplied as context
DEFAULT_TOP_K = 3

SYSTEM_INSTRUCTION = "You are a helpful AI assistant that provides clear and educational responses."

NO_CONTEXT_MARKER = "(no previous interactions)"


@dataclass
class RagAnswer:
    """Outcome of one RAG query."""
    query: str
    answer: str
    context_records: List[InteractionRecord] = field(default_factory=list)
    record: Optional[InteractionRecord] = None
    persistence_error: Optional[str] = None

    @property
    def persisted(self) -> bool:
        return self.record is not None


def build_context(records: Sequence[InteractionRecord]) -> str:
    """Format records as "Q: ...\\nA: ..." blocks separated by a blank line."""
    return "\n\n".join(f"Q: {r.prompt}\nA: {r.response}" for r in records)


def compose_prompt(context: str, query: str) -> str:
    """Build the user instruction with separate context and question sections."""
    return (
        "Use these previous Q&A pairs as context for answering the new question.\n"
        "\n"
        "### Previous interactions:\n"
        f"{context if context else NO_CONTEXT_MARKER}\n"
        "\n"
        "### New question:\n"
        f"{query}\n"
        "\n"
        "Please provide a clear and educational response."
    )


class RagService:
    """Answers queries with context retrieved from the chat history."""

    def __init__(self, chat_provider: IChatProvider, embedding_provider: IEmbeddingProvider,
                 store: IChatHistoryStore, settings: Optional[Settings] = None):
        self.chat_provider = chat_provider
        self.embedding_provider = embedding_provider
        self.store = store
        self.top_k = settings.top_k if settings else DEFAULT_TOP_K
        if self.top_k < 1:
            raise ValueError("top_k must be >= 1")

        logger.info(
            f"RagService initialized with chat deployment: {chat_provider.model_name}, "
            f"embedding provider: {embedding_provider.name}, store: {store.name}"
        )

    def answer(self, query: str) -> str:
        """Answer a query and return only the text."""
        return self.process_query(query).answer

    def process_query(self, query: str) -> RagAnswer:
        """
        Run the full RAG pipeline for one query.

        Raises:
            EmbeddingFailure: the query could not be embedded
            PersistenceFailure: the history could not be read
            GenerationFailure: the model failed or returned nothing
        """
        logger.debug(f"Processing query: {query}")

        query_embedding = self._embed(query)

        try:
            history = self.store.scan_all()
            similar = rank(query_embedding, history, self.top_k)
        except RagWriterError as e:
            log_failure(e.kind, e.stage or "retrieve", e.detail, {"query": query})
            raise
        logger.log_rag_stage("retrieve", details={"candidates": len(history), "found": len(similar)})
        logger.debug(f"Similar contexts: {summarize_texts([r.prompt for r in similar])}")

        context = build_context(similar)
        prompt = compose_prompt(context, query)
        logger.debug(f"Built context with {len(context)} characters")

        answer = self._generate(prompt, query)

        result = RagAnswer(query=query, answer=answer, context_records=list(similar))
        try:
            result.record = self.store.append(
                InteractionRecord(prompt=query, response=answer, embedding=list(query_embedding))
            )
            logger.log_rag_stage("persist", details={"record_id": result.record.id})
        except PersistenceFailure as e:
            # The answer already exists; losing one history entry is tolerated
            result.persistence_error = e.detail
            logger.log_rag_stage("persist", status="failed", details={"error": e.detail})

        return result

    def _embed(self, query: str) -> List[float]:
        if query is None or not query.strip():
            raise EmbeddingFailure("Query is empty", stage="embed")
        try:
            embedding = self.embedding_provider.embed_text(query)
        except EmbeddingFailure as e:
            log_failure(e.kind, "embed", e.detail, {"query": query})
            raise
        if not embedding:
            raise EmbeddingFailure("Embedding provider returned an empty vector", stage="embed")

        logger.log_rag_stage("embed", details={"dimension": len(embedding)})
        return embedding

    def _generate(self, prompt: str, query: str) -> str:
        try:
            answer = self.chat_provider.generate(SYSTEM_INSTRUCTION, prompt)
        except GenerationFailure as e:
            log_failure(e.kind, "generate", e.detail, {"query": query})
            raise
        if not answer or not answer.strip():
            raise GenerationFailure("Model returned an empty answer", stage="generate")

        logger.log_rag_stage("generate", details={"answer_length": len(answer)})
        return answer
