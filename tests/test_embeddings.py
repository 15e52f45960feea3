"""
Embedding providers: deterministic hash provider and the Ollama adapter.
"""

import pytest
from unittest.mock import Mock

import ollama

from ragwriter.core.errors import EmbeddingFailure
from ragwriter.vector.embeddings import IEmbeddingProvider, DeterministicHashEmbedding, OllamaEmbedding


def test_embedding_interface():
    """Test that the embedding provider implements the interface correctly."""
    embedder = DeterministicHashEmbedding(dimension=384)

    assert isinstance(embedder, IEmbeddingProvider)
    assert embedder.get_dimension() == 384


def test_default_dimension_matches_stored_vectors():
    assert DeterministicHashEmbedding().get_dimension() == 1536


def test_deterministic_embedding():
    """Test that the same input always produces the same output."""
    embedder1 = DeterministicHashEmbedding(dimension=64)
    embedder2 = DeterministicHashEmbedding(dimension=64)

    vector1 = embedder1.embed_text("Hello, world!")
    vector2 = embedder2.embed_text("Hello, world!")

    assert vector1 == vector2
    assert len(vector1) == 64


def test_vector_is_fully_populated():
    """Every dimension carries hash data, values stay within [-1, 1]."""
    vector = DeterministicHashEmbedding(dimension=100).embed_text("test")

    assert len(vector) == 100
    assert all(-1.0 <= v <= 1.0 for v in vector)
    assert sum(1 for v in vector if v == 0.0) < 5


def test_different_inputs_produce_different_vectors():
    embedder = DeterministicHashEmbedding(dimension=32)

    assert embedder.embed_text("Hello, world!") != embedder.embed_text("Goodbye, world!")


def test_empty_text_is_an_embedding_failure():
    embedder = DeterministicHashEmbedding(dimension=8)

    with pytest.raises(EmbeddingFailure):
        embedder.embed_text("   ")


class TestOllamaEmbedding:
    """Ollama adapter with a mocked client."""

    def test_embed_text_returns_first_vector(self):
        client = Mock()
        client.embed.return_value = {"embeddings": [[0.1, 0.2, 0.3]]}
        embedder = OllamaEmbedding(model_name="nomic-embed-text", client=client)

        vector = embedder.embed_text("What is RAG?")

        assert vector == [0.1, 0.2, 0.3]
        assert embedder.get_dimension() == 3
        client.embed.assert_called_once_with(model="nomic-embed-text", input="What is RAG?")

    def test_response_error_becomes_embedding_failure(self):
        client = Mock()
        client.embed.side_effect = ollama.ResponseError("model not found")
        embedder = OllamaEmbedding(client=client)

        with pytest.raises(EmbeddingFailure) as exc_info:
            embedder.embed_text("question")

        assert exc_info.value.stage == "embed"

    def test_connection_error_becomes_embedding_failure(self):
        client = Mock()
        client.embed.side_effect = ConnectionError("refused")
        embedder = OllamaEmbedding(client=client)

        with pytest.raises(EmbeddingFailure):
            embedder.embed_text("question")

    def test_empty_embedding_is_failure(self):
        client = Mock()
        client.embed.return_value = {"embeddings": []}
        embedder = OllamaEmbedding(client=client)

        with pytest.raises(EmbeddingFailure):
            embedder.embed_text("question")
