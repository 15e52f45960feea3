"""
Embedding providers: Ollama, sentence-transformers, and a deterministic hash provider for offline use.
Every provider raises EmbeddingFailure instead of returning an unusable vector.
"""

from abc import ABC, abstractmethod
import hashlib
import struct

import ollama
from sentence_transformers import SentenceTransformer

from ..core.errors import EmbeddingFailure
from ..util.logging import logger


class IEmbeddingProvider(ABC):
    """Abstract interface for embedding providers."""

    @abstractmethod
    def embed_text(self, text: str) -> list[float]:
        """Generate embedding vector for given text."""
        pass

    @abstractmethod
    def get_dimension(self) -> int:
        """Get the dimension of the embedding vectors."""
        pass

    @property
    def name(self) -> str:
        return self.__class__.__name__


def _require_text(text: str) -> str:
    if text is None or not str(text).strip():
        raise EmbeddingFailure("Cannot embed empty text", stage="embed")
    return text


class DeterministicHashEmbedding(IEmbeddingProvider):
    """Deterministic hash-based embedding provider for testing purposes.

    The same text always maps to the same vector, so retrieval can be
    exercised without a model. Similar texts do not get similar vectors.
    """

    def __init__(self, dimension: int = 1536):
        if dimension < 1:
            raise ValueError("dimension must be >= 1")
        self.dimension = dimension

    def embed_text(self, text: str) -> list[float]:
        """Generate deterministic embedding vector using sha256 blocks."""
        _require_text(text)

        vector = []
        block = 0
        while len(vector) < self.dimension:
            digest = hashlib.sha256(f"{block}:{text}".encode("utf-8")).digest()
            # 8 unsigned 32-bit ints per digest, mapped to [-1, 1]
            for value in struct.unpack(">8I", digest):
                vector.append((value / 2**32) * 2 - 1)
            block += 1

        return vector[:self.dimension]

    def get_dimension(self) -> int:
        """Get the dimension of the embedding vectors."""
        return self.dimension


class SentenceTransformerEmbedding(IEmbeddingProvider):
    """Sentence transformers embedding provider using pre-trained models."""

    def __init__(self, model_name: str = "all-mpnet-base-v2"):
        self.model_name = model_name
        self._model = None
        self._dimension = None

    @property
    def model(self):
        if self._model is None:
            self._model = SentenceTransformer(self.model_name)
        return self._model

    def embed_text(self, text: str) -> list[float]:
        """Generate embedding vector using sentence transformers."""
        _require_text(text)
        try:
            embedding = self.model.encode(text, convert_to_tensor=False)
        except Exception as e:
            raise EmbeddingFailure(f"sentence-transformers model {self.model_name} failed: {e}", stage="embed") from e
        return [float(v) for v in embedding.tolist()]

    def get_dimension(self) -> int:
        """Get the dimension of the embedding vectors."""
        if self._dimension is None:
            self._dimension = self.model.get_sentence_embedding_dimension()
        return self._dimension


class OllamaEmbedding(IEmbeddingProvider):
    """Embedding provider backed by an Ollama embedding model."""

    def __init__(self, model_name: str = "nomic-embed-text", host: str = None, client=None):
        self.model_name = model_name
        self.host = host
        self._client = client
        self._dimension = None

    @property
    def client(self):
        if self._client is None:
            self._client = ollama.Client(host=self.host)
        return self._client

    def embed_text(self, text: str) -> list[float]:
        """Generate embedding vector with the configured Ollama deployment."""
        _require_text(text)
        logger.debug(f"Generating embedding for text of length {len(text)} using deployment {self.model_name}")

        try:
            response = self.client.embed(model=self.model_name, input=text)
        except ollama.ResponseError as e:
            raise EmbeddingFailure(f"Ollama model error ({self.model_name}): {e}", stage="embed") from e
        except Exception as e:
            raise EmbeddingFailure(f"Ollama unavailable at {self.host}: {e}", stage="embed") from e

        embeddings = response["embeddings"] if response else None
        if not embeddings or not embeddings[0]:
            raise EmbeddingFailure(f"Ollama returned no embedding for deployment {self.model_name}", stage="embed")

        vector = [float(v) for v in embeddings[0]]
        self._dimension = len(vector)
        logger.debug(f"Successfully generated embedding of size {len(vector)}")
        return vector

    def get_dimension(self) -> int:
        """Get the dimension of the embedding vectors (probes the model on first use)."""
        if self._dimension is None:
            self._dimension = len(self.embed_text("dimension probe"))
        return self._dimension
