"""
Vector layer: record types, embedding codec, embedding providers and cosine ranking.
"""

# Package initialization for vector module
from .types import InteractionRecord, ScoredRecord
from .similarity import cosine_similarity, rank, rank_scored, score_candidates
from .codec import serialize, deserialize
from .embeddings import IEmbeddingProvider, DeterministicHashEmbedding, SentenceTransformerEmbedding, OllamaEmbedding

__all__ = [
    'InteractionRecord',
    'ScoredRecord',
    'cosine_similarity',
    'rank',
    'rank_scored',
    'score_candidates',
    'serialize',
    'deserialize',
    'IEmbeddingProvider',
    'DeterministicHashEmbedding',
    'SentenceTransformerEmbedding',
    'OllamaEmbedding'
]
