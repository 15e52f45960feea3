"""
Configuration for the RAG demo and blog writer.
Values come from the environment (and an optional .env file); services receive them as an explicit Settings object.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv()

# Database path configuration
DB_PATH = os.getenv("DB_PATH", "./data/chat_history.db")

DEBUG = os.getenv("DEBUG", "false").lower() == "true"

# Provider selection
STORE_PROVIDER = os.getenv("STORE_PROVIDER", "sqlite")  # sqlite|memory
LLM_PROVIDER = os.getenv("LLM_PROVIDER", "ollama")  # ollama|mock
EMBED_PROVIDER = os.getenv("EMBED_PROVIDER", "ollama")  # ollama|sentence_transformers|hash

# Model deployments
OLLAMA_HOST = os.getenv("OLLAMA_HOST", "http://localhost:11434")
OLLAMA_CHAT_MODEL = os.getenv("OLLAMA_CHAT_MODEL", "llama3.1:8b")
OLLAMA_EMBED_MODEL = os.getenv("OLLAMA_EMBED_MODEL", "nomic-embed-text")
ST_MODEL_NAME = os.getenv("ST_MODEL_NAME", "all-mpnet-base-v2")
EMBED_DIMENSION = int(os.getenv("EMBED_DIMENSION", "1536"))
LLM_TEMPERATURE = float(os.getenv("LLM_TEMPERATURE", "0.7"))

# Retrieval and refinement policy
RAG_TOP_K = int(os.getenv("RAG_TOP_K", "3"))
BLOG_MAX_ITERATIONS = int(os.getenv("BLOG_MAX_ITERATIONS", "3"))

VALID_STORE_PROVIDERS = ["sqlite", "memory"]
VALID_LLM_PROVIDERS = ["ollama", "mock"]
VALID_EMBED_PROVIDERS = ["ollama", "sentence_transformers", "hash"]

# Version string
VERSION = "1.0.0"


@dataclass(frozen=True)
class Settings:
    """Snapshot of the configuration handed to stores, providers and services."""
    db_path: str = DB_PATH
    debug: bool = DEBUG
    store_provider: str = STORE_PROVIDER
    llm_provider: str = LLM_PROVIDER
    embed_provider: str = EMBED_PROVIDER
    ollama_host: str = OLLAMA_HOST
    chat_model: str = OLLAMA_CHAT_MODEL
    embed_model: str = OLLAMA_EMBED_MODEL
    st_model_name: str = ST_MODEL_NAME
    embed_dimension: int = EMBED_DIMENSION
    temperature: float = LLM_TEMPERATURE
    top_k: int = RAG_TOP_K
    max_iterations: int = BLOG_MAX_ITERATIONS


def load_settings() -> Settings:
    """Read the current environment into a Settings object."""
    return Settings(
        db_path=os.getenv("DB_PATH", DB_PATH),
        debug=os.getenv("DEBUG", "false").lower() == "true",
        store_provider=os.getenv("STORE_PROVIDER", STORE_PROVIDER),
        llm_provider=os.getenv("LLM_PROVIDER", LLM_PROVIDER),
        embed_provider=os.getenv("EMBED_PROVIDER", EMBED_PROVIDER),
        ollama_host=os.getenv("OLLAMA_HOST", OLLAMA_HOST),
        chat_model=os.getenv("OLLAMA_CHAT_MODEL", OLLAMA_CHAT_MODEL),
        embed_model=os.getenv("OLLAMA_EMBED_MODEL", OLLAMA_EMBED_MODEL),
        st_model_name=os.getenv("ST_MODEL_NAME", ST_MODEL_NAME),
        embed_dimension=int(os.getenv("EMBED_DIMENSION", str(EMBED_DIMENSION))),
        temperature=float(os.getenv("LLM_TEMPERATURE", str(LLM_TEMPERATURE))),
        top_k=int(os.getenv("RAG_TOP_K", str(RAG_TOP_K))),
        max_iterations=int(os.getenv("BLOG_MAX_ITERATIONS", str(BLOG_MAX_ITERATIONS)))
    )


def validate_settings(settings: Settings) -> List[str]:
    """Validate configuration and return any issues."""
    issues = []

    if settings.store_provider not in VALID_STORE_PROVIDERS:
        issues.append(f"Invalid STORE_PROVIDER: {settings.store_provider}")

    if settings.llm_provider not in VALID_LLM_PROVIDERS:
        issues.append(f"Invalid LLM_PROVIDER: {settings.llm_provider}")

    if settings.embed_provider not in VALID_EMBED_PROVIDERS:
        issues.append(f"Invalid EMBED_PROVIDER: {settings.embed_provider}")

    if settings.top_k < 1:
        issues.append("RAG_TOP_K must be >= 1")

    if settings.max_iterations < 1:
        issues.append("BLOG_MAX_ITERATIONS must be >= 1")

    if settings.embed_dimension < 1:
        issues.append("EMBED_DIMENSION must be >= 1")

    return issues


def debug_enabled():
    """Check if debug mode is enabled."""
    return os.getenv("DEBUG", "false").lower() == "true"


def ensure_db_directory(db_path: Optional[str] = None):
    """Ensure the database directory exists."""
    Path(db_path or DB_PATH).parent.mkdir(parents=True, exist_ok=True)


def get_store(settings: Settings):
    """Get configured chat history store implementation."""
    if settings.store_provider == "memory":
        from .dao import InMemoryChatHistoryStore
        return InMemoryChatHistoryStore()

    from .dao import SQLiteChatHistoryStore
    return SQLiteChatHistoryStore(settings.db_path)


def get_embedding_provider(settings: Settings):
    """Get configured embedding provider implementation."""
    if settings.embed_provider == "hash":
        from ..vector.embeddings import DeterministicHashEmbedding
        return DeterministicHashEmbedding(dimension=settings.embed_dimension)
    elif settings.embed_provider == "sentence_transformers":
        from ..vector.embeddings import SentenceTransformerEmbedding
        return SentenceTransformerEmbedding(settings.st_model_name)

    from ..vector.embeddings import OllamaEmbedding
    return OllamaEmbedding(model_name=settings.embed_model, host=settings.ollama_host)


def get_chat_provider(settings: Settings):
    """Get configured chat provider implementation."""
    if settings.llm_provider == "mock":
        from ..agents.chat_provider import ScriptedChatProvider
        return ScriptedChatProvider()

    from ..agents.chat_provider import OllamaChatProvider
    return OllamaChatProvider(
        model_name=settings.chat_model,
        host=settings.ollama_host,
        temperature=settings.temperature
    )
