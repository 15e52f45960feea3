"""
Service registry: builds the configured providers, store and services in one place.
"""

from typing import Any, Dict, Optional

from ..core import config
from ..core.config import Settings
from ..util.logging import logger
from .blog_writer import BlogWriterService
from .rag_service import RagService


class ServiceRegistry:
    """
    Holds the wired capabilities and services for one process.
    Nothing here reads configuration after construction.
    """

    def __init__(self, settings: Optional[Settings] = None, chat_provider=None,
                 embedding_provider=None, store=None):
        """
        Args:
            settings: Configuration snapshot (defaults to the current environment)
            chat_provider: Overrides the configured chat provider
            embedding_provider: Overrides the configured embedding provider
            store: Overrides the configured chat history store
        """
        self.settings = settings or config.load_settings()

        issues = config.validate_settings(self.settings)
        if issues:
            raise ValueError("Invalid configuration: " + "; ".join(issues))

        logger.set_debug(self.settings.debug)

        self.chat_provider = chat_provider or config.get_chat_provider(self.settings)
        self.embedding_provider = embedding_provider or config.get_embedding_provider(self.settings)
        self.store = store or config.get_store(self.settings)

        self.rag_service = RagService(
            chat_provider=self.chat_provider,
            embedding_provider=self.embedding_provider,
            store=self.store,
            settings=self.settings
        )
        self.blog_writer = BlogWriterService(self.chat_provider, settings=self.settings)

    def get_status(self) -> Dict[str, Any]:
        """Summary of the wired components for health reporting."""
        return {
            "chat_provider": self.chat_provider.__class__.__name__,
            "chat_model": self.chat_provider.model_name,
            "chat_status": self.chat_provider.get_status()["status"],
            "embedding_provider": self.embedding_provider.name,
            "store": self.store.name,
            "store_healthy": self.store.healthy(),
            "top_k": self.rag_service.top_k,
            "max_iterations": self.blog_writer.max_iterations
        }
