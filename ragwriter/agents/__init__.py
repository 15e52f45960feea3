"""
Model-facing services: chat providers, the RAG service and the blog writer loop.
"""

from .chat_provider import IChatProvider, OllamaChatProvider, ScriptedChatProvider
from .rag_service import RagService, RagAnswer, build_context, compose_prompt
from .blog_writer import BlogWriterService, BlogPostResult, EvaluationVerdict, parse_verdict, extract_feedback

__all__ = [
    'IChatProvider',
    'OllamaChatProvider',
    'ScriptedChatProvider',
    'RagService',
    'RagAnswer',
    'build_context',
    'compose_prompt',
    'BlogWriterService',
    'BlogPostResult',
    'EvaluationVerdict',
    'parse_verdict',
    'extract_feedback'
]
