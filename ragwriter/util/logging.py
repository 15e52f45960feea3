"""
Structured logging for RAG stages, store operations and refinement iterations.
"""

import logging
import os
from typing import Any, Dict, List

class StructuredLogger:
    """Structured logger for retrieval, generation and persistence operations."""

    def __init__(self, name: str = "ragwriter"):
        self.logger = logging.getLogger(name)
        debug = os.getenv("DEBUG", "false").lower() == "true"
        self.logger.setLevel(logging.DEBUG if debug else logging.INFO)

        # Create handler if not already set
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)

    def set_debug(self, enabled: bool) -> None:
        """Switch debug output on or off."""
        self.logger.setLevel(logging.DEBUG if enabled else logging.INFO)

    def log_operation(self, operation: str, status: str, details: Dict[str, Any] = None, level: int = logging.INFO):
        """Log a structured operation."""
        message = f"Operation: {operation}, Status: {status}"
        if details:
            message += f", Details: {details}"

        self.logger.log(level, message)

    def log_rag_stage(self, stage: str, status: str = "success", details: Dict[str, Any] = None):
        """Log one stage of a RAG query (embed, retrieve, generate, persist)."""
        level = logging.DEBUG if status == "success" else logging.WARNING
        self.log_operation(f"rag.{stage}", status, sanitize_payload(details) if details else None, level)

    def log_store_operation(self, operation: str, store: str, details: Dict[str, Any] = None, status: str = "success"):
        """Log a chat history store operation."""
        log_details = {"store": store}
        if details:
            log_details.update(details)

        level = logging.DEBUG if status == "success" else logging.ERROR
        self.log_operation(f"store.{operation}", status, log_details, level)

    def log_refinement_iteration(self, iteration: int, verdict: str, details: Dict[str, Any] = None):
        """Log the outcome of one writer/editor iteration."""
        log_details = {"iteration": iteration, "verdict": verdict}
        if details:
            log_details.update(sanitize_payload(details))

        self.log_operation("blog.iteration", verdict, log_details)

    # Standard logging methods for compatibility
    def info(self, message: str) -> None:
        """Log an info message."""
        self.logger.info(message)

    def warning(self, message: str) -> None:
        """Log a warning message."""
        self.logger.warning(message)

    def error(self, message: str) -> None:
        """Log an error message."""
        self.logger.error(message)

    def debug(self, message: str) -> None:
        """Log a debug message."""
        self.logger.debug(message)

# Global logger instance
logger = StructuredLogger()

def sanitize_payload(payload: Any, max_length: int = 100) -> Any:
    """Truncate long strings in payloads before they reach the log."""
    if isinstance(payload, dict):
        return {k: sanitize_payload(v, max_length) for k, v in payload.items()}
    elif isinstance(payload, str):
        return payload[:max_length] + "..." if len(payload) > max_length else payload
    elif isinstance(payload, list):
        return [sanitize_payload(item, max_length) for item in payload]
    else:
        return payload

def log_failure(kind: str, stage: str, detail: str, identifiers: Dict[str, Any] = None):
    """Log a structured failure with its stage."""
    log_details = dict(identifiers) if identifiers else {}
    log_details.update({"kind": kind, "stage": stage, "detail": sanitize_payload(detail)})
    logger.log_operation("failure", "error", log_details, logging.ERROR)

def summarize_texts(texts: List[str], max_length: int = 40) -> List[str]:
    """Short previews of a list of texts for debug output."""
    return [sanitize_payload(t, max_length) for t in texts]
