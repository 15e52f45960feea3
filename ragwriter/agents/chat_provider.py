"""
Chat model providers.
OllamaChatProvider talks to a local Ollama instance; ScriptedChatProvider plays back canned replies without external dependencies.
"""

from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass
from datetime import datetime
from typing import Deque, Dict, Iterable, List, Optional

import ollama

from ..core.errors import GenerationFailure
from ..util.logging import logger


@dataclass
class ChatCall:
    """One recorded call to a chat provider."""
    system_instruction: Optional[str]
    user_instruction: str
    timestamp: datetime


class IChatProvider(ABC):
    """Abstract interface for chat model providers."""

    def __init__(self, model_name: str):
        self.model_name = model_name

    @abstractmethod
    def generate(self, system_instruction: Optional[str], user_instruction: str) -> str:
        """
        Generate a reply.

        Args:
            system_instruction: Optional system message
            user_instruction: The user message

        Returns:
            Non-empty reply text

        Raises:
            GenerationFailure: if the model is unavailable or the reply is empty
        """
        pass

    def get_status(self) -> Dict[str, str]:
        """Get current status of this provider."""
        return {
            "provider": self.__class__.__name__,
            "model_name": self.model_name,
            "status": "ready"
        }


class OllamaChatProvider(IChatProvider):
    """Chat provider backed by an Ollama model."""

    def __init__(self, model_name: str, host: str = None, temperature: float = 0.7, client=None):
        super().__init__(model_name)
        self.host = host
        self.temperature = temperature
        self._client = client

    @property
    def client(self):
        if self._client is None:
            self._client = ollama.Client(host=self.host)
        return self._client

    def _build_messages(self, system_instruction: Optional[str], user_instruction: str) -> List[Dict[str, str]]:
        messages = []
        if system_instruction:
            messages.append({'role': 'system', 'content': system_instruction})
        messages.append({'role': 'user', 'content': user_instruction})
        return messages

    def generate(self, system_instruction: Optional[str], user_instruction: str) -> str:
        start_time = datetime.now()
        try:
            response = self.client.chat(
                model=self.model_name,
                messages=self._build_messages(system_instruction, user_instruction),
                options={
                    'temperature': self.temperature,
                    'top_p': 0.9
                }
            )
        except ollama.ResponseError as e:
            raise GenerationFailure(f"Ollama model error ({self.model_name}): {e}", stage="generate") from e
        except Exception as e:
            raise GenerationFailure(f"Ollama unavailable at {self.host}: {e}", stage="generate") from e

        content = response["message"]["content"] if response else ""
        if not content or not content.strip():
            raise GenerationFailure(f"Ollama model {self.model_name} returned an empty response", stage="generate")

        processing_time = int((datetime.now() - start_time).total_seconds() * 1000)
        logger.debug(f"Received response of {len(content)} characters from {self.model_name} in {processing_time}ms")
        return content

    def get_status(self) -> Dict[str, str]:
        """Get current status with Ollama-specific information."""
        status = super().get_status()
        status["status"] = "ready" if check_ollama_health(self.client) else "unavailable"
        return status


class ScriptedChatProvider(IChatProvider):
    """
    Chat provider that replies from a queue of scripted answers.

    Once the queue is empty it falls back to canned replies: editor prompts
    are approved with PASS, everything else gets a generic answer. Every call
    is recorded in ``calls``.
    """

    FALLBACK_REPLIES = {
        "evaluate": "PASS - the draft is clear, engaging and complete.",
        "general": "This is a simulated answer. Configure LLM_PROVIDER=ollama for real responses."
    }

    def __init__(self, replies: Iterable = (), model_name: str = "mock-model"):
        super().__init__(model_name)
        self._replies: Deque = deque(replies)
        self.calls: List[ChatCall] = []

    def queue(self, *replies) -> None:
        """Append scripted replies; an Exception instance is raised when reached."""
        self._replies.extend(replies)

    def generate(self, system_instruction: Optional[str], user_instruction: str) -> str:
        self.calls.append(ChatCall(system_instruction, user_instruction, datetime.now()))

        if self._replies:
            reply = self._replies.popleft()
        elif "blog editor" in user_instruction.lower():
            reply = self.FALLBACK_REPLIES["evaluate"]
        else:
            reply = self.FALLBACK_REPLIES["general"]

        if isinstance(reply, Exception):
            raise GenerationFailure(f"Scripted failure: {reply}", stage="generate") from reply
        if not reply or not str(reply).strip():
            raise GenerationFailure("Scripted provider returned an empty response", stage="generate")
        return reply

    @property
    def call_count(self) -> int:
        return len(self.calls)


def check_ollama_health(client=None) -> bool:
    """Check Ollama service health."""
    try:
        (client or ollama).list()
        return True
    except Exception:
        return False
