"""
Writer/editor refinement loop for blog posts.

A writer produces a draft, an editor answers PASS or NEEDS_IMPROVEMENT with
feedback, and the writer rewrites the whole draft until the editor approves
or the iteration budget runs out.
"""

import re
from dataclasses import dataclass, field
from typing import List, Optional

from ..core.config import Settings
from ..core.errors import GenerationFailure
from ..util.logging import logger, log_failure
from .chat_provider import IChatProvider

MAX_ITERATIONS = 3

APPROVAL_TOKEN = "PASS"
IMPROVEMENT_TOKEN = "NEEDS_IMPROVEMENT"

DRAFT_PROMPT = """You are a professional blog writer. Write a well-structured, engaging blog post about "{topic}".
The post should have a clear introduction, body paragraphs, and conclusion.
Include relevant examples and maintain a conversational yet professional tone.
"""

EVALUATION_PROMPT = """You are a critical blog editor. Evaluate the following blog draft and respond with either:
PASS - if the draft is well-written, engaging, and complete
NEEDS_IMPROVEMENT - followed by specific, actionable feedback on what to improve

Focus on:
- Clarity and flow of ideas
- Engagement and reader interest
- Professional yet conversational tone
- Structure and organization

Draft:
{draft}
"""

REFINE_PROMPT = """You are a blog writer. Improve the following blog draft based on this editorial feedback:

Feedback: {feedback}

Current Draft:
{draft}

Provide the complete improved version while maintaining the original topic and structure.
"""

_SEPARATOR = re.compile(r"^[\s:\-]+")
_IMPROVEMENT_MARKER = re.compile(re.escape(IMPROVEMENT_TOKEN), re.IGNORECASE)


@dataclass(frozen=True)
class EvaluationVerdict:
    """Parsed editor output: approved, or feedback to act on."""
    approved: bool
    feedback: Optional[str] = None


@dataclass
class BlogPostResult:
    """Final draft plus how the loop ended."""
    topic: str
    draft: str
    approved: bool
    iterations: int
    evaluations: List[str] = field(default_factory=list)


def extract_feedback(evaluation: str) -> str:
    """Text after the NEEDS_IMPROVEMENT marker, or the whole evaluation if the marker is missing."""
    if evaluation is None:
        return ""
    match = _IMPROVEMENT_MARKER.search(evaluation)
    if match is None:
        return evaluation
    tail = evaluation[match.end():]
    return _SEPARATOR.sub("", tail).strip()


def parse_verdict(evaluation: str) -> EvaluationVerdict:
    """PASS anywhere in the text approves the draft, even next to NEEDS_IMPROVEMENT."""
    if APPROVAL_TOKEN in (evaluation or "").upper():
        return EvaluationVerdict(approved=True)
    return EvaluationVerdict(approved=False, feedback=extract_feedback(evaluation))


class BlogWriterService:
    """Generates blog posts through a bounded writer/editor loop."""

    def __init__(self, chat_provider: IChatProvider, settings: Optional[Settings] = None):
        self.chat_provider = chat_provider
        self.max_iterations = settings.max_iterations if settings else MAX_ITERATIONS
        if self.max_iterations < 1:
            raise ValueError("max_iterations must be >= 1")

    def generate_blog_post(self, topic: str) -> str:
        """Return the final draft for a topic."""
        return self.write(topic).draft

    def write(self, topic: str) -> BlogPostResult:
        """
        Run the writer/editor loop.

        Raises:
            ValueError: if the topic is blank
            GenerationFailure: if any writer or editor call fails
        """
        if topic is None or not topic.strip():
            raise ValueError("topic cannot be empty")

        logger.info(f"Starting blog generation for topic: {topic}")

        draft = self._call("draft", 0, DRAFT_PROMPT.format(topic=topic))
        logger.info("Initial draft generated")
        logger.debug(f"Initial draft content:\n{draft}")

        result = BlogPostResult(topic=topic, draft=draft, approved=False, iterations=0)

        for iteration in range(1, self.max_iterations + 1):
            result.iterations = iteration
            evaluation = self._call("evaluate", iteration, EVALUATION_PROMPT.format(draft=result.draft))
            result.evaluations.append(evaluation)
            verdict = parse_verdict(evaluation)

            if verdict.approved:
                result.approved = True
                logger.log_refinement_iteration(iteration, "approved")
                break

            logger.log_refinement_iteration(iteration, "needs_improvement", {"feedback": verdict.feedback})
            result.draft = self._call(
                "refine", iteration,
                REFINE_PROMPT.format(feedback=verdict.feedback, draft=result.draft)
            )
            logger.debug(f"Revised draft content (iteration {iteration}):\n{result.draft}")

        if not result.approved:
            logger.warning(f"Maximum iterations ({self.max_iterations}) reached without editor approval")

        return result

    def _call(self, stage: str, iteration: int, prompt: str) -> str:
        try:
            text = self.chat_provider.generate(None, prompt)
        except GenerationFailure as e:
            log_failure(e.kind, stage, e.detail, {"iteration": iteration})
            raise GenerationFailure(f"{stage} failed on iteration {iteration}: {e.detail}", stage=stage) from e

        if not text or not text.strip():
            log_failure(GenerationFailure.kind, stage, "empty response", {"iteration": iteration})
            raise GenerationFailure(f"{stage} returned an empty response on iteration {iteration}", stage=stage)
        return text
