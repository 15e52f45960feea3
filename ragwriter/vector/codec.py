"""
Text codec for embeddings stored in the chat_history table.

Grammar: ``[n1,n2,...]`` where each ``n`` is a finite decimal float literal.
Whitespace around numbers is tolerated on read and never written.
"""

import math
import re
from typing import List, Optional, Sequence

from ..core.errors import EmbeddingCodecError

# float() alone also accepts nan, inf and underscores
_NUMBER = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")


def serialize(embedding: Optional[Sequence[float]]) -> Optional[str]:
    """Convert an embedding to its bracketed text form. None stays None."""
    if embedding is None:
        return None

    values = [float(v) for v in embedding]
    for position, value in enumerate(values):
        if not math.isfinite(value):
            raise EmbeddingCodecError(f"Non-finite value {value!r} at position {position}", stage="encode")
    # repr() of a Python float round-trips exactly
    return "[" + ",".join(repr(v) for v in values) + "]"


def deserialize(text: Optional[str]) -> Optional[List[float]]:
    """Parse bracketed text back into a list of floats. None stays None."""
    if text is None:
        return None

    stripped = text.strip()
    if not (stripped.startswith("[") and stripped.endswith("]")):
        raise EmbeddingCodecError(f"Embedding text must be enclosed in brackets: {stripped[:40]!r}", stage="decode")

    body = stripped[1:-1].strip()
    if not body:
        return []

    values = []
    for position, token in enumerate(body.split(",")):
        token = token.strip()
        if not _NUMBER.fullmatch(token):
            raise EmbeddingCodecError(f"Invalid number {token!r} at position {position}", stage="decode")
        value = float(token)
        if not math.isfinite(value):
            raise EmbeddingCodecError(f"Number {token!r} at position {position} is out of range", stage="decode")
        values.append(value)
    return values
