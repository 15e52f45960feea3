"""
ragwriter - retrieval-augmented Q&A over past interactions and a self-critiquing blog writer.
"""

from .core.config import VERSION

__version__ = VERSION
