"""
Grounding Sources Package

Share-link normalization and bounded text extraction for the optional
reference document attached to a recommendation request.
"""

from .normalizer import normalize_source_url, RewriteRule, REWRITE_RULES
from .extractor import DocumentExtractor, Extracted, Unavailable, ExtractionResult

__all__ = [
    "normalize_source_url",
    "RewriteRule",
    "REWRITE_RULES",
    "DocumentExtractor",
    "Extracted",
    "Unavailable",
    "ExtractionResult",
]
