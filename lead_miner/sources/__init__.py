from .base import BaseSearchClient, PageResult
from .gemini import GeminiSearchClient, extract_grounding_sources

__all__ = [
    "BaseSearchClient",
    "PageResult",
    "GeminiSearchClient",
    "extract_grounding_sources",
]
