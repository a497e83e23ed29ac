from __future__ import annotations

from typing import Any, List, Optional

from google import genai
from google.genai import types

from .base import BaseSearchClient, PageResult
from ..config import DEFAULT_MODEL
from ..models import PLACEHOLDER_URI, GroundingSource, Location
from ..parser import parse_markdown_table
from ..utils import logger

MAPS_PLACE_URL = "https://www.google.com/maps/place/?q=place_id:{place_id}"
MAPS_DEFAULT_TITLE = "Google Maps"

SYSTEM_INSTRUCTION = """
You are a Corporate Data Auditor specialised in lead mining.
Your job is to build databases of business contacts.

RULES:
1.  **REAL DATA**: Never invent data. If you cannot find the email, write "N/A".
2.  **EXHAUSTIVENESS**: The user wants ALL possible results, not only the top 20.
3.  **FIELDS**: Name, Phone, Email, Address, Website, Rating, Type.
4.  **PAGINATION STRATEGY**:
    *   You will receive the current "Batch" (page) number.
    *   Batch 1: focus on the most popular and relevant results.
    *   Batch 2+: focus on smaller businesses, niche competitors, or businesses on
        nearby streets that did not appear at the top.
    *   Try NOT to repeat businesses that would be obvious on batch 1.

REQUIRED OUTPUT: a Markdown table with the columns
| Name | Phone | Email | Address | Website | Rating | Type |
"""


def extract_grounding_sources(response: Any) -> List[GroundingSource]:
    """Flatten web and maps grounding chunks of the first candidate."""
    sources: List[GroundingSource] = []
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return sources
    metadata = getattr(candidates[0], "grounding_metadata", None)
    chunks = getattr(metadata, "grounding_chunks", None) or []

    for chunk in chunks:
        web = getattr(chunk, "web", None)
        maps = getattr(chunk, "maps", None)
        if web is not None:
            sources.append(GroundingSource(title=web.title or "", uri=web.uri or PLACEHOLDER_URI))
        elif maps is not None:
            place_id = getattr(maps, "place_id", None)
            uri = MAPS_PLACE_URL.format(place_id=place_id) if place_id else PLACEHOLDER_URI
            sources.append(GroundingSource(title=maps.title or MAPS_DEFAULT_TITLE, uri=uri))
    return sources


class GeminiSearchClient(BaseSearchClient):
    """Runs one grounded Gemini query per page and parses the returned table."""

    name = "Gemini"

    def __init__(
        self,
        api_key: str | None = None,
        client: Any = None,
        model: str = DEFAULT_MODEL,
        max_output_tokens: int = 8192,
        thinking_budget: int = 4096,
    ) -> None:
        if client is None:
            if not api_key:
                raise ValueError("An api_key or a ready client is required.")
            client = genai.Client(api_key=api_key)
        self.client = client
        self.model = model
        self.max_output_tokens = max_output_tokens
        self.thinking_budget = thinking_budget

    def build_config(self, location: Optional[Location], page: int) -> types.GenerateContentConfig:
        tool_config = None
        if location is not None:
            tool_config = types.ToolConfig(
                retrieval_config=types.RetrievalConfig(
                    lat_lng=types.LatLng(latitude=location.latitude, longitude=location.longitude)
                )
            )
        return types.GenerateContentConfig(
            system_instruction=SYSTEM_INSTRUCTION,
            tools=[
                types.Tool(google_maps=types.GoogleMaps()),
                types.Tool(google_search=types.GoogleSearch()),
            ],
            tool_config=tool_config,
            temperature=self.temperature_for(page),
            max_output_tokens=self.max_output_tokens,
            thinking_config=types.ThinkingConfig(thinking_budget=self.thinking_budget),
        )

    def fetch_page(self, query: str, location: Optional[Location], page: int) -> PageResult:
        if not query or not query.strip():
            raise ValueError("Query must be provided for lead searches.")

        prompt = self.build_prompt(query.strip(), page)
        logger.info(f"Querying {self.model} for page {page}: {query!r} (location={'on' if location else 'off'})")
        try:
            response = self.client.models.generate_content(
                model=self.model,
                contents=prompt,
                config=self.build_config(location, page),
            )
        except Exception as e:
            logger.error(f"Gemini request failed on page {page}: {e}")
            raise

        text = response.text or ""
        contacts = parse_markdown_table(text)
        sources = extract_grounding_sources(response)
        logger.info(f"Parsed {len(contacts)} contacts and {len(sources)} sources from page {page}")
        return PageResult(contacts=contacts, sources=sources, raw_text=text)
