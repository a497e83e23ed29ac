from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional

from ..models import BusinessContact, GroundingSource, Location

BASE_TEMPERATURE = 0.7
TEMPERATURE_STEP = 0.1

PAGE_FOCUS = {
    1: "Return the main, best-rated results for this area.",
    2: (
        "IGNORE the most famous results. Look for smaller businesses, new "
        "establishments or those with fewer reviews that the map tends to hide."
    ),
}
DEEP_SEARCH_FOCUS = (
    "Run a deep sweep (Deep Search). Look through web directories for businesses "
    "that may not even have a map pin but do exist in the area."
)


@dataclass
class PageResult:
    contacts: List[BusinessContact] = field(default_factory=list)
    sources: List[GroundingSource] = field(default_factory=list)
    raw_text: str = ""


class BaseSearchClient(ABC):
    name: str = "base"

    def page_focus(self, page: int) -> str:
        return PAGE_FOCUS.get(page, DEEP_SEARCH_FOCUS)

    def temperature_for(self, page: int) -> float:
        # Later pages sample hotter so they do not echo page one
        return round(BASE_TEMPERATURE + page * TEMPERATURE_STEP, 2)

    def build_prompt(self, query: str, page: int) -> str:
        return (
            f"LEAD SEARCH - BATCH {page}\n"
            f'Term: "{query}"\n'
            "\n"
            f"DIRECTIVE: {self.page_focus(page)}\n"
            "\n"
            "GOAL:\n"
            "1. Find around 20-30 NEW businesses for this batch.\n"
            "2. For each one, cross-check map and web search data to find the PHONE and EMAIL.\n"
            "3. Produce the table.\n"
        )

    @abstractmethod
    def fetch_page(self, query: str, location: Optional[Location], page: int) -> PageResult:
        raise NotImplementedError
