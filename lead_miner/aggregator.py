"""
Multi-page lead aggregation.

One run issues up to ``MAX_PAGES`` sequential page queries against a search
client, merges their contacts while suppressing duplicates, and stops early
once a page past the first adds nothing new. A failing page ends the run:
with contacts already collected it is a partial success, otherwise a failure.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, List, Optional

from .models import BusinessContact, GroundingSource, Location, RunState, SearchResult
from .sources.base import BaseSearchClient
from .utils import logger

MAX_PAGES = 3
PAGE_DELAY_SECONDS = 1.0

PARTIAL_MESSAGE = "The search was interrupted, but the data collected so far is shown."
FAILURE_MESSAGE = "Failed to fetch data. Please try again."


@dataclass(frozen=True)
class AggregationEvent:
    kind: str
    page: int = 0
    total_pages: int = MAX_PAGES
    message: str = ""


@dataclass
class AggregationOutcome:
    state: RunState
    result: Optional[SearchResult] = None
    message: str = ""
    pages_fetched: int = 0
    error: Optional[BaseException] = None

    @property
    def is_partial(self) -> bool:
        return self.state is RunState.PARTIAL_SUCCESS

    @property
    def ok(self) -> bool:
        return self.state in (RunState.SUCCESS, RunState.PARTIAL_SUCCESS)


def progress_text(page: int, total: int) -> str:
    return f"Extracting batch {page} of {total}... (analysing data)"


class LeadAggregator:
    """Runs the paged search loop for one query at a time."""

    def __init__(
        self,
        client: BaseSearchClient,
        max_pages: int = MAX_PAGES,
        page_delay: float = PAGE_DELAY_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.client = client
        self.max_pages = max_pages
        self.page_delay = page_delay
        self._sleep = sleep
        self.state = RunState.IDLE

    def _emit(self, listener, event: AggregationEvent) -> None:
        if listener is not None:
            listener(event)

    def _finish(self, listener, outcome: AggregationOutcome) -> AggregationOutcome:
        self.state = outcome.state
        self._emit(listener, AggregationEvent(
            kind=outcome.state.value,
            page=outcome.pages_fetched,
            total_pages=self.max_pages,
            message=outcome.message,
        ))
        return outcome

    def run_search(
        self,
        query: str,
        location: Optional[Location] = None,
        listener: Optional[Callable[[AggregationEvent], None]] = None,
    ) -> AggregationOutcome:
        if not query or not query.strip():
            raise ValueError("Query must be provided for lead searches.")
        query = query.strip()

        self.state = RunState.RUNNING
        self._emit(listener, AggregationEvent(kind="started", total_pages=self.max_pages))

        contacts: List[BusinessContact] = []
        sources: List[GroundingSource] = []
        seen_keys: set[str] = set()
        pages_fetched = 0

        for page in range(1, self.max_pages + 1):
            self._emit(listener, AggregationEvent(
                kind="progress",
                page=page,
                total_pages=self.max_pages,
                message=progress_text(page, self.max_pages),
            ))

            try:
                data = self.client.fetch_page(query, location, page)
            except Exception as e:
                if contacts:
                    logger.warning(f"Page {page} failed after {len(contacts)} contacts, keeping partial results: {e}")
                    return self._finish(listener, AggregationOutcome(
                        state=RunState.PARTIAL_SUCCESS,
                        result=SearchResult(contacts=contacts, sources=sources),
                        message=PARTIAL_MESSAGE,
                        pages_fetched=pages_fetched,
                        error=e,
                    ))
                logger.exception(f"Page {page} failed with no contacts collected: {e}")
                return self._finish(listener, AggregationOutcome(
                    state=RunState.FAILURE,
                    message=FAILURE_MESSAGE,
                    pages_fetched=pages_fetched,
                    error=e,
                ))
            pages_fetched += 1

            new_count = 0
            for contact in data.contacts:
                key = contact.dedup_key
                if key in seen_keys:
                    logger.debug(f"Duplicate skipped: {contact.name}")
                    continue
                seen_keys.add(key)
                contacts.append(contact)
                new_count += 1

            sources.extend(data.sources)
            logger.info(f"Page {page}/{self.max_pages}: {new_count} new contacts, {len(contacts)} total")

            if new_count == 0 and page > 1:
                logger.info("No new contacts in this batch. Stopping.")
                break

            if page < self.max_pages:
                self._sleep(self.page_delay)

        return self._finish(listener, AggregationOutcome(
            state=RunState.SUCCESS,
            result=SearchResult(contacts=contacts, sources=sources),
            pages_fetched=pages_fetched,
        ))
