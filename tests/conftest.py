import sys
from pathlib import Path
from types import SimpleNamespace

import pytest

# Ensure the packages are importable when running pytest from a plain checkout.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from lead_miner.models import BusinessContact, GroundingSource  # noqa: E402
from lead_miner.sources.base import BaseSearchClient, PageResult  # noqa: E402


class ScriptedClient(BaseSearchClient):
    """Search client returning one scripted PageResult (or raising) per page."""

    name = "scripted"

    def __init__(self, pages):
        self.pages = list(pages)
        self.calls = []

    def fetch_page(self, query, location, page):
        self.calls.append((query, location, page))
        outcome = self.pages[page - 1]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


def contact(name, phone, **extra):
    return BusinessContact(name=name, phone=phone, **extra)


def page(*contacts, sources=()):
    return PageResult(contacts=list(contacts), sources=list(sources))


def fake_response(text, chunks=None):
    metadata = SimpleNamespace(grounding_chunks=chunks)
    return SimpleNamespace(text=text, candidates=[SimpleNamespace(grounding_metadata=metadata)])


@pytest.fixture
def source():
    return GroundingSource(title="Acme site", uri="https://acme.example")
