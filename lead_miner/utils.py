from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Iterable, List

if TYPE_CHECKING:
    from .models import GroundingSource


# Basic logging config for console output
logging.basicConfig(
    level=logging.INFO,
    format="[%(levelname)s] %(asctime)s - %(name)s - %(message)s",
)
logger = logging.getLogger("lead_miner")


def phone_digits(phone: str) -> str:
    if not phone:
        return ""
    return re.sub(r"\D", "", phone)


def dedup_key(name: str, phone: str) -> str:
    return f"{(name or '').lower().strip()}_{phone_digits(phone)}"


def unique_sources(sources: Iterable[GroundingSource]) -> List[GroundingSource]:
    seen: set[str] = set()
    unique: List[GroundingSource] = []
    for s in sources:
        if s.uri in seen:
            continue
        seen.add(s.uri)
        unique.append(s)
    return unique


def parse_rating(rating: str) -> float | None:
    if not rating:
        return None
    match = re.search(r"\d+(?:[.,]\d+)?", rating)
    if not match:
        return None
    return float(match.group(0).replace(",", "."))
