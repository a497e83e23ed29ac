"""Markdown table extraction for model replies.

The model is asked for a pipe-delimited table but may wrap it in prose, bold
the header, or drop columns. Anything that does not look like a data row is
skipped rather than reported.
"""

from __future__ import annotations

import re
from typing import List

from .models import DEFAULT_TYPE, NOT_AVAILABLE, BusinessContact

DELIMITER = "|"
MIN_COLUMNS = 5
HEADER_TOKENS = ("name", "nome", "empresa")

SEPARATOR_PATTERN = re.compile(r"^[\s|:\-]*-[\s|:\-]*$")


def is_separator_row(line: str) -> bool:
    return bool(SEPARATOR_PATTERN.match(line))


def is_header_cell(cell: str) -> bool:
    text = cell.strip("*_ ").lower()
    return any(token in text for token in HEADER_TOKENS)


def split_row(line: str) -> List[str]:
    cells = [c.strip() for c in line.split(DELIMITER)]
    # "| a | b |" yields empty edge cells that are not part of the row
    if cells and cells[0] == "":
        cells = cells[1:]
    if cells and cells[-1] == "":
        cells = cells[:-1]
    return cells


def _cell(cells: List[str], idx: int, default: str = NOT_AVAILABLE) -> str:
    if idx < len(cells) and cells[idx]:
        return cells[idx]
    return default


def parse_markdown_table(text: str) -> List[BusinessContact]:
    """Extract business contacts from a pipe-delimited table in free text.

    Rows with fewer than five cells are dropped without error; model output is
    noisy and partial tables are expected. Column order is name, phone, email,
    address, website, then optional rating and type.
    """
    contacts: List[BusinessContact] = []
    header_seen = False

    for line in (text or "").splitlines():
        if not line.strip() or DELIMITER not in line:
            continue
        if is_separator_row(line):
            header_seen = True
            continue

        cells = split_row(line)
        if not header_seen and cells and is_header_cell(cells[0]):
            continue
        if len(cells) < MIN_COLUMNS:
            continue

        contacts.append(
            BusinessContact(
                name=_cell(cells, 0),
                phone=_cell(cells, 1),
                email=_cell(cells, 2),
                address=_cell(cells, 3),
                website=_cell(cells, 4),
                rating=_cell(cells, 5),
                type=_cell(cells, 6, DEFAULT_TYPE),
            )
        )
    return contacts
