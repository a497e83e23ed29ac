from __future__ import annotations

import re
from typing import IO, Iterable, List, Tuple, Union

import pandas as pd
from openpyxl.utils import get_column_letter

from .models import BusinessContact

SHEET_NAME = "Leads"

# (field, header, column width)
EXPORT_COLUMNS: List[Tuple[str, str, int]] = [
    ("name", "Name", 35),
    ("phone", "Phone", 18),
    ("email", "Email", 30),
    ("address", "Address", 50),
    ("website", "Website", 30),
    ("rating", "Rating", 10),
    ("type", "Type", 20),
]

Target = Union[str, IO[bytes]]


def export_filename(query: str, extension: str = "xlsx") -> str:
    slug = re.sub(r"\s+", "_", (query or "").strip())
    return f"leads_{slug}_complete.{extension}"


def build_dataframe(contacts: Iterable[BusinessContact]) -> pd.DataFrame:
    df = pd.DataFrame([c.to_row() for c in contacts], columns=[f for f, _, _ in EXPORT_COLUMNS])
    return df.rename(columns={f: header for f, header, _ in EXPORT_COLUMNS})


def export_to_csv(contacts: Iterable[BusinessContact], target: Target) -> None:
    df = build_dataframe(contacts)
    df.to_csv(target, index=False, encoding="utf-8-sig")


def export_to_excel(contacts: Iterable[BusinessContact], target: Target) -> None:
    df = build_dataframe(contacts)
    with pd.ExcelWriter(target, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name=SHEET_NAME)
        sheet = writer.sheets[SHEET_NAME]
        for idx, (_, _, width) in enumerate(EXPORT_COLUMNS, start=1):
            sheet.column_dimensions[get_column_letter(idx)].width = width
        # Model text is data; "=..." must stay a literal string, not a formula
        for row in sheet.iter_rows(min_row=2):
            for cell in row:
                if cell.data_type == "f":
                    cell.data_type = "s"
