import io

import pandas as pd
from openpyxl import load_workbook

from lead_miner.exporter import (
    EXPORT_COLUMNS,
    SHEET_NAME,
    build_dataframe,
    export_filename,
    export_to_csv,
    export_to_excel,
)
from lead_miner.models import BusinessContact

CONTACTS = [
    BusinessContact(name="Acme", phone="555-1234", email="a@x.com", address="1 Main St", website="acme.com"),
    BusinessContact(name="Beta", phone="999", rating="4.9", type="Clinic"),
]


def test_export_filename():
    assert export_filename("dentists  downtown") == "leads_dentists_downtown_complete.xlsx"
    assert export_filename(" cafes ", "csv") == "leads_cafes_complete.csv"


def test_dataframe_headers_in_order():
    df = build_dataframe(CONTACTS)
    assert list(df.columns) == ["Name", "Phone", "Email", "Address", "Website", "Rating", "Type"]
    assert df.iloc[1]["Type"] == "Clinic"


def test_empty_dataframe_keeps_headers():
    assert list(build_dataframe([]).columns) == [header for _, header, _ in EXPORT_COLUMNS]


def test_excel_sheet_and_widths(tmp_path):
    path = tmp_path / "leads.xlsx"
    export_to_excel(CONTACTS, str(path))
    wb = load_workbook(path)
    assert wb.sheetnames == [SHEET_NAME]
    ws = wb[SHEET_NAME]
    assert [cell.value for cell in ws[1]] == ["Name", "Phone", "Email", "Address", "Website", "Rating", "Type"]
    assert ws.max_row == 3
    assert ws["A2"].value == "Acme"
    assert ws.column_dimensions["A"].width == 35
    assert ws.column_dimensions["D"].width == 50


def test_excel_to_buffer():
    bio = io.BytesIO()
    export_to_excel(CONTACTS, bio)
    bio.seek(0)
    df = pd.read_excel(bio, sheet_name=SHEET_NAME, dtype=str)
    assert df["Name"].tolist() == ["Acme", "Beta"]


def test_csv(tmp_path):
    path = tmp_path / "leads.csv"
    export_to_csv(CONTACTS, str(path))
    df = pd.read_csv(path, encoding="utf-8-sig", dtype=str, keep_default_na=False)
    assert df["Email"].tolist() == ["a@x.com", "N/A"]


def test_excel_keeps_formula_like_text_literal():
    risky = [BusinessContact(name="=1+1", phone="555", website='=HYPERLINK("http://x","y")')]
    bio = io.BytesIO()
    export_to_excel(risky, bio)
    bio.seek(0)
    ws = load_workbook(bio)[SHEET_NAME]
    assert ws["A2"].data_type == "s"
    assert ws["A2"].value == "=1+1"
    assert ws["E2"].data_type == "s"
    assert ws["B2"].value == "555"
