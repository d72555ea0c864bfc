#!/usr/bin/env python3
"""Generate a sample billboard workbook with defined scenarios for verification"""

from openpyxl import Workbook
from openpyxl.styles import PatternFill, Font

HEADER = [
    "Spatiu ID", "Locatie", "Latitudine", "Longitudine",
    "Imagini 1", "Imagini 2", "Imagini 3", "Schita", "StreetView",
    "Perioade Disponibile",
]

# Define sample scenarios
scenarios = [
    {
        "name": "P1: Coordinates + hyperlinks",
        "description": "Valid lat/lng, image cells carry hyperlinks",
        "Spatiu ID": "CJ-001",
        "Locatie": "Piața Unirii, Cluj-Napoca",
        "Latitudine": "46,769379",
        "Longitudine": "23,589954",
        "Imagini 1": ("Foto 1", "https://example.com/cj-001-1.jpg"),
        "Imagini 2": ("Foto 2", "https://example.com/cj-001-2.jpg"),
        "Schita": ("Schiță", "https://example.com/cj-001-schita.pdf"),
        "Perioade Disponibile": "Disponibil: 01/10/25 : 15/10/25; Disponibil: 01/12/25 : 31/12/25",
        "expected": "Imported, 2 images, available 10/10/2025-20/10/2025",
    },
    {
        "name": "P2: HYPERLINK formula",
        "description": "Image given as =HYPERLINK() formula",
        "Spatiu ID": "CJ-002",
        "Locatie": "Bd. Eroilor 10, Cluj-Napoca",
        "Latitudine": 46.770439,
        "Longitudine": 23.591423,
        "Imagini 1": '=HYPERLINK("https://example.com/cj-002-1.jpg","Foto")',
        "Perioade Disponibile": "Disponibil: 16/10/25 : 31/10/25",
        "expected": "Imported, 1 image, not available 10/10/2025-15/10/2025",
    },
    {
        "name": "P3: Address only",
        "description": "No coordinates; geocoded from Locatie when an API key is set",
        "Spatiu ID": "CJ-003",
        "Locatie": "Strada Memorandumului 28, Cluj-Napoca",
        "Latitudine": "",
        "Longitudine": "",
        "Perioade Disponibile": "Ocupat",
        "expected": "Geocoded, or dropped without API key; never available",
    },
    {
        "name": "P4: Nothing usable",
        "description": "No coordinates, no address",
        "Spatiu ID": "CJ-004",
        "Locatie": "",
        "Latitudine": "n/a",
        "Longitudine": "",
        "expected": "Skipped",
    },
]


def create_sample_excel(path: str = "sample_billboards.xlsx"):
    wb = Workbook()

    # Sheet 1: billboards, header on row 3 (rows 1-2 are a title and a blank row)
    ws = wb.active
    ws.title = "Panouri"
    ws["A1"] = "Inventar panouri - Cluj"
    ws["A1"].font = Font(bold=True, size=14)

    for col, name in enumerate(HEADER, 1):
        cell = ws.cell(row=3, column=col, value=name)
        cell.font = Font(bold=True)
        cell.fill = PatternFill("solid", fgColor="FFFF00")

    for i, scenario in enumerate(scenarios):
        row = 4 + i
        for col, name in enumerate(HEADER, 1):
            value = scenario.get(name)
            if value is None:
                continue
            cell = ws.cell(row=row, column=col)
            if isinstance(value, tuple):
                cell.value, cell.hyperlink = value
            else:
                cell.value = value

    # Sheet 2: Expected Results
    ws_expected = wb.create_sheet("Expected Results")
    ws_expected["A1"] = "Scenario"
    ws_expected["B1"] = "Description"
    ws_expected["C1"] = "Expected"
    for col in range(1, 4):
        ws_expected.cell(row=1, column=col).font = Font(bold=True)

    for i, scenario in enumerate(scenarios):
        ws_expected.cell(row=2 + i, column=1, value=scenario["name"])
        ws_expected.cell(row=2 + i, column=2, value=scenario["description"])
        ws_expected.cell(row=2 + i, column=3, value=scenario["expected"])

    ws_expected.column_dimensions["A"].width = 35
    ws_expected.column_dimensions["B"].width = 55
    ws_expected.column_dimensions["C"].width = 55

    wb.save(path)
    print(f"Created: {path}")
    print(f"  - {len(scenarios)} scenarios")
    print("  - Sheet 'Panouri': header on row 3")
    print("  - Sheet 'Expected Results': expected outcomes")


if __name__ == "__main__":
    create_sample_excel()
