"""
Report generation utilities for Numbers and Excel formats.
"""

from datetime import date
from io import BytesIO
from pathlib import Path
from zoneinfo import ZoneInfo

from numbers_parser import Document
from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from core.aggregation import BucketKey, event_day, event_duration, resolve_timezone, summarize, to_zone
from core.classification import classify
from core.config import CATEGORY_LABELS, DETAIL_HEADERS, MIN_TABLE_ROWS, SUMMARY_ROW_LABELS
from models.events import CATEGORY_ORDER, Bucket, CalendarEvent
from services.stats import category_totals, daily_breakdown


def format_date_display(d: date) -> str:
    """Format date as M/D/YYYY (platform-safe, no zero-padding)."""
    return f"{d.month}/{d.day}/{d.year}"


def event_rows(events: list[CalendarEvent], tz: ZoneInfo | str | None = None) -> list[dict]:
    """Flatten events into detail rows, in local time of tz."""
    tz = resolve_timezone(tz)
    rows = []
    for event in events:
        day = event_day(event, tz)
        rows.append(
            {
                "date": format_date_display(day) if day else "",
                "calendar": event.calendar_name or "",
                "category": CATEGORY_LABELS[classify(event.calendar_name).value],
                "title": event.title,
                "start": to_zone(event.start, tz).strftime("%H:%M") if event.start else "",
                "end": to_zone(event.end, tz).strftime("%H:%M") if event.end else "",
                "hours": round(event_duration(event, tz).total_seconds() / 3600, 2),
            }
        )
    return rows


def _row_values(row: dict) -> list:
    return [row["date"], row["calendar"], row["category"], row["title"], row["start"], row["end"], row["hours"]]


def write_detail_table(table, rows: list[dict]):
    """Write headers and event rows to a Numbers detail table."""
    for col_idx, header in enumerate(DETAIL_HEADERS):
        table.write(0, col_idx, header)

    for row_idx, row in enumerate(rows, start=1):
        for col_idx, value in enumerate(_row_values(row)):
            table.write(row_idx, col_idx, value)


# =============================================================================
# NUMBERS REPORT GENERATION (Weekly Reports)
# =============================================================================


def create_weekly_numbers_report(
    buckets: dict[BucketKey, Bucket],
    events: list[CalendarEvent],
    output_path: Path,
    tz: ZoneInfo | str | None = None,
):
    """
    Create Numbers report with Summary and Detail sheets.

    Sheet 1 - Time Summary: Pivot-style table with days as rows, categories
              as columns (hours), a Total column and a totals row.
    Sheet 2 - Event Detail: One row per event.
    """
    breakdown = daily_breakdown(buckets)
    category_headers = [CATEGORY_LABELS[c.value] for c in CATEGORY_ORDER]
    summary_headers = ["Date"] + category_headers + ["Total"]
    summary_rows = len(breakdown) + 2  # header + data + total row

    doc = Document(
        sheet_name="Time Summary",
        table_name="Time Summary",
        num_rows=summary_rows,
        num_cols=len(summary_headers),
        num_header_rows=1,
        num_header_cols=1,
    )
    summary_table = doc.sheets["Time Summary"].tables["Time Summary"]

    for col_idx, header in enumerate(summary_headers):
        summary_table.write(0, col_idx, header)

    for row_idx, (day, row) in enumerate(breakdown.items(), start=1):
        summary_table.write(row_idx, 0, format_date_display(day) if day else "Undated")
        row_total = 0.0
        for col_idx, category in enumerate(CATEGORY_ORDER, start=1):
            hours = round(row[category].hours, 2)
            if hours > 0:
                summary_table.write(row_idx, col_idx, hours)
            row_total += hours
        summary_table.write(row_idx, len(CATEGORY_ORDER) + 1, round(row_total, 2))

    totals = category_totals(buckets)
    total_row_idx = len(breakdown) + 1
    summary_table.write(total_row_idx, 0, "Total")
    grand_total = 0.0
    for col_idx, category in enumerate(CATEGORY_ORDER, start=1):
        hours = round(totals[category].hours, 2)
        summary_table.write(total_row_idx, col_idx, hours)
        grand_total += hours
    summary_table.write(total_row_idx, len(CATEGORY_ORDER) + 1, round(grand_total, 2))

    rows = event_rows(events, tz)
    detail_rows = max(len(rows) + 1, MIN_TABLE_ROWS)
    doc.add_sheet(
        "Event Detail",
        table_name="Event Detail",
        num_rows=detail_rows,
        num_cols=len(DETAIL_HEADERS),
    )
    detail_table = doc.sheets["Event Detail"].tables["Event Detail"]
    write_detail_table(detail_table, rows)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    doc.save(str(output_path))
    print(f"Saved Numbers report to: {output_path}")


# =============================================================================
# EXCEL REPORT GENERATION (Monthly Reports)
# =============================================================================


def write_excel_breakdown_sheet(ws, buckets: dict[BucketKey, Bucket]):
    """
    Write the Daily Breakdown sheet.

    Row 1: Date | one column per category | Total
    One row per day with hours; Total column and totals row are SUM formulas.
    """
    breakdown = daily_breakdown(buckets)
    if not breakdown:
        # Single-day buckets: one row for the whole view
        breakdown = {None: category_totals(buckets)}

    headers = ["Date"] + [CATEGORY_LABELS[c.value] for c in CATEGORY_ORDER] + ["Total"]
    for col_idx, header in enumerate(headers, start=1):
        cell = ws.cell(row=1, column=col_idx, value=header)
        cell.font = Font(bold=True)

    first_cat_col = get_column_letter(2)
    last_cat_col = get_column_letter(len(CATEGORY_ORDER) + 1)
    total_col = len(CATEGORY_ORDER) + 2

    for row_idx, (day, row) in enumerate(breakdown.items(), start=2):
        ws.cell(row=row_idx, column=1, value=format_date_display(day) if day else "All")
        for col_idx, category in enumerate(CATEGORY_ORDER, start=2):
            ws.cell(row=row_idx, column=col_idx, value=round(row[category].hours, 2))
        ws.cell(row=row_idx, column=total_col, value=f"=SUM({first_cat_col}{row_idx}:{last_cat_col}{row_idx})")

    last_data_row = len(breakdown) + 1
    totals_row = last_data_row + 1
    ws.cell(row=totals_row, column=1, value="Total").font = Font(bold=True)
    for col_idx in range(2, total_col + 1):
        col_letter = get_column_letter(col_idx)
        ws.cell(row=totals_row, column=col_idx, value=f"=SUM({col_letter}2:{col_letter}{last_data_row})")

    return totals_row


def write_excel_detail_sheet(ws, rows: list[dict]):
    """Write the Event Detail sheet using DETAIL_HEADERS."""
    for col_idx, header in enumerate(DETAIL_HEADERS, start=1):
        cell = ws.cell(row=1, column=col_idx, value=header)
        cell.font = Font(bold=True)

    for row_idx, row in enumerate(rows, start=2):
        for col_idx, value in enumerate(_row_values(row), start=1):
            ws.cell(row=row_idx, column=col_idx, value=value)


def write_excel_summary_sheet(ws, buckets: dict[BucketKey, Bucket], breakdown_sheet_name: str, totals_row: int):
    """
    Write the Summary sheet.

    Rows 1-3: total events, active hours, most common category.
    Then one row per category: hours (referencing the breakdown totals row)
    and share of total as a formula.
    """
    summary = summarize(buckets)
    most_common = summary.most_common_category

    values = [
        summary.total_events,
        summary.active_hours,
        CATEGORY_LABELS[most_common.value] if most_common else "-",
    ]
    for row_idx, (label, value) in enumerate(zip(SUMMARY_ROW_LABELS, values), start=1):
        ws.cell(row=row_idx, column=1, value=label).font = Font(bold=True)
        ws.cell(row=row_idx, column=2, value=value)

    header_row = len(SUMMARY_ROW_LABELS) + 2
    for col_idx, header in enumerate(["Category", "Hours", "Events", "% of total"], start=1):
        ws.cell(row=header_row, column=col_idx, value=header).font = Font(bold=True)

    totals = category_totals(buckets)
    grand_total_ref = f"'{breakdown_sheet_name}'!${get_column_letter(len(CATEGORY_ORDER) + 2)}${totals_row}"
    for offset, category in enumerate(CATEGORY_ORDER, start=1):
        row_idx = header_row + offset
        source_col = get_column_letter(offset + 1)
        ws.cell(row=row_idx, column=1, value=CATEGORY_LABELS[category.value])
        ws.cell(row=row_idx, column=2, value=f"='{breakdown_sheet_name}'!{source_col}{totals_row}")
        ws.cell(row=row_idx, column=3, value=totals[category].count)
        # Avoid division by zero with IFERROR
        ws.cell(row=row_idx, column=4, value=f"=IFERROR(B{row_idx}/{grand_total_ref},0)")
        ws.cell(row=row_idx, column=4).number_format = "0.0%"


def build_excel_report(
    buckets: dict[BucketKey, Bucket],
    events: list[CalendarEvent],
    tz: ZoneInfo | str | None = None,
) -> Workbook:
    """
    Create the Excel time report workbook.

    Sheet 1: "Daily Breakdown" - hours per day and category with SUM formulas
    Sheet 2: "Event Detail" - one row per event
    Sheet 3: "Summary" - headline numbers and category shares
    """
    wb = Workbook()

    ws_breakdown = wb.active
    ws_breakdown.title = "Daily Breakdown"
    totals_row = write_excel_breakdown_sheet(ws_breakdown, buckets)

    ws_detail = wb.create_sheet(title="Event Detail")
    write_excel_detail_sheet(ws_detail, event_rows(events, tz))

    ws_summary = wb.create_sheet(title="Summary")
    write_excel_summary_sheet(ws_summary, buckets, "Daily Breakdown", totals_row)

    return wb


def create_excel_report(
    buckets: dict[BucketKey, Bucket],
    events: list[CalendarEvent],
    output_path: Path,
    tz: ZoneInfo | str | None = None,
):
    """Build the Excel report and save it to output_path."""
    wb = build_excel_report(buckets, events, tz)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    wb.save(str(output_path))
    print(f"Saved Excel report to: {output_path}")


def create_excel_report_to_bytes(
    buckets: dict[BucketKey, Bucket],
    events: list[CalendarEvent],
    tz: ZoneInfo | str | None = None,
) -> bytes:
    """Build the Excel report in memory."""
    wb = build_excel_report(buckets, events, tz)
    buffer = BytesIO()
    wb.save(buffer)
    return buffer.getvalue()
