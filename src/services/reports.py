"""
Report rendering: plain text lines for stdout and an Excel export.
"""

import logging
from pathlib import Path

from openpyxl import Workbook
from openpyxl.styles import Font

from core.config import EVENTS_HEADERS, SUMMARY_HEADERS
from core.dates import format_date_display, format_rfc1123
from models.events import AggregateResult, EventEntry, ReportWindow

logger = logging.getLogger(__name__)


def format_hours(value: float) -> str:
    """Shortest decimal form: 8.0 -> '8', 1.5 -> '1.5'."""
    text = repr(round(value, 6))
    return text[:-2] if text.endswith(".0") else text


def format_event_line(entry: EventEntry) -> str:
    """One line per matching event: start, duration, title."""
    return f"{format_rfc1123(entry.start)}\t\t{format_hours(entry.hours)}\t{entry.title}"


def format_summary_lines(result: AggregateResult) -> list[str]:
    """The 'week total' and 'month total' lines."""
    return [
        f"week total: {format_hours(result.week_total_hours)} of "
        f"{format_hours(result.week_target)} ({result.week_balance:+.2f})",
        f"month total: {format_hours(result.month_total_hours)} of "
        f"{format_hours(result.month_target)} ({result.month_balance:+.2f})",
    ]


def render_report(result: AggregateResult) -> list[str]:
    """All stdout lines: every matching event, then the two summary lines."""
    return [format_event_line(entry) for entry in result.entries] + format_summary_lines(result)


# =============================================================================
# EXCEL EXPORT
# =============================================================================


def write_header_row(ws, headers: list[str]):
    for col_idx, header in enumerate(headers, start=1):
        cell = ws.cell(row=1, column=col_idx, value=header)
        cell.font = Font(bold=True)


def write_excel_events_sheet(ws, entries: list[EventEntry]):
    """
    Write the Events sheet: one row per matching event.

    Datetimes are written without tzinfo (Excel has no zone support).
    """
    write_header_row(ws, EVENTS_HEADERS)

    for row_idx, entry in enumerate(entries, start=2):
        row_data = [
            entry.start.replace(tzinfo=None),
            entry.end.replace(tzinfo=None),
            round(entry.hours, 2),
            entry.title,
            "yes" if entry.in_week else None,
            "yes" if entry.in_month else None,
        ]
        for col_idx, value in enumerate(row_data, start=1):
            ws.cell(row=row_idx, column=col_idx, value=value)


def write_excel_summary_sheet(ws, result: AggregateResult, window: ReportWindow):
    """
    Write the Summary sheet.

    Row 2: week, Row 3: month. Balance is a formula (Total - Target).
    """
    write_header_row(ws, SUMMARY_HEADERS)

    periods = [
        (
            f"Week {format_date_display(window.week_begin.date())} - "
            f"{format_date_display(window.week_end.date())}",
            result.week_total_hours,
            result.work_days_in_week,
            result.week_target,
        ),
        (
            f"Month {format_date_display(window.month_begin.date())} - "
            f"{format_date_display(window.month_end.date())}",
            result.month_total_hours,
            result.work_days_in_month,
            result.month_target,
        ),
    ]

    for row_idx, (label, total, days, target) in enumerate(periods, start=2):
        ws.cell(row=row_idx, column=1, value=label)
        ws.cell(row=row_idx, column=2, value=round(total, 2))
        ws.cell(row=row_idx, column=3, value=days)
        ws.cell(row=row_idx, column=4, value=target)
        ws.cell(row=row_idx, column=5, value=f"=B{row_idx}-D{row_idx}")


def create_excel_report(result: AggregateResult, window: ReportWindow, output_path: Path):
    """
    Create an Excel workbook with two sheets.

    Sheet 1: "Summary" - week and month totals against target
    Sheet 2: "Events" - matching events with their durations
    """
    wb = Workbook()

    ws_summary = wb.active
    ws_summary.title = "Summary"
    write_excel_summary_sheet(ws_summary, result, window)

    ws_events = wb.create_sheet(title="Events")
    write_excel_events_sheet(ws_events, result.entries)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    wb.save(str(output_path))
    logger.info("Saved Excel report to: %s", output_path)
