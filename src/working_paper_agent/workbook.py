"""Schedule M-1 working paper workbook writer.

Produces ``m1_working_paper.xlsx`` with these sheets:
- ``<current year> TB``: current-period trial balance as loaded
- ``<last year> TB``: prior-period trial balance, only when one was given
- ``M-1 Adjustments``: one row per proposed book-tax adjustment

The writer assumes it is the only one writing to a given output path during
a process run. An existing workbook at the same path is overwritten.

A missing IRS Ref or M-1 Line is written as a blank cell. xlsx has no stored
empty-string cell, so readers see an empty or ``None`` value there.

Text that starts with ``=`` is written as a string cell, never a formula.
"""

import re
from collections.abc import Sequence
from decimal import Decimal
from pathlib import Path
from typing import Any

import structlog
from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.worksheet.worksheet import Worksheet

from working_paper_agent.models import (
    Adjustment,
    TrialBalanceRow,
    WorkingPaperFailure,
    WorkingPaperRequest,
    WorkingPaperResult,
    WorkingPaperSuccess,
)

logger = structlog.get_logger(__name__)

ADJUSTMENTS_SHEET = "M-1 Adjustments"
ADJUSTMENT_HEADERS = [
    "#",
    "Account",
    "Type",
    "Amount",
    "Explanation",
    "IRS Ref",
    "M-1 Line",
]

_CURRENCY_FORMAT = '"$"#,##0.00'
_HEADER_FILL = PatternFill(start_color="DAEEF3", end_color="DAEEF3", fill_type="solid")
_INVALID_SHEET_CHARS = re.compile(r"[\\/*?:\[\]]")
_MAX_SHEET_NAME = 31
_MAX_COLUMN_WIDTH = 60


def _sheet_title(name: str) -> str:
    """Make a label usable as an Excel sheet title (no []:*?/\\, 31 chars max)."""
    return _INVALID_SHEET_CHARS.sub("-", name)[:_MAX_SHEET_NAME]


def _format_decimal(value: Decimal) -> int | float:
    # Excel has no decimal type; keep whole amounts integral
    return int(value) if value == value.to_integral_value() else float(value)


def _append_row(worksheet: Worksheet, values: Sequence[Any]) -> None:
    """Append a row, keeping '='-prefixed text as text."""
    worksheet.append(list(values))
    for cell in worksheet[worksheet.max_row]:
        if isinstance(cell.value, str) and cell.value.startswith("="):
            cell.data_type = "s"


def _write_header_row(worksheet: Worksheet, headers: Sequence[str]) -> None:
    _append_row(worksheet, headers)
    for cell in worksheet[1]:
        cell.font = Font(bold=True)
        cell.alignment = Alignment(horizontal="center")
        cell.fill = _HEADER_FILL


def _auto_fit_columns(worksheet: Worksheet) -> None:
    """Size each column to its longest value, capped."""
    for column_cells in worksheet.columns:
        longest = max(
            (len(str(cell.value)) for cell in column_cells if cell.value is not None),
            default=0,
        )
        column = column_cells[0].column_letter
        worksheet.column_dimensions[column].width = min(longest + 2, _MAX_COLUMN_WIDTH)


def _collect_columns(rows: Sequence[TrialBalanceRow]) -> list[str]:
    """Union of row keys in first-seen order."""
    columns: dict[str, None] = {}
    for row in rows:
        for key in row:
            columns.setdefault(key, None)
    return list(columns)


def _add_trial_balance_sheet(
    workbook: Workbook, title: str, rows: Sequence[TrialBalanceRow]
) -> Worksheet:
    ws = workbook.create_sheet(_sheet_title(title))
    columns = _collect_columns(rows)
    if not columns:
        return ws

    _write_header_row(ws, columns)
    for row in rows:
        _append_row(ws, [row.get(column) for column in columns])
    _auto_fit_columns(ws)
    return ws


def _add_adjustments_sheet(
    workbook: Workbook, adjustments: Sequence[Adjustment]
) -> Worksheet:
    ws = workbook.create_sheet(ADJUSTMENTS_SHEET)
    _write_header_row(ws, ADJUSTMENT_HEADERS)

    amount_column = ADJUSTMENT_HEADERS.index("Amount") + 1
    for index, adjustment in enumerate(adjustments, 1):
        _append_row(ws, [
            index,
            adjustment.account,
            adjustment.type.value,
            _format_decimal(adjustment.amount),
            adjustment.explanation,
            adjustment.irs_rule_ref or None,
            adjustment.m1_line or None,
        ])
        ws.cell(row=index + 1, column=amount_column).number_format = _CURRENCY_FORMAT

    _auto_fit_columns(ws)
    return ws


def generate_working_paper(request: WorkingPaperRequest) -> WorkingPaperResult:
    """Write the M-1 working paper workbook for a validated request.

    Never raises: any failure while creating the output directory, building
    sheets or saving the file comes back as a ``WorkingPaperFailure``.

    Args:
        request: Adjustments, trial balances, year labels and output directory.

    Returns:
        WorkingPaperSuccess with the file path, or WorkingPaperFailure with
        the error message.
    """
    log = logger.bind(current_year=request.current_year, output_path=request.output_path)

    try:
        output_dir = Path(request.output_path)
        if not output_dir.exists():
            log.warning("output_directory_missing", action="creating")
            output_dir.mkdir(parents=True, exist_ok=True)
            log.info("output_directory_created")

        log.info(
            "generating_working_paper",
            current_rows=len(request.current_tb),
            prior_rows=len(request.prior_tb),
            adjustments=len(request.adjustments),
        )

        workbook = Workbook()
        # Drop the default sheet openpyxl creates
        workbook.remove(workbook.active)

        _add_trial_balance_sheet(workbook, f"{request.current_year} TB", request.current_tb)
        if request.prior_tb:
            _add_trial_balance_sheet(workbook, f"{request.last_year} TB", request.prior_tb)
        _add_adjustments_sheet(workbook, request.adjustments)

        output_file_path = request.output_file_path
        workbook.save(output_file_path)

    except Exception as e:
        message = str(e) or type(e).__name__
        log.error("working_paper_failed", error=message)
        return WorkingPaperFailure(error=message)

    log.info("working_paper_generated", file=output_file_path)
    return WorkingPaperSuccess(output_file_path=output_file_path)
