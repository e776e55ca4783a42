"""
Excel report of committed weld passes.
"""

import io
import logging
from datetime import datetime
from typing import List, Optional, Sequence

import openpyxl
from openpyxl.styles import Alignment, Font

from ..weld_engine.models import WeldingPass

logger = logging.getLogger(__name__)

SHEET_TITLE = "Welds"

HEADERS = [
    "Date", "Time", "Process", "Voltage (V)", "Current (A)",
    "Length (mm)", "Elapsed (s)", "k-factor", "Heat input (kJ/mm)",
]


def pass_row(welding_pass: WeldingPass) -> List:
    """One spreadsheet row; elapsed rounded to 0.1 s, heat input to 0.001 kJ/mm."""
    return [
        welding_pass.created_at.strftime("%d/%m/%Y"),
        welding_pass.created_at.strftime("%H:%M"),
        welding_pass.process.label,
        welding_pass.voltage,
        welding_pass.current,
        welding_pass.length,
        round(welding_pass.elapsed_time, 1),
        welding_pass.k_factor,
        round(welding_pass.heat_input, 3),
    ]


def build_workbook(passes: Sequence[WeldingPass]) -> openpyxl.Workbook:
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = SHEET_TITLE

    ws.append(HEADERS)
    for c in range(1, len(HEADERS) + 1):
        cell = ws.cell(row=1, column=c)
        cell.font = Font(bold=True)
        cell.alignment = Alignment(horizontal="center")
    ws.freeze_panes = "A2"

    for welding_pass in passes:
        ws.append(pass_row(welding_pass))

    return wb


def export_passes_xlsx(passes: Sequence[WeldingPass]) -> bytes:
    """Serialize the history (in the given order) to xlsx bytes."""
    wb = build_workbook(passes)
    buffer = io.BytesIO()
    wb.save(buffer)
    logger.info(f"Exported {len(passes)} passes to xlsx")
    return buffer.getvalue()


def report_filename(now: Optional[datetime] = None) -> str:
    now = now or datetime.now()
    return f"weld_report_{now.strftime('%Y%m%d_%H%M')}.xlsx"
