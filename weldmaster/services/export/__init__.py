"""
Export service for the pass history.
"""

from .excel_export import export_passes_xlsx, report_filename

__all__ = ["export_passes_xlsx", "report_filename"]
