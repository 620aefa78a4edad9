"""Export package."""

from spendmate.export.exporter import (
    CSV_HEADER,
    build_csv,
    csv_row,
    export_filename,
    render_print_view,
)

__all__ = [
    "CSV_HEADER",
    "build_csv",
    "csv_row",
    "export_filename",
    "render_print_view",
]
