"""
Expense Export

CSV download and a printable HTML table. Both take the records the
user is currently looking at, in display order.

CSV format:
    Date,Merchant,Category,Amount,Recurring,Notes
Merchant and notes are always double-quoted with embedded quotes
doubled, so commas in free text never shift columns.
"""

import html
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from spendmate.models import ExpenseRecord


CSV_HEADER = ("Date", "Merchant", "Category", "Amount", "Recurring", "Notes")


def _quote(value: Optional[str]) -> str:
    return '"' + (value or "").replace('"', '""') + '"'


def _recurring_label(record: ExpenseRecord) -> str:
    return "Yes" if record.is_recurring else "No"


def csv_row(record: ExpenseRecord) -> str:
    """Single CSV line for a record, without a trailing newline."""
    return ",".join([
        record.date.isoformat(),
        _quote(record.merchant),
        record.category.value,
        f"{record.amount:.2f}",
        _recurring_label(record),
        _quote(record.notes),
    ])


def build_csv(records: Iterable[ExpenseRecord]) -> str:
    """Full CSV document: header line followed by one line per record."""
    lines = [",".join(CSV_HEADER)]
    lines.extend(csv_row(record) for record in records)
    return "\n".join(lines)


def export_filename(today: Optional[date] = None) -> str:
    """e.g. spendmate_expenses_2024-03-01.csv"""
    today = today or date.today()
    return f"spendmate_expenses_{today.isoformat()}.csv"


def render_print_view(records: Iterable[ExpenseRecord], title: str = "SpendMate Expense Report") -> str:
    """
    Standalone HTML page with the same columns as the CSV plus a total row.

    All user text is HTML-escaped.
    """
    records = list(records)
    total = sum((r.amount for r in records), Decimal("0"))

    head = "".join(f"<th>{name}</th>" for name in CSV_HEADER)
    rows = []
    for record in records:
        cells = [
            record.date.isoformat(),
            html.escape(record.merchant),
            record.category.value,
            f"{record.amount:.2f}",
            _recurring_label(record),
            html.escape(record.notes or ""),
        ]
        rows.append("<tr>" + "".join(f"<td>{cell}</td>" for cell in cells) + "</tr>")

    rows.append(
        f'<tr class="total"><td colspan="3">Total</td><td>{total:.2f}</td><td colspan="2"></td></tr>'
    )

    return f"""<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<title>{html.escape(title)}</title>
<style>
body {{ font-family: sans-serif; margin: 2rem; }}
table {{ border-collapse: collapse; width: 100%; }}
th, td {{ border: 1px solid #ccc; padding: 0.4rem 0.6rem; text-align: left; }}
tr.total td {{ font-weight: bold; }}
</style>
</head>
<body>
<h1>{html.escape(title)}</h1>
<p>Generated {date.today().isoformat()} &middot; {len(records)} expenses</p>
<table>
<thead><tr>{head}</tr></thead>
<tbody>
{chr(10).join(rows)}
</tbody>
</table>
</body>
</html>
"""
