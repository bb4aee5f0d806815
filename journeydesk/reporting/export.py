"""CSV serialization for report and roster exports."""

import csv
from datetime import date, datetime
from typing import Iterable, Mapping

import pandas as pd

from journeydesk.errors import ValidationError
from journeydesk.reporting.formatters import format_date_for_export

_SPECIAL = (",", '"', "\n", "\r")


def _cell(value) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, date):
        return format_date_for_export(value)
    return str(value)


def _quote(text: str) -> str:
    if any(c in text for c in _SPECIAL):
        return '"' + text.replace('"', '""') + '"'
    return text


def to_csv_text(records: Iterable[Mapping], headers: Mapping[str, str]) -> str:
    """Serialize records to CSV text.

    `headers` maps record keys to column labels, in output order. Fields that
    contain a comma, a quote or a newline are quoted with inner quotes
    doubled. Rows are separated by a bare newline with none after the last.
    Empty fields are always written bare, also in a one-column export.
    """
    rows = list(records)
    if not rows:
        raise ValidationError("no_data_to_export", "Nothing to export")

    keys = list(headers.keys())
    cells = [[_cell(row.get(key)) for key in keys] for row in rows]

    # The csv writer quotes a lone empty field as "" so the row is not blank.
    if len(keys) == 1:
        lines = [headers[keys[0]]] + [row[0] for row in cells]
        return "\n".join(_quote(line) for line in lines)

    df = pd.DataFrame(cells, columns=list(headers.values()), dtype=object)
    text = df.to_csv(index=False, lineterminator="\n", quoting=csv.QUOTE_MINIMAL)
    return text.removesuffix("\n")


def export_filename(name: str, today: date | None = None) -> str:
    """`<name>_<YYYY-MM-DD>.csv` stamped with the generation date."""
    stamp = (today or date.today()).isoformat()
    return f"{name}_{stamp}.csv"
