"""Workbook loader and cell coercion for card rows.

Reads the first sheet of an ``.xlsx`` workbook with pandas and turns every
record into a :class:`CardRow`. Column headers are matched case- and
accent-insensitively against the Portuguese names used by the marketing
team ("tipo", "valor", "categoria", ...); English names are accepted as
aliases. Cells that are blank, missing or NaN become empty strings.

No business rules live here: classification, formatting and rendering are
done by the modules downstream.
"""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Any, Mapping

import pandas as pd

from src.exceptions import DataValidationError

from .card_types import strip_accents
from .models import CardRow

logger = logging.getLogger(__name__)

COLUMN_ALIASES: dict[str, str] = {
    "ordem": "order",
    "order": "order",
    "tipo": "type",
    "type": "type",
    "texto": "text",
    "text": "text",
    "valor": "value",
    "value": "value",
    "complemento": "complement",
    "complement": "complement",
    "legal": "legal",
    "uf": "uf",
    "segmento": "segment",
    "segment": "segment",
    "cupom": "coupon",
    "coupon": "coupon",
    "selo": "seal",
    "seal": "seal",
    "categoria": "category",
    "category": "category",
    "logo": "logo",
    "urn": "urn",
}


def normalize_header(header: Any) -> str:
    """Return the canonical lookup key for a column header."""
    return strip_accents(str(header)).strip().lower()


def is_blank(value: Any) -> bool:
    """Return True for ``None``, NaN and whitespace-only strings."""
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and not value.strip()


def cell_to_text(value: Any) -> str:
    """Coerce a loosely typed cell value into a trimmed string.

    Integral floats lose their trailing ``.0`` because spreadsheets store
    every number as a float.

    Examples
    --------
    >>> cell_to_text(3.0)
    '3'
    >>> cell_to_text(None)
    ''
    >>> cell_to_text("  SP ")
    'SP'
    """
    if is_blank(value):
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def card_row_from_record(record: Mapping[Any, Any]) -> CardRow:
    """Build a :class:`CardRow` from one raw spreadsheet record.

    Unknown columns are ignored. ``value`` keeps numbers as numbers so
    fractional percentages (``0.5``) can be recognized later.
    """
    fields: dict[str, Any] = {}
    for header, cell in record.items():
        field_name = COLUMN_ALIASES.get(normalize_header(header))
        if field_name is None or field_name in fields:
            continue
        if field_name == "value":
            fields[field_name] = "" if is_blank(cell) else cell
        else:
            fields[field_name] = cell_to_text(cell)
    return CardRow(**fields)


def read_workbook_records(workbook_path: Path) -> list[dict[Any, Any]]:
    """Read the first sheet of a workbook into raw record dictionaries.

    Parameters
    ----------
    workbook_path : Path
        Path to the ``.xlsx`` file.

    Returns
    -------
    list[dict]
        One dictionary per data row, keyed by the header row.

    Raises
    ------
    FileNotFoundError
        If the workbook does not exist.
    DataValidationError
        If the file cannot be parsed as a spreadsheet.
    """
    workbook_path = Path(workbook_path)
    if not workbook_path.exists():
        raise FileNotFoundError(f"Workbook not found: {workbook_path}")
    try:
        frame = pd.read_excel(
            workbook_path, sheet_name=0, dtype=object, engine="openpyxl"
        )
    except Exception as exc:
        raise DataValidationError(
            f"Cannot read workbook {workbook_path.name}: {exc}",
            context={"path": str(workbook_path)},
        ) from exc
    frame = frame.astype(object).where(pd.notna(frame), "")
    return frame.to_dict(orient="records")


def load_card_rows_from_workbook(workbook_path: Path) -> list[CardRow]:
    """Load every record of the first sheet as a :class:`CardRow`.

    Rows are returned in file order; that order drives output naming.
    """
    rows = [card_row_from_record(r) for r in read_workbook_records(workbook_path)]
    logger.info("Loaded %d rows from %s", len(rows), Path(workbook_path).name)
    return rows


__all__ = [
    "card_row_from_record",
    "cell_to_text",
    "is_blank",
    "load_card_rows_from_workbook",
    "normalize_header",
    "read_workbook_records",
]
