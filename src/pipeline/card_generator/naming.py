"""Output file naming for generated card documents.

Documents are named ``{order}_{TYPE}_{CATEGORY}.pdf``. Two rows can produce
the same name (same order, type and category); instead of letting the later
document overwrite the earlier one, :class:`UniqueNameAllocator` appends a
numeric suffix (``_2``, ``_3``, ...) so every rendered row ends up in the
archive.
"""

from __future__ import annotations

import logging
import re

from src.config import DOCUMENT_EXTENSION, NO_CATEGORY_LABEL

from .card_types import strip_accents
from .models import CardType

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def sanitize_name_part(part: str) -> str:
    """Make a name component safe for every filesystem we write to.

    Examples
    --------
    >>> sanitize_name_part("BELEZA / SAÚDE")
    'BELEZA-SAUDE'
    """
    cleaned = _UNSAFE_CHARS.sub("-", strip_accents(part).strip())
    return cleaned.strip("-.")


def build_output_filename(
    order: str, card_type: CardType, category: str, position: int
) -> str:
    """Return the document filename for a row.

    Parameters
    ----------
    order : str
        Value of the "ordem" column; blank means use ``position``.
    card_type : CardType
        Normalized card type.
    category : str
        Value of the "categoria" column; blank means ``NO_CATEGORY_LABEL``.
    position : int
        1-based sequence number of the row among renderable rows.

    Examples
    --------
    >>> build_output_filename("", CardType.CUPOM, "", 1)
    '1_CUPOM_SEM-CATEGORIA.pdf'
    >>> build_output_filename("07", CardType.QUEDA, "Bebidas", 3)
    '07_QUEDA_BEBIDAS.pdf'
    """
    order_part = sanitize_name_part(order) or str(position)
    category_part = sanitize_name_part(category.upper()) or NO_CATEGORY_LABEL
    type_part = card_type.value.upper()
    return f"{order_part}_{type_part}_{category_part}{DOCUMENT_EXTENSION}"


class UniqueNameAllocator:
    """Hand out filenames that are unique within one run."""

    def __init__(self) -> None:
        self._taken: set[str] = set()

    def allocate(self, filename: str) -> str:
        candidate = filename
        if candidate.lower() in self._taken:
            stem, dot, ext = filename.rpartition(".")
            if not dot:
                stem, ext = filename, ""
            suffix = 2
            while True:
                candidate = f"{stem}_{suffix}{dot}{ext}"
                if candidate.lower() not in self._taken:
                    break
                suffix += 1
            logger.warning(
                "Output name %s already used in this run, writing %s",
                filename,
                candidate,
            )
        self._taken.add(candidate.lower())
        return candidate


__all__ = ["UniqueNameAllocator", "build_output_filename", "sanitize_name_part"]
