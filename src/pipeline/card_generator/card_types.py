"""Classification of free-text card types onto the closed ``CardType`` set.

Spreadsheets are filled in by hand, so the "tipo" column arrives with mixed
casing, stray whitespace, accents and extra words ("Promoção relâmpago",
"CUPOM 10%"). Classification is by substring, checked in a fixed priority
order; the first keyword found wins.
"""

from __future__ import annotations

import unicodedata
from typing import Any

from .models import CardType

# Priority order matters: free text may contain more than one keyword.
_KEYWORD_PRIORITY: tuple[tuple[str, CardType], ...] = (
    ("promo", CardType.PROMOCAO),
    ("cupom", CardType.CUPOM),
    ("queda", CardType.QUEDA),
    ("cashback", CardType.CASHBACK),
)


def strip_accents(text: str) -> str:
    """Remove combining marks after canonical decomposition.

    Examples
    --------
    >>> strip_accents("Promoção")
    'Promocao'
    """
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize_card_type(raw: Any) -> CardType | None:
    """Map a free-text card type onto a :class:`CardType`.

    Parameters
    ----------
    raw : Any
        Cell value from the "tipo" column. Non-string values are converted
        with ``str``; ``None`` and blanks are unrecognized.

    Returns
    -------
    CardType | None
        The matching card type, or ``None`` when the text is unrecognized.

    Examples
    --------
    >>> normalize_card_type("  PROMOÇÃO ")
    <CardType.PROMOCAO: 'promocao'>
    >>> normalize_card_type("BC")
    <CardType.BC: 'bc'>
    >>> normalize_card_type("bcx") is None
    True
    """
    if raw is None:
        return None
    normalized = strip_accents(str(raw).lower().strip())
    if not normalized:
        return None
    for keyword, card_type in _KEYWORD_PRIORITY:
        if keyword in normalized:
            return card_type
    if normalized == CardType.BC.value:
        return CardType.BC
    return None


__all__ = ["normalize_card_type", "strip_accents"]
