"""Template loading and placeholder substitution for card markup.

Each :class:`CardType` has one HTML template named after the type's value
(``cupom.html``, ``promocao.html``, ...). Templates use double-brace tokens
(``{{TEXTO}}``, ``{{VALOR}}``, ...) that are replaced literally and globally
in one scan of the template, so text inserted for one token is never
expanded again by another. There is no template language. A token missing
from a template is simply never substituted, and a context value missing
for a token renders as an empty string.

Boundaries
----------
- Reads template files; never writes to disk.
- Row text is upper-cased and HTML-escaped. ``LOGO`` and ``SELO`` carry
  ``data:`` URIs produced by :mod:`.assets` and are inserted verbatim.
"""

from __future__ import annotations

import html
import logging
import math
import re
from pathlib import Path
from typing import Any

from src.config import TEMPLATE_EXTENSION, UF_LABEL_PREFIX, URN_LABEL_PREFIX

from .data_loader import cell_to_text, is_blank
from .models import CardRow, CardType

logger = logging.getLogger(__name__)

PLACEHOLDER_TOKENS: tuple[str, ...] = (
    "TEXTO",
    "VALOR",
    "COMPLEMENTO",
    "LEGAL",
    "SEGMENTO",
    "CUPOM",
    "UF",
    "URN",
    "LOGO",
    "SELO",
)

# Tokens whose values are markup-safe data URIs.
_RAW_TOKENS = frozenset({"LOGO", "SELO"})

_TOKEN_PATTERN = re.compile(
    "|".join(re.escape("{{" + token + "}}") for token in PLACEHOLDER_TOKENS)
)


def template_path_for(templates_dir: Path, card_type: CardType) -> Path:
    """Return the on-disk template location for ``card_type``."""
    return Path(templates_dir) / f"{card_type.value}{TEMPLATE_EXTENSION}"


def has_template(templates_dir: Path, card_type: CardType) -> bool:
    """Return True if the deployment ships a template for ``card_type``."""
    return template_path_for(templates_dir, card_type).is_file()


def load_template(path: Path) -> str:
    """Read the contents of a template file as a string.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    """
    with Path(path).open("r", encoding="utf-8") as fh:
        return fh.read()


class TemplateCache:
    """Per-run cache of template text keyed by card type."""

    def __init__(self, templates_dir: Path) -> None:
        self.templates_dir = Path(templates_dir)
        self._templates: dict[CardType, str] = {}

    def get(self, card_type: CardType) -> str:
        if card_type not in self._templates:
            self._templates[card_type] = load_template(
                template_path_for(self.templates_dir, card_type)
            )
        return self._templates[card_type]


def _as_number(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        try:
            number = float(str(value).strip())
        except ValueError:
            return None
    return number if math.isfinite(number) else None


def format_card_value(card_type: CardType, value: Any) -> str:
    """Format the "valor" cell for the given card type.

    Promotion cards print the value as written (upper-cased, percent sign
    kept). Every other template renders its own percent glyph, so the sign
    is stripped; fractional numbers between 0 and 1 come from percentage
    formatted cells and are scaled to whole percentages.

    Examples
    --------
    >>> format_card_value(CardType.CUPOM, "50%")
    '50'
    >>> format_card_value(CardType.CUPOM, 0.15)
    '15'
    >>> format_card_value(CardType.QUEDA, 12.5)
    '12.5'
    >>> format_card_value(CardType.PROMOCAO, "50% off")
    '50% OFF'
    """
    if is_blank(value):
        return ""
    if card_type is CardType.PROMOCAO:
        return cell_to_text(value).upper()
    number = _as_number(value)
    if number is None:
        return cell_to_text(value).replace("%", "").strip()
    if 0 < number < 1:
        number *= 100
    rounded = round(number, 2)
    if rounded.is_integer():
        return str(int(rounded))
    return str(rounded)


def _labelled(prefix: str, value: str) -> str:
    return f"{prefix}{value}" if value else ""


def build_card_context(
    card_type: CardType, row: CardRow, *, logo: str = "", seal: str = ""
) -> dict[str, str]:
    """Resolve every placeholder token for one row.

    Parameters
    ----------
    card_type : CardType
        Normalized type of the row; drives value formatting.
    row : CardRow
        Source record.
    logo, seal : str
        Inline data URIs from :mod:`.assets`; empty strings are allowed.

    Returns
    -------
    dict[str, str]
        Mapping from token name (without braces) to its replacement text.
    """

    def text(value: Any) -> str:
        return cell_to_text(value).upper()

    return {
        "TEXTO": text(row.text),
        "VALOR": format_card_value(card_type, row.value),
        "COMPLEMENTO": text(row.complement),
        "LEGAL": text(row.legal),
        "SEGMENTO": text(row.segment),
        "CUPOM": text(row.coupon),
        "UF": _labelled(UF_LABEL_PREFIX, text(row.uf)),
        "URN": _labelled(URN_LABEL_PREFIX, text(row.urn)),
        "LOGO": logo or "",
        "SELO": seal or "",
    }


def render_template(template_content: str, context: dict[str, str]) -> str:
    """Replace every ``{{TOKEN}}`` occurrence with its context value.

    Tokens without a context entry render as an empty string. Values are
    HTML-escaped except for the image tokens.
    """
    values: dict[str, str] = {}
    for token in PLACEHOLDER_TOKENS:
        value = context.get(token) or ""
        if token not in _RAW_TOKENS:
            value = html.escape(value, quote=True)
        values["{{" + token + "}}"] = value
    return _TOKEN_PATTERN.sub(lambda match: values[match.group(0)], template_content)


def render_card_markup(
    card_type: CardType,
    row: CardRow,
    template_content: str,
    *,
    logo: str = "",
    seal: str = "",
) -> str:
    """Render the complete card markup for ``row``."""
    context = build_card_context(card_type, row, logo=logo, seal=seal)
    return render_template(template_content, context)


__all__ = [
    "PLACEHOLDER_TOKENS",
    "TemplateCache",
    "build_card_context",
    "format_card_value",
    "has_template",
    "load_template",
    "render_card_markup",
    "render_template",
    "template_path_for",
]
