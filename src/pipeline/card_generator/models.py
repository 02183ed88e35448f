"""Value types shared by the card generation pipeline.

All objects here live for a single run: they are created while a workbook
is processed and discarded when the run returns. Only the generated PDF
documents and the final archive outlive a run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any


class CardType(str, Enum):
    """Closed set of card layouts, one on-disk template each."""

    CUPOM = "cupom"
    PROMOCAO = "promocao"
    QUEDA = "queda"
    CASHBACK = "cashback"
    BC = "bc"


class RunState(str, Enum):
    """Lifecycle of a :class:`CardBatchProcessor` run."""

    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class GenerationStatus(str, Enum):
    """Outcome reported to the caller once a run finishes."""

    COMPLETED = "completed"
    EMPTY_INPUT = "empty_input"
    NO_OUTPUT = "no_output"


@dataclass
class CardRow:
    """One spreadsheet record.

    Every field defaults to an empty string. ``value`` keeps the raw cell
    value because numeric cells and percentage strings are formatted
    differently by the renderer.
    """

    order: str = ""
    type: str = ""
    text: str = ""
    value: Any = ""
    complement: str = ""
    legal: str = ""
    uf: str = ""
    segment: str = ""
    coupon: str = ""
    seal: str = ""
    category: str = ""
    logo: str = ""
    urn: str = ""


@dataclass(frozen=True)
class RenderJob:
    """Markup and target filename produced for a single row."""

    card_type: CardType
    markup: str
    filename: str


@dataclass(frozen=True)
class ProgressSnapshot:
    """Progress of a run, published after every rendered card."""

    total: int
    processed: int
    percentage: int
    current_card: str

    def to_dict(self) -> dict[str, Any]:
        """Return the message payload relayed to waiting clients."""
        return {
            "total": self.total,
            "processed": self.processed,
            "percentage": self.percentage,
            "currentCard": self.current_card,
        }


@dataclass
class GenerationResult:
    """Summary of a finished run.

    ``archive_path`` is only set when ``status`` is ``COMPLETED``.
    """

    status: GenerationStatus
    archive_path: Path | None = None
    total: int = 0
    processed: int = 0
    skipped: int = 0
    documents: list[Path] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.status is GenerationStatus.COMPLETED


__all__ = [
    "CardRow",
    "CardType",
    "GenerationResult",
    "GenerationStatus",
    "ProgressSnapshot",
    "RenderJob",
    "RunState",
]
